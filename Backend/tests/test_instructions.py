"""Tests for step tables and bundle assembly."""
import pytest

from triage import lexicon
from triage.assembler import ESTIMATED_TIME, SOURCES, assemble, warning_for
from triage.classifier import ClassificationResult
from triage.instructions import Step, generate_steps, has_specific_steps

TABLED = [
    lexicon.BLEEDING, lexicon.BURN_INJURY, lexicon.FRACTURE, lexicon.CARDIAC_EMERGENCY,
    lexicon.STROKE, lexicon.HEAD_INJURY, lexicon.EYE_INJURY, lexicon.CUT_LACERATION,
]


class TestGenerateSteps:

    @pytest.mark.parametrize("injury_type", TABLED + [lexicon.MINOR_WOUND, "Something Else"])
    @pytest.mark.parametrize("severity", ["low", "medium", "high"])
    def test_ids_are_contiguous_from_one(self, injury_type, severity):
        steps = generate_steps(injury_type, severity)
        assert [s.id for s in steps] == list(range(1, len(steps) + 1))
        assert all(s.content for s in steps)

    @pytest.mark.parametrize("injury_type", TABLED)
    def test_tabled_types_have_specific_steps(self, injury_type):
        assert has_specific_steps(injury_type)

    @pytest.mark.parametrize("injury_type", [lexicon.MINOR_WOUND, lexicon.SPRAIN_STRAIN, lexicon.ALLERGIC_REACTION])
    def test_generic_types(self, injury_type):
        assert not has_specific_steps(injury_type)
        assert generate_steps(injury_type)[0].content.startswith("Assess the injury")

    def test_bleeding_steps(self):
        steps = generate_steps(lexicon.BLEEDING)
        assert steps[0].content == "Apply direct pressure to the wound with a clean cloth or bandage."
        assert steps[0].important and steps[0].has_video and steps[0].has_audio

    def test_burn_cooling_has_duration(self):
        assert generate_steps(lexicon.BURN_INJURY)[1].duration == "10-15 min"

    def test_generic_third_step_importance_follows_severity(self):
        assert generate_steps("Other", "high")[2].important
        assert generate_steps("Other", "medium")[2].important
        assert not generate_steps("Other", "low")[2].important

    def test_table_steps_ignore_severity(self):
        assert generate_steps(lexicon.FRACTURE, "low") == generate_steps(lexicon.FRACTURE, "high")


class TestStepToDict:

    def test_only_set_flags_are_emitted(self):
        assert Step(1, "Do it").to_dict() == {"id": 1, "content": "Do it"}

    def test_all_flags(self):
        step = Step(2, "Cool", important=True, duration="10 min", has_video=True, has_audio=True)
        assert step.to_dict() == {
            "id": 2, "content": "Cool", "important": True, "duration": "10 min",
            "hasVideo": True, "hasAudio": True,
        }


class TestAssemble:

    @pytest.mark.parametrize("severity, warning", [
        ("high", "Seek immediate medical attention!"),
        ("medium", "Consult with a healthcare professional as soon as possible."),
        ("low", "Monitor the condition and seek medical attention if symptoms worsen."),
    ])
    def test_warning_by_severity(self, severity, warning):
        assert warning_for(severity) == warning

    def test_bundle_dict(self):
        result = ClassificationResult(lexicon.FRACTURE, 0.76666, "high", "none", location="leg")
        bundle = assemble(result, generate_steps(lexicon.FRACTURE), parsedAs="structured")
        d = bundle.to_dict()
        assert d["injuryType"] == lexicon.FRACTURE
        assert d["probability"] == 0.7667
        assert d["details"] == {"severity": "high", "location": "leg", "bloodLevel": "none", "foreignObjects": False}
        assert len(d["steps"]) == 5
        assert d["warning"] == "Seek immediate medical attention!"
        assert d["sources"] == list(SOURCES)
        assert d["estimatedTime"] == ESTIMATED_TIME
        assert d["parsedAs"] == "structured"
        assert d["failSafe"] is False
        assert "error" not in d

    def test_error_is_included_when_set(self):
        result = ClassificationResult(lexicon.BLEEDING, 0.7, "high", "moderate")
        d = assemble(result, [], error="timed out").to_dict()
        assert d["error"] == "timed out"
