"""Tests for the vital-signs analyzer."""
from triage.vitals import VitalSigns, analyze_vital_signs


def _metrics(result):
    return {f.metric: f.severity for f in result.critical_details}


class TestAnalyzeVitalSigns:

    def test_normal_readings(self):
        result = analyze_vital_signs(VitalSigns(heart_rate=72, systolic=120, diastolic=80,
                                                oxygen_saturation=98, temperature=36.8, respiration_rate=16))
        assert not result.has_critical_signs
        assert result.critical_details == []
        assert result.overall_recommendation.startswith("Vital signs are currently within normal ranges")

    def test_missing_and_zero_readings_are_ignored(self):
        result = analyze_vital_signs(VitalSigns(heart_rate=0))
        assert result.critical_details == []

    def test_tachycardia_with_open_wound(self):
        result = analyze_vital_signs(VitalSigns(heart_rate=130), "Cut/Laceration", "high")
        assert _metrics(result) == {"Heart Rate": "critical"}
        assert result.critical_details[0].value == "130 bpm"
        assert result.critical_details[0].normal_range == "60-100 bpm"
        assert any("hypovolemic shock" in w for w in result.injury_specific_warnings)
        assert result.overall_recommendation.startswith("MEDICAL EMERGENCY")

    def test_slightly_elevated_heart_rate_is_a_warning(self):
        result = analyze_vital_signs(VitalSigns(heart_rate=105))
        assert _metrics(result) == {"Heart Rate": "warning"}
        assert not result.has_critical_signs
        assert result.overall_recommendation.startswith("CAUTION")

    def test_critical_without_injury_context(self):
        result = analyze_vital_signs(VitalSigns(temperature=39.6))
        assert result.critical_details[0].value == "39.6°C"
        assert result.injury_specific_warnings == []
        assert result.overall_recommendation.startswith("MEDICAL ALERT")

    def test_low_blood_pressure_with_burn_depends_on_severity(self):
        vitals = VitalSigns(systolic=85, diastolic=55)
        assert analyze_vital_signs(vitals, "Burn Injury", "low").injury_specific_warnings == []
        warnings = analyze_vital_signs(vitals, "Burn Injury", "medium").injury_specific_warnings
        assert any("burn shock" in w for w in warnings)

    def test_blood_pressure_needs_both_values(self):
        assert analyze_vital_signs(VitalSigns(systolic=200)).critical_details == []

    def test_low_oxygen_with_chest_injury(self):
        result = analyze_vital_signs(VitalSigns(oxygen_saturation=88), "chest trauma")
        assert _metrics(result) == {"Oxygen Saturation": "critical"}
        assert any("pneumothorax" in w for w in result.injury_specific_warnings)

    def test_mildly_low_oxygen_is_flagged(self):
        result = analyze_vital_signs(VitalSigns(oxygen_saturation=93))
        assert _metrics(result) == {"Oxygen Saturation": "warning"}
        assert result.has_critical_signs

    def test_slow_breathing_with_head_injury(self):
        result = analyze_vital_signs(VitalSigns(respiration_rate=8, heart_rate=45), "Head Injury")
        assert _metrics(result) == {"Heart Rate": "critical", "Respiration Rate": "critical"}
        assert len(result.injury_specific_warnings) == 2

    def test_to_dict(self):
        d = analyze_vital_signs(VitalSigns(heart_rate=130)).to_dict()
        assert set(d) == {"hasCriticalSigns", "criticalDetails", "injurySpecificWarnings", "overallRecommendation"}
        assert d["criticalDetails"][0]["normalRange"] == "60-100 bpm"
