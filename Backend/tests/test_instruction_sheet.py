"""Tests for the PDF instruction sheet."""
from reporting import InstructionSheetGenerator
from triage.pipeline import InjuryTriagePipeline


def test_bundle_renders_to_pdf():
    bundle = InjuryTriagePipeline().for_injury_type("Burn Injury")
    pdf = InstructionSheetGenerator().build(bundle)
    assert pdf.startswith(b"%PDF")


def test_fail_safe_dict_renders_to_pdf():
    data = InjuryTriagePipeline().fail_safe("service down").to_dict()
    pdf = InstructionSheetGenerator().build(data)
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_markup_in_text_is_escaped():
    data = InjuryTriagePipeline().for_injury_type("Splinter <b>").to_dict()
    data["note"] = "Use <care> & caution"
    assert InstructionSheetGenerator().build(data).startswith(b"%PDF")
