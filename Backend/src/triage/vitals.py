"""
Vital Signs Analyzer Module
Flags abnormal wearable readings and cross-references them with the
detected injury type.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

NORMAL_RANGES = {
    "heartRate": "60-100 bpm",
    "bloodPressure": "90-140/60-90 mmHg",
    "oxygenSaturation": "95-100%",
    "temperature": "36.5-37.5°C",
    "respirationRate": "12-20 bpm",
}


@dataclass(frozen=True)
class VitalSigns:
    heart_rate: Optional[float] = None
    systolic: Optional[float] = None
    diastolic: Optional[float] = None
    oxygen_saturation: Optional[float] = None
    temperature: Optional[float] = None  # Celsius
    respiration_rate: Optional[float] = None


@dataclass
class VitalFinding:
    metric: str
    value: str
    normal_range: str
    severity: str  # warning | critical
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "metric": self.metric,
            "value": self.value,
            "normalRange": self.normal_range,
            "severity": self.severity,
            "recommendation": self.recommendation,
        }


@dataclass
class VitalSignsAnalysis:
    has_critical_signs: bool = False
    critical_details: list = field(default_factory=list)
    injury_specific_warnings: list = field(default_factory=list)
    overall_recommendation: str = ""

    def to_dict(self) -> dict:
        return {
            "hasCriticalSigns": self.has_critical_signs,
            "criticalDetails": [d.to_dict() for d in self.critical_details],
            "injurySpecificWarnings": list(self.injury_specific_warnings),
            "overallRecommendation": self.overall_recommendation,
        }


def _mentions(injury: str, *fragments: str) -> bool:
    return any(f in injury for f in fragments)


def analyze_vital_signs(vitals: VitalSigns, injury_type: Optional[str] = None,
                        injury_severity: str = "medium") -> VitalSignsAnalysis:
    """
    Check each reading against its normal range.

    A zero or missing reading is treated as "no data". Injury-specific
    warnings are keyed on fragments of the lower-cased injury type, so
    "Cut/Laceration" and "laceration" both match ``"lac"``.
    """
    result = VitalSignsAnalysis()
    findings = result.critical_details
    warnings = result.injury_specific_warnings
    injury = (injury_type or "").lower()

    def flag(metric, value, range_key, severity, recommendation, critical=True):
        findings.append(VitalFinding(metric, value, NORMAL_RANGES[range_key], severity, recommendation))
        if critical:
            result.has_critical_signs = True

    # Heart rate
    hr = vitals.heart_rate
    if hr:
        value = f"{hr:g} bpm"
        if hr > 120:
            flag("Heart Rate", value, "heartRate", "critical",
                 "Elevated heart rate may indicate shock, pain, or cardiovascular distress")
            if _mentions(injury, "cut", "lac", "wound"):
                warnings.append("Elevated heart rate combined with an open wound may indicate significant "
                                "blood loss or the onset of hypovolemic shock")
            if _mentions(injury, "burn"):
                warnings.append("Elevated heart rate with burns may indicate burn shock developing, "
                                "which can be life-threatening")
            if _mentions(injury, "fract"):
                warnings.append("Elevated heart rate with a fracture may indicate internal bleeding, "
                                "fat embolism, or pain-induced shock")
        elif hr < 50:
            flag("Heart Rate", value, "heartRate", "critical",
                 "Abnormally low heart rate may indicate cardiac problems or serious injury")
            if _mentions(injury, "head", "concuss"):
                warnings.append("Low heart rate combined with head injury could indicate increased "
                                "intracranial pressure - immediate medical attention required")
        elif hr > 100:
            flag("Heart Rate", value, "heartRate", "warning",
                 "Slightly elevated heart rate - monitor for changes", critical=False)

    # Blood pressure
    if vitals.systolic and vitals.diastolic:
        systolic, diastolic = vitals.systolic, vitals.diastolic
        value = f"{systolic:g}/{diastolic:g} mmHg"
        if systolic > 160 or diastolic > 100:
            flag("Blood Pressure", value, "bloodPressure", "critical",
                 "Dangerously high blood pressure - may increase risk of bleeding or indicate "
                 "other serious conditions")
            if _mentions(injury, "head", "brain"):
                warnings.append("High blood pressure with head injury significantly increases risk "
                                "of cerebral hemorrhage")
        elif systolic < 90 or diastolic < 60:
            flag("Blood Pressure", value, "bloodPressure", "critical",
                 "Low blood pressure may indicate shock or significant blood loss")
            if _mentions(injury, "cut", "lac", "wound", "bleed"):
                warnings.append("Low blood pressure with bleeding injury indicates significant blood "
                                "loss and possible hypovolemic shock - medical emergency")
            if _mentions(injury, "burn") and injury_severity in ("medium", "high"):
                warnings.append("Low blood pressure with significant burns indicates burn shock - "
                                "medical emergency")

    # Oxygen saturation
    spo2 = vitals.oxygen_saturation
    if spo2:
        value = f"{spo2:g}%"
        if spo2 < 90:
            flag("Oxygen Saturation", value, "oxygenSaturation", "critical",
                 "Dangerously low blood oxygen levels - immediate medical attention required")
            if _mentions(injury, "chest", "lung", "rib"):
                warnings.append("Low oxygen with chest injury may indicate pneumothorax or "
                                "hemothorax - medical emergency")
        elif spo2 < 95:
            flag("Oxygen Saturation", value, "oxygenSaturation", "warning",
                 "Below normal blood oxygen levels - monitor closely")

    # Temperature
    temp = vitals.temperature
    if temp:
        value = f"{temp:.1f}°C"
        if temp > 39.0:
            flag("Body Temperature", value, "temperature", "critical",
                 "High fever may indicate infection or inflammation")
            if _mentions(injury, "cut", "lac", "wound"):
                warnings.append("Fever with open wound suggests infection - medical attention required")
            if _mentions(injury, "burn"):
                warnings.append("Fever with burns may indicate infection or systemic inflammatory response")
        elif temp < 35.5:
            flag("Body Temperature", value, "temperature", "critical",
                 "Low body temperature may indicate shock or exposure")

    # Respiration rate
    rr = vitals.respiration_rate
    if rr:
        value = f"{rr:g} bpm"
        if rr > 24:
            flag("Respiration Rate", value, "respirationRate", "critical",
                 "Abnormally fast breathing may indicate respiratory distress")
            if _mentions(injury, "chest", "lung", "rib"):
                warnings.append("Rapid breathing with chest injury suggests respiratory compromise - "
                                "medical emergency")
        elif rr < 10:
            flag("Respiration Rate", value, "respirationRate", "critical",
                 "Abnormally slow breathing may indicate neurological or respiratory depression")
            if _mentions(injury, "head", "brain", "concuss"):
                warnings.append("Slow breathing with head injury suggests worsening neurological "
                                "status - medical emergency")

    if result.has_critical_signs:
        if warnings:
            result.overall_recommendation = ("MEDICAL EMERGENCY: Critical vital signs detected with "
                                             "injury-specific concerns. Seek immediate medical attention.")
        else:
            result.overall_recommendation = ("MEDICAL ALERT: Critical vital signs detected. "
                                             "Seek medical attention as soon as possible.")
    elif findings:
        result.overall_recommendation = ("CAUTION: Some vital signs are abnormal. "
                                         "Monitor closely and consider medical consultation.")
    else:
        result.overall_recommendation = "Vital signs are currently within normal ranges. Continue to monitor."

    if result.has_critical_signs:
        logger.warning("Critical vital signs: %s", [f.metric for f in findings if f.severity == "critical"])
    return result
