"""Packages a classification and its steps into the response bundle."""

from dataclasses import dataclass, field
from typing import Optional

from .classifier import ClassificationResult
from .instructions import Step

WARNINGS = {
    "high": "Seek immediate medical attention!",
    "medium": "Consult with a healthcare professional as soon as possible.",
    "low": "Monitor the condition and seek medical attention if symptoms worsen.",
}

NOTE = (
    "These instructions are based on current medical guidelines and are meant for "
    "temporary care until professional help is available."
)

SOURCES = (
    "American Red Cross First Aid Guidelines",
    "Mayo Clinic Emergency Procedures",
    "National Institute for Health - First Aid Protocols",
)

# Constant regardless of injury type.
ESTIMATED_TIME = "5-10 minutes"


@dataclass(frozen=True)
class InstructionBundle:
    classification: ClassificationResult
    steps: tuple
    warning: str
    note: str = NOTE
    sources: tuple = SOURCES
    estimated_time: str = ESTIMATED_TIME
    error: Optional[str] = None
    extras: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        c = self.classification
        d = {
            "injuryType": c.injury_type,
            "probability": round(c.confidence, 4),
            "details": {
                "severity": c.severity,
                "location": c.location,
                "bloodLevel": c.blood_level,
                "foreignObjects": c.foreign_objects,
            },
            "steps": [s.to_dict() for s in self.steps],
            "warning": self.warning,
            "note": self.note,
            "sources": list(self.sources),
            "estimatedTime": self.estimated_time,
            "matchedKeywords": list(c.matched_keywords),
            "overrideApplied": c.override_applied,
            "failSafe": c.fail_safe,
        }
        if self.error:
            d["error"] = self.error
        d.update(self.extras)
        return d


def warning_for(severity: str) -> str:
    return WARNINGS.get(severity, WARNINGS["low"])


def assemble(classification: ClassificationResult, steps: list[Step], error: Optional[str] = None,
             **extras) -> InstructionBundle:
    return InstructionBundle(
        classification=classification,
        steps=tuple(steps),
        warning=warning_for(classification.severity),
        error=error,
        extras=extras,
    )
