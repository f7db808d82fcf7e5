"""Vital-signs request/response schemas."""
from typing import Literal, Optional

from pydantic import BaseModel, Field


class BloodPressure(BaseModel):
    systolic: float = Field(..., ge=0)
    diastolic: float = Field(..., ge=0)


class VitalSignsRequest(BaseModel):
    """Latest wearable readings, optionally tied to a detected injury."""
    heartRate: Optional[float] = Field(None, ge=0)
    bloodPressure: Optional[BloodPressure] = None
    oxygenSaturation: Optional[float] = Field(None, ge=0, le=100)
    temperature: Optional[float] = Field(None, ge=0, description="Body temperature in °C")
    respirationRate: Optional[float] = Field(None, ge=0)
    injuryType: Optional[str] = None
    injurySeverity: Literal["low", "medium", "high"] = "medium"

    model_config = {"json_schema_extra": {"example": {
        "heartRate": 128, "bloodPressure": {"systolic": 85, "diastolic": 55},
        "oxygenSaturation": 97, "temperature": 36.8, "respirationRate": 18,
        "injuryType": "Cut/Laceration", "injurySeverity": "high",
    }}}


class VitalFinding(BaseModel):
    metric: str
    value: str
    normalRange: str
    severity: Literal["warning", "critical"]
    recommendation: str


class VitalSignsResponse(BaseModel):
    hasCriticalSigns: bool
    criticalDetails: list[VitalFinding] = []
    injurySpecificWarnings: list[str] = []
    overallRecommendation: str
