"""Injury triage request/response schemas."""
from typing import Literal, Optional

from pydantic import BaseModel, Field

Severity = Literal["low", "medium", "high"]
BloodLevel = Literal["none", "minimal", "moderate", "severe"]


class InjuryAnalyzeBase64Request(BaseModel):
    """Request to analyze a base64-encoded image."""
    imageBase64: str = Field("", description="Base64 image, optionally with a data:image/...;base64, prefix")

    model_config = {"json_schema_extra": {"example": {"imageBase64": "data:image/jpeg;base64,/9j/4AAQ..."}}}


class InjuryDetails(BaseModel):
    severity: Severity
    location: str = "Undetermined"
    bloodLevel: BloodLevel
    foreignObjects: bool = False


class InstructionStep(BaseModel):
    """A single first-aid step."""
    id: int = Field(..., ge=1)
    content: str
    important: Optional[bool] = None
    duration: Optional[str] = None
    hasVideo: Optional[bool] = None
    hasAudio: Optional[bool] = None


class DetectionDetails(BaseModel):
    redDominance: bool = False
    bloodMentions: int = Field(0, ge=0)
    hasFace: bool = False
    violenceScore: str = "UNLIKELY"


class ModelVerdict(BaseModel):
    """The upstream model's own label, before keyword scoring."""
    injuryType: Optional[str] = None
    confidence: Optional[float] = None
    recognised: bool = False


class SimilarDocument(BaseModel):
    title: str
    similarity: float = Field(..., ge=0.0, le=1.0)


class InjuryAnalysisResponse(BaseModel):
    """Classification plus first-aid instructions for one injury."""
    injuryType: str
    probability: float = Field(..., ge=0.0, le=1.0)
    details: InjuryDetails
    steps: list[InstructionStep]
    warning: str
    note: str = ""
    sources: list[str] = []
    estimatedTime: str = ""
    matchedKeywords: list[str] = []
    overrideApplied: bool = False
    failSafe: bool = False
    error: Optional[str] = None
    parsedAs: Optional[str] = None
    detectionDetails: Optional[DetectionDetails] = None
    modelVerdict: Optional[ModelVerdict] = None
    similarDocuments: Optional[list[SimilarDocument]] = None
    filename: Optional[str] = None
    size_bytes: Optional[int] = None


class InjuryTypeSummary(BaseModel):
    injuryType: str
    category: str
    urgencyLevel: int = Field(..., ge=1, le=5)


class InjuryTypeInfo(BaseModel):
    """Reference data for one injury type."""
    injuryType: str
    category: str
    details: InjuryDetails
    urgencyLevel: int = Field(..., ge=1, le=5)
    symptoms: list[str] = []
    commonCauses: list[str] = []
    imageSignifiers: list[str] = []
    emergencySigns: list[str] = []
