"""Medical assistant request/response schemas."""
from typing import Optional

from pydantic import BaseModel, Field


class AssistantQueryRequest(BaseModel):
    """A question for the medical assistant."""
    query: str = Field("", max_length=4000, description="Free-form first-aid or symptom question")
    injuryType: Optional[str] = Field(None, description="Injury type already identified, if any")

    model_config = {"json_schema_extra": {"example": {
        "query": "How long should I keep cooling a burn on my hand?",
        "injuryType": "Burn Injury",
    }}}


class KnowledgeSource(BaseModel):
    """A knowledge-base entry used as reference context."""
    id: str
    title: str
    similarity: float = Field(..., ge=0.0)


class AssistantResponse(BaseModel):
    answer: str
    sources: list[KnowledgeSource] = []
