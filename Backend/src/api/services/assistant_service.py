"""Medical assistant service - knowledge-base retrieval plus the remote chat model."""
import asyncio
import logging
from typing import Optional

from api.services.model_registry import ModelRegistry
from triage.knowledge import format_context, retrieve

logger = logging.getLogger(__name__)


async def answer_medical_query(query: str, injury_type: Optional[str] = None) -> dict:
    """
    Answer a free-form first-aid question.

    The query (plus the injury type, when the caller knows one) selects
    knowledge-base entries that are sent to the model as reference context.

    Returns a dict matching AssistantResponse:
        answer, sources

    Raises RuntimeError (UpstreamUnavailable included) when the model is not
    configured or cannot be reached.
    """
    model = ModelRegistry.get("assistant")

    lookup = f"{query} {injury_type}" if injury_type else query
    retrieved = retrieve(lookup)
    context = format_context(retrieved)
    if injury_type:
        context = f"Specific injury type: {injury_type}\n\n{context}".rstrip()
    logger.info("Assistant query with %d reference entries", len(retrieved))

    answer = await asyncio.to_thread(model.predict, query, context)
    return {"answer": answer, "sources": [r.to_dict() for r in retrieved]}
