"""Medical assistant router."""
from fastapi import APIRouter, HTTPException, status

from api.schemas.assistant import AssistantQueryRequest, AssistantResponse
from api.services.assistant_service import answer_medical_query

router = APIRouter()


@router.post(
    "",
    response_model=AssistantResponse,
    status_code=status.HTTP_200_OK,
    summary="Ask the medical assistant a first-aid question",
)
async def ask_assistant(request: AssistantQueryRequest):
    """
    Answer a first-aid question, grounded in the built-in knowledge base.

    - Returns 400 when the query is missing or blank
    - Returns 503 when the assistant model is not configured or unreachable

    Args:
        request: query text and, optionally, an already identified injury type
    """
    query = request.query.strip()
    if not query:
        raise HTTPException(400, "Missing query parameter")

    try:
        result = await answer_medical_query(query, request.injuryType)
        return AssistantResponse(**result)
    except RuntimeError as exc:
        raise HTTPException(503, str(exc))
    except Exception as exc:
        raise HTTPException(500, f"Assistant error: {exc}")
