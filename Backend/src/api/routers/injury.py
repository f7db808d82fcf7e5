"""Injury triage router."""
from typing import Literal, Optional

from fastapi import APIRouter, File, UploadFile, HTTPException, Query, Response, status

import config
from api.schemas.injury import (
    InjuryAnalysisResponse,
    InjuryAnalyzeBase64Request,
    InjuryTypeInfo,
    InjuryTypeSummary,
)
from api.services.injury_service import (
    decode_image_base64,
    injury_type_info,
    instructions_for,
    list_injury_types,
    run_injury_analysis,
)
from reporting import InstructionSheetGenerator

router = APIRouter()


def _check_size(data: bytes) -> None:
    if len(data) > config.MAX_UPLOAD_SIZE:
        raise HTTPException(413, f"File exceeds {config.MAX_UPLOAD_SIZE // (1024 * 1024)} MB limit.")


@router.post(
    "/analyze",
    response_model=InjuryAnalysisResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Classify an injury photo and return first-aid steps",
)
async def analyze_injury(file: UploadFile = File(..., description="Injury photo (JPEG/PNG/WEBP)")):
    """
    Classify an injury photo and return step-by-step first aid.

    - Blood evidence always ends in a Bleeding or Cut/Laceration verdict
    - If the analysis service is down, the fail-safe Bleeding result is
      returned with an ``error`` field instead of a 5xx

    Args:
        file: Image in JPEG, PNG, WEBP, BMP or HEIC format
    """
    if file.content_type not in config.ALLOWED_IMAGE_TYPES:
        raise HTTPException(400, f"Unsupported file type: {file.content_type}")

    data = await file.read()
    _check_size(data)
    if not data:
        raise HTTPException(400, "Empty file.")

    result = await run_injury_analysis(data, file.filename or "upload")
    return InjuryAnalysisResponse(**result)


@router.post(
    "/analyze-base64",
    response_model=InjuryAnalysisResponse,
    response_model_exclude_none=True,
    summary="Classify a base64-encoded injury photo",
)
async def analyze_injury_base64(request: InjuryAnalyzeBase64Request):
    """Same as ``/analyze`` for clients that send the image inline."""
    try:
        data = decode_image_base64(request.imageBase64)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    _check_size(data)

    result = await run_injury_analysis(data, "inline")
    return InjuryAnalysisResponse(**result)


@router.get(
    "/instructions",
    response_model=InjuryAnalysisResponse,
    response_model_exclude_none=True,
    summary="First-aid steps for a manually selected injury type",
)
async def get_instructions(
    injury_type: str = Query(..., min_length=1, description="e.g. Burn Injury"),
    severity: Optional[Literal["low", "medium", "high"]] = Query(None),
):
    return InjuryAnalysisResponse(**instructions_for(injury_type, severity))


@router.get("/types", response_model=list[InjuryTypeSummary], summary="List known injury types")
async def get_injury_types():
    return list_injury_types()


@router.get("/types/{injury_type:path}", response_model=InjuryTypeInfo, summary="Reference data for an injury type")
async def get_injury_type(injury_type: str):
    """Symptoms, causes and visual cues for one injury type (e.g. ``Cut/Laceration``)."""
    try:
        return InjuryTypeInfo(**injury_type_info(injury_type))
    except KeyError:
        raise HTTPException(404, f"Unknown injury type: {injury_type}")


@router.post(
    "/report",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
    summary="Render an analysis result as a printable PDF",
)
async def build_report(bundle: InjuryAnalysisResponse):
    pdf = InstructionSheetGenerator().build(bundle.model_dump(exclude_none=True))
    filename = bundle.injuryType.replace("/", "-").replace(" ", "_").lower()
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="first-aid-{filename}.pdf"'},
    )
