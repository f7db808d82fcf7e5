"""Vital-signs router."""
from fastapi import APIRouter, status

from api.schemas.vitals import VitalSignsRequest, VitalSignsResponse
from api.services.vitals_service import run_vitals_analysis

router = APIRouter()


@router.post(
    "/analyze",
    response_model=VitalSignsResponse,
    status_code=status.HTTP_200_OK,
    summary="Check wearable vital signs against normal ranges",
)
async def analyze_vitals(request: VitalSignsRequest):
    """
    Flag abnormal readings and cross-reference them with a detected injury.

    Missing or zero readings are ignored.
    """
    return VitalSignsResponse(**run_vitals_analysis(request))
