"""Vital-signs service: maps request bodies onto the vitals analyzer."""
import logging

from api.schemas.vitals import VitalSignsRequest
from triage.vitals import VitalSigns, analyze_vital_signs

logger = logging.getLogger(__name__)


def run_vitals_analysis(request: VitalSignsRequest) -> dict:
    bp = request.bloodPressure
    vitals = VitalSigns(
        heart_rate=request.heartRate,
        systolic=bp.systolic if bp else None,
        diastolic=bp.diastolic if bp else None,
        oxygen_saturation=request.oxygenSaturation,
        temperature=request.temperature,
        respiration_rate=request.respirationRate,
    )
    logger.debug("Analyzing vitals %s for injury %s", vitals, request.injuryType)
    return analyze_vital_signs(vitals, request.injuryType, request.injurySeverity).to_dict()
