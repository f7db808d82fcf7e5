"""Injury triage service: runs the upstream model and the triage pipeline."""
import asyncio
import base64
import binascii
import logging
from typing import Optional

from api.services.model_registry import ModelRegistry
from triage.pipeline import InjuryTriagePipeline
from triage.reference import INJURY_PROFILES, get_injury_profile
from triage.signal import strip_data_url

logger = logging.getLogger(__name__)

_pipeline = InjuryTriagePipeline()


async def run_injury_analysis(data: bytes, filename: str = "") -> dict:
    """
    Classify an injury photo and build its first-aid instructions.

    Always returns a bundle dict; an unavailable model yields the
    fail-safe result with an ``error`` field instead of raising.
    """
    try:
        model = ModelRegistry.get("injury")
    except RuntimeError as exc:
        logger.error("Injury model not configured: %s", exc)
        result = _pipeline.fail_safe(str(exc)).to_dict()
    else:
        bundle = await asyncio.to_thread(_pipeline.analyze_image, model, data)
        result = bundle.to_dict()
    result["filename"] = filename
    result["size_bytes"] = len(data)
    return result


def decode_image_base64(image_base64: str) -> bytes:
    """Decode a base64 image, with or without a ``data:image/...`` prefix."""
    payload = strip_data_url(image_base64 or "")
    if not payload:
        raise ValueError("Missing image data")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Invalid base64 image data: {exc}") from exc


def instructions_for(injury_type: str, severity: Optional[str] = None) -> dict:
    return _pipeline.for_injury_type(injury_type, severity).to_dict()


def list_injury_types() -> list[dict]:
    return [
        {"injuryType": p.injury_type, "category": p.care_category, "urgencyLevel": p.urgency_level}
        for p in INJURY_PROFILES.values()
    ]


def injury_type_info(injury_type: str) -> dict:
    if injury_type not in INJURY_PROFILES:
        raise KeyError(injury_type)
    return get_injury_profile(injury_type).to_dict()
