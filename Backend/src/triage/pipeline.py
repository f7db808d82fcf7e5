"""
Injury triage pipeline: upstream response -> signal -> scores ->
classification -> steps -> bundle.

Every entry point returns an InstructionBundle. Failures resolve to the
more cautious outcome: an unreachable model yields the Bleeding fail-safe,
an unparseable answer goes through the free-text heuristics.
"""

import logging
from typing import Any, Optional

from .assembler import InstructionBundle, assemble
from .classifier import ClassificationResult, classify, fail_safe_classification
from .errors import UpstreamUnavailable
from .instructions import generate_steps
from .reference import INJURY_PROFILES, get_injury_profile, manual_blood_level, similar_documents
from .scorer import score
from .signal import (
    DetectionSignal,
    FreeTextSignal,
    ParsedSignal,
    ReportedDetails,
    StructuredSignal,
    parse_model_response,
    signal_from_parsed,
    signal_from_vision,
)

logger = logging.getLogger(__name__)

MANUAL_SELECTION_CONFIDENCE = 0.87


class InjuryTriagePipeline:
    """Stateless; one instance can serve concurrent requests."""

    def analyze_image(self, model: Any, data: bytes) -> InstructionBundle:
        """
        Run *model* on image bytes and classify the result.

        ``model.kind`` is ``"text"`` for vision-language models returning
        prose/JSON, or ``"vision"`` for Cloud Vision style annotations.
        """
        try:
            response = model.predict(data)
        except UpstreamUnavailable as exc:
            logger.error("Upstream model unavailable: %s", exc)
            return self.fail_safe(str(exc))
        except Exception as exc:
            logger.exception("Upstream model failed: %s", exc)
            return self.fail_safe(f"Analysis failed: {exc}")

        try:
            if model.kind == "vision":
                return self.run_vision(response)
            return self.run_text(response)
        except Exception as exc:
            logger.exception("Triage failed on upstream response: %s", exc)
            return self.fail_safe(f"Could not interpret the analysis: {exc}")

    def run_text(self, text: str) -> InstructionBundle:
        if not text or not text.strip():
            return self.fail_safe("Empty response from the analysis model")
        parsed = parse_model_response(text)
        parsed_as = "structured" if isinstance(parsed, StructuredSignal) else "free_text"
        logger.info("Model response parsed as %s", parsed_as)
        verdict = _model_verdict(parsed)
        bundle = self.run_signal(signal_from_parsed(parsed), parsed.reported, parsedAs=parsed_as, modelVerdict=verdict)
        if verdict["injuryType"] != bundle.classification.injury_type:
            logger.info("Model said %s (confidence %s), scored as %s",
                        verdict["injuryType"], verdict["confidence"], bundle.classification.injury_type)
        return bundle

    def run_vision(self, annotation: dict) -> InstructionBundle:
        return self.run_signal(signal_from_vision(annotation or {}), parsedAs="vision")

    def run_signal(self, signal: DetectionSignal, reported: Optional[ReportedDetails] = None,
                   **extras) -> InstructionBundle:
        scores = score(signal)
        result = classify(scores, signal, reported)
        logger.info("Classified as %s (confidence %.2f, severity %s, override=%s)",
                    result.injury_type, result.confidence, result.severity, result.override_applied)
        steps = generate_steps(result.injury_type, result.severity)
        return assemble(result, steps, detectionDetails=_detection_details(signal), **extras)

    def fail_safe(self, error: Optional[str] = None) -> InstructionBundle:
        result = fail_safe_classification()
        logger.warning("Returning fail-safe %s result: %s", result.injury_type, error)
        return assemble(result, generate_steps(result.injury_type, result.severity), error=error)

    def for_injury_type(self, injury_type: str, severity: Optional[str] = None) -> InstructionBundle:
        """Bundle for an injury type the user picked by hand (no image)."""
        profile = get_injury_profile(injury_type)
        result = ClassificationResult(
            injury_type=injury_type,
            confidence=MANUAL_SELECTION_CONFIDENCE,
            severity=severity or profile.severity,
            blood_level=manual_blood_level(injury_type),
            location=profile.default_location,
            foreign_objects=profile.foreign_objects,
        )
        steps = generate_steps(injury_type, result.severity)
        return assemble(result, steps, similarDocuments=similar_documents(injury_type))


def _detection_details(signal: DetectionSignal) -> dict:
    return {
        "redDominance": signal.red_dominance,
        "bloodMentions": signal.blood_mention_count,
        "hasFace": signal.has_face,
        "violenceScore": signal.violence_likelihood.value,
    }


def _model_verdict(parsed: ParsedSignal) -> dict:
    """What the upstream model itself concluded, before scoring."""
    reported = parsed.reported
    if isinstance(parsed, FreeTextSignal):
        recognised = parsed.matched_category
    else:
        recognised = reported.injury_type in INJURY_PROFILES
    return {
        "injuryType": reported.injury_type,
        "confidence": reported.confidence,
        "recognised": recognised,
    }
