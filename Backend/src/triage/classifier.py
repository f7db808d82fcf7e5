"""
Decision rule: turns category scores into one classification.

Ties go to the category listed first in the lexicon. Blood-like evidence
always ends in a Bleeding or Cut/Laceration verdict.
"""

import logging
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from . import lexicon
from .reference import get_injury_profile
from .scorer import CategoryScore
from .signal import DetectionSignal, ReportedDetails

logger = logging.getLogger(__name__)

_BLOOD_LEVEL_RANK = {"none": 0, "minimal": 1, "moderate": 2, "severe": 3}

UNDETERMINED = "Undetermined"


@dataclass(frozen=True)
class ClassificationResult:
    injury_type: str
    confidence: float
    severity: str
    blood_level: str
    location: str = UNDETERMINED
    foreign_objects: bool = False
    matched_keywords: tuple = ()
    override_applied: bool = False
    fail_safe: bool = False


# Used when the upstream model could not be reached or returned nothing
FAIL_SAFE_RESULT = ClassificationResult(
    injury_type=lexicon.BLEEDING,
    confidence=0.7,
    severity="high",
    blood_level="moderate",
    location=UNDETERMINED,
    foreign_objects=False,
    fail_safe=True,
)


def fail_safe_classification() -> ClassificationResult:
    return FAIL_SAFE_RESULT


def confidence_for(max_score: float) -> float:
    if max_score <= 0:
        return lexicon.BASE_CONFIDENCE
    return min(lexicon.BASE_CONFIDENCE + lexicon.CONFIDENCE_PER_POINT * max_score, lexicon.MAX_CONFIDENCE)


def pick_category(scores: Mapping[str, CategoryScore]) -> CategoryScore:
    """Strictly greatest score wins; the first category in lexicon order wins ties."""
    ordered = [c for c in lexicon.CATEGORY_ORDER if c in scores]
    ordered += [c for c in scores if c not in ordered]

    best = CategoryScore(lexicon.MINOR_WOUND)
    for category in ordered:
        if scores[category].score > best.score:
            best = scores[category]
    return best


def location_from_tokens(tokens) -> Optional[str]:
    ordered = sorted(tokens)
    for part in lexicon.BODY_PARTS:
        if any(part in token for token in ordered):
            return part
    return None


def classify(
    scores: Mapping[str, CategoryScore],
    signal: DetectionSignal,
    reported: Optional[ReportedDetails] = None,
) -> ClassificationResult:
    """
    Pick a category from *scores*, fill in details, then apply the bleeding
    override.

    *reported* carries whatever severity/blood level/location the upstream
    model stated; those values replace the category defaults.
    """
    reported = reported or ReportedDetails()
    best = pick_category(scores)

    if best.score <= 0:
        logger.info("No specific injury evidence, defaulting to %s", lexicon.MINOR_WOUND)
        category, confidence, matched = lexicon.MINOR_WOUND, lexicon.BASE_CONFIDENCE, ()
    else:
        category, confidence = best.category, confidence_for(best.score)
        matched = tuple(sorted(best.matched_keywords))

    profile = get_injury_profile(category)
    result = ClassificationResult(
        injury_type=category,
        confidence=confidence,
        severity=reported.severity or profile.severity,
        blood_level=reported.blood_level or profile.blood_level,
        location=reported.location or location_from_tokens(signal.tokens) or UNDETERMINED,
        foreign_objects=profile.foreign_objects if reported.foreign_objects is None else reported.foreign_objects,
        matched_keywords=matched,
    )
    return apply_blood_override(result, signal)


def apply_blood_override(result: ClassificationResult, signal: DetectionSignal) -> ClassificationResult:
    """
    Force a Bleeding verdict when blood is in evidence but the winner is not
    blood-related. Idempotent.
    """
    blood_evidence = signal.red_dominance or signal.mentions_blood or result.blood_level != "none"

    if blood_evidence and result.injury_type not in lexicon.BLOOD_CATEGORIES:
        logger.info("Blood detected but classified as %s, overriding to %s", result.injury_type, lexicon.BLEEDING)
        blood_level = result.blood_level
        if _BLOOD_LEVEL_RANK.get(blood_level, 0) < _BLOOD_LEVEL_RANK["moderate"]:
            blood_level = "moderate"
        result = replace(
            result,
            injury_type=lexicon.BLEEDING,
            blood_level=blood_level,
            severity="high",
            confidence=max(result.confidence, lexicon.OVERRIDE_MIN_CONFIDENCE),
            override_applied=True,
        )

    if signal.red_dominance and result.blood_level == "none":
        result = replace(result, blood_level="minimal")

    return result
