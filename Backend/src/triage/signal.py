"""
Detection signals: the evidence bag the scorer consumes, and the parsers
that build one from upstream model output.

Two upstream shapes are handled:
  - Vision-language model text (Gemini): either a JSON object
    (``StructuredSignal``) or prose (``FreeTextSignal``).
  - Cloud Vision ``images:annotate`` responses: labels, objects, OCR text,
    faces, SafeSearch and dominant colours.
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from . import lexicon
from .errors import MalformedSignal

logger = logging.getLogger(__name__)

SEVERITIES = ("low", "medium", "high")
BLOOD_LEVELS = ("none", "minimal", "moderate", "severe")

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")
_DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")

# A known category reported by the model is represented by one evidence
# token that only hits that category's keyword list.
_REPORTED_TYPE_TOKENS = {
    lexicon.BLEEDING: "bleeding",
    lexicon.CUT_LACERATION: "laceration",
    lexicon.HEAD_INJURY: "head",
    lexicon.BURN_INJURY: "burn",
    lexicon.FRACTURE: "fracture",
    lexicon.SPRAIN_STRAIN: "sprain",
    lexicon.EYE_INJURY: "eye",
    lexicon.ALLERGIC_REACTION: "allergy",
    lexicon.MINOR_WOUND: "minor",
}

# Free-text category cues, highest priority first
_TEXT_CATEGORY_RULES = (
    (re.compile(r"bleed|blood|hemorrhage", re.I), lexicon.BLEEDING, "severe", 0.9),
    (re.compile(r"cut|laceration|gash", re.I), lexicon.CUT_LACERATION, "moderate", 0.85),
    (re.compile(r"burn|scald", re.I), lexicon.BURN_INJURY, None, 0.8),
    (re.compile(r"fracture|broken", re.I), lexicon.FRACTURE, None, 0.75),
    (re.compile(r"sprain|strain", re.I), lexicon.SPRAIN_STRAIN, None, 0.7),
)
_SEVERE_TEXT = re.compile(r"severe|serious|critical|emergency|urgent", re.I)
_MODERATE_TEXT = re.compile(r"moderate|medium", re.I)
_COLOR_TEXT = re.compile(r"\b(?:red|blue|black|purple|yellow|white|pink|brown|crimson|maroon)", re.I)


class ViolenceLikelihood(str, Enum):
    """SafeSearch-style likelihood that the image shows violence."""

    UNKNOWN = "UNKNOWN"
    UNLIKELY = "UNLIKELY"
    POSSIBLE = "POSSIBLE"
    LIKELY = "LIKELY"
    VERY_LIKELY = "VERY_LIKELY"

    @classmethod
    def from_value(cls, value: Any) -> "ViolenceLikelihood":
        """Accept an enum member, a SafeSearch name or a 0-100 score."""
        if isinstance(value, cls):
            return value
        if value is None or isinstance(value, bool):
            return cls.UNKNOWN
        if isinstance(value, (int, float)):
            if value >= 80:
                return cls.VERY_LIKELY
            if value >= 60:
                return cls.LIKELY
            if value >= 40:
                return cls.POSSIBLE
            return cls.UNLIKELY
        name = str(value).strip().upper()
        if name == "VERY_UNLIKELY":
            return cls.UNLIKELY
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_elevated(self) -> bool:
        return self in (ViolenceLikelihood.POSSIBLE, ViolenceLikelihood.LIKELY, ViolenceLikelihood.VERY_LIKELY)


@dataclass(frozen=True)
class DetectionSignal:
    """Evidence for one image. Tokens are lower-cased on construction."""

    tokens: frozenset = frozenset()
    red_dominance: bool = False
    blood_mention_count: int = 0
    has_face: bool = False
    violence_likelihood: ViolenceLikelihood = ViolenceLikelihood.UNKNOWN

    def __post_init__(self):
        if self.blood_mention_count < 0:
            raise ValueError("blood_mention_count must be >= 0")
        normalised = frozenset(t.strip().lower() for t in self.tokens if t and t.strip())
        object.__setattr__(self, "tokens", normalised)
        object.__setattr__(self, "violence_likelihood", ViolenceLikelihood.from_value(self.violence_likelihood))

    @classmethod
    def from_tokens(cls, tokens, red_dominance: bool = False, has_face: bool = False,
                    violence_likelihood: Any = None) -> "DetectionSignal":
        """Build a signal, counting blood vocabulary over *tokens*."""
        lowered = [t.lower() for t in tokens if t]
        return cls(
            tokens=frozenset(lowered),
            red_dominance=red_dominance,
            blood_mention_count=lexicon.count_blood_mentions(lowered),
            has_face=has_face,
            violence_likelihood=violence_likelihood,
        )

    @property
    def mentions_blood(self) -> bool:
        return any(word in token for token in self.tokens for word in lexicon.BLOOD_MENTION_WORDS)


@dataclass(frozen=True)
class ReportedDetails:
    """What the upstream model itself claimed. Every field is optional."""

    injury_type: Optional[str] = None
    severity: Optional[str] = None
    blood_level: Optional[str] = None
    location: Optional[str] = None
    foreign_objects: Optional[bool] = None
    confidence: Optional[float] = None


@dataclass(frozen=True)
class StructuredSignal:
    """Model answered with a JSON object."""

    reported: ReportedDetails
    detected_objects: tuple = ()
    detected_colors: tuple = ()
    descriptions: tuple = ()


@dataclass(frozen=True)
class FreeTextSignal:
    """Model answered in prose; details were recovered with regexes."""

    reported: ReportedDetails
    text: str = ""
    detected_colors: tuple = ()
    matched_category: bool = False


ParsedSignal = Union[StructuredSignal, FreeTextSignal]


# ---------------------------------------------------------------------------
# Parsing model text
# ---------------------------------------------------------------------------

def strip_data_url(image_base64: str) -> str:
    """Remove a ``data:image/...;base64,`` prefix if present."""
    return _DATA_URL_PREFIX.sub("", image_base64.strip())


def parse_model_response(text: str) -> ParsedSignal:
    """
    Turn model output into a parsed signal.

    The first ``{...}`` block is tried as JSON; anything that is not valid
    JSON falls through to the regex parser.
    """
    try:
        return parse_structured(text)
    except MalformedSignal as exc:
        logger.info("Model response is not structured JSON (%s); using text heuristics", exc)
        return parse_free_text(text)


def parse_structured(text: str) -> StructuredSignal:
    match = _JSON_BLOCK.search(text or "")
    if not match:
        raise MalformedSignal("no JSON object in response")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise MalformedSignal(f"invalid JSON: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise MalformedSignal("JSON body is not an object")

    details = payload.get("details") if isinstance(payload.get("details"), dict) else {}
    detection = payload.get("detectionDetails") if isinstance(payload.get("detectionDetails"), dict) else {}

    def pick(key):
        value = payload.get(key)
        return details.get(key) if value is None else value

    foreign = pick("foreignObjects")
    if foreign is None:
        foreign = detection.get("foreignObjects")

    reported = ReportedDetails(
        injury_type=_clean_str(payload.get("injuryType")),
        severity=_normalise_choice(pick("severity"), SEVERITIES),
        blood_level=_normalise_choice(pick("bloodLevel"), BLOOD_LEVELS),
        location=_clean_str(pick("location")),
        foreign_objects=foreign if isinstance(foreign, bool) else None,
        confidence=_to_float(payload.get("confidence")),
    )
    descriptions = tuple(
        s for s in (_clean_str(payload.get(k)) or _clean_str(detection.get(k))
                    for k in ("description", "observations", "notes"))
        if s
    )
    return StructuredSignal(
        reported=reported,
        detected_objects=_str_tuple(detection.get("detectedObjects")),
        detected_colors=_str_tuple(detection.get("detectedColors")),
        descriptions=descriptions,
    )


def parse_free_text(text: str) -> FreeTextSignal:
    """Recover injury details from prose. Defaults to Bleeding when nothing matches."""
    text = text or ""
    injury_type, blood_level, confidence = lexicon.BLEEDING, None, 0.6
    matched = False
    for pattern, category, level, conf in _TEXT_CATEGORY_RULES:
        if pattern.search(text):
            injury_type, blood_level, confidence = category, level, conf
            matched = True
            break

    if _SEVERE_TEXT.search(text):
        severity = "high"
    elif _MODERATE_TEXT.search(text):
        severity = "medium"
    else:
        severity = "low"

    lowered = text.lower()
    location = next((part for part in lexicon.BODY_PARTS if part in lowered), None)
    colors = tuple(dict.fromkeys(m.lower() for m in _COLOR_TEXT.findall(lowered)))

    return FreeTextSignal(
        reported=ReportedDetails(
            injury_type=injury_type,
            severity=severity,
            blood_level=blood_level,
            location=location,
            confidence=confidence,
        ),
        text=lowered,
        detected_colors=colors,
        matched_category=matched,
    )


# ---------------------------------------------------------------------------
# Building DetectionSignals
# ---------------------------------------------------------------------------

def signal_from_parsed(parsed: ParsedSignal) -> DetectionSignal:
    """Derive scorer evidence from a parsed model response."""
    red = any(name in color.lower() for color in parsed.detected_colors for name in lexicon.BLOOD_COLOR_NAMES)

    if isinstance(parsed, FreeTextSignal):
        evidence = [parsed.text] if parsed.text else []
        return DetectionSignal(
            tokens=frozenset(evidence),
            red_dominance=red,
            blood_mention_count=lexicon.count_blood_mentions(evidence),
        )

    evidence = [*parsed.detected_objects, *parsed.detected_colors, *parsed.descriptions]
    if parsed.reported.location:
        evidence.append(parsed.reported.location)
    evidence = [e.lower() for e in evidence]

    # The model's own label is a verdict, not an observation: it adds to
    # scoring but not to the blood mention count.
    label_tokens = []
    if parsed.reported.injury_type:
        label_tokens.append(_REPORTED_TYPE_TOKENS.get(parsed.reported.injury_type,
                                                      parsed.reported.injury_type.lower()))

    return DetectionSignal(
        tokens=frozenset(evidence + label_tokens),
        red_dominance=red,
        blood_mention_count=lexicon.count_blood_mentions(evidence),
    )


def signal_from_vision(annotation: dict) -> DetectionSignal:
    """Build a signal from one Cloud Vision ``responses[]`` entry."""
    labels = [a.get("description", "") for a in annotation.get("labelAnnotations") or []]
    objects = [a.get("name", "") for a in annotation.get("localizedObjectAnnotations") or []]
    texts = [a.get("description", "") for a in annotation.get("textAnnotations") or []]
    tokens = [t.lower() for t in labels + objects + texts if t]

    red_score = 0.0
    colors = ((annotation.get("imagePropertiesAnnotation") or {}).get("dominantColors") or {}).get("colors") or []
    for entry in colors:
        rgb = entry.get("color") or {}
        if lexicon.is_red(rgb.get("red", 0), rgb.get("green", 0), rgb.get("blue", 0)):
            red_score += entry.get("pixelFraction", 0.0) * 100
    red_dominance = red_score > lexicon.RED_DOMINANCE_THRESHOLD
    logger.debug("Red dominance %s (score %.2f)", red_dominance, red_score)

    violence = (annotation.get("safeSearchAnnotation") or {}).get("violence", "UNLIKELY")

    return DetectionSignal.from_tokens(
        tokens,
        red_dominance=red_dominance,
        has_face=bool(annotation.get("faceAnnotations")),
        violence_likelihood=violence,
    )


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------

def _clean_str(value) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _normalise_choice(value, choices) -> Optional[str]:
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()
    return None


def _to_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _str_tuple(values) -> tuple:
    if not isinstance(values, list):
        return ()
    return tuple(v.strip() for v in values if isinstance(v, str) and v.strip())
