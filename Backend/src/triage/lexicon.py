"""
Static lookup tables for injury classification.

Keyword lists, base weights and boost constants are tuned by hand and are
matched as plain substrings (``"cut"`` also hits ``"cutting board"``).
Changing them changes classification output.
"""

# Category labels, in tie-break order
BLEEDING = "Bleeding"
CUT_LACERATION = "Cut/Laceration"
HEAD_INJURY = "Head Injury"
BURN_INJURY = "Burn Injury"
FRACTURE = "Fracture"
SPRAIN_STRAIN = "Sprain/Strain"
EYE_INJURY = "Eye Injury"
ALLERGIC_REACTION = "Allergic Reaction"
MINOR_WOUND = "Minor Wound"

# Not scored; reachable by manual selection only
CARDIAC_EMERGENCY = "Cardiac Emergency"
STROKE = "Stroke"

BLOOD_CATEGORIES = frozenset({BLEEDING, CUT_LACERATION})

# category -> (base weight, keywords)
INJURY_KEYWORDS: dict[str, tuple[float, tuple[str, ...]]] = {
    BLEEDING: (2.0, (
        "blood", "bleeding", "hemorrhage", "clot", "bandage", "pressure", "gauze", "red fluid",
    )),
    CUT_LACERATION: (1.5, (
        "cut", "laceration", "knife", "blade", "scissors", "sharp", "wound", "gash", "slice",
    )),
    HEAD_INJURY: (1.2, (
        "head", "concussion", "skull", "brain", "trauma", "bump", "consciousness", "dizziness",
        "headache",
    )),
    BURN_INJURY: (1.0, (
        "burn", "fire", "scald", "flame", "blister", "heat", "thermal", "radiation", "chemical burn",
    )),
    FRACTURE: (1.0, (
        "fracture", "broken", "bone", "crack", "splint", "cast", "x-ray", "joint", "dislocation",
    )),
    SPRAIN_STRAIN: (0.8, (
        "sprain", "strain", "twist", "joint", "ligament", "tendon", "muscle", "swelling", "bruise",
        "ankle",
    )),
    EYE_INJURY: (0.7, (
        "eye", "vision", "cornea", "iris", "pupil", "blindness", "sight", "optical", "contact",
        "foreign object",
    )),
    ALLERGIC_REACTION: (0.6, (
        "allergy", "reaction", "rash", "hives", "itching", "swelling", "anaphylaxis", "food allergy",
    )),
    MINOR_WOUND: (0.5, (
        "scratch", "abrasion", "scrape", "minor", "small wound", "band-aid", "superficial",
    )),
}

CATEGORY_ORDER: tuple[str, ...] = tuple(INJURY_KEYWORDS)

# Terms counted towards blood_mention_count (one count per term per token)
BLOOD_TERMS = (
    "blood", "bleeding", "wound", "cut", "laceration", "injury", "trauma",
    "red", "gore", "head wound", "bloody", "bleed", "red fluid", "abrasion",
)

# Words whose presence anywhere in the model text triggers the bleeding override
BLOOD_MENTION_WORDS = ("blood", "bleeding")

# Colour names reported by a language model that count as blood-like
BLOOD_COLOR_NAMES = ("red", "blood", "crimson", "maroon")

BODY_PARTS = (
    "arm", "leg", "hand", "foot", "head", "face", "chest", "back", "abdomen",
    "neck", "finger", "ankle", "wrist", "shoulder", "elbow", "knee",
)

# --- Boosts ---
RED_DOMINANCE_BOOST = 3.0
BLOOD_MENTION_BOOST = 1.5  # per mention
VIOLENCE_BOOST = 2.0
FACE_BOOST = 1.5

# --- Confidence ---
BASE_CONFIDENCE = 0.6
CONFIDENCE_PER_POINT = 0.04
MAX_CONFIDENCE = 0.99
OVERRIDE_MIN_CONFIDENCE = 0.85

# --- Red colour band (Cloud Vision dominant colours) ---
RED_MIN_CHANNEL = 150
RED_CHANNEL_RATIO = 1.5
RED_DOMINANCE_THRESHOLD = 5.0  # percent of image pixels


def is_red(red: float, green: float, blue: float) -> bool:
    """True when an RGB colour falls in the blood-like red band."""
    return red > RED_MIN_CHANNEL and red > green * RED_CHANNEL_RATIO and red > blue * RED_CHANNEL_RATIO


def count_blood_mentions(tokens) -> int:
    return sum(1 for term in BLOOD_TERMS for token in tokens if term in token)
