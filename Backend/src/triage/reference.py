"""
Injury reference data: per-category defaults and patient-facing facts.

Profiles supply the severity / blood level / foreign-object defaults the
classifier starts from, plus the symptoms, causes and visual cues shown
alongside the instructions. Categories that do not involve blood default
to a blood level of ``none``.
"""

from dataclasses import dataclass

from . import lexicon


@dataclass(frozen=True)
class InjuryProfile:
    injury_type: str
    care_category: str
    severity: str
    blood_level: str
    foreign_objects: bool
    urgency_level: int  # 1..5, 5 most urgent
    default_location: str
    symptoms: tuple = ()
    common_causes: tuple = ()
    image_signifiers: tuple = ()
    emergency_signs: tuple = ()

    def to_dict(self) -> dict:
        return {
            "injuryType": self.injury_type,
            "category": self.care_category,
            "details": {
                "severity": self.severity,
                "location": self.default_location,
                "bloodLevel": self.blood_level,
                "foreignObjects": self.foreign_objects,
            },
            "urgencyLevel": self.urgency_level,
            "symptoms": list(self.symptoms),
            "commonCauses": list(self.common_causes),
            "imageSignifiers": list(self.image_signifiers),
            "emergencySigns": list(self.emergency_signs),
        }


_PROFILES = (
    InjuryProfile(
        lexicon.BLEEDING, "bleeding", "high", "severe", False, 5, "Wound site",
        symptoms=(
            "Continuous blood flow from a wound",
            "Blood that spurts or pulses (arterial bleeding)",
            "Blood that quickly soaks through bandages",
            "Symptoms of shock (pale skin, rapid breathing, weakness)",
        ),
        common_causes=(
            "Deep cuts or lacerations",
            "Puncture wounds",
            "Traumatic injuries",
            "Surgical complications",
            "Underlying medical conditions",
        ),
        image_signifiers=("Visible blood", "Saturated bandages or clothing", "Open wound", "Red fluid"),
        emergency_signs=(
            "severe, uncontrolled bleeding",
            "amputation",
            "deep wounds with visible fat or muscle",
            "embedded objects in the wound",
        ),
    ),
    InjuryProfile(
        lexicon.CUT_LACERATION, "cut", "medium", "moderate", False, 3, "Arm/Hand",
        symptoms=(
            "Open wound with visible skin separation",
            "Bleeding, which can be minimal to severe",
            "Pain around the wound site",
            "Potential exposure of deeper tissues",
        ),
        common_causes=(
            "Contact with sharp objects",
            "Kitchen accidents",
            "Work-related injuries",
            "Falls on sharp edges",
        ),
        image_signifiers=("Linear wound with clean edges", "Visible blood", "Exposed tissue layers"),
        emergency_signs=(
            "deep cuts where fat, muscle or bone may be visible",
            "wounds with jagged edges",
            "wounds with embedded objects",
            "wounds that won't stop bleeding after 10 minutes of pressure",
            "wounds from rusty objects",
            "animal or human bites",
        ),
    ),
    InjuryProfile(
        lexicon.HEAD_INJURY, "head", "high", "none", False, 5, "Head",
        symptoms=(
            "Headache or pressure in the head",
            "Temporary loss of consciousness",
            "Confusion or disorientation",
            "Nausea or vomiting",
            "Dizziness or balance problems",
            "Visible wound or bleeding on the head",
        ),
        common_causes=(
            "Falls",
            "Vehicle-related accidents",
            "Sports injuries",
            "Violence or assaults",
            "Workplace accidents",
        ),
        image_signifiers=(
            "Visible wound or bruising on head",
            "Bleeding from head or face",
            "Swelling",
            "Irregular pupil size (in severe cases)",
        ),
        emergency_signs=(
            "repeated vomiting",
            "seizures",
            "inability to recognize people or places",
            "increasing confusion",
            "weakness or numbness in limbs",
            "decreased coordination",
            "slurred speech",
            "one pupil larger than the other",
            "clear fluid or blood from ears or nose",
        ),
    ),
    InjuryProfile(
        lexicon.BURN_INJURY, "burn", "medium", "none", False, 4, "Arm/Hand",
        symptoms=(
            "Redness and pain in the affected area",
            "Blistering of the skin",
            "Swelling",
            "White or charred appearance in severe burns",
        ),
        common_causes=(
            "Contact with hot surfaces",
            "Scalding liquids",
            "Fire exposure",
            "Chemical contact",
            "Electrical accidents",
        ),
        image_signifiers=("Redness or discoloration", "Blisters or broken skin", "Charred tissue in severe cases"),
        emergency_signs=(
            "burns larger than 3 inches in diameter",
            "burns on the face, hands, feet, genitals or over a joint",
            "third-degree burns (white or charred appearance)",
            "burns from chemicals, electricity, or explosions",
        ),
    ),
    InjuryProfile(
        lexicon.FRACTURE, "fracture", "high", "none", False, 5, "Arm/Leg",
        symptoms=(
            "Pain that intensifies with movement",
            "Swelling and bruising",
            "Deformity or abnormal alignment",
            "Limited mobility or inability to move the affected area",
        ),
        common_causes=(
            "Falls from height",
            "Direct impacts",
            "Sports injuries",
            "Vehicle accidents",
            "Repetitive stress in osteoporotic bones",
        ),
        image_signifiers=("Visible deformity", "Swelling", "Bruising", "Abnormal angle or positioning"),
        emergency_signs=(
            "bone protruding through the skin",
            "severe deformity",
            "loss of pulse beyond the injury",
            "bluish color of the injured area",
            "numbness or tingling beyond the injury",
        ),
    ),
    InjuryProfile(
        lexicon.SPRAIN_STRAIN, "sprain", "low", "none", False, 2, "Ankle/Wrist",
        symptoms=(
            "Pain and tenderness around the affected joint or muscle",
            "Swelling",
            "Bruising",
            "Limited flexibility or range of motion",
        ),
        common_causes=(
            "Sudden twisting or wrenching movements",
            "Falls",
            "Sports injuries",
            "Overexertion",
        ),
        image_signifiers=("Swelling around joint", "Bruising", "Abnormal position"),
        emergency_signs=(
            "inability to bear weight on an injured leg",
            "inability to move the injured joint",
            "numbness in any part of the injured area",
            "severe pain and swelling",
            "visible deformity",
        ),
    ),
    InjuryProfile(
        lexicon.EYE_INJURY, "eye", "medium", "none", True, 4, "Eye",
        symptoms=(
            "Pain or discomfort in the eye",
            "Redness or bloodshot appearance",
            "Vision changes or blurriness",
            "Sensitivity to light",
            "Visible object in the eye",
        ),
        common_causes=(
            "Foreign objects",
            "Chemical exposure",
            "UV or radiation exposure",
            "Trauma or impact",
            "Scratches from contact lenses",
        ),
        image_signifiers=("Red or irritated eye", "Visible foreign body", "Abnormal pupil", "Excessive tearing"),
    ),
    InjuryProfile(
        lexicon.ALLERGIC_REACTION, "allergic", "medium", "none", False, 4, "Face/Body",
        symptoms=(
            "Skin reactions (hives, itching, rash)",
            "Swelling of the face, lips, tongue, or throat",
            "Congestion or runny nose",
            "Difficulty breathing",
            "Nausea, vomiting, or diarrhea",
        ),
        common_causes=(
            "Food allergies (nuts, shellfish, etc.)",
            "Medication reactions",
            "Insect stings or bites",
            "Contact with allergens (latex, plants)",
            "Environmental allergens",
        ),
        image_signifiers=("Hives or rash", "Swelling of face or extremities", "Red, irritated skin"),
    ),
    InjuryProfile(
        lexicon.MINOR_WOUND, "cut", "low", "none", False, 1, "Arm/Hand",
        symptoms=(
            "Small break in the skin",
            "Minimal bleeding that stops quickly",
            "Mild pain or discomfort",
            "Slight redness around the wound site",
        ),
        common_causes=("Paper cuts", "Minor scrapes", "Small punctures", "Abrasions from falls"),
        image_signifiers=("Small wound", "Minimal blood", "Superficial damage only"),
    ),
    InjuryProfile(
        lexicon.CARDIAC_EMERGENCY, "cardiac", "high", "none", False, 5, "Chest",
        symptoms=(
            "chest pain or pressure",
            "pain spreading to shoulder, arm, back, neck, or jaw",
            "shortness of breath",
            "cold sweat",
            "nausea",
            "lightheadedness",
        ),
        emergency_signs=(
            "chest pain lasting more than a few minutes",
            "chest pain that doesn't respond to rest or nitroglycerin",
            "loss of consciousness",
            "no breathing or pulse",
        ),
    ),
    InjuryProfile(
        lexicon.STROKE, "stroke", "high", "none", False, 5, "Head",
        symptoms=(
            "sudden numbness or weakness in face, arm, or leg (especially on one side)",
            "sudden confusion or trouble speaking",
            "sudden trouble seeing",
            "sudden trouble walking, dizziness, or loss of balance",
            "sudden severe headache",
        ),
        emergency_signs=(
            "any stroke symptoms, even if they seem to go away",
            "loss of consciousness",
            "seizures",
            "severe headache with no known cause",
        ),
    ),
)

INJURY_PROFILES: dict[str, InjuryProfile] = {p.injury_type: p for p in _PROFILES}

# Blood levels shown when a type is picked by hand. They differ from the
# classifier defaults above, which must stay "none" outside the blood categories.
MANUAL_BLOOD_LEVELS = {
    lexicon.HEAD_INJURY: "moderate",
    lexicon.FRACTURE: "minimal",
    lexicon.MINOR_WOUND: "minimal",
}


def manual_blood_level(injury_type: str) -> str:
    return MANUAL_BLOOD_LEVELS.get(injury_type) or get_injury_profile(injury_type).blood_level


def get_injury_profile(injury_type: str) -> InjuryProfile:
    """Profile for *injury_type*, or a generic one for anything unrecognised."""
    profile = INJURY_PROFILES.get(injury_type)
    if profile is not None:
        return profile
    return InjuryProfile(
        injury_type=injury_type,
        care_category="other",
        severity="medium",
        blood_level="none",
        foreign_objects=False,
        urgency_level=3,
        default_location="Unspecified",
        symptoms=("Pain", "Discomfort", "Potential tissue damage"),
        common_causes=("Accident", "Trauma", "External force"),
        image_signifiers=("Visible injury", "Affected area appearance"),
    )


def similar_documents(injury_type: str) -> list[dict]:
    """Reference documents listed next to a manually selected injury type."""
    category = get_injury_profile(injury_type).care_category
    return [
        {"title": f"{injury_type} Treatment Protocol", "similarity": 0.92},
        {"title": "Emergency First Aid Guidelines", "similarity": 0.85},
        {"title": f"Common {category} injuries", "similarity": 0.78},
    ]
