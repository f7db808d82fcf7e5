"""
First-aid step tables.

Each injury type has one fixed, ordered list of steps. Anything without a
table of its own gets the generic assess/clean/treat/cover/monitor list.
"""

from dataclasses import dataclass
from typing import Optional

from . import lexicon


@dataclass(frozen=True)
class Step:
    id: int
    content: str
    important: bool = False
    duration: Optional[str] = None
    has_video: bool = False
    has_audio: bool = False

    def to_dict(self) -> dict:
        d = {"id": self.id, "content": self.content}
        if self.important:
            d["important"] = True
        if self.duration:
            d["duration"] = self.duration
        if self.has_video:
            d["hasVideo"] = True
        if self.has_audio:
            d["hasAudio"] = True
        return d


# (content, important, duration, has_video, has_audio)
_STEP_TABLES: dict[str, tuple] = {
    lexicon.BLEEDING: (
        ("Apply direct pressure to the wound with a clean cloth or bandage.", True, None, True, True),
        ("If blood soaks through, add another layer without removing the first.", False, None, True, False),
        ("If possible, elevate the wound above the heart.", False, None, False, True),
        ("If bleeding continues severely, apply pressure to the appropriate pressure point.", True, None, True, False),
        ("Secure the dressing with a bandage once bleeding is controlled.", False, None, False, False),
    ),
    lexicon.BURN_INJURY: (
        ("Remove the source of the burn if it's safe to do so.", True, None, False, False),
        ("Cool the burn with cool (not cold) running water for 10 to 15 minutes.", False, "10-15 min", True, True),
        ("Remove any jewelry or tight items from the burned area before swelling occurs.", True, None, False, False),
        ("Cover the burn with a sterile, non-adhesive bandage or clean cloth.", False, None, True, False),
        ("Do not apply butter, oil, ice, or fluffy cotton to the burn.", True, None, False, False),
    ),
    lexicon.FRACTURE: (
        ("Immobilize the injured area. Do not attempt to realign the bone.", True, None, True, True),
        ("Apply a cold pack wrapped in cloth to reduce swelling and pain.", False, "15-20 min", True, False),
        ("If the person must be moved, stabilize the area with a makeshift splint.", True, None, True, False),
        ("Treat for shock if necessary by laying the person flat with feet elevated.", False, None, False, True),
        ("Seek immediate medical attention for proper diagnosis and treatment.", False, None, False, False),
    ),
    lexicon.CARDIAC_EMERGENCY: (
        ("Call emergency services immediately.", True, None, False, False),
        ("Have the person sit or lie in a comfortable position, typically with head and shoulders elevated.",
         False, None, True, True),
        ("If the person is responsive and has prescribed medication like nitroglycerin, help them take it.",
         True, None, False, False),
        ("If the person is unresponsive and not breathing normally, begin CPR if trained.", True, None, True, True),
        ("If an AED is available, use it following the device instructions.", False, None, True, False),
    ),
    lexicon.STROKE: (
        ("Remember the acronym FAST: Face drooping, Arm weakness, Speech difficulty, "
         "Time to call emergency services.", True, None, True, True),
        ("Note the time when symptoms first appeared.", True, None, False, False),
        ("Do not give the person anything to eat or drink.", True, None, False, False),
        ("If the person is unresponsive but breathing, place them in the recovery position.", False, None, True, False),
        ("Stay with the person until emergency help arrives.", False, None, False, False),
    ),
    lexicon.HEAD_INJURY: (
        ("Keep the person still and awake if possible.", True, None, False, False),
        ("Apply gentle pressure with a clean cloth if there's external bleeding.", False, None, True, False),
        ("Apply a cold pack to swollen areas (wrapped in a cloth).", False, "10 minutes", False, True),
        ("Monitor for signs of concussion including confusion, vomiting, or unequal pupils.", True, None, False, False),
        ("Seek immediate medical attention, especially with loss of consciousness or confusion.",
         True, None, False, False),
    ),
    lexicon.EYE_INJURY: (
        ("Do NOT rub the eye or apply pressure.", True, None, False, False),
        ("For chemical exposure, flush with clean water for 15-20 minutes.", False, "15-20 min", True, False),
        ("For a foreign object, try to flush it with water or blink repeatedly. "
         "Don't try to remove embedded objects.", True, None, False, False),
        ("For blunt trauma, apply a cold compress without pressure.", False, None, True, False),
        ("Seek medical attention, especially for chemical exposures, embedded objects, or vision changes.",
         True, None, False, False),
    ),
    lexicon.CUT_LACERATION: (
        ("Clean the wound with clean water and mild soap if available.", False, None, True, False),
        ("Apply gentle pressure with a clean cloth or bandage until bleeding stops.", True, None, True, True),
        ("Once bleeding stops, apply an antibiotic ointment if available.", False, None, False, True),
        ("Cover the wound with a sterile bandage or clean cloth.", False, None, True, False),
        ("Seek medical attention for deep cuts, dirty wounds, or if the bleeding doesn't stop "
         "after 15 minutes of pressure.", True, None, False, False),
    ),
}


def has_specific_steps(injury_type: str) -> bool:
    return injury_type in _STEP_TABLES


def generate_steps(injury_type: str, severity: str = "medium") -> list[Step]:
    """
    Ordered first-aid steps for *injury_type*, ids 1..N.

    Unknown injury types get the generic list; its third step is flagged
    important only for medium and high severity.
    """
    table = _STEP_TABLES.get(injury_type)
    if table is None:
        return _default_steps(severity)
    return [
        Step(i, content, important, duration, video, audio)
        for i, (content, important, duration, video, audio) in enumerate(table, start=1)
    ]


def _default_steps(severity: str) -> list[Step]:
    return [
        Step(1, "Assess the injury carefully without causing additional harm.", has_video=True),
        Step(2, "Clean the affected area gently with mild soap and water if appropriate.", has_audio=True),
        Step(3, "Apply appropriate first aid based on the specific injury.",
             important=severity in ("high", "medium"), has_video=True),
        Step(4, "Cover with a clean bandage if needed.", has_video=True),
        Step(5, "Monitor for changes in condition and seek medical attention as needed."),
    ]
