"""
Scorer Module
Weighted keyword scoring of a DetectionSignal per injury category.
"""

import logging
from dataclasses import dataclass

from . import lexicon
from .signal import DetectionSignal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryScore:
    """Accumulated evidence for one category. A score of 0 means no evidence."""
    category: str
    score: float = 0.0
    matched_keywords: frozenset = frozenset()


def score(signal: DetectionSignal) -> dict[str, CategoryScore]:
    """
    Score every category against *signal*.

    Each keyword adds the category's base weight once for every token that
    contains it. Context boosts are applied once per category afterwards.
    The returned dict preserves the fixed category order.
    """
    scores: dict[str, CategoryScore] = {}
    tokens = sorted(signal.tokens)

    for category, (weight, keywords) in lexicon.INJURY_KEYWORDS.items():
        total = 0.0
        matched = set()
        for keyword in keywords:
            for token in tokens:
                if keyword in token:
                    total += weight
                    matched.add(keyword)
                    logger.debug("Match: %r includes %r for %s (+%s)", token, keyword, category, weight)

        if category in lexicon.BLOOD_CATEGORIES:
            if signal.red_dominance:
                total += lexicon.RED_DOMINANCE_BOOST
            if signal.blood_mention_count > 0:
                total += lexicon.BLOOD_MENTION_BOOST * signal.blood_mention_count
            if signal.violence_likelihood.is_elevated:
                total += lexicon.VIOLENCE_BOOST

        if category == lexicon.HEAD_INJURY and signal.has_face:
            total += lexicon.FACE_BOOST

        scores[category] = CategoryScore(category, total, frozenset(matched))

    logger.debug("Category scores: %s", {c: s.score for c, s in scores.items()})
    return scores
