"""
Strength and confidence scores for relation candidates.

strength   = min(1, base_weight * (1 + co_occurrence) * exp(-0.1 * distance) * relatedness)
confidence = mean(matched ? 0.8 : 0.5, min(1, frequency / 10), context_support, type_confidence)
"""

import math
from typing import Iterable

from graphweave.config import constants
from graphweave.nlp.patterns import SUPPORTING_WORDS, TYPE_CONFIDENCE
from graphweave.nlp.text_utils import char_jaccard, find_all, first_index


def co_occurrence(text: str, source: str, target: str) -> float:
    """Share of ``source`` occurrences with ``target`` inside the symmetric window."""
    window = constants.COOCCURRENCE_WINDOW
    count = 0
    for idx in find_all(text, source):
        nearby = text[max(0, idx - window) : idx + len(source) + window]
        if find_all(nearby, target):
            count += 1
    return min(1.0, 0.2 * count)


def text_distance(text: str, source: str, target: str) -> float:
    src_idx = first_index(text, source)
    tgt_idx = first_index(text, target)
    if src_idx < 0 or tgt_idx < 0:
        return math.inf
    return float(abs(src_idx - tgt_idx))


def context_support(text: str, source: str) -> float:
    """0.5 baseline, +0.1 per supporting discourse word near the first mention."""
    idx = first_index(text, source)
    if idx < 0:
        return 0.5
    window = constants.CONTEXT_SUPPORT_WINDOW
    nearby = text[max(0, idx - window) : idx + window].lower()
    count = sum(len(find_all(nearby, word)) for word in SUPPORTING_WORDS)
    return min(1.0, 0.5 + 0.1 * count)


def relation_strength(
    text: str, source: str, target: str, base_weight: float
) -> float:
    distance = text_distance(text, source, target)
    decay = 0.0 if math.isinf(distance) else math.exp(-0.1 * distance)
    score = (
        base_weight
        * (1 + co_occurrence(text, source, target))
        * decay
        * char_jaccard(source, target)
    )
    return min(1.0, score)


def type_confidence(relation_type: str) -> float:
    return TYPE_CONFIDENCE.get(relation_type, constants.DEFAULT_TYPE_CONFIDENCE)


def relation_confidence(
    matched: bool, frequency: int, support: float, relation_type: str
) -> float:
    parts = [
        0.8 if matched else 0.5,
        min(1.0, frequency / 10.0),
        support,
        type_confidence(relation_type),
    ]
    return sum(parts) / len(parts)


def mean(values: Iterable[float], default: float = 0.5) -> float:
    values = list(values)
    return sum(values) / len(values) if values else default
