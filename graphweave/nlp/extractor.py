import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple

from graphweave.config import constants
from graphweave.graph.edge import RelationCandidate
from graphweave.graph.node import Entity, EntityType, normalize_label
from graphweave.nlp.keywords import extract_keywords
from graphweave.nlp.patterns import (
    ARTICLES_RE,
    ATTRIBUTE_PATTERNS,
    CJK_BREAK_RE,
    CJK_NUMERAL_RE,
    DIGITS_RE,
    EMBEDDED_PUNCT_RE,
    EN_FUNCTION_WORDS,
    ENTITY_PATTERNS,
    EVENT_PATTERNS,
    HONORIFICS_EN,
    HONORIFICS_ZH,
    LATIN_IDENTIFIER_RE,
    ORDINAL_RE,
    ORG_SUFFIXES_EN,
    ORG_SUFFIXES_ZH,
    RELATION_PATTERNS,
    SYNTHESIZED_LABELS,
    ZH_LEADING_FUNCTION_WORDS,
    ZH_TRAILING_FUNCTION_WORDS,
    ScanHit,
)
from graphweave.nlp.scoring import (
    context_support,
    relation_confidence,
    relation_strength,
)
from graphweave.nlp.text_utils import (
    char_jaccard,
    count_occurrences,
    detect_language,
    first_index,
    is_cjk,
    iter_sentences,
)

Span = Tuple[int, int]

_HONORIFIC_DOT_RE = re.compile(r"^(Mr|Mrs|Ms|Dr|Prof)\.\s*")
_ALL_CAPS_RE = re.compile(r"^[A-Z]{2,}$")
_QUOTES = "\"'“”‘’「」『』"


# ---------------------------------------------------------------------------
# Candidate validation
# ---------------------------------------------------------------------------


def clean_candidate(text: str) -> str:
    text = (text or "").strip().strip(_QUOTES).strip()
    text = _HONORIFIC_DOT_RE.sub(r"\1 ", text)
    return ARTICLES_RE.sub("", text).strip()


def is_valid_candidate(text: str) -> bool:
    """Shared filter for entity mentions and relation endpoints."""
    if not text or not text.strip():
        return False
    text = text.strip()
    if DIGITS_RE.match(text) or CJK_NUMERAL_RE.match(text) or ORDINAL_RE.match(text):
        return False
    if EMBEDDED_PUNCT_RE.search(text):
        return False
    if LATIN_IDENTIFIER_RE.match(text) and re.search(r"[_\d]", text):
        return False

    tokens = text.lower().split()
    if tokens[0] in EN_FUNCTION_WORDS or tokens[-1] in EN_FUNCTION_WORDS:
        return False
    if is_cjk(text):
        if text.startswith(ZH_LEADING_FUNCTION_WORDS):
            return False
        if text.endswith(ZH_TRAILING_FUNCTION_WORDS):
            return False
    return True


def classify_entity(text: str) -> EntityType:
    words = text.split()
    if words and words[0].rstrip(".") in HONORIFICS_EN:
        return EntityType.PERSON
    if text.endswith(HONORIFICS_ZH) and len(text) > 2:
        return EntityType.PERSON
    if _ALL_CAPS_RE.match(text):
        return EntityType.ORGANIZATION
    if words and words[-1].rstrip(".") in ORG_SUFFIXES_EN:
        return EntityType.ORGANIZATION
    if text.endswith(ORG_SUFFIXES_ZH) and len(text) > 2:
        return EntityType.ORGANIZATION
    return EntityType.CONCEPT


def _feature_flags(text: str) -> Dict[str, bool]:
    lang = "zh" if is_cjk(text) else "en"
    return {
        "is_event": any(p.search(text) for p in EVENT_PATTERNS[lang]),
        "is_attribute": any(p.search(text) for p in ATTRIBUTE_PATTERNS[lang]),
    }


def _overlaps(start: int, end: int, consumed: List[Span]) -> bool:
    return any(start < c_end and c_start < end for c_start, c_end in consumed)


# ---------------------------------------------------------------------------
# Per-sentence passes
# ---------------------------------------------------------------------------


def _make_entity(
    text: str,
    entity_type: EntityType,
    position: int,
    sentence_index: int,
    full_text: str,
    pattern: str,
) -> Entity:
    frequency = count_occurrences(full_text, text)
    properties = _feature_flags(text)
    properties["sentence_index"] = sentence_index
    properties["pattern"] = pattern
    return Entity(
        text=text,
        type=entity_type,
        position=position,
        weight=min(1.0, 0.3 + 0.1 * frequency),
        properties=properties,
    )


def _sentence_entities(
    sentence: str, offset: int, sentence_index: int, full_text: str
) -> List[Entity]:
    # Relation triggers and function words become blanks so CJK runs stop at them.
    masked = CJK_BREAK_RE.sub(lambda m: " " * len(m.group()), sentence)
    consumed: List[Span] = []
    entities: List[Entity] = []

    for pattern in ENTITY_PATTERNS:
        source = masked if pattern.name == "cjk_run" else sentence
        for hit in pattern.matcher.scan(source):
            if _overlaps(hit.start, hit.end, consumed):
                continue
            candidate = clean_candidate(hit.groups[0])
            if pattern.name == "cjk_run" and len(candidate) < 2:
                continue
            if not is_valid_candidate(candidate):
                continue
            consumed.append((hit.start, hit.end))
            entity_type = pattern.entity_type or classify_entity(candidate)
            entities.append(
                _make_entity(
                    candidate,
                    entity_type,
                    offset + hit.start,
                    sentence_index,
                    full_text,
                    pattern.name,
                )
            )
    return entities


def _pattern_relations(sentence: str) -> List[RelationCandidate]:
    lang = detect_language(sentence)
    consumed: List[Span] = []
    relations: List[RelationCandidate] = []

    for pattern in RELATION_PATTERNS[lang]:
        for hit in pattern.matcher.scan(sentence):
            if _overlaps(hit.start, hit.end, consumed):
                continue
            endpoints = _endpoints(hit)
            if endpoints is None:
                continue
            consumed.append((hit.start, hit.end))
            source, target = endpoints
            relations.append(
                RelationCandidate(
                    source_text=source,
                    target_text=target,
                    relation_type=pattern.relation_type,
                    matched=True,
                    context=sentence,
                    label=pattern.label,
                    base_weight=pattern.base_weight,
                    family=pattern.family,
                )
            )
    return relations


def _endpoints(hit: ScanHit) -> Optional[Tuple[str, str]]:
    if len(hit.groups) < 2:
        return None
    source, target = clean_candidate(hit.groups[0]), clean_candidate(hit.groups[1])
    if not (is_valid_candidate(source) and is_valid_candidate(target)):
        return None
    if normalize_label(source) == normalize_label(target):
        return None
    return source, target


def _unique_by_label(entities: Sequence[Entity]) -> List[Entity]:
    seen = set()
    unique = []
    for entity in sorted(entities, key=lambda e: e.position):
        if entity.normalized not in seen:
            seen.add(entity.normalized)
            unique.append(entity)
    return unique


def _synthesized(
    kind: str, source: str, target: str, context: str, lang: str, base: float
) -> RelationCandidate:
    return RelationCandidate(
        source_text=source,
        target_text=target,
        relation_type=kind,
        matched=False,
        context=context,
        label=SYNTHESIZED_LABELS[kind][lang],
        base_weight=base,
        family="synthesized",
    )


def _sequential_relations(
    ordered: List[Entity], sentence: str, lang: str
) -> List[RelationCandidate]:
    return [
        _synthesized(
            "sequential",
            a.text,
            b.text,
            sentence,
            lang,
            constants.SEQUENTIAL_RELATION_WEIGHT,
        )
        for a, b in zip(ordered, ordered[1:])
    ]


def _contextual_relations(
    previous: List[Entity], current: List[Entity], sentence: str, lang: str
) -> List[RelationCandidate]:
    return [
        _synthesized(
            "contextual",
            p.text,
            c.text,
            sentence,
            lang,
            constants.CONTEXT_RELATION_WEIGHT,
        )
        for p in previous
        for c in current
        if p.normalized != c.normalized
    ]


def _similarity_relations(text: str, lang: str) -> List[RelationCandidate]:
    keywords = [
        word for word, _ in extract_keywords(text) if is_valid_candidate(word)
    ]
    relations = []
    for i, a in enumerate(keywords):
        for b in keywords[i + 1 :]:
            similarity = char_jaccard(a, b)
            if similarity > constants.SIMILARITY_THRESHOLD:
                relations.append(_synthesized("similar", a, b, "", lang, similarity))
    return relations


def _relation_key(rel: RelationCandidate) -> Tuple[str, str, str]:
    return (
        normalize_label(rel.source_text),
        rel.relation_type,
        normalize_label(rel.target_text),
    )


def _score(relations: List[RelationCandidate], text: str) -> None:
    frequency: Dict[Tuple[str, str, str], int] = {}
    for rel in relations:
        key = _relation_key(rel)
        frequency[key] = frequency.get(key, 0) + 1

    for rel in relations:
        key = _relation_key(rel)
        rel.context_support = context_support(text, rel.source_text)
        rel.strength = relation_strength(
            text, rel.source_text, rel.target_text, rel.base_weight
        )
        rel.confidence = relation_confidence(
            rel.matched, frequency[key], rel.context_support, rel.relation_type
        )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def extract(text: str) -> Tuple[List[Entity], List[RelationCandidate]]:
    """
    Heuristic entity and relation extraction.

    Never raises on malformed input: empty or whitespace-only text yields
    ``([], [])``. All state is local to the call.
    """
    if not text or not text.strip():
        return [], []

    lang = detect_language(text)
    entities: List[Entity] = []
    relations: List[RelationCandidate] = []
    previous: List[Entity] = []

    for index, (offset, sentence) in enumerate(iter_sentences(text)):
        sentence_entities = _sentence_entities(sentence, offset, index, text)
        sentence_relations = _pattern_relations(sentence)

        known = {e.normalized for e in sentence_entities}
        for rel in sentence_relations:
            for endpoint in (rel.source_text, rel.target_text):
                if normalize_label(endpoint) in known:
                    continue
                known.add(normalize_label(endpoint))
                position = offset + max(first_index(sentence, endpoint), 0)
                sentence_entities.append(
                    _make_entity(
                        endpoint,
                        EntityType.CONCEPT,
                        position,
                        index,
                        text,
                        "relation_endpoint",
                    )
                )

        ordered = _unique_by_label(sentence_entities)
        relations.extend(sentence_relations)
        relations.extend(_sequential_relations(ordered, sentence, lang))
        relations.extend(_contextual_relations(previous, ordered, sentence, lang))
        entities.extend(sorted(sentence_entities, key=lambda e: e.position))
        previous = ordered

        logging.debug(
            f"Sentence {index}: {len(sentence_entities)} entities, "
            f"{len(sentence_relations)} pattern relations"
        )

    relations.extend(_similarity_relations(text, lang))
    _score(relations, text)

    logging.debug(
        f"Extracted {len(entities)} entity mentions and {len(relations)} relation candidates"
    )
    return entities, relations
