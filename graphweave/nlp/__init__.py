from graphweave.nlp.text_utils import (
    split_sentences,
    iter_sentences,
    detect_language,
    char_jaccard,
)
from graphweave.nlp.keywords import extract_keywords
from graphweave.nlp.extractor import (
    extract,
    is_valid_candidate,
    classify_entity,
)

__all__ = [
    "split_sentences",
    "iter_sentences",
    "detect_language",
    "char_jaccard",
    "extract_keywords",
    "extract",
    "is_valid_candidate",
    "classify_entity",
]
