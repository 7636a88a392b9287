import re
from typing import Dict, List, Tuple

from graphweave.config import constants
from graphweave.nlp.text_utils import detect_language

_TOKEN_STRIP_RE = {
    "en": re.compile(r"[^\w]"),
    "zh": re.compile(r"[^\w一-鿿]"),
}


def extract_keywords(
    text: str, limit: int = constants.MAX_KEYWORDS
) -> List[Tuple[str, float]]:
    """
    Whitespace tokens, punctuation stripped and lower-cased, ranked by
    relative frequency. Ties keep first-seen order.
    """
    if not text or not text.strip():
        return []

    lang = detect_language(text)
    words = text.split()
    freq: Dict[str, int] = {}
    for word in words:
        token = _TOKEN_STRIP_RE[lang].sub("", word.lower())
        if len(token) > 1:
            freq[token] = freq.get(token, 0) + 1

    ranked = sorted(freq.items(), key=lambda kv: kv[1], reverse=True)
    return [(token, count / len(words)) for token, count in ranked[:limit]]
