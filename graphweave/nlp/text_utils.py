import re
from typing import List, Tuple

# "." ends a sentence unless it sits inside a decimal or follows an honorific.
SENTENCE_END_RE = re.compile(
    r"[!?。！？]+|(?<!\bMr)(?<!\bMrs)(?<!\bMs)(?<!\bDr)(?<!\bProf)\.(?!\d)"
)
CJK_RE = re.compile(r"[一-鿿]")
LATIN_RE = re.compile(r"[A-Za-z]")


def iter_sentences(text: str) -> List[Tuple[int, str]]:
    """(offset, sentence) pairs; boundary characters are consumed and empty parts dropped."""
    if not text:
        return []
    sentences: List[Tuple[int, str]] = []
    start = 0
    for boundary in SENTENCE_END_RE.finditer(text):
        _append_stripped(sentences, text, start, boundary.start())
        start = boundary.end()
    _append_stripped(sentences, text, start, len(text))
    return sentences


def _append_stripped(
    out: List[Tuple[int, str]], text: str, start: int, end: int
) -> None:
    chunk = text[start:end]
    stripped = chunk.strip()
    if stripped:
        out.append((start + chunk.index(stripped), stripped))


def split_sentences(text: str) -> List[str]:
    return [sentence for _, sentence in iter_sentences(text)]


def detect_language(text: str) -> str:
    cjk = len(CJK_RE.findall(text or ""))
    latin = len(LATIN_RE.findall(text or ""))
    return "zh" if cjk > latin else "en"


def is_cjk(text: str) -> bool:
    return bool(CJK_RE.search(text or ""))


def char_jaccard(a: str, b: str) -> float:
    """Jaccard overlap of the two strings' character sets."""
    set_a, set_b = set(a or ""), set(b or "")
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def find_all(text: str, needle: str) -> List[int]:
    """Start offsets of every literal (escaped) occurrence of needle."""
    if not text or not needle:
        return []
    return [m.start() for m in re.finditer(re.escape(needle), text)]


def first_index(text: str, needle: str) -> int:
    hits = find_all(text, needle)
    return hits[0] if hits else -1


def count_occurrences(text: str, needle: str) -> int:
    return len(find_all(text, needle))
