import re
from typing import Dict, List

from graphweave.nlp.text_utils import count_occurrences, detect_language

_SENTIMENT_WORDS: Dict[str, Dict[str, List[str]]] = {
    "en": {
        "positive": [
            "good",
            "excellent",
            "great",
            "strong",
            "high",
            "fast",
            "better",
            "best",
            "superior",
            "amazing",
        ],
        "negative": [
            "bad",
            "poor",
            "weak",
            "low",
            "slow",
            "worse",
            "worst",
            "inferior",
            "terrible",
            "awful",
        ],
    },
    "zh": {
        "positive": ["好", "优秀", "棒", "强", "高", "快", "优质", "卓越", "出色", "完美"],
        "negative": ["差", "糟", "弱", "低", "慢", "坏", "劣质", "糟糕", "失败", "不佳"],
    },
}


def word_sentiment(word: str, lang: str) -> str:
    lexicon = _SENTIMENT_WORDS[lang]
    lowered = word.lower()
    if any(w in lowered for w in lexicon["positive"]):
        return "positive"
    if any(w in lowered for w in lexicon["negative"]):
        return "negative"
    return "neutral"


def analyze_sentiment(text: str) -> Dict[str, float]:
    if not text:
        return {"positive": 0, "negative": 0, "polarity": 0.0}

    lang = detect_language(text)
    lowered = text.lower()
    if lang == "en":
        tokens = re.findall(r"\w+", lowered)
        pos = sum(t in _SENTIMENT_WORDS["en"]["positive"] for t in tokens)
        neg = sum(t in _SENTIMENT_WORDS["en"]["negative"] for t in tokens)
    else:
        pos = sum(count_occurrences(lowered, w) for w in _SENTIMENT_WORDS["zh"]["positive"])
        neg = sum(count_occurrences(lowered, w) for w in _SENTIMENT_WORDS["zh"]["negative"])

    total = pos + neg
    return {
        "positive": pos,
        "negative": neg,
        "polarity": (pos - neg) / total if total else 0.0,
    }
