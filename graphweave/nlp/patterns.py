"""
Pattern tables for heuristic entity and relation extraction.

Relation patterns are plain data: an ordered list of ``RelationPattern``
tuples whose ``matcher`` only has to provide ``scan(text)``. Order matters:
a pattern whose span overlaps text already consumed by an earlier pattern in
the same sentence is skipped.
"""

import re
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from graphweave.graph.node import EntityType


class ScanHit(NamedTuple):
    start: int
    end: int
    groups: Tuple[str, ...]


class RegexMatcher:
    def __init__(self, pattern: str, flags: int = 0) -> None:
        self.regex = re.compile(pattern, flags)

    def scan(self, text: str) -> Iterator[ScanHit]:
        for m in self.regex.finditer(text):
            groups = m.groups() or (m.group(0),)
            yield ScanHit(m.start(), m.end(), tuple(g or "" for g in groups))

    def __repr__(self) -> str:
        return f"RegexMatcher({self.regex.pattern!r})"


class RelationPattern(NamedTuple):
    matcher: RegexMatcher
    relation_type: str
    label: str
    base_weight: float
    family: str


class EntityPattern(NamedTuple):
    matcher: RegexMatcher
    name: str
    entity_type: Optional[EntityType]


# ---------------------------------------------------------------------------
# Relation weights and per-type confidence
# ---------------------------------------------------------------------------

BASE_WEIGHTS: Dict[str, float] = {
    # hierarchical
    "isA": 0.8,
    "belongsTo": 0.8,
    "hasPart": 0.7,
    "composedOf": 0.7,
    # causal
    "causes": 0.9,
    "triggers": 0.85,
    "affects": 0.7,
    "ifThen": 0.8,
    # temporal
    "before": 0.6,
    "after": 0.6,
    "concurrent": 0.7,
    "during": 0.65,
    # functional
    "usedFor": 0.75,
    "implements": 0.8,
    "supports": 0.7,
    "provides": 0.75,
    "requires": 0.7,
    # spatial
    "locatedIn": 0.7,
    "nearTo": 0.6,
    "surrounds": 0.65,
}

TYPE_CONFIDENCE: Dict[str, float] = {
    "isA": 0.9,
    "belongsTo": 0.85,
    "hasPart": 0.8,
    "causes": 0.85,
    "affects": 0.75,
    "before": 0.8,
    "after": 0.8,
    "usedFor": 0.8,
    "implements": 0.85,
    "locatedIn": 0.9,
}

SYNTHESIZED_LABELS = {
    "contextual": {"zh": "上下文关联", "en": "contextual relation"},
    "sequential": {"zh": "顺序", "en": "sequential"},
    "similar": {"zh": "相似", "en": "similar"},
}

# (family, relation type, chinese trigger, english trigger regex, english label)
_RELATION_TABLE: List[Tuple[str, str, str, str, str]] = [
    ("hierarchical", "isA", "是一种", r"is a (?:kind|type|sort) of", "is a kind of"),
    ("hierarchical", "belongsTo", "属于", r"belongs? to", "belongs to"),
    ("hierarchical", "hasPart", "包含", r"contains?", "contains"),
    ("hierarchical", "composedOf", "组成", r"(?:is composed of|consists? of)", "is composed of"),
    ("hierarchical", "isA", "是一个", r"is an?", "is a"),
    ("causal", "causes", "导致", r"causes?", "causes"),
    ("causal", "triggers", "引起", r"triggers?", "triggers"),
    ("causal", "affects", "影响", r"affects?", "affects"),
    ("causal", "ifThen", "就", r"then", "if...then"),
    ("temporal", "before", "先于", r"(?:happens |occurs |comes )?before", "before"),
    ("temporal", "after", "之后", r"(?:happens |occurs |comes )?after", "after"),
    ("temporal", "concurrent", "同时", r"(?:while|at the same time as)", "at the same time as"),
    ("temporal", "during", "期间", r"during", "during"),
    ("functional", "usedFor", "用于", r"is used for", "is used for"),
    ("functional", "implements", "实现", r"implements?", "implements"),
    ("functional", "supports", "支持", r"supports?", "supports"),
    ("functional", "provides", "提供", r"provides?", "provides"),
    ("functional", "requires", "需要", r"requires?", "requires"),
    ("spatial", "locatedIn", "位于", r"is located in", "is located in"),
    ("spatial", "nearTo", "靠近", r"is near(?: to)?", "is near"),
    ("spatial", "surrounds", "包围", r"surrounds?", "surrounds"),
]

ZH_LABELS = {"composedOf": "由...组成", "ifThen": "如果...就"}

_ZH_CLAUSE = r"[^，,；;：:。！？!?]"
_EN_CLAUSE = r"[^,;:，；：]"


def _zh_pattern(relation_type: str, trigger: str) -> str:
    if relation_type == "composedOf":
        return rf"({_ZH_CLAUSE}+?)由({_ZH_CLAUSE}+?)组成"
    if relation_type == "ifThen":
        return rf"如果({_ZH_CLAUSE}+?)[，,]?就({_ZH_CLAUSE}+)"
    return rf"({_ZH_CLAUSE}+?){re.escape(trigger)}({_ZH_CLAUSE}+)"


def _en_pattern(relation_type: str, trigger: str) -> str:
    if relation_type == "ifThen":
        return r"\bif\s+([^;:]+?)\s*,?\s*then\s+([^,;:]+)"
    return rf"({_EN_CLAUSE}+?)\s+{trigger}\s+({_EN_CLAUSE}+)"


def _build_relation_patterns() -> Dict[str, List[RelationPattern]]:
    patterns: Dict[str, List[RelationPattern]] = {"zh": [], "en": []}
    for family, relation_type, zh_trigger, en_trigger, en_label in _RELATION_TABLE:
        base = BASE_WEIGHTS[relation_type]
        patterns["zh"].append(
            RelationPattern(
                RegexMatcher(_zh_pattern(relation_type, zh_trigger)),
                relation_type,
                ZH_LABELS.get(relation_type, zh_trigger),
                base,
                family,
            )
        )
        patterns["en"].append(
            RelationPattern(
                RegexMatcher(_en_pattern(relation_type, en_trigger), re.IGNORECASE),
                relation_type,
                en_label,
                base,
                family,
            )
        )
    return patterns


RELATION_PATTERNS = _build_relation_patterns()

ZH_TRIGGERS = sorted(
    {row[2] for row in _RELATION_TABLE} | {"如果", "由"}, key=len, reverse=True
)

# ---------------------------------------------------------------------------
# Entity patterns (evaluated in order; overlapping later hits are skipped)
# ---------------------------------------------------------------------------

HONORIFICS_EN = ("Mr", "Mrs", "Ms", "Dr", "Prof", "Sir")
HONORIFICS_ZH = ("先生", "女士", "小姐", "教授", "博士", "老师", "医生")
ORG_SUFFIXES_EN = (
    "Inc",
    "Corp",
    "Corporation",
    "Ltd",
    "LLC",
    "Company",
    "University",
    "Institute",
    "Foundation",
    "Association",
    "Group",
)
ORG_SUFFIXES_ZH = ("公司", "集团", "大学", "学院", "研究所", "研究院", "协会", "银行", "医院")

UNITS = (
    r"kg|km|cm|mm|ms|mg|ml|GB|MB|KB|TB|Hz|kHz|MHz|GHz|kW|W|V|°C|°F|%|"
    r"g|m|s|h|l|"
    r"公斤|千克|克|公里|千米|厘米|毫米|米|秒|分钟|小时|天|年|个月|元|美元|度|岁|倍"
)

ENTITY_PATTERNS: List[EntityPattern] = [
    EntityPattern(
        RegexMatcher(
            r"\b(?:(?:Mr|Mrs|Ms|Dr|Prof)\.?\s+)?[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b"
            r"|\b[A-Z]{2,}\b"
        ),
        "capitalized",
        None,
    ),
    EntityPattern(
        RegexMatcher(rf"\d+(?:\.\d+)?\s*(?:{UNITS})(?![A-Za-z])"),
        "measurement",
        EntityType.MEASUREMENT,
    ),
    EntityPattern(
        RegexMatcher(r"[\"“「『]([^\"“”「」『』]+)[\"”」』]"),
        "quoted",
        EntityType.TERM,
    ),
    EntityPattern(
        RegexMatcher(r"[A-Za-z0-9]*[一-鿿][一-鿿A-Za-z0-9]*"),
        "cjk_run",
        None,
    ),
]

# Splits CJK text into candidate runs before the cjk_run pattern is applied.
CJK_BREAK_WORDS = sorted(
    set(ZH_TRIGGERS)
    | {
        "一种", "一个", "这", "那", "此", "该", "是", "和", "与", "或", "而",
        "的", "了", "着", "在", "把", "被", "对", "从", "也", "都", "很", "并",
    },
    key=len,
    reverse=True,
)
CJK_BREAK_RE = re.compile("|".join(re.escape(w) for w in CJK_BREAK_WORDS))

# ---------------------------------------------------------------------------
# Invalidity filter
# ---------------------------------------------------------------------------

DIGITS_RE = re.compile(r"^\d+$")
CJK_NUMERAL_RE = re.compile(r"^[一二三四五六七八九十百千万亿零两]+$")
ORDINAL_RE = re.compile(
    r"^第[\d一二三四五六七八九十百千]+"
    r"|^\d+(?:st|nd|rd|th)$"
    r"|^(?:first|second|third|fourth|fifth|sixth|seventh|eighth|ninth|tenth|last)$",
    re.IGNORECASE,
)
LATIN_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
# Decimal points between digits are allowed; hyphens join compound words.
EMBEDDED_PUNCT_RE = re.compile(
    r"[，。！？、；：,;:!?\"'“”‘’()（）\[\]{}<>《》【】/\\|@#$^&*+=~`…]"
    r"|(?<!\d)\.|\.(?!\d)"
)

ZH_LEADING_FUNCTION_WORDS = (
    "这", "那", "此", "该", "是", "和", "与", "或", "而", "的", "一种", "一个",
)
ZH_TRAILING_FUNCTION_WORDS = ("是", "和", "与", "或", "而", "的", "了", "着", "过")
EN_FUNCTION_WORDS = frozenset(
    {
        "this", "that", "these", "those",
        "is", "are", "was", "were", "be", "been", "am",
        "and", "or", "but", "nor", "so",
        "a", "an", "the", "of", "to",
    }
)
ARTICLES_RE = re.compile(r"^(?:a|an|the)\s+", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Entity feature indicators
# ---------------------------------------------------------------------------

EVENT_PATTERNS = {
    "en": [
        re.compile(r"ed$"),
        re.compile(r"ing$"),
        re.compile(r"^(?:start|end|begin|finish|complete|launch)", re.IGNORECASE),
        re.compile(r"\b(?:and|or|but|then|while)\b", re.IGNORECASE),
    ],
    "zh": [
        re.compile(r"[了过着]$"),
        re.compile(r"^(?:开始|结束|发生|完成|启动)"),
        re.compile(r"(?:并|或|而|但|然后)"),
    ],
}

ATTRIBUTE_PATTERNS = {
    "en": [
        re.compile(
            r"^(?:size|length|width|height|depth|weight|color|shape)", re.IGNORECASE
        ),
        re.compile(r"(?:ness|ity|tion|sion|ance|ence)$"),
        re.compile(r"^(?:can|could|should|must|may|might)\b", re.IGNORECASE),
    ],
    "zh": [
        re.compile(r"^(?:大小|长度|宽度|高度|深度|重量|颜色|形状)"),
        re.compile(r"(?:性|度|率|量|值|数|比)$"),
        re.compile(r"^(?:可以|能够|应该|必须|不能|不可以)"),
    ],
}

SUPPORTING_WORDS = (
    "确实", "的确", "必然", "显然", "证明", "表明", "说明", "意味着", "因此", "所以", "由此可见",
    "indeed", "clearly", "therefore", "thus", "shows", "proves",
    "demonstrates", "means", "hence",
)
