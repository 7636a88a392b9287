from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

EdgeKey = Tuple[str, str, str]


def make_edge_id(source: str, target: str, relation_type: str) -> str:
    digest = hashlib.sha1(f"{source}|{relation_type}|{target}".encode("utf-8"))
    return f"edge-{digest.hexdigest()[:12]}"


@dataclass
class RelationCandidate:
    """
    An unverified (source, target, type) triple proposed by a pattern or a
    heuristic. ``matched`` is True only for explicit pattern hits.
    """

    source_text: str
    target_text: str
    relation_type: str
    matched: bool
    context: str
    label: str = ""
    base_weight: float = 0.5
    strength: float = 0.0
    confidence: float = 0.0
    context_support: float = 0.5
    family: str = ""


@dataclass
class Edge:
    id: str
    source: str
    target: str
    type: str
    label: str
    weight: float
    confidence: float
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> EdgeKey:
        return (self.source, self.target, self.type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "label": self.label,
            "weight": self.weight,
            "confidence": self.confidence,
            "properties": dict(self.properties),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Edge":
        return cls(
            id=data["id"],
            source=data["source"],
            target=data["target"],
            type=data["type"],
            label=data.get("label", data["type"]),
            weight=float(data["weight"]),
            confidence=float(data["confidence"]),
            properties=dict(data.get("properties") or {}),
        )

    def __str__(self) -> str:
        return (
            f"{self.source} --{self.label} ({self.weight:.2f}, "
            f"{self.confidence:.2f})--> {self.target}"
        )
