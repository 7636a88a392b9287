from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class EntityType(Enum):
    CONCEPT = "Concept"
    PERSON = "Person"
    ORGANIZATION = "Organization"
    MEASUREMENT = "Measurement"
    TERM = "Term"
    UNKNOWN = "Unknown"


_WS_RE = re.compile(r"\s+")


def normalize_label(text: str) -> str:
    """Lower-case, trim and collapse inner whitespace."""
    return _WS_RE.sub(" ", (text or "").strip()).lower()


def make_node_id(label: str) -> str:
    digest = hashlib.sha1(normalize_label(label).encode("utf-8")).hexdigest()
    return f"node-{digest[:12]}"


@dataclass
class Entity:
    """A single entity mention produced by the extractor, pre-deduplication."""

    text: str
    type: EntityType
    position: int
    weight: float
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def normalized(self) -> str:
        return normalize_label(self.text)


@dataclass
class Node:
    id: str
    label: str
    type: EntityType
    weight: float = 0.0
    properties: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.type.value,
            "weight": self.weight,
            "properties": dict(self.properties),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        return cls(
            id=data["id"],
            label=data["label"],
            type=EntityType(data.get("type", EntityType.UNKNOWN.value)),
            weight=float(data.get("weight", 0.0)),
            properties=dict(data.get("properties") or {}),
        )

    def __str__(self) -> str:
        return f"{self.label} ({self.type.value}, {self.weight:g})"
