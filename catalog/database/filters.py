# catalog/database/filters.py
"""
Backend-neutral query filters.

A ``Filter`` is an AND of conditions plus an optional OR group which is itself
ANDed with the rest. Both storage backends understand it: the in-memory one
evaluates ``Filter.matches`` directly, the PostgreSQL one compiles it to SQL.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

class Op(str, Enum):
    EQ = "eq"
    NE = "ne"
    IN = "in"
    CONTAINS = "contains"  # list field holds the value
    ICONTAINS = "icontains"  # case-insensitive substring

@dataclass(frozen=True)
class Condition:
    field: str
    op: Op
    value: Any

    def matches(self, document: Mapping[str, Any]) -> bool:
        current = document.get(self.field)
        if self.op is Op.EQ:
            return current == self.value
        if self.op is Op.NE:
            return current != self.value
        if self.op is Op.IN:
            return current in self.value
        if self.op is Op.CONTAINS:
            return current is not None and self.value in current
        if self.op is Op.ICONTAINS:
            if current is None:
                return False
            return str(self.value).lower() in str(current).lower()
        raise ValueError(f"Unsupported operator: {self.op}")

@dataclass
class Filter:
    conditions: List[Condition] = field(default_factory=list)
    any_of: List[Condition] = field(default_factory=list)

    @classmethod
    def active(cls) -> "Filter":
        """Filter matching records that are not soft-deleted."""
        return cls().where("is_deleted", False)

    def where(self, field_name: str, value: Any) -> "Filter":
        self.conditions.append(Condition(field_name, Op.EQ, value))
        return self

    def exclude(self, field_name: str, value: Any) -> "Filter":
        self.conditions.append(Condition(field_name, Op.NE, value))
        return self

    def where_in(self, field_name: str, values: Iterable[Any]) -> "Filter":
        self.conditions.append(Condition(field_name, Op.IN, list(values)))
        return self

    def has(self, field_name: str, value: Any) -> "Filter":
        self.conditions.append(Condition(field_name, Op.CONTAINS, value))
        return self

    def search(self, field_names: Iterable[str], text: str) -> "Filter":
        self.any_of = [Condition(name, Op.ICONTAINS, text) for name in field_names]
        return self

    def fields(self) -> List[str]:
        return [c.field for c in self.conditions] + [c.field for c in self.any_of]

    def matches(self, document: Mapping[str, Any]) -> bool:
        if not all(c.matches(document) for c in self.conditions):
            return False
        if self.any_of and not any(c.matches(document) for c in self.any_of):
            return False
        return True

@dataclass(frozen=True)
class Sort:
    field: str
    descending: bool = True

    @classmethod
    def parse(cls, field_name: str, order: Optional[str]) -> "Sort":
        return cls(field_name, descending=(order or "desc").lower() != "asc")

def describe(flt: Filter) -> Dict[str, Any]:
    """Loggable summary of a filter"""
    return {
        "all": [(c.field, c.op.value, c.value) for c in flt.conditions],
        "any": [(c.field, c.op.value, c.value) for c in flt.any_of],
    }
