# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, NamedTuple, Optional, Union

from .errors import ParseError


class Kind(str, Enum):
    """Textual tags shared by field types and field values."""

    BOOLEAN = "bool"
    INTEGER = "int"
    FLOAT = "float"
    STRING = "str"
    RELATION = "relation"
    RELATION_LIST = "relation_list"
    PINNED_RELATION = "pinned_relation"
    PINNED_RELATION_LIST = "pinned_relation_list"

    @property
    def is_relation(self) -> bool:
        return self in RELATION_KINDS

    def __str__(self) -> str:
        return self.value


PRIMITIVE_KINDS = frozenset({Kind.BOOLEAN, Kind.INTEGER, Kind.FLOAT, Kind.STRING})
RELATION_KINDS = frozenset({
    Kind.RELATION,
    Kind.RELATION_LIST,
    Kind.PINNED_RELATION,
    Kind.PINNED_RELATION_LIST,
})

Scalar = Union[bool, int, float, str]


@dataclass(frozen=True)
class FieldType:
    """
    Type of a schema field.

    Relation kinds carry the id of the schema they point at in `target`.
    The id is passed through as-is; nothing here checks that it exists.
    """

    kind: Kind
    target: Optional[str] = None

    def __post_init__(self):
        kind = Kind(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind.is_relation and self.target is None:
            raise ValueError(f"{kind} type requires a target schema id")
        if not kind.is_relation and self.target is not None:
            raise ValueError(f"{kind} type does not take a target")

    def __str__(self) -> str:
        if self.kind.is_relation:
            return f"{self.kind}({self.target})"
        return str(self.kind)

    @classmethod
    def parse(cls, text: str) -> "FieldType":
        from .convert import match_type_field
        return match_type_field(text)


BOOLEAN = FieldType(Kind.BOOLEAN)
INTEGER = FieldType(Kind.INTEGER)
FLOAT = FieldType(Kind.FLOAT)
STRING = FieldType(Kind.STRING)


def relation(target: str) -> FieldType:
    return FieldType(Kind.RELATION, target)


def relation_list(target: str) -> FieldType:
    return FieldType(Kind.RELATION_LIST, target)


def pinned_relation(target: str) -> FieldType:
    return FieldType(Kind.PINNED_RELATION, target)


def pinned_relation_list(target: str) -> FieldType:
    return FieldType(Kind.PINNED_RELATION_LIST, target)


@dataclass(frozen=True)
class FieldValue:
    """
    Concrete value of a document field.

    Python payload per kind:
        bool  -> bool
        int   -> int (64-bit signed range)
        float -> float
        str and every relation kind -> str (relation lists keep their
        bracketed text, e.g. "[id_a, id_b]")
    """

    kind: Kind
    value: Scalar

    def __post_init__(self):
        kind = Kind(self.kind)
        object.__setattr__(self, "kind", kind)
        value = self.value

        if kind is Kind.BOOLEAN:
            if not isinstance(value, bool):
                raise TypeError(f"bool value expected, got {value!r}")
        elif kind is Kind.INTEGER:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"int value expected, got {value!r}")
        elif kind is Kind.FLOAT:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"float value expected, got {value!r}")
            object.__setattr__(self, "value", float(value))
        elif not isinstance(value, str):
            raise TypeError(f"{kind} value must be a string, got {value!r}")

    def __str__(self) -> str:
        if self.kind is Kind.BOOLEAN:
            return "true" if self.value else "false"
        if self.kind.is_relation:
            return f"{self.kind}({self.value})"
        return str(self.value)

    def to_wire(self) -> Any:
        """JSON-compatible form of the value as it goes into an operation."""
        if self.kind is Kind.RELATION:
            return self.value.strip()
        if self.kind in (Kind.RELATION_LIST, Kind.PINNED_RELATION):
            return split_relation_ids(self.value)
        if self.kind is Kind.PINNED_RELATION_LIST:
            return [[document_id] for document_id in split_relation_ids(self.value)]
        return self.value


def split_relation_ids(text: str) -> List[str]:
    """
    Split "id" or "[id_a, id_b]" into a list of ids.

    Brackets must balance. Quotes and nested brackets around single ids are dropped.
    """
    depth = 0
    for ch in text:
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth < 0:
                break
    if depth != 0:
        raise ParseError(text, "unbalanced brackets in relation list")

    inner = text.strip()
    if inner.startswith("[") and inner.endswith("]"):
        inner = inner[1:-1]

    ids = [part.strip().strip("[]\"' ") for part in inner.split(",")]
    return [document_id for document_id in ids if document_id]


class RawField(NamedTuple):
    """The two untrimmed halves of an "identifier: payload" string."""
    identifier: str
    raw: str


class FieldSpec(NamedTuple):
    identifier: str
    field_type: FieldType


class FieldAssignment(NamedTuple):
    identifier: str
    value: FieldValue
