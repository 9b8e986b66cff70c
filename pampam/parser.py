# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .errors import ParseError, UnknownTypeError
from .fields import PRIMITIVE_KINDS, RELATION_KINDS, RawField

SEPARATOR = ":"

StrTuple = Tuple[str, str]


def split_field(text: str) -> RawField:
    """Split one "identifier: payload" string on its single separator, untrimmed."""
    parts = text.split(SEPARATOR)
    if len(parts) == 1:
        raise ParseError(text, f'missing "{SEPARATOR}" separator in field: "{text}"')
    if len(parts) > 2:
        raise ParseError(text, f'more than one "{SEPARATOR}" separator in field: "{text}"')
    return RawField(parts[0], parts[1])


def parse_fields(fields: Iterable[str]) -> List[StrTuple]:
    """
    Turn raw "identifier: payload" strings into (identifier, payload) pairs.

    The identifier is trimmed; the payload is trimmed and lower-cased.
    Input order is kept. Stops at the first malformed field.
    """
    pairs = []
    for text in fields:
        identifier, raw = split_field(text)
        pairs.append((identifier.strip(), raw.strip().lower()))
    return pairs


def validate_type_fields(type_fields: Sequence[StrTuple]) -> None:
    for field in type_fields:
        validate_type_field(field)


def validate_type_field(field: StrTuple) -> None:
    """
    Cheap shape check on a type payload before conversion: a primitive token,
    or a relation kind followed by "(" and ending in ")".
    """
    _identifier, typ = field
    if typ in {kind.value for kind in PRIMITIVE_KINDS}:
        return
    for kind in RELATION_KINDS:
        if typ.startswith(f"{kind}(") and typ.endswith(")"):
            return
    raise UnknownTypeError(typ)


@dataclass
class RelationData:
    relation_name: str
    document_id: str


def parse_relation(text: str) -> RelationData:
    """
    Extract ("relation_list", "id_1") from "relation_list(id_1)".

    The first "(" and the first ")" after it delimit the inner text; nested
    parentheses are not balanced and anything after the closing ")" is ignored.
    So "relation_list(((id)))" yields the inner text "((id".
    """
    stripped = text.strip()

    open_at = stripped.find("(")
    if open_at < 0:
        raise ParseError(text, 'expected "(" after relation name')

    close_at = stripped.find(")", open_at + 1)
    if close_at < 0:
        raise ParseError(text, 'expected ")" to close relation')

    return RelationData(
        relation_name=stripped[:open_at],
        document_id=stripped[open_at + 1:close_at],
    )


def relation_prefix(text: str) -> str:
    """Text before the first "(" (all of it when there is none), trimmed."""
    return text.strip().split("(", 1)[0]


def is_relation_name(name: str) -> bool:
    return name in {kind.value for kind in RELATION_KINDS}

