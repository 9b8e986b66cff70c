# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
import math
import re
from typing import Callable, List, Optional, Sequence

from .errors import PamError, UnknownTypeError
from .fields import BOOLEAN, FLOAT, INTEGER, STRING, FieldAssignment, FieldSpec, FieldType, FieldValue, Kind
from .parser import (
    StrTuple,
    is_relation_name,
    parse_fields,
    parse_relation,
    relation_prefix,
    validate_type_field,
)

I64_MAX = 2 ** 63 - 1
I64_MIN = -(2 ** 63)

# Strict double literal: ASCII digits only, no whitespace, no "_" separators.
_NUMBER_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)",
    re.IGNORECASE,
)

_PRIMITIVE_TYPES = {
    "str": STRING,
    "int": INTEGER,
    "float": FLOAT,
    "bool": BOOLEAN,
}


def match_type_field(typ: str) -> FieldType:
    """Resolve a type payload such as "int" or "relation(schema_a)"."""
    if typ in _PRIMITIVE_TYPES:
        return _PRIMITIVE_TYPES[typ]

    if not is_relation_name(relation_prefix(typ)):
        raise UnknownTypeError(typ)

    res = parse_relation(typ)
    return FieldType(Kind(res.relation_name), res.document_id)


def match_value_field(value: str) -> FieldValue:
    """
    Resolve a value payload. Order: boolean literal, number, relation
    expression, and finally plain string.
    """
    if value == "true":
        return FieldValue(Kind.BOOLEAN, True)
    if value == "false":
        return FieldValue(Kind.BOOLEAN, False)

    number = _parse_number(value)
    if number is not None:
        # the decimal point alone decides int vs float
        if "." in value:
            return FieldValue(Kind.FLOAT, number)
        return FieldValue(Kind.INTEGER, _truncate_i64(number))

    if value.startswith("relation") or value.startswith("pinned_relation"):
        res = parse_relation(value)
        if not is_relation_name(res.relation_name):
            raise UnknownTypeError(res.relation_name)
        return FieldValue(Kind(res.relation_name), res.document_id)

    return FieldValue(Kind.STRING, value)


def convert_to_type_fields(fields: Sequence[StrTuple]) -> List[FieldSpec]:
    return [FieldSpec(ident, match_type_field(typ)) for ident, typ in fields]


def convert_to_value_fields(fields: Sequence[StrTuple]) -> List[FieldAssignment]:
    return [FieldAssignment(ident, match_value_field(value)) for ident, value in fields]


def diagnose_fields(raw_fields: Sequence[str], mode: str = "type") -> List[PamError]:
    """
    Check every raw "identifier: payload" string and collect all problems
    instead of stopping at the first one. Returns an empty list for a clean batch.

    mode is "type" for schema fields or "value" for document fields.
    """
    resolve: Callable[[str], object]
    if mode == "type":
        resolve = match_type_field
    elif mode == "value":
        resolve = match_value_field
    else:
        raise ValueError(f"mode must be 'type' or 'value', got {mode!r}")

    errors: List[PamError] = []
    for text in raw_fields:
        try:
            [(ident, payload)] = parse_fields([text])
            resolve(payload)
            if mode == "type":
                # same shape rule "create schema" applies
                validate_type_field((ident, payload))
        except PamError as e:
            errors.append(e)
    return errors


def _parse_number(text: str) -> Optional[float]:
    if not _NUMBER_RE.fullmatch(text):
        return None
    return float(text)


def _truncate_i64(number: float) -> int:
    if math.isnan(number):
        return 0
    if number >= I64_MAX:
        return I64_MAX
    if number <= I64_MIN:
        return I64_MIN
    return int(number)
