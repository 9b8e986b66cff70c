# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
from enum import IntEnum
from typing import Any, Dict, List, Mapping, Sequence

from .fields import FieldType, FieldValue

SCHEMA_FIELD_DEFINITION = "schema_field_definition_v1"
SCHEMA_DEFINITION = "schema_definition_v1"


class OperationAction(IntEnum):
    CREATE = 0
    UPDATE = 1
    DELETE = 2


def sort_fields(fields: Sequence[tuple]) -> List[tuple]:
    """Fields must reach the node in alphabetical order of their names."""
    return sorted(fields, key=lambda f: f[0])


def encode_fields(fields: Mapping[str, FieldValue]) -> Dict[str, Any]:
    if not fields:
        raise ValueError("at least one field is required")
    return {name: value.to_wire() for name, value in sort_fields(list(fields.items()))}


def field_definition(version: int, name: str, field_type: FieldType) -> List[Any]:
    # [1, 0, "schema_field_definition_v1", {"name": "...", "type": "relation(...)"}]
    return [version, OperationAction.CREATE, SCHEMA_FIELD_DEFINITION, {"name": name, "type": str(field_type)}]


def schema_definition(version: int, name: str, description: str, field_ids: Sequence[str]) -> List[Any]:
    # fields are view ids, one operation id each: [["<field_id>"], ["<field_id>"]]
    return [
        version,
        OperationAction.CREATE,
        SCHEMA_DEFINITION,
        {
            "description": description,
            "fields": [[field_id] for field_id in field_ids],
            "name": name,
        },
    ]


def create_document(version: int, schema_id: str, fields: Mapping[str, FieldValue]) -> List[Any]:
    # [1, 0, "chat_0020cae3b...", {"msg": "...", "username": "..."}]
    return [version, OperationAction.CREATE, schema_id, encode_fields(fields)]


def update_document(version: int, schema_id: str, view_id: str, fields: Mapping[str, FieldValue]) -> List[Any]:
    # [1, 1, "chat_0020cae3b...", ["<view_id>"], {"username": "..."}]
    return [version, OperationAction.UPDATE, schema_id, [view_id], encode_fields(fields)]


def delete_document(version: int, schema_id: str, view_id: str) -> List[Any]:
    return [version, OperationAction.DELETE, schema_id, [view_id]]


def previous(operation: Sequence[Any]):
    """View id an update/delete operation builds on, None for creates."""
    if operation[1] == OperationAction.CREATE:
        return None
    return operation[3][0]
