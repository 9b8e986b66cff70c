# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, TypedDict, Union

from . import operations
from .errors import GenericStringError, SigningError
from .fields import FieldType, FieldValue
from .remote import (
    ALL_SCHEMAS_QUERY,
    DEFAULT_ENDPOINT,
    NEXT_ARGS_QUERY,
    PUBLISH_MUTATION,
    SCHEMA_QUERY,
    GraphQLClient,
    ensure_keys,
)
from .signing import NextArgs, Signer

logger = logging.getLogger("pampam.operator")

SchemaFields = Union[Mapping[str, FieldType], Iterable[Tuple[str, FieldType]]]
DocumentFields = Union[Mapping[str, FieldValue], Iterable[Tuple[str, FieldValue]]]


class SchemaResponse(TypedDict):
    schema_id: str
    view_id: str
    name: str
    field_ids: List[str]


class Meta(TypedDict):
    documentId: str
    viewId: str


class SchemaDefinition(TypedDict):
    meta: Meta
    fields: Dict[str, Any]


def _as_dict(fields) -> Dict[str, Any]:
    if isinstance(fields, Mapping):
        return dict(fields)
    result: Dict[str, Any] = {}
    for name, value in fields:
        if name in result:
            raise ValueError(f"duplicate field {name!r}")
        result[name] = value
    return result


class Operator:
    """
    Publishes schemas and documents to a node.

    Args:
        client: GraphQL transport, defaults to one pointed at DEFAULT_ENDPOINT.
        signer: identity used to sign entries. Read-only use (schema queries)
                works without one.
        version: operation format version.
    """

    def __init__(
        self,
        client: Optional[GraphQLClient] = None,
        signer: Optional[Signer] = None,
        version: int = 1,
    ) -> None:
        self.client = client or GraphQLClient(DEFAULT_ENDPOINT)
        self.signer = signer
        self.version = version

        if signer is None:
            logger.warning("Operator initialized without a signer; publishing will fail.")

    @classmethod
    def default(cls, signer: Optional[Signer] = None) -> "Operator":
        """Operator with version 1 and the ENDPOINT env variable (or DEFAULT_ENDPOINT)."""
        endpoint = os.environ.get("ENDPOINT") or DEFAULT_ENDPOINT
        return cls(client=GraphQLClient(endpoint), signer=signer)

    def create_schema(self, name: str, description: str, fields: SchemaFields) -> SchemaResponse:
        """
        Publish every field definition, then the schema definition pointing
        at the returned field ids.
        """
        field_ids = self._publish_fields(_as_dict(fields))
        view_id = self._send_to_node(
            operations.schema_definition(self.version, name, description, field_ids)
        )
        return {
            "schema_id": f"{name}_{view_id}",
            "view_id": view_id,
            "name": name,
            "field_ids": field_ids,
        }

    def _publish_fields(self, fields: Dict[str, FieldType]) -> List[str]:
        if not fields:
            raise ValueError("a schema needs at least one field")

        field_ids = []
        for name, field_type in operations.sort_fields(list(fields.items())):
            field_ids.append(
                self._send_to_node(operations.field_definition(self.version, name, field_type))
            )
        return field_ids

    def create_document(self, schema_id: str, fields: DocumentFields) -> str:
        return self._send_to_node(
            operations.create_document(self.version, schema_id, _as_dict(fields))
        )

    def update_document(self, schema_id: str, view_id: str, fields: DocumentFields) -> str:
        """Update some or all fields of the document at `view_id`. Returns the new operation id."""
        return self._send_to_node(
            operations.update_document(self.version, schema_id, view_id, _as_dict(fields))
        )

    def delete_document(self, schema_id: str, view_id: str) -> str:
        return self._send_to_node(operations.delete_document(self.version, schema_id, view_id))

    def get_all_schema_definition(self) -> List[SchemaDefinition]:
        data = self.client.query(ALL_SCHEMAS_QUERY)
        ensure_keys(data, ("allSchemas",))
        return data["allSchemas"]

    def get_schema_definition(self, document_id: str, view_id: str) -> SchemaDefinition:
        data = self.client.query(SCHEMA_QUERY, {"id": document_id, "viewId": view_id})
        ensure_keys(data, ("schema",))
        return data["schema"]

    def _send_to_node(self, operation: List[Any]) -> str:
        if self.signer is None:
            raise SigningError("No signing identity configured")

        # 1. Ask the node where the next entry of this key goes
        data = self.client.query(
            NEXT_ARGS_QUERY,
            {"publicKey": self.signer.public_key, "viewId": operations.previous(operation)},
        )
        ensure_keys(data, ("nextArgs",))
        next_args: NextArgs = data["nextArgs"]

        # 2. Encode, sign
        try:
            signed = self.signer.sign(operation, next_args)
        except GenericStringError:
            raise
        except Exception as e:
            raise SigningError(f"Could not sign and encode entry: {e}") from e

        # 3. Publish
        self.client.query(PUBLISH_MUTATION, {"entry": signed.entry, "operation": signed.operation})
        logger.debug("published %s on %s -> %s", operation[2], next_args.get("logId"), signed.hash)
        return signed.hash
