# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
import json
import logging
from typing import Any, Dict, Optional

import requests

from .errors import AuthError, ProtocolError

logger = logging.getLogger("pampam.remote")

DEFAULT_ENDPOINT = "http://localhost:2020/graphql"

NEXT_ARGS_QUERY = """
query NextArgs($publicKey: String!, $viewId: String) {
    nextArgs(publicKey: $publicKey, viewId: $viewId) {
        logId
        seqNum
        skiplink
        backlink
    }
}
"""

PUBLISH_MUTATION = """
mutation Publish($entry: String!, $operation: String!) {
    publish(entry: $entry, operation: $operation) {
        logId
        seqNum
        skiplink
        backlink
    }
}
"""

ALL_SCHEMAS_QUERY = """
query {
    allSchemas: all_schema_definition_v1 {
        meta {
            documentId
            viewId
        }
        fields {
            name
            description
            fields {
                fields {
                    name
                    type
                }
            }
        }
    }
}
"""

SCHEMA_QUERY = """
query Schema($id: DocumentId!, $viewId: DocumentViewId!) {
    schema: schema_definition_v1(id: $id, viewId: $viewId) {
        meta {
            documentId
            viewId
        }
        fields {
            name
            description
            fields {
                fields {
                    name
                    type
                }
            }
        }
    }
}
"""


class GraphQLClient:
    def __init__(self, endpoint: str = DEFAULT_ENDPOINT, api_key: Optional[str] = None, timeout: int = 10):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = requests.Session()
        if api_key:
            self.session.headers.update({"Authorization": f"Bearer {api_key}"})

    def query(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a query or mutation and return its `data` object."""
        payload: Dict[str, Any] = {"query": query}
        if variables is not None:
            payload["variables"] = variables

        logger.debug("POST %s variables=%s", self.endpoint, variables)
        try:
            resp = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProtocolError(f"request to {self.endpoint} failed: {e}") from e

        if not resp.ok:
            if resp.status_code in (401, 403):
                raise AuthError(f"Authentication failed ({resp.status_code}): {resp.reason}")

            # Try to parse JSON error message, fallback to text
            try:
                err = resp.json()
                msg = _error_messages(err) or err.get("message") or err.get("error") or err
            except (ValueError, AttributeError):
                msg = resp.text
            raise ProtocolError(f"{resp.status_code} Server Error: {msg}")

        try:
            body = resp.json()
        except (ValueError, json.JSONDecodeError):
            raise ProtocolError("Node returned non-JSON response")

        if not isinstance(body, dict):
            raise ProtocolError("invalid GraphQL response shape")

        messages = _error_messages(body)
        if messages:
            raise ProtocolError(f"GraphQL request failed: {messages}")

        data = body.get("data")
        if not isinstance(data, dict):
            raise ProtocolError("GraphQL response has no data")
        return data


def _error_messages(body: Dict[str, Any]) -> str:
    errors = body.get("errors") or []
    return "; ".join(str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors)


def ensure_keys(d: Dict[str, Any], keys):
    missing = [k for k in keys if k not in d]
    if missing:
        raise ProtocolError(f"missing keys in node response: {missing}")
