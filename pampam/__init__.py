# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
from .errors import (
    PamError,
    ParseError,
    UnknownTypeError,
    GenericStringError,
    ProtocolError,
    AuthError,
    SigningError,
)
from .fields import Kind, FieldType, FieldValue, FieldSpec, FieldAssignment, RawField
from .parser import parse_fields, parse_relation, validate_type_fields
from .convert import (
    match_type_field,
    match_value_field,
    convert_to_type_fields,
    convert_to_value_fields,
    diagnose_fields,
)
from .operator import Operator
from .remote import GraphQLClient
from .signing import Signer, SignedEntry

__version__ = "0.1.0"

__all__ = [
    "PamError", "ParseError", "UnknownTypeError", "GenericStringError",
    "ProtocolError", "AuthError", "SigningError",
    "Kind", "FieldType", "FieldValue", "FieldSpec", "FieldAssignment", "RawField",
    "parse_fields", "parse_relation", "validate_type_fields",
    "match_type_field", "match_value_field", "convert_to_type_fields",
    "convert_to_value_fields", "diagnose_fields",
    "Operator", "GraphQLClient", "Signer", "SignedEntry",
]
