# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.

class PamError(Exception):
    """Base class for all pampam exceptions."""
    pass


class ParseError(PamError, ValueError):
    """Raised when a field or relation expression is structurally malformed."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Error at parsing {field}, {reason}")


class UnknownTypeError(PamError, ValueError):
    """Raised when a well-formed token names no known type."""

    def __init__(self, typ: str):
        self.typ = typ
        super().__init__(f'Unknown type "{typ}"')


class GenericStringError(PamError):
    """Wraps failures coming from the transport or signing layers."""
    pass


class ProtocolError(GenericStringError):
    """Raised for protocol-level problems (invalid node response, GraphQL errors, etc.)."""
    pass


class AuthError(ProtocolError):
    """Raised when authentication fails (401/403)."""
    pass


class SigningError(GenericStringError):
    """Raised when no signing identity is available or signing fails."""
    pass
