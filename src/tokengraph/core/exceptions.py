"""
Exception hierarchy for tokengraph.

Structural findings (missing references, cycles, deep nesting) are never
raised; they are returned as data by the analyzer. The exceptions below are
reserved for caller bugs and unrecoverable failures.
"""

from typing import Any, Dict


class TokenGraphError(Exception):
    """Base class for all tokengraph errors."""

    def __init__(self, message: str, details: Dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class InvalidTokenSystemError(TokenGraphError):
    """The token system violates the input contract (missing, malformed, duplicate ids)."""


class InvalidConfigError(TokenGraphError):
    """A configuration file could not be parsed or validated."""


class TokenNotFoundError(TokenGraphError):
    """A token id requested by the caller does not exist in the system."""

    def __init__(self, token_id: str):
        super().__init__(f"Token not found: {token_id}", {"token_id": token_id})
        self.token_id = token_id


class UnknownVisualizationError(TokenGraphError):
    """No transformer is registered for the requested visualization type."""

    def __init__(self, visualization_type: str):
        super().__init__(
            f"No transformer registered for visualization type: {visualization_type}",
            {"visualization_type": visualization_type},
        )
        self.visualization_type = visualization_type


class TransformationError(TokenGraphError):
    """A transformer failed part way through; no partial result is returned."""

    def __init__(self, transformer_name: str, operation: str, cause: Exception):
        super().__init__(
            f"[{transformer_name}] {operation} failed: {cause}",
            {"transformer": transformer_name, "operation": operation},
        )
        self.transformer_name = transformer_name
        self.operation = operation
