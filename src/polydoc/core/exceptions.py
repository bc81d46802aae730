"""
Custom exception classes for the polydoc package.

Provides structured error handling with domain-specific exceptions
for the codec, the type registry and the index client.
"""

from typing import Any, Dict, Optional


class PolydocException(Exception):
    """Base exception class for all polydoc exceptions."""

    pass


class CodecError(PolydocException):
    """Raised when a document cannot be encoded or decoded."""

    pass


class UnknownTypeLabel(CodecError):
    """Raised at decode time when the type label is not registered."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"No document shape registered for label={label!r}")


class MalformedPayload(CodecError):
    """
    Raised when a payload is not valid JSON or does not fit the shape
    registered for the requested label.

    Example:
        >>> raise MalformedPayload(
        ...     reason="Payload is not a JSON object",
        ...     details={"label": "Student", "json_type": "list"}
        ... )
    """

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        self.reason = reason
        self.details = details or {}
        message = f"{reason}"
        if self.details:
            message += f" - {self.details}"
        super().__init__(message)


class UnregisteredVariant(CodecError):
    """Raised at encode time when the document type has no registered label."""

    def __init__(self, shape: type):
        self.shape = shape
        super().__init__(f"Document type {shape.__name__!r} is not registered with this codec")


class TypeRegistryError(PolydocException):
    """Raised when a registration would break the registry invariants."""

    pass


class DuplicateLabel(TypeRegistryError):
    """Raised when a label is already registered to a different shape."""

    def __init__(self, label: str, existing: type, new: type):
        self.label = label
        self.existing = existing
        self.new = new
        super().__init__(
            f"Label {label!r} already registered to {existing.__name__}, cannot register {new.__name__}"
        )


class IndexClientError(PolydocException):
    """Raised when the index client is misused or the index returns an unusable response."""

    pass
