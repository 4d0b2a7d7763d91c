"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class NotFoundError(DomainError):
    """Raised when a query or identifier yields no playable result."""

    def __init__(self, message: str, query: str | None = None) -> None:
        super().__init__(message, code="NOT_FOUND")
        self.query = query


class UnsupportedInputError(DomainError):
    """Raised for input that can never be played, such as personalized mixes."""

    def __init__(self, message: str, query: str | None = None) -> None:
        super().__init__(message, code="UNSUPPORTED_INPUT")
        self.query = query


class OutOfRangeError(DomainError):
    """Raised when a position or value falls outside its allowed bounds."""

    def __init__(
        self,
        field: str,
        value: int,
        minimum: int,
        maximum: int,
        message: str | None = None,
    ) -> None:
        msg = message or f"{field} must be between {minimum} and {maximum} (got {value})"
        super().__init__(msg, code="OUT_OF_RANGE")
        self.field = field
        self.value = value
        self.minimum = minimum
        self.maximum = maximum


class InvalidStateError(DomainError):
    """Raised when an operation is invalid in the current session state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_STATE")
        self.operation = operation
        self.current_state = current_state


class InsufficientItemsError(DomainError):
    """Raised when a queue operation needs more items than are queued."""

    def __init__(self, operation: str, required: int, available: int) -> None:
        msg = f"'{operation}' needs at least {required} items in the queue (have {available})"
        super().__init__(msg, code="INSUFFICIENT_ITEMS")
        self.operation = operation
        self.required = required
        self.available = available


class AlreadyExistsError(DomainError):
    """Raised when a session is created for an id that already has a live one."""

    def __init__(self, entity_type: str, identifier: str | int) -> None:
        super().__init__(f"{entity_type} '{identifier}' already exists", code="ALREADY_EXISTS")
        self.entity_type = entity_type
        self.identifier = identifier


class UpstreamFailureError(DomainError):
    """Raised when a catalog, streaming or transport call fails."""

    def __init__(self, service: str, message: str) -> None:
        super().__init__(f"{service}: {message}", code="UPSTREAM_FAILURE")
        self.service = service


class OperationTimeoutError(DomainError):
    """Raised when an awaited external call exceeds its time bound."""

    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(f"{operation} timed out after {timeout:g}s", code="TIMEOUT")
        self.operation = operation
        self.timeout = timeout
