"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each exception keeps the inputs that triggered it as attributes, so callers
can render role-appropriate feedback without parsing messages.
"""

from __future__ import annotations

from typing import Any


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidConfigurationError(DomainException):
    """A subsidy rule or setting is out of range or inconsistent."""

    def __init__(self, field: str, value: Any, message: str | None = None) -> None:
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid subsidy configuration: {field}={value!r}")


class TransitionDeniedError(DomainException):
    """A status transition was refused. Not retry-safe."""

    def __init__(self, from_status: Any, to_status: Any, message: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(message)


class InvalidTransitionError(TransitionDeniedError):
    """The (from, to) pair is never legal."""

    def __init__(self, from_status: Any, to_status: Any) -> None:
        super().__init__(
            from_status,
            to_status,
            f"Invalid transition: {_label(from_status)} -> {_label(to_status)}",
        )


class UnauthorizedError(TransitionDeniedError):
    """The (from, to) pair is legal, but not for this role."""

    def __init__(self, role: Any, from_status: Any, to_status: Any) -> None:
        self.role = role
        super().__init__(
            from_status,
            to_status,
            f"Role '{_label(role)}' may not move an order "
            f"from {_label(from_status)} to {_label(to_status)}",
        )


class ConflictError(DomainException):
    """A concurrent change won the race. Re-read and retry."""

    def __init__(
        self,
        order_id: Any,
        expected_status: Any = None,
        actual_status: Any = None,
        message: str | None = None,
    ) -> None:
        self.order_id = order_id
        self.expected_status = expected_status
        self.actual_status = actual_status
        if message is None:
            message = (
                f"Order #{order_id} changed concurrently "
                f"(expected {_label(expected_status)}, found {_label(actual_status)})"
            )
        super().__init__(message)


def _label(value: Any) -> str:
    return str(getattr(value, "value", value))
