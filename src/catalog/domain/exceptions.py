"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so outer layers (CLI, an HTTP adapter) can catch them uniformly. Every error
carries a stable machine-readable ``code`` next to its human message, and a
``kind`` that maps onto a 4xx status class.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"


_HTTP_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
}


class DomainException(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind = ErrorKind.VALIDATION
    default_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self.kind]

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "kind": self.kind.value,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    kind = ErrorKind.VALIDATION
    default_code = "INVALID_VALUE"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = ErrorKind.NOT_FOUND
    default_code = "NOT_FOUND"


class ForbiddenError(DomainException):
    """The acting vendor may not touch this entity, or the action is gated."""

    kind = ErrorKind.FORBIDDEN
    default_code = "FORBIDDEN_ACCESS"


class ConflictError(DomainException):
    """A uniqueness constraint would be broken, or a write lost a race."""

    kind = ErrorKind.CONFLICT
    default_code = "CONFLICT"
