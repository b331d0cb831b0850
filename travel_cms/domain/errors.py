"""
Error taxonomy for the content publication engine.

Every error carries a machine-readable ``code``, a human message and, where it
applies, the offending ``field`` or status transition so the presentation layer
can point at the exact input that was rejected.

Hierarchy:
- ContentError
  - NotFoundError: id or slug absent
  - ConflictError: uniqueness violation
    - StaleWriteError: compare-and-swap lost to a concurrent writer
  - ValidationError: missing or malformed field
    - InvalidTransitionError: lifecycle pair not in the transition table
  - StoreUnavailableError: backing store unreachable or timed out

Rendering never raises; degraded sections surface as ``DiagnosticView``.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError


class ContentError(Exception):
    """Base class for all content engine errors."""

    kind = "error"

    def __init__(self, code: str, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "code": self.code,
            "message": self.message,
            "field": self.field,
        }


class NotFoundError(ContentError):
    kind = "not_found"

    def __init__(self, collection: str, key: object, field: str = "id") -> None:
        super().__init__(
            code=f"{collection}_not_found",
            message=f"No entry in {collection} with {field} '{key}'",
            field=field,
        )
        self.collection = collection
        self.key = key


class ConflictError(ContentError):
    kind = "conflict"


class StaleWriteError(ConflictError):
    """Raised when a conditional write finds the entity in an unexpected status."""

    def __init__(self, collection: str, entity_id: object, expected: str, actual: str) -> None:
        super().__init__(
            code="stale_status",
            message=(
                f"{collection} entry {entity_id} is '{actual}', expected '{expected}'"
            ),
            field="status",
        )
        self.expected = expected
        self.actual = actual


class ValidationError(ContentError):
    kind = "validation"


class InvalidTransitionError(ValidationError):
    """Raised when a status change is not in the transition table."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None) -> None:
        message = f"Cannot transition from '{from_status}' to '{to_status}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(code="invalid_transition", message=message, field="status")
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["transition"] = {"from": self.from_status, "to": self.to_status}
        return data


class StoreUnavailableError(ContentError):
    kind = "unavailable"

    def __init__(self, message: str) -> None:
        super().__init__(code="store_unavailable", message=message)


def from_pydantic(exc: PydanticValidationError) -> ValidationError:
    """Convert the first pydantic error into a ValidationError naming its field."""
    errors = exc.errors()
    if not errors:
        return ValidationError(code="invalid", message=str(exc))
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return ValidationError(
        code=f"{loc or 'value'}_invalid",
        message=f"{loc}: {first.get('msg', 'invalid value')}" if loc else first["msg"],
        field=loc or None,
    )
