"""Equality filtering shared by the store adapters."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from travel_cms.domain.entities import Collection, Entity, entity_type
from travel_cms.domain.errors import ValidationError


def _normalize(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    return value


def matches_filters(entity: Entity, filters: dict[str, Any] | None) -> bool:
    """
    Equality match on entity attributes.

    The special key ``tag`` matches posts carrying that tag. None values are
    ignored so optional query parameters can be passed straight through.
    """
    if not filters:
        return True
    for key, expected in filters.items():
        if expected is None:
            continue
        if key == "tag":
            if expected not in getattr(entity, "tags", ()):
                return False
            continue
        if _normalize(getattr(entity, key, None)) != _normalize(expected):
            return False
    return True


def check_filters(collection: Collection, filters: dict[str, Any] | None) -> None:
    model = entity_type(collection)
    for key in filters or {}:
        if key == "tag" and collection == "posts":
            continue
        if key not in model.model_fields and key not in model.model_computed_fields:
            raise ValidationError(
                code="unknown_filter",
                message=f"Cannot filter {collection} on '{key}'",
                field=key,
            )
