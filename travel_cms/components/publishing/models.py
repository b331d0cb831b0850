"""
Publishing component input models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from uuid import UUID

from travel_cms.domain.entities import Collection

PublishAction = Literal["publish", "schedule", "cancel_schedule", "archive", "restore"]


@dataclass(frozen=True)
class TransitionInput:
    """Input for a lifecycle action on a page or post."""

    collection: Collection
    entity_id: UUID
    action: PublishAction
    scheduled_at: datetime | str | None = None
