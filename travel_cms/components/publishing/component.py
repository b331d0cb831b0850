"""
Publishing component - lifecycle actions on pages and posts.
"""

from __future__ import annotations

from travel_cms.components.content import ContentOutput, ErrorDetail
from travel_cms.domain.errors import ContentError

from ._impl import PublishingService
from .models import TransitionInput


def run_transition(inp: TransitionInput, *, service: PublishingService) -> ContentOutput:
    try:
        if inp.action == "publish":
            entity = service.publish(inp.collection, inp.entity_id)
        elif inp.action == "schedule":
            entity = service.schedule(inp.collection, inp.entity_id, inp.scheduled_at)  # type: ignore[arg-type]
        elif inp.action == "cancel_schedule":
            entity = service.cancel_schedule(inp.collection, inp.entity_id)
        elif inp.action == "archive":
            entity = service.archive(inp.collection, inp.entity_id)
        elif inp.action == "restore":
            entity = service.restore(inp.collection, inp.entity_id)
        else:
            raise ValueError(f"Unknown action: {inp.action}")
    except ContentError as e:
        return ContentOutput(entity=None, errors=[ErrorDetail.from_error(e)], success=False)
    return ContentOutput(entity=entity)


def run(inp: TransitionInput, *, service: PublishingService) -> ContentOutput:
    """Main entry point for the publishing component."""
    if isinstance(inp, TransitionInput):
        return run_transition(inp, service=service)
    raise ValueError(f"Unknown input type: {type(inp)}")
