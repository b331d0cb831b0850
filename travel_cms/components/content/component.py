"""
Content component - typed CRUD over pages, posts and content blocks.

Entry points wrap ContentService and turn domain errors into output objects
carrying ErrorDetail entries, so callers that prefer values over exceptions
(admin tools, batch imports) never need a try block.
"""

from __future__ import annotations

from travel_cms.domain.errors import ContentError

from ._impl import ContentService
from .models import (
    ContentListOutput,
    ContentOutput,
    CreateContentInput,
    DeleteContentInput,
    ErrorDetail,
    GetContentInput,
    ListContentInput,
    UpdateContentInput,
)


def _failed(error: ContentError) -> ContentOutput:
    return ContentOutput(entity=None, errors=[ErrorDetail.from_error(error)], success=False)


def run_create(inp: CreateContentInput, *, service: ContentService) -> ContentOutput:
    try:
        entity = service.create(inp.collection, inp.data, author_id=inp.author_id)
    except ContentError as e:
        return _failed(e)
    return ContentOutput(entity=entity)


def run_update(inp: UpdateContentInput, *, service: ContentService) -> ContentOutput:
    try:
        entity = service.update(
            inp.collection, inp.entity_id, inp.changes, regenerate_slug=inp.regenerate_slug
        )
    except ContentError as e:
        return _failed(e)
    return ContentOutput(entity=entity)


def run_get(inp: GetContentInput, *, service: ContentService) -> ContentOutput:
    try:
        if inp.entity_id is not None:
            entity = service.get_by_id(inp.collection, inp.entity_id)
        elif inp.slug is not None:
            entity = service.get_by_slug(inp.collection, inp.slug)
        else:
            return ContentOutput(
                entity=None,
                errors=[
                    ErrorDetail(
                        kind="validation",
                        code="lookup_key_required",
                        message="Either entity_id or slug is required",
                    )
                ],
                success=False,
            )
    except ContentError as e:
        return _failed(e)
    return ContentOutput(entity=entity)


def run_list(inp: ListContentInput, *, service: ContentService) -> ContentListOutput:
    try:
        items = service.list(inp.collection, inp.filters)
    except ContentError as e:
        return ContentListOutput(
            items=[], total=0, errors=[ErrorDetail.from_error(e)], success=False
        )
    total = len(items)
    end = None if inp.limit is None else inp.offset + inp.limit
    return ContentListOutput(items=items[inp.offset : end], total=total)


def run_delete(inp: DeleteContentInput, *, service: ContentService) -> ContentOutput:
    try:
        service.delete(inp.collection, inp.entity_id)
    except ContentError as e:
        return _failed(e)
    return ContentOutput(entity=None)


def run(
    inp: (
        CreateContentInput
        | UpdateContentInput
        | GetContentInput
        | ListContentInput
        | DeleteContentInput
    ),
    *,
    service: ContentService,
) -> ContentOutput | ContentListOutput:
    """
    Main entry point for the content component.

    Dispatches to the appropriate handler based on input type.
    """
    if isinstance(inp, CreateContentInput):
        return run_create(inp, service=service)
    elif isinstance(inp, UpdateContentInput):
        return run_update(inp, service=service)
    elif isinstance(inp, GetContentInput):
        return run_get(inp, service=service)
    elif isinstance(inp, ListContentInput):
        return run_list(inp, service=service)
    elif isinstance(inp, DeleteContentInput):
        return run_delete(inp, service=service)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
