from fastapi import Request
from fastapi.responses import JSONResponse

from travel_cms.domain.errors import ContentError

STATUS_BY_KIND: dict[str, int] = {
    "not_found": 404,
    "conflict": 409,
    "validation": 422,
    "unavailable": 503,
}


def status_for(error: ContentError) -> int:
    return STATUS_BY_KIND.get(error.kind, 400)


async def content_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map domain errors to JSON responses with a structured detail body."""
    assert isinstance(exc, ContentError)
    return JSONResponse(status_code=status_for(exc), content={"detail": exc.to_dict()})
