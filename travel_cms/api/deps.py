from functools import lru_cache
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status

from travel_cms.app_shell.config import Settings
from travel_cms.app_shell.context import ServiceContext


# --- Settings ---
@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


# --- Services ---
def get_context(request: Request) -> ServiceContext:
    ctx = getattr(request.app.state, "context", None)
    if ctx is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service context not initialised",
        )
    return ctx  # type: ignore[no-any-return]


# --- Principal ---
def get_principal_id(
    x_principal_id: Annotated[str | None, Header()] = None,
) -> UUID | None:
    """Identity of the caller, as asserted by the fronting auth layer."""
    if not x_principal_id:
        return None
    try:
        return UUID(x_principal_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Principal-Id must be a UUID",
        ) from None


ContextDep = Annotated[ServiceContext, Depends(get_context)]
PrincipalDep = Annotated[UUID | None, Depends(get_principal_id)]
