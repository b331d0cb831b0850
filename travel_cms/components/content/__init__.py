"""
Content component - typed CRUD over pages, posts and content blocks.
"""

from ._impl import (
    ContentConfig,
    ContentService,
    create_content_service,
    parse_datetime,
)
from .component import (
    run,
    run_create,
    run_delete,
    run_get,
    run_list,
    run_update,
)
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

__all__ = [
    # Entry points
    "run",
    "run_create",
    "run_delete",
    "run_get",
    "run_list",
    "run_update",
    # Input models
    "CreateContentInput",
    "DeleteContentInput",
    "GetContentInput",
    "ListContentInput",
    "UpdateContentInput",
    # Output models
    "ContentListOutput",
    "ContentOutput",
    "ErrorDetail",
    # Service
    "ContentConfig",
    "ContentService",
    "create_content_service",
    "parse_datetime",
]
