"""
Publishing component - lifecycle actions on pages and posts.
"""

from ._impl import PublishingService, create_publishing_service, require_publishable
from .component import run, run_transition
from .models import PublishAction, TransitionInput

__all__ = [
    # Entry points
    "run",
    "run_transition",
    # Input models
    "PublishAction",
    "TransitionInput",
    # Service
    "PublishingService",
    "create_publishing_service",
    "require_publishable",
]
