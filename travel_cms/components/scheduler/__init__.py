"""
Scheduler component - promotes due scheduled content.
"""

from ._impl import (
    PublicationScheduler,
    SchedulerConfig,
    SchedulerService,
    create_publication_scheduler,
    create_scheduler_service,
)
from .component import run, run_sweep
from .models import (
    PromotionOutcome,
    PromotionResult,
    ScheduledContent,
    SchedulerStatus,
    SchedulingStats,
    StatusCounts,
    SweepInput,
    SweepResult,
)

__all__ = [
    # Entry points
    "run",
    "run_sweep",
    # Services
    "PublicationScheduler",
    "SchedulerConfig",
    "SchedulerService",
    "create_publication_scheduler",
    "create_scheduler_service",
    # Models
    "PromotionOutcome",
    "PromotionResult",
    "ScheduledContent",
    "SchedulerStatus",
    "SchedulingStats",
    "StatusCounts",
    "SweepInput",
    "SweepResult",
]
