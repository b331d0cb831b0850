"""
Scheduler component - one sweep over due scheduled content.
"""

from __future__ import annotations

from ._impl import SchedulerService
from .models import SweepInput, SweepResult


def run_sweep(inp: SweepInput, *, service: SchedulerService) -> SweepResult:
    return service.sweep()


def run(inp: SweepInput, *, service: SchedulerService) -> SweepResult:
    """Main entry point for the scheduler component."""
    if isinstance(inp, SweepInput):
        return run_sweep(inp, service=service)
    raise ValueError(f"Unknown input type: {type(inp)}")
