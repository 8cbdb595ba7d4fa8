"""
Background generation module.

Runs packing and emission off the caller's thread and delivers only results
that are newer than everything delivered before.
"""

from fontcode.scheduler.generation import (
    GenerationRequest,
    GenerationResult,
    GenerationScheduler,
    SchedulerState,
    run_generation,
)

__all__ = [
    "GenerationRequest",
    "GenerationResult",
    "GenerationScheduler",
    "SchedulerState",
    "run_generation",
]
