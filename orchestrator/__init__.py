"""Pipeline orchestration: section runs, retries, schedule gate and scheduler."""

from .service import RunReport, RunState, SectionOrchestrator, SectionSummary
from .retry import RunResult, run_with_retry
from .schedule import ScheduleGate, window_contains
from .scheduler import ScraperScheduler

__all__ = [
    "RunReport",
    "RunState",
    "SectionOrchestrator",
    "SectionSummary",
    "RunResult",
    "run_with_retry",
    "ScheduleGate",
    "window_contains",
    "ScraperScheduler",
]
