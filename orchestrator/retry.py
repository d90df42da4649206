"""Bounded retry around a full pipeline run."""

from __future__ import annotations

import asyncio
from datetime import datetime
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import BaseModel, Field
from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt, wait_fixed

from models import utcnow
from .service import RunReport


logger = logging.getLogger(__name__)


class RunResult(BaseModel):
    """What a caller learns about a run. Never raised, never exits the process."""

    success: bool
    attempts: int = 0
    report: Optional[RunReport] = None
    error: Optional[str] = None
    message: Optional[str] = None
    skipped: bool = False
    timestamp: datetime = Field(default_factory=utcnow)

    def to_status(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    wait = state.next_action.sleep if state.next_action else 0
    logger.warning("Attempt %d failed: %s; retrying in %.0fs", state.attempt_number, exc, wait)


async def run_with_retry(
    run: Callable[[], Awaitable[RunReport]],
    *,
    max_attempts: int = 3,
    backoff_seconds: float = 10.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> RunResult:
    """Invoke ``run`` until it succeeds or ``max_attempts`` are used up."""
    attempts = 0
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(1, max_attempts)),
            wait=wait_fixed(backoff_seconds),
            sleep=sleep,
            before_sleep=_log_retry,
            reraise=True,
        ):
            with attempt:
                attempts = attempt.retry_state.attempt_number
                logger.info("Attempt %d/%d", attempts, max_attempts)
                report = await run()
    except Exception as exc:
        logger.error("All %d attempts exhausted: %s", attempts, exc)
        return RunResult(success=False, attempts=attempts, error=str(exc))

    return RunResult(success=True, attempts=attempts, report=report)
