"""Schedule gate: decides whether a scheduled run may start now."""

from __future__ import annotations

from datetime import datetime, timedelta
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from config import ScheduleSettings, ScheduleWindow


logger = logging.getLogger(__name__)

# How far ahead next_run() looks for an allowed minute
_LOOKAHEAD = timedelta(days=2)


def _as_local(value: datetime) -> datetime:
    """Naive input is taken as local time; aware input keeps its own wall clock."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


def window_contains(window: ScheduleWindow, moment: datetime) -> bool:
    """Start inclusive, end exclusive. A window whose end precedes its start wraps midnight."""
    minute = moment.hour * 60 + moment.minute
    start, end = window.start_minute, window.end_minute
    if start == end:
        return True
    if start < end:
        return start <= minute < end
    return minute >= start or minute < end


class ScheduleGate:
    """
    Time-window/interval policy with the last run time kept in a sidecar file.

    With the gate disabled every moment is allowed. Otherwise a run is allowed
    when ``now`` falls in some window whose interval has elapsed since the last run.
    """

    def __init__(
        self,
        *,
        enabled: bool,
        windows: Sequence[ScheduleWindow],
        state_path: Union[str, Path],
    ) -> None:
        self.enabled = enabled
        self.windows: List[ScheduleWindow] = list(windows)
        self.state_path = Path(state_path)

    @classmethod
    def from_settings(cls, settings: ScheduleSettings) -> "ScheduleGate":
        return cls(enabled=settings.enabled, windows=settings.windows, state_path=settings.state_file)

    def last_run(self) -> Optional[datetime]:
        if not self.state_path.exists():
            return None
        try:
            data = json.loads(self.state_path.read_text(encoding="utf-8"))
            return _as_local(datetime.fromisoformat(str(data["lastRun"])))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable schedule state %s: %s", self.state_path, e)
            return None

    def record_run(self, when: Optional[datetime] = None) -> None:
        moment = _as_local(when or datetime.now())
        self.state_path.parent.mkdir(parents=True, exist_ok=True)
        self.state_path.write_text(json.dumps({"lastRun": moment.isoformat()}), encoding="utf-8")

    def windows_at(self, moment: datetime) -> List[ScheduleWindow]:
        return [w for w in self.windows if window_contains(w, moment)]

    def _allowed(self, moment: datetime, last: Optional[datetime]) -> bool:
        active = self.windows_at(moment)
        if not active:
            return False
        if last is None:
            return True
        elapsed = moment - last
        return any(elapsed >= timedelta(minutes=w.interval_minutes) for w in active)

    def should_run_now(self, now: Optional[datetime] = None) -> bool:
        if not self.enabled:
            return True
        moment = _as_local(now or datetime.now())
        allowed = self._allowed(moment, self.last_run())
        if not allowed:
            logger.debug("Schedule gate closed at %s", moment.isoformat(timespec="minutes"))
        return allowed

    def next_run(self, now: Optional[datetime] = None) -> Optional[datetime]:
        """Earliest minute from ``now`` at which the gate opens; None when disabled or never."""
        if not self.enabled:
            return None
        moment = _as_local(now or datetime.now())
        last = self.last_run()
        if self._allowed(moment, last):
            return moment
        candidate = moment.replace(second=0, microsecond=0) + timedelta(minutes=1)
        limit = moment + _LOOKAHEAD
        while candidate <= limit:
            if self._allowed(candidate, last):
                return candidate
            candidate += timedelta(minutes=1)
        return None
