"""
FlowFocus Pomodoro

Timer settings, per-day session counters and the focus/break timer state
machine. The timer is driven by ``tick`` calls, so callers decide where the
clock comes from.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import ValidationError

from .entities import PomodoroSettings
from .settings import StorageKeys
from .storage import LocalPersistence
from ..utils import get_today

# Set up module logger
logger = logging.getLogger(__name__)

TimerMode = Literal["pomodoro", "short_break", "long_break"]


class PomodoroTracker:
    """
    Persists timer settings and counts finished focus sessions per day.
    """

    def __init__(self, persistence: LocalPersistence) -> None:
        self.persistence = persistence
        self.settings = self._load_settings()
        self.sessions: Dict[str, int] = self._load_sessions()

    def _load_settings(self) -> PomodoroSettings:
        data = self.persistence.load(StorageKeys.POMODORO_SETTINGS)
        if data is None:
            return PomodoroSettings()
        try:
            return PomodoroSettings.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid pomodoro settings in storage, using defaults: {e}")
            return PomodoroSettings()

    def _load_sessions(self) -> Dict[str, int]:
        data = self.persistence.load(StorageKeys.POMODORO_SESSIONS)
        if not isinstance(data, dict):
            if data is not None:
                logger.error("Invalid pomodoro session counters in storage, starting fresh")
            return {}
        return {day: count for day, count in data.items() if isinstance(count, int) and count >= 0}

    def update_settings(self, **minutes: int) -> PomodoroSettings:
        """
        Change one or more timer lengths.

        Args:
            **minutes: ``pomodoro``, ``short_break`` and/or ``long_break`` in minutes

        Returns:
            The new settings

        Raises:
            ValidationError: If a length is not a positive integer
        """
        data = self.settings.model_dump()
        data.update(minutes)
        self.settings = PomodoroSettings.model_validate(data)
        self.persistence.save(StorageKeys.POMODORO_SETTINGS, self.settings.to_record())
        return self.settings

    def minutes_for(self, mode: TimerMode) -> int:
        """Configured length of a timer mode."""
        return getattr(self.settings, mode)

    def record_session(self, day: Optional[date] = None) -> int:
        """
        Count one finished focus session.

        Args:
            day: Day to count it on, today by default

        Returns:
            The day's new session count
        """
        key = (day or get_today()).isoformat()
        self.sessions[key] = self.sessions.get(key, 0) + 1
        self.persistence.save(StorageKeys.POMODORO_SESSIONS, dict(self.sessions))
        return self.sessions[key]

    def sessions_on(self, day: date) -> int:
        """Number of sessions finished on a day."""
        return self.sessions.get(day.isoformat(), 0)

    def recent_sessions(self, days: int = 7, end: Optional[date] = None) -> List[Tuple[date, int]]:
        """
        Session counts for the last ``days`` days, oldest first.

        Days without sessions are included with a count of zero.
        """
        last = end or get_today()
        return [
            (day, self.sessions_on(day))
            for day in (last - timedelta(days=offset) for offset in range(days - 1, -1, -1))
        ]


class PomodoroTimer:
    """
    Focus/break countdown.

    Finishing a focus session records it and switches to a short break;
    finishing any break switches back to focus. The timer stops after each
    switch and waits for ``start``.
    """

    def __init__(self, tracker: PomodoroTracker, mode: TimerMode = "pomodoro") -> None:
        self.tracker = tracker
        self.mode: TimerMode = mode
        self.remaining = self.duration
        self.is_active = False

    @property
    def duration(self) -> int:
        """Length of the current mode in seconds."""
        return self.tracker.minutes_for(self.mode) * 60

    @property
    def progress(self) -> float:
        """Elapsed share of the current mode, in percent."""
        return (self.duration - self.remaining) / self.duration * 100

    def start(self) -> None:
        self.is_active = True

    def pause(self) -> None:
        self.is_active = False

    def reset(self) -> None:
        """Stop and rewind the current mode."""
        self.is_active = False
        self.remaining = self.duration

    def set_mode(self, mode: TimerMode) -> None:
        """Switch mode, stopping and rewinding the timer."""
        self.mode = mode
        self.reset()

    def tick(self, seconds: int = 1) -> bool:
        """
        Advance an active timer.

        Args:
            seconds: Elapsed seconds

        Returns:
            True if the current mode finished during this tick
        """
        if not self.is_active:
            return False

        self.remaining = max(0, self.remaining - seconds)
        if self.remaining > 0:
            return False

        if self.mode == "pomodoro":
            count = self.tracker.record_session()
            logger.info(f"Pomodoro finished, {count} sessions today")
            self.set_mode("short_break")
        else:
            self.set_mode("pomodoro")
        return True
