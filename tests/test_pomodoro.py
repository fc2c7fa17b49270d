"""
Tests for the pomodoro tracker, timer and dashboard layout.
"""

import json
from datetime import date
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from flowfocus.models.dashboard import DEFAULT_LAYOUTS, DashboardLayout
from flowfocus.models.pomodoro import PomodoroTimer, PomodoroTracker
from flowfocus.models.settings import StorageKeys
from flowfocus.models.storage import InMemoryBackend, LocalPersistence


@pytest.fixture
def tracker(persistence: LocalPersistence) -> PomodoroTracker:
    """Create a tracker with default settings and no sessions."""
    return PomodoroTracker(persistence)


class TestPomodoroTracker:
    """Test cases for settings and session counters."""

    def test_default_settings(self, tracker: PomodoroTracker) -> None:
        assert tracker.minutes_for("pomodoro") == 25
        assert tracker.minutes_for("short_break") == 5
        assert tracker.minutes_for("long_break") == 15

    def test_update_settings_persists(self, tracker: PomodoroTracker, backend: InMemoryBackend) -> None:
        tracker.update_settings(pomodoro=50)

        stored = json.loads(backend.data[StorageKeys.POMODORO_SETTINGS])
        assert stored["pomodoro"] == 50
        assert stored["shortBreak"] == 5

    def test_update_settings_rejects_zero(self, tracker: PomodoroTracker) -> None:
        with pytest.raises(ValidationError):
            tracker.update_settings(short_break=0)

        assert tracker.minutes_for("short_break") == 5

    def test_invalid_stored_settings_fall_back(self) -> None:
        backend = InMemoryBackend({StorageKeys.POMODORO_SETTINGS: '{"pomodoro": -3}'})

        tracker = PomodoroTracker(LocalPersistence(backend, debounce_seconds=0))

        assert tracker.minutes_for("pomodoro") == 25

    def test_record_session_counts_per_day(self, tracker: PomodoroTracker) -> None:
        day = date(2024, 6, 1)

        tracker.record_session(day)
        count = tracker.record_session(day)

        assert count == 2
        assert tracker.sessions_on(day) == 2
        assert tracker.sessions_on(date(2024, 6, 2)) == 0

    def test_record_session_defaults_to_today(self, tracker: PomodoroTracker) -> None:
        with patch("flowfocus.models.pomodoro.get_today", return_value=date(2024, 6, 3)):
            tracker.record_session()

        assert tracker.sessions == {"2024-06-03": 1}

    def test_recent_sessions_fill_missing_days(self, tracker: PomodoroTracker) -> None:
        """Days without sessions report zero, oldest day first."""
        tracker.record_session(date(2024, 6, 1))
        tracker.record_session(date(2024, 6, 3))

        recent = tracker.recent_sessions(days=3, end=date(2024, 6, 3))

        assert recent == [(date(2024, 6, 1), 1), (date(2024, 6, 2), 0), (date(2024, 6, 3), 1)]

    def test_bad_stored_counters_are_dropped(self) -> None:
        backend = InMemoryBackend({StorageKeys.POMODORO_SESSIONS: '{"2024-06-01": 2, "2024-06-02": -1}'})

        tracker = PomodoroTracker(LocalPersistence(backend, debounce_seconds=0))

        assert tracker.sessions == {"2024-06-01": 2}


class TestPomodoroTimer:
    """Test cases for the focus/break state machine."""

    def test_starts_inactive_and_full(self, tracker: PomodoroTracker) -> None:
        timer = PomodoroTimer(tracker)

        assert timer.remaining == 25 * 60
        assert timer.is_active is False
        assert timer.tick(10) is False
        assert timer.remaining == 25 * 60

    def test_progress(self, tracker: PomodoroTracker) -> None:
        timer = PomodoroTimer(tracker)
        timer.start()

        timer.tick(15 * 60)

        assert timer.progress == pytest.approx(60.0)

    def test_finished_focus_records_and_switches_to_break(self, tracker: PomodoroTracker) -> None:
        """A finished focus session counts and stops on a short break."""
        timer = PomodoroTimer(tracker)
        timer.start()

        with patch("flowfocus.models.pomodoro.get_today", return_value=date(2024, 6, 1)):
            assert timer.tick(25 * 60) is True

        assert tracker.sessions_on(date(2024, 6, 1)) == 1
        assert timer.mode == "short_break"
        assert timer.remaining == 5 * 60
        assert timer.is_active is False

    def test_finished_break_returns_to_focus(self, tracker: PomodoroTracker) -> None:
        """Breaks do not count as sessions."""
        timer = PomodoroTimer(tracker, mode="long_break")
        timer.start()

        assert timer.tick(15 * 60 + 30) is True

        assert timer.mode == "pomodoro"
        assert tracker.sessions == {}

    def test_pause_and_reset(self, tracker: PomodoroTracker) -> None:
        timer = PomodoroTimer(tracker)
        timer.start()
        timer.tick(60)
        timer.pause()

        assert timer.tick(60) is False
        assert timer.remaining == 24 * 60

        timer.reset()
        assert timer.remaining == 25 * 60

    def test_set_mode_uses_new_length(self, tracker: PomodoroTracker) -> None:
        tracker.update_settings(short_break=10)
        timer = PomodoroTimer(tracker)

        timer.set_mode("short_break")

        assert timer.duration == 600


class TestDashboardLayout:
    """Test cases for the stored dashboard layout."""

    def test_defaults_when_nothing_stored(self, persistence: LocalPersistence) -> None:
        layout = DashboardLayout(persistence)

        assert set(layout.layouts) == {"lg", "md", "sm", "xs", "xxs"}
        assert layout.layouts == DEFAULT_LAYOUTS
        assert layout.layouts is not DEFAULT_LAYOUTS

    def test_update_and_reload(self, persistence: LocalPersistence) -> None:
        custom = {"lg": [{"i": "notes", "x": 0, "y": 0, "w": 12, "h": 4, "minH": 2, "minW": 2}]}

        DashboardLayout(persistence).update(custom)

        assert DashboardLayout(persistence).layouts == custom

    def test_reset_forgets_stored_layout(self, persistence: LocalPersistence, backend: InMemoryBackend) -> None:
        layout = DashboardLayout(persistence)
        layout.update({"lg": []})

        layout.reset()

        assert StorageKeys.DASHBOARD_LAYOUT not in backend.data
        assert layout.layouts == DEFAULT_LAYOUTS
