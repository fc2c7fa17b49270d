"""
Pytest configuration and shared fixtures for FlowFocus tests.
"""

import json
from pathlib import Path
from typing import Any, Callable, List, Optional

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from flowfocus.models.config import FlowFocusConfig
from flowfocus.models.storage import InMemoryBackend, LocalPersistence
from flowfocus.models.store import FlowFocusStore


class FakeTimer:
    """Stand-in for ``threading.Timer`` that only fires when told to."""

    instances: List["FakeTimer"] = []

    def __init__(self, interval: float, function: Callable[..., Any], args: Optional[tuple] = None) -> None:
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.instances.append(self)

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.function(*self.args)


@pytest.fixture
def backend() -> InMemoryBackend:
    """Create an empty in-memory key-value backend."""
    return InMemoryBackend()


@pytest.fixture
def persistence(backend: InMemoryBackend) -> LocalPersistence:
    """Create persistence that writes synchronously."""
    return LocalPersistence(backend, debounce_seconds=0)


@pytest.fixture
def fake_timers() -> List[FakeTimer]:
    """Reset and expose the timers created by ``debounced_persistence``."""
    FakeTimer.instances = []
    return FakeTimer.instances


@pytest.fixture
def debounced_persistence(backend: InMemoryBackend, fake_timers: List[FakeTimer]) -> LocalPersistence:
    """Create debounced persistence driven by fake timers."""
    return LocalPersistence(backend, debounce_seconds=0.5, timer_factory=FakeTimer)


@pytest.fixture
def store(persistence: LocalPersistence) -> FlowFocusStore:
    """Create a store over in-memory persistence with the default collections."""
    return FlowFocusStore(persistence)


@pytest.fixture
def config(tmp_path: Path) -> FlowFocusConfig:
    """Create a configuration pointing at a temporary data directory."""
    key_file = tmp_path / "openai_key.txt"
    key_file.write_text("sk-test-key-1234567890abcdef")
    return FlowFocusConfig(
        openai_key_path=key_file,
        data_dir=tmp_path / "data",
        debounce_seconds=0,
    )


@pytest.fixture
def fake_chat_model() -> Callable[..., FakeListChatModel]:
    """Factory for chat models that answer with the given JSON payloads."""
    def _make(*payloads: Any) -> FakeListChatModel:
        responses = [p if isinstance(p, str) else json.dumps(p) for p in payloads]
        return FakeListChatModel(responses=responses)
    return _make


@pytest.fixture
def sample_plan_records() -> List[dict]:
    """Study plans in the exported storage shape."""
    return [
        {
            "id": "plan_1",
            "title": "Learn Rust",
            "goal": "Rust",
            "startDate": "2024-07-01",
            "tasks": [
                {"id": "t1", "topic": "Ownership", "description": "Borrowing rules",
                 "duration": "2 hours", "completed": True, "date": "2024-07-01"},
                {"id": "t2", "topic": "Traits", "description": "Generics and traits",
                 "duration": "2 hours", "completed": False, "date": "2024-07-02"},
            ],
        }
    ]
