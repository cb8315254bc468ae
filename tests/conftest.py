# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from plugin_diagnostics.config import RuntimeConfig, reset_settings
from plugin_diagnostics.core.clipboard import ClipboardWriter
from plugin_diagnostics.core.persistence import MemoryStateStore, PersistenceCodec
from plugin_diagnostics.core.queue_client import MemoryTaskQueueClient
from plugin_diagnostics.core.session import DiagnosticsSession
from plugin_diagnostics.shared.schemas.domain import TaskError, TaskRecord
from plugin_diagnostics.shared.timeutil import to_iso

if TYPE_CHECKING:
    from collections.abc import Callable, Generator, Iterable

FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _utc_local_time(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture(autouse=True)
def _clean_settings() -> Generator[None, None, None]:
    reset_settings()
    yield
    reset_settings()


@dataclass
class FrozenClock:
    now: datetime = FIXED_NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now += timedelta(**delta)
        return self.now


@dataclass
class FakeClipboard:
    writes: list[str] = field(default_factory=list)
    available: bool = True

    def copy(self, value: str) -> bool:
        if not self.available:
            return False
        self.writes.append(value)
        return True

    def writer(self) -> ClipboardWriter:
        return ClipboardWriter(preferred=None, fallback=self.copy)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def fake_clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def memory_store() -> MemoryStateStore:
    store = MemoryStateStore()
    store.initialize()
    return store


@pytest.fixture
def codec(memory_store: MemoryStateStore) -> PersistenceCodec:
    return PersistenceCodec(memory_store)


@pytest.fixture
def make_task() -> Callable[..., TaskRecord]:
    def _make(
        task_id: str,
        *,
        plugin_id: str = "alpha",
        state: str = "succeeded",
        minutes_ago: float = 1,
        operation: str = "sync",
        error: TaskError | None = None,
    ) -> TaskRecord:
        return TaskRecord(
            task_id=task_id,
            plugin_id=plugin_id,
            operation=operation,
            state=state,
            attempt=1,
            max_retries=3,
            started_at=to_iso(FIXED_NOW - timedelta(minutes=minutes_ago)),
            error=error,
        )

    return _make


@pytest.fixture
def sample_tasks(make_task: Callable[..., TaskRecord]) -> list[TaskRecord]:
    return [
        make_task("t-1", plugin_id="alpha", state="running", minutes_ago=1),
        make_task(
            "t-2",
            plugin_id="beta",
            state="failed",
            minutes_ago=30,
            error=TaskError(code="E42", message="Disk full"),
        ),
        make_task("t-3", plugin_id="alpha", state="queued", minutes_ago=120),
        make_task("t-4", plugin_id="beta", state="succeeded", minutes_ago=60 * 30),
    ]


@pytest.fixture
def make_session(
    codec: PersistenceCodec,
    clock: FrozenClock,
    fake_clipboard: FakeClipboard,
) -> Callable[..., DiagnosticsSession]:
    def _make(tasks: Iterable[TaskRecord] = (), **client_kwargs: object) -> DiagnosticsSession:
        client = MemoryTaskQueueClient(tasks, **client_kwargs)  # type: ignore[arg-type]
        session = DiagnosticsSession(
            client,
            codec,
            clipboard=fake_clipboard.writer(),
            config=RuntimeConfig(event_debounce_seconds=0),
            clock=clock,
        )
        session.refresh()
        return session

    return _make
