# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Interface to the task-queue backend and an in-memory implementation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from pydantic import TypeAdapter

from plugin_diagnostics.shared.schemas.domain import QueueStat, TaskRecord, can_cancel

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["MemoryTaskQueueClient", "TaskQueueClient"]

_TASKS = TypeAdapter(list[TaskRecord])
_STATS = TypeAdapter(list[QueueStat])


class TaskQueueClient(Protocol):
    """Pull-model access to the plugin task queue."""

    def list_tasks(self, state_filter: str | None, limit: int) -> list[TaskRecord]:
        """Return the newest tasks, optionally restricted to one state."""
        ...

    def list_queue_stats(self) -> list[QueueStat]:
        """Return per-plugin queue counters."""
        ...

    def cancel_task(self, task_id: str) -> bool:
        """Request cancellation; return whether it was accepted."""
        ...

    def get_task_detail(self, task_id: str) -> TaskRecord | None:
        """Return the full record for a task, if it still exists."""
        ...

    def list_plugins(self) -> list[str]:
        """Return the ids of the installed plugins."""
        ...


class MemoryTaskQueueClient:
    """Task queue backed by a list held in memory, newest first."""

    def __init__(
        self,
        tasks: Iterable[TaskRecord] = (),
        stats: Iterable[QueueStat] = (),
        plugins: Iterable[str] | None = None,
    ) -> None:
        """Seed the queue with tasks, stats and optionally explicit plugins."""
        self._tasks: list[TaskRecord] = list(tasks)
        self._stats: list[QueueStat] = list(stats)
        self._plugins = list(plugins) if plugins is not None else None

    @classmethod
    def from_snapshot(cls, payload: dict[str, object]) -> MemoryTaskQueueClient:
        """Build a queue from a ``{tasks, queueStats, plugins}`` mapping."""
        plugins = payload.get("plugins")
        return cls(
            tasks=_TASKS.validate_python(payload.get("tasks") or []),
            stats=_STATS.validate_python(payload.get("queueStats") or []),
            plugins=[str(plugin) for plugin in plugins] if isinstance(plugins, list) else None,
        )

    @classmethod
    def from_snapshot_file(cls, path: str | Path) -> MemoryTaskQueueClient:
        """Load a snapshot file; a bare JSON list is read as the task list."""
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(payload, list):
            payload = {"tasks": payload}
        if not isinstance(payload, dict):
            message = f"Task snapshot must be a JSON object or list: {path}"
            raise ValueError(message)
        return cls.from_snapshot(payload)

    def replace_tasks(self, tasks: Iterable[TaskRecord]) -> None:
        """Swap in a new task snapshot."""
        self._tasks = list(tasks)

    def list_tasks(self, state_filter: str | None, limit: int) -> list[TaskRecord]:
        """Return up to ``limit`` tasks matching the state filter."""
        matching = [task for task in self._tasks if state_filter is None or task.state == state_filter]
        return matching[:limit]

    def list_queue_stats(self) -> list[QueueStat]:
        """Return the stored queue counters."""
        return list(self._stats)

    def cancel_task(self, task_id: str) -> bool:
        """Mark a cancellable task as cancelled."""
        for index, task in enumerate(self._tasks):
            if task.task_id != task_id:
                continue
            if not can_cancel(task):
                return False
            self._tasks[index] = task.model_copy(update={"state": "cancelled"})
            return True
        return False

    def get_task_detail(self, task_id: str) -> TaskRecord | None:
        """Return the task with the id, if present."""
        return next((task for task in self._tasks if task.task_id == task_id), None)

    def list_plugins(self) -> list[str]:
        """Return explicit plugins or those seen in tasks and stats."""
        if self._plugins is not None:
            return list(self._plugins)
        seen = dict.fromkeys([*(task.plugin_id for task in self._tasks), *(stat.plugin_id for stat in self._stats)])
        return list(seen)
