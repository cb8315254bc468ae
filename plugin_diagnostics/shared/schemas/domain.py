# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Shared domain schemas used across Plugin Diagnostics components."""

from __future__ import annotations

from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TaskState = Literal["queued", "running", "retrying", "succeeded", "failed", "cancelled", "timed_out"]
TimeRangeMode = Literal["all", "1h", "24h", "7d", "custom"]
HistorySortMode = Literal["recent", "label"]
HistoryViewMode = Literal["default", "flat", "only_pinned"]
ActionLevel = Literal["success", "warning", "error"]

TASK_STATES: tuple[str, ...] = get_args(TaskState)
TASK_FILTERS: tuple[str, ...] = ("all", *TASK_STATES)
TIME_RANGE_MODES: tuple[str, ...] = get_args(TimeRangeMode)
HISTORY_SORT_MODES: tuple[str, ...] = get_args(HistorySortMode)
HISTORY_VIEW_MODES: tuple[str, ...] = get_args(HistoryViewMode)

PAGE_SIZE_OPTIONS: tuple[int, ...] = (10, 20, 50)
DEFAULT_PAGE_SIZE = 10
MAX_HISTORY = 5
ALL = "all"

TASK_STATE_LABELS: dict[str, str] = {
    "queued": "Queued",
    "running": "Running",
    "retrying": "Retrying",
    "succeeded": "Succeeded",
    "failed": "Failed",
    "cancelled": "Cancelled",
    "timed_out": "Timed out",
}

_CANCELLABLE_STATES = {"queued", "running", "retrying"}


class _BaseSchema(BaseModel):
    """Base schema with camelCase wire names."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        validate_assignment=False,
    )


class _FrozenSchema(_BaseSchema):
    """Immutable snapshot schema."""

    model_config = ConfigDict(frozen=True)


class TaskError(_FrozenSchema):
    """Failure details attached to a task record."""

    code: str | None = None
    message: str
    retryable: bool = False


class TaskRecord(_FrozenSchema):
    """Task snapshot supplied by the task-queue collaborator."""

    task_id: str
    plugin_id: str
    operation: str
    state: TaskState
    attempt: int = 0
    max_retries: int = 0
    started_at: str
    ended_at: str | None = None
    duration_ms: int | None = None
    error: TaskError | None = None


class QueueStat(_FrozenSchema):
    """Per-plugin queue counters."""

    plugin_id: str
    running: int = 0
    waiting: int = 0
    rejected: int = 0
    completed: int = 0
    failed: int = 0
    cancelled: int = 0
    timed_out: int = 0


class CustomRangeHistoryItem(_FrozenSchema):
    """Previously applied custom time range."""

    id: str
    start: str
    end: str
    updated_at: str
    label: str = ""
    pinned: bool = False


class FilterState(_BaseSchema):
    """Task list filter and pagination state."""

    task_filter: str = ALL
    plugin_filter: str = ALL
    search_keyword: str = ""
    page_size: int = DEFAULT_PAGE_SIZE
    page: int = 1
    time_range_mode: TimeRangeMode = "all"
    custom_start: str = ""
    custom_end: str = ""
    last_applied_custom_start: str = ""
    last_applied_custom_end: str = ""
    last_applied_custom_updated_at: str = ""


class HistoryViewState(_BaseSchema):
    """Presentation options for the range history list."""

    search_keyword: str = ""
    sort_mode: HistorySortMode = "recent"
    only_pinned: bool = False
    pinned_first: bool = True

    @property
    def view_mode(self) -> HistoryViewMode:
        """Return the named projection of the pinned flags."""
        if self.only_pinned:
            return "only_pinned"
        return "default" if self.pinned_first else "flat"


class DiagnosticsState(_BaseSchema):
    """Everything the dashboard persists between sessions."""

    filters: FilterState = Field(default_factory=FilterState)
    history: tuple[CustomRangeHistoryItem, ...] = ()
    history_view: HistoryViewState = Field(default_factory=HistoryViewState)


class EffectiveTimeBounds(_FrozenSchema):
    """Resolved numeric time window in epoch milliseconds."""

    effective_start_ms: int | None = None
    effective_end_ms: int | None = None
    is_swapped: bool = False
    is_empty: bool = False

    @property
    def active(self) -> bool:
        """Return whether any bound restricts the task list."""
        return self.effective_start_ms is not None or self.effective_end_ms is not None


class TaskPage(_BaseSchema):
    """One page of the filtered task list."""

    items: list[TaskRecord]
    total: int
    page: int
    page_size: int
    total_pages: int
    range_start: int
    range_end: int
    visible_pages: list[int]


class HistoryView(_BaseSchema):
    """Sorted and filtered projection of the range history."""

    items: list[CustomRangeHistoryItem]
    total_count: int
    pinned_count: int
    matched_count: int
    view_mode: HistoryViewMode
    count_text: str
    empty_hint: str


class ActionResult(_BaseSchema):
    """Outcome of an imperative dashboard action."""

    ok: bool
    level: ActionLevel
    message: str
    count: int | None = None
    payload: str | None = None

    @classmethod
    def success(cls, message: str, *, count: int | None = None, payload: str | None = None) -> ActionResult:
        """Build a successful result."""
        return cls(ok=True, level="success", message=message, count=count, payload=payload)

    @classmethod
    def warning(cls, message: str) -> ActionResult:
        """Build a no-op result that needs the user's attention."""
        return cls(ok=False, level="warning", message=message)

    @classmethod
    def error(cls, message: str) -> ActionResult:
        """Build a failed result."""
        return cls(ok=False, level="error", message=message)


def state_label(state: str) -> str:
    """Return the display label for a task state."""
    return TASK_STATE_LABELS.get(state, state)


def can_cancel(task: TaskRecord) -> bool:
    """Return whether the task is still in a cancellable state."""
    return task.state in _CANCELLABLE_STATES
