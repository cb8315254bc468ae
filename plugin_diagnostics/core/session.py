# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Stateful diagnostics session shared by the web and CLI front ends.

The session is the single owner of the filter state, the range history and
the latest task snapshot. Every mutation goes through :meth:`DiagnosticsSession.update`
or one of the named actions, which resolve the time range, derive the
last-applied range, persist the result and reconcile pagination while holding
one lock.
"""

from __future__ import annotations

import json
import logging
import threading
from collections import defaultdict
from datetime import timedelta
from typing import TYPE_CHECKING

from plugin_diagnostics.config import RuntimeConfig
from plugin_diagnostics.core.clipboard import ClipboardWriter
from plugin_diagnostics.core.csv_export import export_csv
from plugin_diagnostics.core.debounce import Debouncer, PeriodicRefresher
from plugin_diagnostics.core.effects import derive_effects
from plugin_diagnostics.core.errors import ClipboardError
from plugin_diagnostics.core.history.store import HistoryStore
from plugin_diagnostics.core.history.view import build_history_view, view_mode_state
from plugin_diagnostics.core.pipeline import clamp_page, filter_tasks, paginate, total_pages
from plugin_diagnostics.core.timerange import range_hint, resolve_time_range
from plugin_diagnostics.core.transfer import ImportExportCodec
from plugin_diagnostics.shared.schemas.domain import (
    ALL,
    HISTORY_SORT_MODES,
    HISTORY_VIEW_MODES,
    PAGE_SIZE_OPTIONS,
    TASK_FILTERS,
    TIME_RANGE_MODES,
    ActionResult,
    DiagnosticsState,
    FilterState,
    HistoryViewState,
)
from plugin_diagnostics.shared.timeutil import to_datetime_local, to_ms, utc_now

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime

    from plugin_diagnostics.core.persistence.codec import PersistenceCodec
    from plugin_diagnostics.core.queue_client import TaskQueueClient
    from plugin_diagnostics.shared.schemas.domain import (
        EffectiveTimeBounds,
        HistoryView,
        QueueStat,
        TaskPage,
        TaskRecord,
    )

__all__ = ["DiagnosticsSession"]

_LOGGER = logging.getLogger(__name__)

_FILTER_FIELDS = frozenset(
    {
        "task_filter",
        "plugin_filter",
        "search_keyword",
        "page_size",
        "page",
        "time_range_mode",
        "custom_start",
        "custom_end",
    },
)
_HISTORY_VIEW_FIELDS: dict[str, str] = {
    "history_search_keyword": "search_keyword",
    "history_sort_mode": "sort_mode",
    "history_only_pinned": "only_pinned",
    "history_pinned_first": "pinned_first",
}
_PAGE_RESET_FIELDS = (
    "task_filter",
    "plugin_filter",
    "search_keyword",
    "page_size",
    "time_range_mode",
    "custom_start",
    "custom_end",
)
_NO_LAST_RANGE = "No last applied range to copy"


def _require_choice(name: str, value: object, allowed: tuple[str, ...]) -> str:
    if not isinstance(value, str) or value not in allowed:
        message = f"{name} must be one of {', '.join(allowed)}"
        raise ValueError(message)
    return value


def _require_str(name: str, value: object) -> str:
    if not isinstance(value, str):
        message = f"{name} must be a string"
        raise ValueError(message)
    return value


def _require_bool(name: str, value: object) -> bool:
    if not isinstance(value, bool):
        message = f"{name} must be a boolean"
        raise ValueError(message)
    return value


def _require_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        message = f"{name} must be an integer"
        raise ValueError(message)
    return value


def _validate(name: str, value: object) -> object:  # noqa: PLR0911
    if name == "task_filter":
        return _require_choice(name, value, TASK_FILTERS)
    if name == "time_range_mode":
        return _require_choice(name, value, TIME_RANGE_MODES)
    if name == "history_sort_mode":
        return _require_choice(name, value, HISTORY_SORT_MODES)
    if name == "page_size":
        size = _require_int(name, value)
        if size not in PAGE_SIZE_OPTIONS:
            message = f"page_size must be one of {', '.join(str(option) for option in PAGE_SIZE_OPTIONS)}"
            raise ValueError(message)
        return size
    if name == "page":
        return _require_int(name, value)
    if name in {"history_only_pinned", "history_pinned_first"}:
        return _require_bool(name, value)
    return _require_str(name, value)


class DiagnosticsSession:
    """Owns the dashboard state for one diagnostics instance."""

    def __init__(
        self,
        client: TaskQueueClient,
        codec: PersistenceCodec,
        *,
        clipboard: ClipboardWriter | None = None,
        config: RuntimeConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Load the persisted state and bind the collaborators."""
        self._client = client
        self._codec = codec
        self._clipboard = clipboard
        self._config = config or RuntimeConfig()
        self._clock = clock
        self._transfer = ImportExportCodec()
        self._lock = threading.RLock()

        self._tasks: list[TaskRecord] = []
        self._queue_stats: dict[str, QueueStat] = {}
        self._plugins: list[str] | None = None
        self._selected_detail: TaskRecord | None = None
        self._debouncer = Debouncer(self._config.event_debounce_seconds, self.refresh)
        self._refresher = PeriodicRefresher(self._config.refresh_interval_seconds, self.refresh)

        loaded = codec.load().value
        self._state = derive_effects(loaded, self._bounds_for(loaded), now=self._clock())
        if self._state != loaded:
            self._codec.save(self._state)

    @property
    def state(self) -> DiagnosticsState:
        """Return a copy of the current state."""
        with self._lock:
            return self._state.model_copy(deep=True)

    @property
    def filters(self) -> FilterState:
        """Return a copy of the task filters."""
        return self.state.filters

    @property
    def tasks(self) -> list[TaskRecord]:
        """Return the latest unfiltered task snapshot."""
        with self._lock:
            return list(self._tasks)

    @property
    def tasks_by_plugin(self) -> dict[str, list[TaskRecord]]:
        """Return the snapshot grouped by plugin id."""
        grouped: dict[str, list[TaskRecord]] = defaultdict(list)
        for task in self.tasks:
            grouped[task.plugin_id].append(task)
        return dict(grouped)

    @property
    def queue_stats(self) -> dict[str, QueueStat]:
        """Return queue counters keyed by plugin id."""
        with self._lock:
            return dict(self._queue_stats)

    @property
    def plugins(self) -> list[str]:
        """Return the live plugin ids from the last plugin load."""
        with self._lock:
            return list(self._plugins or [])

    @property
    def selected_detail(self) -> TaskRecord | None:
        """Return the task detail currently on display."""
        with self._lock:
            return self._selected_detail

    @property
    def quick_range_minutes(self) -> list[int]:
        """Return the quick range options in minutes."""
        return list(self._config.quick_range_minutes)

    def now(self) -> datetime:
        """Return the session clock reading."""
        return self._clock()

    def bounds(self) -> EffectiveTimeBounds:
        """Resolve the current time range against the clock."""
        with self._lock:
            return self._bounds_for(self._state)

    def filtered_tasks(self) -> list[TaskRecord]:
        """Return the snapshot after plugin, time and keyword filters."""
        with self._lock:
            return filter_tasks(self._tasks, self._state.filters, self._bounds_for(self._state))

    def task_page(self) -> TaskPage:
        """Return the current page of filtered tasks."""
        with self._lock:
            filters = self._state.filters
            return paginate(self.filtered_tasks(), filters.page, filters.page_size)

    def history_view(self) -> HistoryView:
        """Return the sorted and filtered range history."""
        with self._lock:
            return build_history_view(self._state.history, self._state.history_view)

    def range_hint(self) -> str:
        """Describe how the custom range is applied."""
        with self._lock:
            return range_hint(self._state.filters.time_range_mode, self._bounds_for(self._state))

    def snapshot(self) -> dict[str, object]:
        """Return everything a dashboard needs to render, as JSON-ready data."""
        with self._lock:
            state = self._state
            bounds = self._bounds_for(state)
            filters = state.filters
            detail = self._selected_detail
            return {
                "filters": filters.model_dump(by_alias=True),
                "historyView": {
                    **state.history_view.model_dump(by_alias=True),
                    "viewMode": state.history_view.view_mode,
                },
                "bounds": bounds.model_dump(by_alias=True),
                "rangeHint": range_hint(filters.time_range_mode, bounds),
                "page": self.task_page().model_dump(by_alias=True),
                "history": self.history_view().model_dump(by_alias=True),
                "queueStats": {key: stat.model_dump(by_alias=True) for key, stat in self._queue_stats.items()},
                "plugins": list(self._plugins or []),
                "selectedTask": detail.model_dump(by_alias=True) if detail is not None else None,
                "quickRangeMinutes": list(self._config.quick_range_minutes),
                "hasLastRange": bool(filters.last_applied_custom_start and filters.last_applied_custom_end),
            }

    def update(self, **changes: object) -> None:
        """Apply several filter and history view changes as one mutation.

        Filter fields use their ``FilterState`` names; history view fields are
        prefixed with ``history_`` and ``history_view_mode`` sets both pinned
        flags. Raises :class:`ValueError` for unknown fields or invalid values.
        """
        validated: dict[str, object] = {}
        for name, value in changes.items():
            if name == "history_view_mode":
                validated[name] = _require_choice(name, value, HISTORY_VIEW_MODES)
            elif name in _FILTER_FIELDS or name in _HISTORY_VIEW_FIELDS:
                validated[name] = _validate(name, value)
            else:
                message = f"Unknown filter field: {name}"
                raise ValueError(message)

        with self._lock:
            previous_filter = self._state.filters.task_filter
            filters = self._state.filters.model_copy(
                update={name: value for name, value in validated.items() if name in _FILTER_FIELDS},
            )
            view = self._state.history_view.model_copy(
                update={
                    _HISTORY_VIEW_FIELDS[name]: value
                    for name, value in validated.items()
                    if name in _HISTORY_VIEW_FIELDS
                },
            )
            view_mode = validated.get("history_view_mode")
            if isinstance(view_mode, str):
                view = view_mode_state(view, view_mode)  # type: ignore[arg-type]
            self._commit(self._state.model_copy(update={"filters": filters, "history_view": view}))
            task_filter_changed = self._state.filters.task_filter != previous_filter
        if task_filter_changed:
            self.refresh()

    def set_task_filter(self, value: str) -> None:
        """Select the server-side state filter and re-pull tasks."""
        self.update(task_filter=value)

    def set_plugin_filter(self, value: str) -> None:
        """Restrict the list to one plugin, or ``"all"``."""
        self.update(plugin_filter=value)

    def set_search_keyword(self, value: str) -> None:
        """Set the task keyword filter."""
        self.update(search_keyword=value)

    def set_page_size(self, value: int) -> None:
        """Set the page size; must be 10, 20 or 50."""
        self.update(page_size=value)

    def set_time_range_mode(self, value: str) -> None:
        """Select the time range mode."""
        self.update(time_range_mode=value)

    def set_custom_range(self, start: str, end: str) -> None:
        """Set both custom bounds at once."""
        self.update(custom_start=start, custom_end=end)

    def set_history_view_mode(self, mode: str) -> None:
        """Switch the history list between default, flat and only-pinned."""
        self.update(history_view_mode=mode)

    def go_to_page(self, page: int) -> int:
        """Jump to a page, clamped to the available range."""
        with self._lock:
            pages = total_pages(len(self.filtered_tasks()), self._state.filters.page_size)
            self._set_page(clamp_page(page, pages))
            return self._state.filters.page

    def prev_page(self) -> int:
        """Move one page back."""
        with self._lock:
            return self.go_to_page(self._state.filters.page - 1)

    def next_page(self) -> int:
        """Move one page forward."""
        with self._lock:
            return self.go_to_page(self._state.filters.page + 1)

    def apply_quick_range(self, minutes: int) -> None:
        """Show the last ``minutes`` minutes as a custom range ending now."""
        if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
            message = "minutes must be a positive integer"
            raise ValueError(message)
        now = self._clock()
        self.update(
            time_range_mode="custom",
            custom_start=to_datetime_local(now - timedelta(minutes=minutes)),
            custom_end=to_datetime_local(now),
        )

    def apply_last_range(self) -> bool:
        """Re-apply the last applied custom range; return whether one existed."""
        with self._lock:
            filters = self._state.filters
            start, end = filters.last_applied_custom_start, filters.last_applied_custom_end
            if not start or not end:
                return False
            self.update(time_range_mode="custom", custom_start=start, custom_end=end)
            return True

    def clear_range(self) -> None:
        """Empty both custom bounds, keeping the mode."""
        self.update(custom_start="", custom_end="")

    def apply_history_item(self, history_id: str) -> bool:
        """Apply a stored range; return whether it existed."""
        with self._lock:
            item = HistoryStore(self._state.history).get(history_id)
            if item is None:
                return False
            self.update(time_range_mode="custom", custom_start=item.start, custom_end=item.end)
            return True

    def reset_all_filters(self) -> None:
        """Restore default filters and history view options.

        The last-applied range and the history entries survive a reset.
        """
        with self._lock:
            previous_filter = self._state.filters.task_filter
            current = self._state.filters
            filters = FilterState(
                last_applied_custom_start=current.last_applied_custom_start,
                last_applied_custom_end=current.last_applied_custom_end,
                last_applied_custom_updated_at=current.last_applied_custom_updated_at,
            )
            self._commit(self._state.model_copy(update={"filters": filters, "history_view": HistoryViewState()}))
        if previous_filter != ALL:
            self.refresh()

    def copy_last_range(self) -> ActionResult:
        """Copy the last applied range as a line of text."""
        filters = self.filters
        if not filters.last_applied_custom_start or not filters.last_applied_custom_end:
            return ActionResult.warning(_NO_LAST_RANGE)
        text = f"Last range: {filters.last_applied_custom_start} ~ {filters.last_applied_custom_end}"
        return self._copy(text, success="Copied last range", failure="Failed to copy range")

    def copy_last_range_json(self) -> ActionResult:
        """Copy the last applied range as indented JSON."""
        filters = self.filters
        if not filters.last_applied_custom_start or not filters.last_applied_custom_end:
            return ActionResult.warning(_NO_LAST_RANGE)
        payload = {
            "start": filters.last_applied_custom_start,
            "end": filters.last_applied_custom_end,
            "updatedAt": filters.last_applied_custom_updated_at or None,
        }
        text = json.dumps(payload, ensure_ascii=False, indent=2)
        return self._copy(text, success="Copied range JSON", failure="Failed to copy JSON")

    def toggle_history_pinned(self, history_id: str) -> bool:
        """Flip the pinned flag of a history entry."""
        return self._mutate_history(lambda store: store.toggle_pinned(history_id))

    def rename_history_item(self, history_id: str, label: str) -> bool:
        """Relabel a history entry; a blank label clears it."""
        return self._mutate_history(lambda store: store.rename(history_id, label))

    def remove_history_item(self, history_id: str) -> bool:
        """Delete a history entry."""
        return self._mutate_history(lambda store: store.remove(history_id))

    def clear_history(self) -> None:
        """Delete every history entry."""
        with self._lock:
            self._commit(self._state.model_copy(update={"history": ()}))

    def export_history_json(self) -> ActionResult:
        """Copy the history export envelope to the clipboard."""
        with self._lock:
            items = self._state.history
        return self._transfer.export_to_clipboard(items, self._clipboard_writer(), now=self._clock())

    def history_export_payload(self) -> dict[str, object]:
        """Return the history export envelope without touching the clipboard."""
        with self._lock:
            return self._transfer.export_payload(self._state.history, now=self._clock())

    def import_history_json(self, raw: str) -> ActionResult:
        """Replace the history with an imported payload, all or nothing."""
        with self._lock:
            store = HistoryStore(self._state.history)
            result = self._transfer.import_into(store, raw)
            if not result.ok:
                return result
            view = self._state.history_view.model_copy(update={"search_keyword": "", "sort_mode": "recent"})
            self._commit(self._state.model_copy(update={"history": store.items(), "history_view": view}))
            return result

    def export_csv(self, tasks: Iterable[TaskRecord] | None = None) -> str:
        """Render the filtered task set, or the given tasks, as CSV."""
        return export_csv(self.filtered_tasks() if tasks is None else tasks)

    def refresh(self) -> None:
        """Pull a fresh task snapshot and queue counters."""
        with self._lock:
            task_filter = self._state.filters.task_filter
        state_filter = None if task_filter == ALL else task_filter
        tasks = self._fetch("tasks", lambda: self._client.list_tasks(state_filter, self._config.task_list_limit))
        stats = self._fetch("queue stats", self._client.list_queue_stats)
        with self._lock:
            self._tasks = list(tasks)
            self._queue_stats = {stat.plugin_id: stat for stat in stats}
            self._reconcile()

    def load_plugins(self, plugin_ids: Iterable[str] | None = None) -> None:
        """Record the live plugins and drop a plugin filter that no longer exists."""
        if plugin_ids is None:
            try:
                plugin_ids = self._client.list_plugins()
            except Exception as exc:  # noqa: BLE001
                _LOGGER.warning("Failed to load plugins: %s", exc)
                return
        with self._lock:
            self._plugins = list(plugin_ids)
            filters = self._state.filters
            if filters.plugin_filter != ALL and filters.plugin_filter not in self._plugins:
                _LOGGER.info("Plugin filter %s no longer exists; resetting", filters.plugin_filter)
                self._commit(
                    self._state.model_copy(update={"filters": filters.model_copy(update={"plugin_filter": ALL})}),
                )

    def reload(self) -> None:
        """Load plugins and the runtime snapshot."""
        self.load_plugins()
        self.refresh()

    def cancel_task(self, task_id: str) -> ActionResult:
        """Request cancellation of a task, then re-pull."""
        try:
            cancelled = self._client.cancel_task(task_id)
        except Exception as exc:  # noqa: BLE001
            result = ActionResult.error(f"Failed to cancel task: {exc}")
        else:
            if cancelled:
                result = ActionResult.success("Cancel request sent")
            else:
                result = ActionResult.warning("Task may have already finished and cannot be cancelled")
        self.refresh()
        return result

    def load_task_detail(self, task_id: str) -> ActionResult:
        """Fetch and select the detail of a task."""
        try:
            detail = self._client.get_task_detail(task_id)
        except Exception as exc:  # noqa: BLE001
            return ActionResult.error(f"Failed to load task detail: {exc}")
        if detail is None:
            return ActionResult.warning("Task detail not found; it may have been cleaned up")
        with self._lock:
            self._selected_detail = detail
        return ActionResult.success("Loaded task detail")

    def clear_task_detail(self) -> None:
        """Close the task detail."""
        with self._lock:
            self._selected_detail = None

    def notify_task_event(self) -> None:
        """Schedule a debounced re-pull after a task event."""
        self._debouncer.trigger()

    def start_auto_refresh(self) -> None:
        """Start the periodic re-pull."""
        self._refresher.start()

    def stop(self) -> None:
        """Stop scheduled refreshes."""
        self._debouncer.cancel()
        self._refresher.stop()

    def _now_ms(self) -> int:
        return to_ms(self._clock())

    def _bounds_for(self, state: DiagnosticsState) -> EffectiveTimeBounds:
        filters = state.filters
        return resolve_time_range(
            filters.time_range_mode,
            filters.custom_start,
            filters.custom_end,
            now_ms=self._now_ms(),
        )

    def _commit(self, state: DiagnosticsState) -> None:
        previous = self._state.filters
        state = derive_effects(state, self._bounds_for(state), now=self._clock())
        filters = state.filters
        if any(getattr(previous, name) != getattr(filters, name) for name in _PAGE_RESET_FIELDS):
            state = state.model_copy(update={"filters": filters.model_copy(update={"page": 1})})
        self._state = state
        self._codec.save(state)
        self._reconcile()

    def _reconcile(self) -> None:
        filtered = self.filtered_tasks()
        filters = self._state.filters
        page = clamp_page(filters.page, total_pages(len(filtered), filters.page_size))
        if page != filters.page:
            self._set_page(page)
        detail = self._selected_detail
        if detail is not None and all(task.task_id != detail.task_id for task in filtered):
            self._selected_detail = None

    def _set_page(self, page: int) -> None:
        filters = self._state.filters.model_copy(update={"page": page})
        self._state = self._state.model_copy(update={"filters": filters})

    def _mutate_history(self, change: Callable[[HistoryStore], bool]) -> bool:
        with self._lock:
            store = HistoryStore(self._state.history)
            changed = change(store)
            if changed:
                self._commit(self._state.model_copy(update={"history": store.items()}))
            return changed

    def _fetch[T](self, what: str, loader: Callable[[], list[T]]) -> list[T]:
        try:
            return loader()
        except Exception as exc:  # noqa: BLE001
            _LOGGER.warning("Failed to load plugin runtime %s: %s", what, exc)
            return []

    def _clipboard_writer(self) -> ClipboardWriter:
        if self._clipboard is None:
            self._clipboard = ClipboardWriter.from_platform()
        return self._clipboard

    def _copy(self, text: str, *, success: str, failure: str) -> ActionResult:
        try:
            self._clipboard_writer().write_text(text)
        except ClipboardError as exc:
            return ActionResult.error(f"{failure}: {exc}")
        return ActionResult.success(success, payload=text)
