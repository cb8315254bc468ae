# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Client-side task filtering and pagination."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from plugin_diagnostics.shared.schemas.domain import ALL, TaskPage, state_label
from plugin_diagnostics.shared.timeutil import parse_ms

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from plugin_diagnostics.shared.schemas.domain import EffectiveTimeBounds, FilterState, TaskRecord

    _Predicate = Callable[[TaskRecord], bool]

__all__ = ["clamp_page", "filter_tasks", "paginate", "search_text", "total_pages", "visible_pages"]


def search_text(task: TaskRecord) -> str:
    """Return the lowercase text a keyword search matches against."""
    error = task.error
    parts = [
        task.task_id,
        task.plugin_id,
        task.operation,
        state_label(task.state),
        (error.code or "") if error is not None else "",
        error.message if error is not None else "",
    ]
    return " ".join(parts).lower()


def _plugin_predicate(plugin_filter: str) -> _Predicate:
    return lambda task: task.plugin_id == plugin_filter


def _time_predicate(bounds: EffectiveTimeBounds) -> _Predicate:
    start_ms = bounds.effective_start_ms
    end_ms = bounds.effective_end_ms

    def _within(task: TaskRecord) -> bool:
        started_ms = parse_ms(task.started_at)
        if started_ms is None:
            return False
        if start_ms is not None and started_ms < start_ms:
            return False
        return not (end_ms is not None and started_ms > end_ms)

    return _within


def _keyword_predicate(keyword: str) -> _Predicate:
    return lambda task: keyword in search_text(task)


def _predicates(filters: FilterState, bounds: EffectiveTimeBounds) -> list[_Predicate]:
    predicates: list[_Predicate] = []
    if filters.plugin_filter != ALL:
        predicates.append(_plugin_predicate(filters.plugin_filter))
    if bounds.active:
        predicates.append(_time_predicate(bounds))
    keyword = filters.search_keyword.strip().lower()
    if keyword:
        predicates.append(_keyword_predicate(keyword))
    return predicates


def filter_tasks(
    tasks: Iterable[TaskRecord],
    filters: FilterState,
    bounds: EffectiveTimeBounds,
) -> list[TaskRecord]:
    """Apply plugin, time window and keyword filters, preserving order."""
    predicates = _predicates(filters, bounds)
    return [task for task in tasks if all(predicate(task) for predicate in predicates)]


def total_pages(count: int, page_size: int) -> int:
    """Return the page count; an empty list still has one page."""
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, pages: int) -> int:
    """Clamp a 1-based page number into ``[1, pages]``."""
    return min(max(page, 1), pages)


def visible_pages(page: int, pages: int) -> list[int]:
    """Return the page buttons around the current page."""
    return list(range(max(1, page - 1), min(pages, page + 1) + 1))


def paginate(tasks: Sequence[TaskRecord], page: int, page_size: int) -> TaskPage:
    """Slice one page out of the filtered tasks."""
    pages = total_pages(len(tasks), page_size)
    current = clamp_page(page, pages)
    offset = (current - 1) * page_size
    items = list(tasks[offset : offset + page_size])
    return TaskPage(
        items=items,
        total=len(tasks),
        page=current,
        page_size=page_size,
        total_pages=pages,
        range_start=offset + 1 if tasks else 0,
        range_end=min(current * page_size, len(tasks)),
        visible_pages=visible_pages(current, pages),
    )
