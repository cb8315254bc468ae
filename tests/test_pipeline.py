# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from plugin_diagnostics.core.pipeline import clamp_page, filter_tasks, paginate, search_text, total_pages, visible_pages
from plugin_diagnostics.core.timerange import resolve_time_range
from plugin_diagnostics.shared.schemas.domain import EffectiveTimeBounds, FilterState, TaskError
from plugin_diagnostics.shared.timeutil import to_datetime_local, to_ms

if TYPE_CHECKING:
    from collections.abc import Callable

    from plugin_diagnostics.shared.schemas.domain import TaskRecord
    from tests.conftest import FrozenClock

UNBOUNDED = EffectiveTimeBounds()


def _ids(tasks: list[TaskRecord]) -> list[str]:
    return [task.task_id for task in tasks]


def test_last_hour_keeps_recent_tasks(make_task: Callable[..., TaskRecord], clock: FrozenClock) -> None:
    tasks = [make_task("recent", minutes_ago=1), make_task("old", minutes_ago=120)]
    bounds = resolve_time_range("1h", "", "", now_ms=to_ms(clock.now))
    assert _ids(filter_tasks(tasks, FilterState(time_range_mode="1h"), bounds)) == ["recent"]


def test_swapped_custom_range_filters_between_bounds(
    make_task: Callable[..., TaskRecord],
    clock: FrozenClock,
) -> None:
    tasks = [make_task(f"m{minutes}", minutes_ago=minutes) for minutes in (10, 30, 60)]
    start = to_datetime_local(clock.now - timedelta(minutes=20))
    end = to_datetime_local(clock.now - timedelta(minutes=50))
    filters = FilterState(time_range_mode="custom", custom_start=start, custom_end=end)
    bounds = resolve_time_range("custom", start, end, now_ms=to_ms(clock.now))

    assert bounds.is_swapped
    assert _ids(filter_tasks(tasks, filters, bounds)) == ["m30"]


def test_plugin_and_keyword_filters(sample_tasks: list[TaskRecord]) -> None:
    assert _ids(filter_tasks(sample_tasks, FilterState(plugin_filter="beta"), UNBOUNDED)) == ["t-2", "t-4"]
    assert _ids(filter_tasks(sample_tasks, FilterState(search_keyword="  E42 "), UNBOUNDED)) == ["t-2"]
    assert _ids(filter_tasks(sample_tasks, FilterState(search_keyword="disk"), UNBOUNDED)) == ["t-2"]
    assert _ids(filter_tasks(sample_tasks, FilterState(search_keyword="queued"), UNBOUNDED)) == ["t-3"]
    assert _ids(filter_tasks(sample_tasks, FilterState(plugin_filter="alpha", search_keyword="t-2"), UNBOUNDED)) == []


def test_search_text_uses_state_label(make_task: Callable[..., TaskRecord]) -> None:
    task = make_task("T-9", plugin_id="Gamma", state="timed_out", error=TaskError(message="Slow"))
    assert search_text(task) == "t-9 gamma sync timed out  slow"


def test_unparseable_start_is_dropped_only_when_time_bounded(make_task: Callable[..., TaskRecord]) -> None:
    broken = make_task("broken").model_copy(update={"started_at": "not-a-date"})
    bounded = EffectiveTimeBounds(effective_start_ms=0)
    assert _ids(filter_tasks([broken], FilterState(), UNBOUNDED)) == ["broken"]
    assert filter_tasks([broken], FilterState(time_range_mode="7d"), bounded) == []


def test_bounds_are_inclusive(make_task: Callable[..., TaskRecord], clock: FrozenClock) -> None:
    task = make_task("edge", minutes_ago=5)
    started = to_ms(clock.now - timedelta(minutes=5))
    exact = EffectiveTimeBounds(effective_start_ms=started, effective_end_ms=started)
    assert _ids(filter_tasks([task], FilterState(), exact)) == ["edge"]


def test_paginate_slices_and_clamps(make_task: Callable[..., TaskRecord]) -> None:
    tasks = [make_task(f"t-{index}") for index in range(23)]

    third = paginate(tasks, 3, 10)
    assert _ids(third.items) == ["t-20", "t-21", "t-22"]
    assert (third.total, third.total_pages, third.range_start, third.range_end) == (23, 3, 21, 23)
    assert third.visible_pages == [2, 3]

    clamped = paginate(tasks, 99, 10)
    assert clamped.page == 3

    first = paginate(tasks, 0, 20)
    assert first.page == 1
    assert first.visible_pages == [1, 2]


def test_empty_list_has_one_page() -> None:
    page = paginate([], 1, 10)
    assert page.total_pages == 1
    assert (page.range_start, page.range_end) == (0, 0)
    assert page.visible_pages == [1]


def test_page_helpers() -> None:
    assert total_pages(0, 10) == 1
    assert total_pages(21, 10) == 3
    assert clamp_page(-4, 3) == 1
    assert clamp_page(5, 3) == 3
    assert visible_pages(5, 9) == [4, 5, 6]
