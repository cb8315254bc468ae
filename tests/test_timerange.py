# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import pytest

from plugin_diagnostics.core.timerange import FIXED_WINDOWS_MS, range_hint, resolve_time_range
from plugin_diagnostics.shared.schemas.domain import EffectiveTimeBounds
from plugin_diagnostics.shared.timeutil import parse_ms

NOW_MS = 1_792_324_800_000


def test_all_mode_is_unbounded() -> None:
    bounds = resolve_time_range("all", "2026-10-18T09:00", "2026-10-18T10:00", now_ms=NOW_MS)
    assert bounds == EffectiveTimeBounds()
    assert not bounds.active


@pytest.mark.parametrize("mode", ["1h", "24h", "7d"])
def test_fixed_windows_are_open_ended(mode: str) -> None:
    bounds = resolve_time_range(mode, "", "", now_ms=NOW_MS)
    assert bounds.effective_start_ms == NOW_MS - FIXED_WINDOWS_MS[mode]
    assert bounds.effective_end_ms is None
    assert not bounds.is_swapped
    assert not bounds.is_empty


def test_fixed_window_durations() -> None:
    assert FIXED_WINDOWS_MS == {"1h": 3_600_000, "24h": 86_400_000, "7d": 604_800_000}


def test_inverted_custom_range_is_swapped() -> None:
    bounds = resolve_time_range("custom", "2026-10-18T11:40", "2026-10-18T11:10", now_ms=NOW_MS)
    assert bounds.is_swapped
    assert bounds.effective_start_ms == parse_ms("2026-10-18T11:10")
    assert bounds.effective_end_ms == parse_ms("2026-10-18T11:40")
    assert bounds.effective_start_ms is not None
    assert bounds.effective_end_ms is not None
    assert bounds.effective_start_ms <= bounds.effective_end_ms


def test_ordered_custom_range_is_kept() -> None:
    bounds = resolve_time_range("custom", "2026-10-18T11:10", "2026-10-18T11:40", now_ms=NOW_MS)
    assert not bounds.is_swapped
    assert bounds.effective_start_ms == parse_ms("2026-10-18T11:10")


def test_one_sided_custom_range() -> None:
    since = resolve_time_range("custom", "2026-10-18T11:10", "", now_ms=NOW_MS)
    assert since.effective_start_ms == parse_ms("2026-10-18T11:10")
    assert since.effective_end_ms is None
    assert not since.is_empty

    until = resolve_time_range("custom", "garbage", "2026-10-18T11:10", now_ms=NOW_MS)
    assert until.effective_start_ms is None
    assert until.effective_end_ms == parse_ms("2026-10-18T11:10")


def test_custom_range_without_parseable_bounds_is_empty() -> None:
    bounds = resolve_time_range("custom", "", "nope", now_ms=NOW_MS)
    assert bounds.is_empty
    assert not bounds.active


def test_range_hint_texts() -> None:
    def hint(start: str, end: str) -> str:
        return range_hint("custom", resolve_time_range("custom", start, end, now_ms=NOW_MS))

    assert "showing all tasks" in hint("", "")
    assert "reordered" in hint("2026-10-18T11:40", "2026-10-18T11:10")
    assert hint("2026-10-18T11:10", "2026-10-18T11:40") == "Filtering between start and end time."
    assert hint("2026-10-18T11:10", "") == "Filtering tasks started after the start time."
    assert hint("", "2026-10-18T11:10") == "Filtering tasks started before the end time."
    assert range_hint("1h", resolve_time_range("1h", "", "", now_ms=NOW_MS)) == ""
