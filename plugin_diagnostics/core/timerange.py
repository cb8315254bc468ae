# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Resolve the selected time range mode into numeric bounds."""

from __future__ import annotations

from plugin_diagnostics.shared.schemas.domain import EffectiveTimeBounds
from plugin_diagnostics.shared.timeutil import parse_ms

__all__ = ["FIXED_WINDOWS_MS", "range_hint", "resolve_time_range"]

FIXED_WINDOWS_MS: dict[str, int] = {
    "1h": 60 * 60 * 1000,
    "24h": 24 * 60 * 60 * 1000,
    "7d": 7 * 24 * 60 * 60 * 1000,
}

_UNBOUNDED = EffectiveTimeBounds()


def resolve_time_range(
    mode: str,
    custom_start: str,
    custom_end: str,
    *,
    now_ms: int,
) -> EffectiveTimeBounds:
    """Return the effective bounds for a range mode.

    Fixed windows are open-ended towards ``now``. Custom ranges use whichever
    side parses; an inverted pair is swapped so start never exceeds end.
    Unparseable input is treated as absent.
    """
    if mode == "all":
        return _UNBOUNDED
    window = FIXED_WINDOWS_MS.get(mode)
    if window is not None:
        return EffectiveTimeBounds(effective_start_ms=now_ms - window)
    if mode != "custom":
        return _UNBOUNDED

    start_ms = parse_ms(custom_start)
    end_ms = parse_ms(custom_end)
    swapped = False
    if start_ms is not None and end_ms is not None and start_ms > end_ms:
        start_ms, end_ms = end_ms, start_ms
        swapped = True
    return EffectiveTimeBounds(
        effective_start_ms=start_ms,
        effective_end_ms=end_ms,
        is_swapped=swapped,
        is_empty=start_ms is None and end_ms is None,
    )


def range_hint(mode: str, bounds: EffectiveTimeBounds) -> str:
    """Describe how a custom range is being applied."""
    if mode != "custom":
        return ""
    if bounds.is_empty:
        return "No start or end time set; showing all tasks."
    if bounds.is_swapped:
        return "Start time was after end time; the range was reordered automatically."
    if bounds.effective_start_ms is not None and bounds.effective_end_ms is not None:
        return "Filtering between start and end time."
    if bounds.effective_start_ms is not None:
        return "Filtering tasks started after the start time."
    return "Filtering tasks started before the end time."
