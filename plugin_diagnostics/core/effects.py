# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Derived state that follows from the resolved time range."""

from __future__ import annotations

from typing import TYPE_CHECKING

from plugin_diagnostics.core.history.store import HistoryStore
from plugin_diagnostics.shared.timeutil import to_datetime_local, to_iso

if TYPE_CHECKING:
    from datetime import datetime

    from plugin_diagnostics.shared.schemas.domain import DiagnosticsState, EffectiveTimeBounds

__all__ = ["derive_effects"]


def derive_effects(state: DiagnosticsState, bounds: EffectiveTimeBounds, *, now: datetime) -> DiagnosticsState:
    """Sync the last-applied range and the history with what is being viewed.

    A complete custom range that differs from the recorded last-applied range
    is normalized to minute precision, stored as last applied and upserted
    into the history. Any other state is returned unchanged.
    """
    filters = state.filters
    if filters.time_range_mode != "custom":
        return state
    if bounds.effective_start_ms is None or bounds.effective_end_ms is None:
        return state
    start = to_datetime_local(bounds.effective_start_ms)
    end = to_datetime_local(bounds.effective_end_ms)
    if start == filters.last_applied_custom_start and end == filters.last_applied_custom_end:
        return state

    updated_at = to_iso(now)
    store = HistoryStore(state.history)
    store.upsert(start, end, updated_at=updated_at)
    next_filters = filters.model_copy(
        update={
            "last_applied_custom_start": start,
            "last_applied_custom_end": end,
            "last_applied_custom_updated_at": updated_at,
        },
    )
    return state.model_copy(update={"filters": next_filters, "history": store.items()})
