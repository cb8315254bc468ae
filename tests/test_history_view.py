# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import pytest

from plugin_diagnostics.core.history.store import build_history_id
from plugin_diagnostics.core.history.view import build_history_view, collation_key, view_mode_state
from plugin_diagnostics.shared.schemas.domain import CustomRangeHistoryItem, HistoryViewState


def _item(start: str, end: str, minute: int, *, label: str = "", pinned: bool = False) -> CustomRangeHistoryItem:
    return CustomRangeHistoryItem(
        id=build_history_id(start, end),
        start=start,
        end=end,
        updated_at=f"2026-10-18T10:{minute:02d}:00.000Z",
        label=label,
        pinned=pinned,
    )


BETA = _item("2026-10-18T08:00", "2026-10-18T09:00", 1, label="beta")
ALPHA = _item("2026-10-18T06:00", "2026-10-18T07:00", 3, label="alpha", pinned=True)
UNNAMED = _item("2026-10-17T08:00", "2026-10-17T09:00", 2)
ITEMS = (BETA, ALPHA, UNNAMED)


def _ids(state: HistoryViewState) -> list[str]:
    return [item.id for item in build_history_view(ITEMS, state).items]


def test_pinned_first_groups_pinned_entries() -> None:
    assert _ids(HistoryViewState()) == [ALPHA.id, UNNAMED.id, BETA.id]


def test_flat_recent_sort() -> None:
    assert _ids(HistoryViewState(pinned_first=False)) == [ALPHA.id, UNNAMED.id, BETA.id]


def test_label_sort_falls_back_to_range_text() -> None:
    state = HistoryViewState(sort_mode="label", pinned_first=False)
    assert _ids(state) == [UNNAMED.id, ALPHA.id, BETA.id]


def test_label_sort_within_pinned_group() -> None:
    pinned_beta = BETA.model_copy(update={"pinned": True})
    view = build_history_view((pinned_beta, ALPHA, UNNAMED), HistoryViewState(sort_mode="label"))
    assert [item.id for item in view.items] == [ALPHA.id, BETA.id, UNNAMED.id]


def test_chinese_labels_collate_by_pinyin() -> None:
    labels = ["中文", "apple", "北京"]
    assert sorted(labels, key=collation_key) == ["apple", "北京", "中文"]


def test_counters_with_only_pinned_and_keyword() -> None:
    view = build_history_view(ITEMS, HistoryViewState(only_pinned=True, search_keyword="BETA"))
    assert view.total_count == 3
    assert view.pinned_count == 1
    assert view.matched_count == 0
    assert view.items == []
    assert view.view_mode == "only_pinned"
    assert view.empty_hint == "No pinned ranges match the keyword."
    assert view.count_text == "3 total, 1 pinned, 0 pinned matching"


def test_keyword_matches_label_and_bounds() -> None:
    assert _ids(HistoryViewState(search_keyword=" alp ")) == [ALPHA.id]
    assert _ids(HistoryViewState(search_keyword="2026-10-17")) == [UNNAMED.id]
    view = build_history_view(ITEMS, HistoryViewState(search_keyword="zzz"))
    assert view.matched_count == 0
    assert view.empty_hint == "No ranges match the keyword."
    assert view.count_text == "3 total, 0 matching, 1 pinned"


def test_empty_hints() -> None:
    assert build_history_view((), HistoryViewState()).empty_hint == "No range history yet."
    assert build_history_view((BETA,), HistoryViewState(only_pinned=True)).empty_hint == "No pinned ranges yet."


@pytest.mark.parametrize(
    ("mode", "only_pinned", "pinned_first"),
    [("default", False, True), ("flat", False, False), ("only_pinned", True, True)],
)
def test_view_modes_set_both_flags(mode: str, *, only_pinned: bool, pinned_first: bool) -> None:
    state = view_mode_state(HistoryViewState(only_pinned=not only_pinned, pinned_first=not pinned_first), mode)
    assert (state.only_pinned, state.pinned_first) == (only_pinned, pinned_first)
    assert state.view_mode == mode


def test_unknown_view_mode_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown history view mode"):
        view_mode_state(HistoryViewState(), "grid")
