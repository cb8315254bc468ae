# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Presentation view over the range history: sort, pin grouping and search."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pypinyin import lazy_pinyin

from plugin_diagnostics.shared.schemas.domain import HistoryView, HistoryViewState
from plugin_diagnostics.shared.timeutil import parse_ms

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from plugin_diagnostics.shared.schemas.domain import CustomRangeHistoryItem, HistoryViewMode

    _Predicate = Callable[[CustomRangeHistoryItem], bool]

__all__ = ["build_history_view", "collation_key", "view_mode_state"]

_VIEW_MODE_FLAGS: dict[str, tuple[bool, bool]] = {
    "default": (False, True),
    "flat": (False, False),
    "only_pinned": (True, True),
}


def view_mode_state(state: HistoryViewState, mode: HistoryViewMode) -> HistoryViewState:
    """Return ``state`` with both pinned flags set for a named view mode."""
    try:
        only_pinned, pinned_first = _VIEW_MODE_FLAGS[mode]
    except KeyError as exc:
        message = f"Unknown history view mode: {mode}"
        raise ValueError(message) from exc
    return state.model_copy(update={"only_pinned": only_pinned, "pinned_first": pinned_first})


def collation_key(text: str) -> tuple[str, str]:
    """Return a sort key ordering Han characters by their pinyin reading."""
    return "".join(lazy_pinyin(text)).casefold(), text


def _label_key(item: CustomRangeHistoryItem) -> tuple[str, str]:
    return collation_key(item.label or f"{item.start}-{item.end}")


def _recent_key(item: CustomRangeHistoryItem) -> int:
    parsed = parse_ms(item.updated_at)
    return parsed if parsed is not None else -1


def _sorted(items: Iterable[CustomRangeHistoryItem], sort_mode: str) -> list[CustomRangeHistoryItem]:
    if sort_mode == "label":
        return sorted(items, key=_label_key)
    return sorted(items, key=_recent_key, reverse=True)


def _order(items: Sequence[CustomRangeHistoryItem], state: HistoryViewState) -> list[CustomRangeHistoryItem]:
    if not state.pinned_first:
        return _sorted(items, state.sort_mode)
    pinned = [item for item in items if item.pinned]
    unpinned = [item for item in items if not item.pinned]
    return [*_sorted(pinned, state.sort_mode), *_sorted(unpinned, state.sort_mode)]


def _predicates(state: HistoryViewState) -> list[_Predicate]:
    predicates: list[_Predicate] = []
    if state.only_pinned:
        predicates.append(lambda item: item.pinned)
    keyword = state.search_keyword.strip().lower()
    if keyword:
        predicates.append(lambda item: keyword in f"{item.label} {item.start} {item.end}".lower())
    return predicates


def _count_text(total: int, pinned: int, matched: int, *, only_pinned: bool) -> str:
    if only_pinned:
        return f"{total} total, {pinned} pinned, {matched} pinned matching"
    return f"{total} total, {matched} matching, {pinned} pinned"


def _empty_hint(state: HistoryViewState, pinned: int) -> str:
    has_keyword = bool(state.search_keyword.strip())
    if state.only_pinned:
        if pinned == 0:
            return "No pinned ranges yet."
        if has_keyword:
            return "No pinned ranges match the keyword."
        return "No pinned ranges match."
    return "No ranges match the keyword." if has_keyword else "No range history yet."


def build_history_view(
    items: Sequence[CustomRangeHistoryItem],
    state: HistoryViewState,
) -> HistoryView:
    """Sort and filter history entries for display.

    When ``pinned_first`` is set, pinned entries form their own group ahead of
    the rest and the comparator applies within each group. Filters then run in
    order: only-pinned first, keyword second.
    """
    visible = _order(items, state)
    for predicate in _predicates(state):
        visible = [item for item in visible if predicate(item)]
    pinned = sum(1 for item in items if item.pinned)
    return HistoryView(
        items=visible,
        total_count=len(items),
        pinned_count=pinned,
        matched_count=len(visible),
        view_mode=state.view_mode,
        count_text=_count_text(len(items), pinned, len(visible), only_pinned=state.only_pinned),
        empty_hint=_empty_hint(state, pinned),
    )
