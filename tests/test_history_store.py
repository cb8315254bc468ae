# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import pytest

from plugin_diagnostics.core.history.store import (
    HistoryStore,
    build_history_id,
    coerce_history,
    coerce_history_item,
)
from plugin_diagnostics.shared.schemas.domain import MAX_HISTORY, CustomRangeHistoryItem


def _at(minute: int) -> str:
    return f"2026-10-18T10:{minute:02d}:00.000Z"


def _item(day: int, minute: int, **extra: object) -> CustomRangeHistoryItem:
    start = f"2026-10-{day:02d}T08:00"
    end = f"2026-10-{day:02d}T09:00"
    return CustomRangeHistoryItem(
        id=build_history_id(start, end),
        start=start,
        end=end,
        updated_at=_at(minute),
        **extra,
    )


def test_history_id_is_derived_from_bounds() -> None:
    assert build_history_id("2026-10-18T08:00", "2026-10-18T09:00") == "2026-10-18T08:00|2026-10-18T09:00"


def test_upsert_preserves_label_and_pin() -> None:
    store = HistoryStore()
    first = store.upsert("2026-10-18T08:00", "2026-10-18T09:00", updated_at=_at(1))
    store.upsert("2026-10-17T08:00", "2026-10-17T09:00", updated_at=_at(2))
    assert store.rename(first.id, "  Nightly  ")
    assert store.toggle_pinned(first.id)

    again = store.upsert("2026-10-18T08:00", "2026-10-18T09:00", updated_at=_at(3))

    assert len(store) == 2
    assert store.items()[0] == again
    assert again.label == "Nightly"
    assert again.pinned is True
    assert again.updated_at == _at(3)


def test_sixth_insert_evicts_least_recently_used() -> None:
    store = HistoryStore()
    for day in range(1, 7):
        store.upsert(f"2026-10-{day:02d}T08:00", f"2026-10-{day:02d}T09:00", updated_at=_at(day))

    items = store.items()
    assert len(items) == MAX_HISTORY
    assert items[0].start == "2026-10-06T08:00"
    assert build_history_id("2026-10-01T08:00", "2026-10-01T09:00") not in store
    assert len({item.id for item in items}) == MAX_HISTORY


def test_pinned_entries_are_not_protected_from_eviction() -> None:
    store = HistoryStore([_item(1, 1, pinned=True)])
    for day in range(2, 7):
        store.upsert(f"2026-10-{day:02d}T08:00", f"2026-10-{day:02d}T09:00", updated_at=_at(day))
    assert all(not item.pinned for item in store)
    assert len(store) == MAX_HISTORY


def test_remove_clear_and_missing_ids() -> None:
    store = HistoryStore([_item(1, 1), _item(2, 2)])
    assert not store.remove("missing")
    assert not store.toggle_pinned("missing")
    assert not store.rename("missing", "x")
    assert store.remove(_item(1, 1).id)
    assert [item.id for item in store] == [_item(2, 2).id]
    store.clear()
    assert len(store) == 0


def test_rename_with_empty_label_clears_it() -> None:
    store = HistoryStore([_item(1, 1, label="old")])
    store.rename(_item(1, 1).id, "   ")
    assert store.items()[0].label == ""


def test_replace_all_sorts_dedupes_and_caps() -> None:
    store = HistoryStore()
    stale = _item(1, 1, label="stale")
    fresh = _item(1, 9, label="fresh")
    store.replace_all([stale, _item(2, 2), _item(3, 3), fresh, _item(4, 4), _item(5, 5), _item(6, 6)])

    items = store.items()
    assert len(items) == MAX_HISTORY
    assert items[0].label == "fresh"
    assert [item.updated_at for item in items] == sorted((item.updated_at for item in items), reverse=True)


def test_coerce_history_item_validates_fields() -> None:
    raw = {
        "start": "2026-10-18T08:00",
        "end": "2026-10-18T09:00",
        "updatedAt": "2026-10-18T10:00:00Z",
        "label": "  Deploy  ",
        "pinned": "yes",
    }
    item = coerce_history_item(raw)
    assert item is not None
    assert item.id == "2026-10-18T08:00|2026-10-18T09:00"
    assert item.label == "Deploy"
    assert item.pinned is False
    assert item.updated_at == "2026-10-18T10:00:00.000Z"

    assert coerce_history_item({**raw, "start": "bad"}) is None
    assert coerce_history_item({**raw, "updatedAt": None}) is None
    assert coerce_history_item(["not", "a", "mapping"]) is None


@pytest.mark.parametrize(
    ("pinned", "expected"),
    [(True, True), (False, False), (1, False), ("true", False), (None, False)],
)
def test_coerce_history_item_pins_only_json_booleans(pinned: object, *, expected: bool) -> None:
    raw = {
        "start": "2026-10-18T08:00",
        "end": "2026-10-18T09:00",
        "updatedAt": "2026-10-18T10:00:00Z",
        "pinned": pinned,
    }
    item = coerce_history_item(raw)
    assert item is not None
    assert item.pinned is expected


def test_coerce_history_keeps_newest_duplicate() -> None:
    base = {"start": "2026-10-18T08:00", "end": "2026-10-18T09:00"}
    items = coerce_history(
        [
            {**base, "updatedAt": "2026-10-18T10:00:00Z", "label": "older"},
            {**base, "updatedAt": "2026-10-18T11:00:00Z", "label": "newer"},
            "junk",
        ],
    )
    assert [item.label for item in items] == ["newer"]
    assert coerce_history({"not": "a list"}) == []
