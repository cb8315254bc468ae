# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Bounded most-recently-used store of custom time ranges."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from plugin_diagnostics.shared.schemas.domain import MAX_HISTORY, CustomRangeHistoryItem
from plugin_diagnostics.shared.timeutil import parse_ms, valid_datetime_local, valid_iso_timestamp

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    _ChangeFactory = Callable[[CustomRangeHistoryItem], dict[str, object]]

__all__ = [
    "HistoryStore",
    "build_history_id",
    "coerce_history",
    "coerce_history_item",
    "normalize_history",
]


def build_history_id(start: str, end: str) -> str:
    """Return the identity of a range; equal bounds mean the same entry."""
    return f"{start}|{end}"


def _recency_key(item: CustomRangeHistoryItem) -> int:
    parsed = parse_ms(item.updated_at)
    return parsed if parsed is not None else -1


def normalize_history(
    items: Iterable[CustomRangeHistoryItem],
    *,
    capacity: int = MAX_HISTORY,
) -> list[CustomRangeHistoryItem]:
    """Sort by recency, keep the newest entry per id and cap the length."""
    ordered = sorted(items, key=_recency_key, reverse=True)
    seen: set[str] = set()
    unique: list[CustomRangeHistoryItem] = []
    for item in ordered:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique[:capacity]


def coerce_history_item(raw: object) -> CustomRangeHistoryItem | None:
    """Validate one untrusted history entry, returning ``None`` if unusable."""
    if not isinstance(raw, Mapping):
        return None
    start = valid_datetime_local(raw.get("start"))
    end = valid_datetime_local(raw.get("end"))
    updated_at = valid_iso_timestamp(raw.get("updatedAt"))
    if not start or not end or not updated_at:
        return None
    label = raw.get("label")
    # Only a JSON boolean pins; 1 or "yes" read as unpinned.
    pinned = raw.get("pinned")
    return CustomRangeHistoryItem(
        id=build_history_id(start, end),
        start=start,
        end=end,
        updated_at=updated_at,
        label=label.strip() if isinstance(label, str) else "",
        pinned=pinned if isinstance(pinned, bool) else False,
    )


def coerce_history(value: object) -> list[CustomRangeHistoryItem]:
    """Validate an untrusted history list, silently dropping bad entries."""
    if not isinstance(value, list):
        return []
    items = (coerce_history_item(raw) for raw in value)
    return normalize_history(item for item in items if item is not None)


class HistoryStore:
    """Ordered list of at most ``capacity`` ranges, most recent first."""

    def __init__(
        self,
        items: Iterable[CustomRangeHistoryItem] = (),
        *,
        capacity: int = MAX_HISTORY,
    ) -> None:
        """Create a store seeded with existing entries."""
        self._capacity = capacity
        self._items: list[CustomRangeHistoryItem] = normalize_history(items, capacity=capacity)

    def __len__(self) -> int:
        """Return the number of stored ranges."""
        return len(self._items)

    def __iter__(self) -> Iterator[CustomRangeHistoryItem]:
        """Iterate entries in recency order."""
        return iter(self._items)

    def __contains__(self, history_id: object) -> bool:
        """Return whether an entry with the id exists."""
        return any(item.id == history_id for item in self._items)

    def items(self) -> tuple[CustomRangeHistoryItem, ...]:
        """Return a snapshot of the entries in recency order."""
        return tuple(self._items)

    def get(self, history_id: str) -> CustomRangeHistoryItem | None:
        """Return the entry with the id, if present."""
        for item in self._items:
            if item.id == history_id:
                return item
        return None

    def upsert(self, start: str, end: str, *, updated_at: str) -> CustomRangeHistoryItem:
        """Record a range use and move it to the front.

        An existing entry keeps its label and pinned flag; only ``updated_at``
        and its position change.
        """
        history_id = build_history_id(start, end)
        existing = self.get(history_id)
        if existing is not None:
            item = existing.model_copy(update={"updated_at": updated_at})
        else:
            item = CustomRangeHistoryItem(id=history_id, start=start, end=end, updated_at=updated_at)
        self._items = [item, *(other for other in self._items if other.id != history_id)]
        self.trim()
        return item

    def trim(self) -> None:
        """Evict the least recently used entries beyond capacity."""
        ordered = sorted(self._items, key=_recency_key, reverse=True)
        self._items = ordered[: self._capacity]

    def remove(self, history_id: str) -> bool:
        """Delete an entry; return whether anything was removed."""
        remaining = [item for item in self._items if item.id != history_id]
        removed = len(remaining) != len(self._items)
        self._items = remaining
        return removed

    def clear(self) -> None:
        """Drop every entry."""
        self._items = []

    def toggle_pinned(self, history_id: str) -> bool:
        """Flip the pinned flag of an entry; return whether it was found."""
        return self._replace(history_id, lambda item: {"pinned": not item.pinned})

    def rename(self, history_id: str, label: str) -> bool:
        """Set an entry label; an empty label clears it."""
        normalized = label.strip()
        return self._replace(history_id, lambda _item: {"label": normalized})

    def replace_all(self, items: Iterable[CustomRangeHistoryItem]) -> None:
        """Replace the whole content, deduplicated, sorted and capped."""
        self._items = normalize_history(items, capacity=self._capacity)

    def _replace(self, history_id: str, changes: _ChangeFactory) -> bool:
        found = False
        updated: list[CustomRangeHistoryItem] = []
        for item in self._items:
            if item.id == history_id:
                found = True
                updated.append(item.model_copy(update=changes(item)))
            else:
                updated.append(item)
        self._items = updated
        return found
