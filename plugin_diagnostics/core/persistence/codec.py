# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Serialize the dashboard filter state to a single JSON blob and back."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from plugin_diagnostics.config import DEFAULT_STORAGE_KEY
from plugin_diagnostics.core.history.store import coerce_history
from plugin_diagnostics.shared.schemas.domain import (
    DEFAULT_PAGE_SIZE,
    HISTORY_SORT_MODES,
    PAGE_SIZE_OPTIONS,
    TASK_FILTERS,
    TIME_RANGE_MODES,
    DiagnosticsState,
    FilterState,
    HistoryViewState,
)
from plugin_diagnostics.shared.timeutil import valid_datetime_local, valid_iso_timestamp

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from plugin_diagnostics.core.persistence.adapters.base import BaseStateStore

__all__ = ["DecodeResult", "PersistenceCodec", "decode_state", "encode_state"]

_LOGGER = logging.getLogger(__name__)

_DATETIME_LOCAL_FIELDS = (
    ("customStart", "custom_start"),
    ("customEnd", "custom_end"),
    ("lastAppliedCustomStart", "last_applied_custom_start"),
    ("lastAppliedCustomEnd", "last_applied_custom_end"),
)


@dataclass(slots=True)
class DecodeResult[T]:
    """Decoded value plus whether (and why) defaults were substituted."""

    value: T
    used_defaults: bool = False
    diagnostics: list[str] = field(default_factory=list)


def encode_state(state: DiagnosticsState) -> str:
    """Serialize the full state into the persisted JSON layout."""
    filters = state.filters
    view = state.history_view
    payload = {
        "taskFilter": filters.task_filter,
        "pluginFilter": filters.plugin_filter,
        "searchKeyword": filters.search_keyword,
        "pageSize": filters.page_size,
        "timeRangeMode": filters.time_range_mode,
        "customStart": filters.custom_start,
        "customEnd": filters.custom_end,
        "lastAppliedCustomStart": filters.last_applied_custom_start,
        "lastAppliedCustomEnd": filters.last_applied_custom_end,
        "lastAppliedCustomUpdatedAt": filters.last_applied_custom_updated_at,
        "customRangeHistory": [item.model_dump(by_alias=True) for item in state.history],
        "historySearchKeyword": view.search_keyword,
        "historySortMode": view.sort_mode,
        "historyOnlyPinned": view.only_pinned,
        "historyPinnedFirst": view.pinned_first,
    }
    return json.dumps(payload, ensure_ascii=False)


def _one_of(allowed: tuple[str, ...]) -> Callable[[object], str | None]:
    return lambda value: value if isinstance(value, str) and value in allowed else None


def _string(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _boolean(value: object) -> bool | None:
    return value if isinstance(value, bool) else None


def _page_size(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value in PAGE_SIZE_OPTIONS else None


class _FieldReader:
    def __init__(self, payload: Mapping[str, object]) -> None:
        self._payload = payload
        self.diagnostics: list[str] = []

    def read[T](self, key: str, validator: Callable[[object], T | None], default: T) -> T:
        if key not in self._payload:
            return default
        value = validator(self._payload[key])
        if value is None:
            self.diagnostics.append(f"{key} is invalid; using default")
            return default
        return value

    def read_time(self, key: str, validator: Callable[[object], str]) -> str:
        raw = self._payload.get(key)
        value = validator(raw)
        if raw not in (None, "") and not value:
            self.diagnostics.append(f"{key} is not a valid datetime; cleared")
        return value


def decode_state(raw: str | None) -> DecodeResult[DiagnosticsState]:
    """Decode a persisted blob, falling back field by field to defaults.

    Invalid JSON or a non-object top level yields the full default state; the
    decoder never raises.
    """
    if raw is None or not raw.strip():
        return DecodeResult(DiagnosticsState(), used_defaults=True)
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        return DecodeResult(DiagnosticsState(), used_defaults=True, diagnostics=[f"invalid JSON: {exc}"])
    if not isinstance(parsed, dict):
        return DecodeResult(DiagnosticsState(), used_defaults=True, diagnostics=["top level is not an object"])

    reader = _FieldReader(parsed)
    time_fields = {name: reader.read_time(key, valid_datetime_local) for key, name in _DATETIME_LOCAL_FIELDS}
    filters = FilterState(
        task_filter=reader.read("taskFilter", _one_of(TASK_FILTERS), "all"),
        plugin_filter=reader.read("pluginFilter", _string, "all"),
        search_keyword=reader.read("searchKeyword", _string, ""),
        page_size=reader.read("pageSize", _page_size, DEFAULT_PAGE_SIZE),
        time_range_mode=reader.read("timeRangeMode", _one_of(TIME_RANGE_MODES), "all"),
        last_applied_custom_updated_at=reader.read_time("lastAppliedCustomUpdatedAt", valid_iso_timestamp),
        **time_fields,
    )
    history_view = HistoryViewState(
        search_keyword=reader.read("historySearchKeyword", _string, ""),
        sort_mode=reader.read("historySortMode", _one_of(HISTORY_SORT_MODES), "recent"),
        only_pinned=reader.read("historyOnlyPinned", _boolean, False),  # noqa: FBT003
        pinned_first=reader.read("historyPinnedFirst", _boolean, True),  # noqa: FBT003
    )
    state = DiagnosticsState(
        filters=filters,
        history=tuple(coerce_history(parsed.get("customRangeHistory"))),
        history_view=history_view,
    )
    return DecodeResult(state, used_defaults=bool(reader.diagnostics), diagnostics=reader.diagnostics)


class PersistenceCodec:
    """Write-through persistence of the dashboard state under one key."""

    def __init__(self, store: BaseStateStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        """Bind the codec to a store and storage key."""
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        """Return the storage key."""
        return self._key

    def load(self) -> DecodeResult[DiagnosticsState]:
        """Read and decode the persisted state, logging one warning on problems."""
        try:
            raw = self._store.get(self._key)
        except (SQLAlchemyError, OSError) as exc:
            _LOGGER.warning("Failed to read persisted diagnostics filters: %s", exc)
            return DecodeResult(DiagnosticsState(), used_defaults=True, diagnostics=[str(exc)])
        result = decode_state(raw)
        if result.diagnostics:
            _LOGGER.warning("Failed to read persisted diagnostics filters: %s", "; ".join(result.diagnostics))
        return result

    def save(self, state: DiagnosticsState) -> bool:
        """Serialize and store the full state; failures are logged, not raised."""
        try:
            self._store.set(self._key, encode_state(state))
        except (SQLAlchemyError, OSError, TypeError, ValueError) as exc:
            _LOGGER.warning("Failed to persist diagnostics filters: %s", exc)
            return False
        return True
