# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from typing import TYPE_CHECKING

from plugin_diagnostics.config import StorageConfigMemory, StorageConfigSqlite
from plugin_diagnostics.core.persistence import (
    MemoryStateStore,
    PersistenceCodec,
    SQLiteStateStore,
    store_from_config,
)
from plugin_diagnostics.shared.schemas.domain import DiagnosticsState, FilterState

if TYPE_CHECKING:
    from pathlib import Path


def test_set_get_overwrite_delete(tmp_path: Path) -> None:
    store = SQLiteStateStore(tmp_path / "state.db")
    store.initialize()
    try:
        assert store.get("k") is None
        store.set("k", "one")
        store.set("k", "two")
        assert store.get("k") == "two"
        store.delete("k")
        assert store.get("k") is None
    finally:
        store.close()


def test_state_survives_reopen(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "state.db"
    state = DiagnosticsState(filters=FilterState(task_filter="failed", search_keyword="中文"))

    first = SQLiteStateStore(path)
    first.initialize()
    assert PersistenceCodec(first).save(state)
    first.close()

    second = SQLiteStateStore(path)
    second.initialize()
    try:
        assert PersistenceCodec(second).load().value == state
    finally:
        second.close()


def test_store_from_config(tmp_path: Path) -> None:
    memory = store_from_config(StorageConfigMemory())
    assert isinstance(memory, MemoryStateStore)

    sqlite = store_from_config(StorageConfigSqlite(db_path=tmp_path / "db.sqlite"))
    try:
        assert isinstance(sqlite, SQLiteStateStore)
        assert sqlite.path == (tmp_path / "db.sqlite").resolve()
        sqlite.set("key", "value")
        assert sqlite.get("key") == "value"
    finally:
        sqlite.close()
