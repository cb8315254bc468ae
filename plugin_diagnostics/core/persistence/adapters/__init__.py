# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Key/value backends holding the serialized dashboard state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import BaseStateStore
from .memory import MemoryStateStore
from .sqlite import SQLiteStateStore

if TYPE_CHECKING:
    from plugin_diagnostics.config import StorageConfigMemory, StorageConfigSqlite

__all__ = ["BaseStateStore", "MemoryStateStore", "SQLiteStateStore", "store_from_config"]


def store_from_config(config: StorageConfigSqlite | StorageConfigMemory) -> BaseStateStore:
    """Build and initialize the store selected by the storage config."""
    db_path = getattr(config, "db_path", None)
    store: BaseStateStore = MemoryStateStore() if db_path is None else SQLiteStateStore(db_path)
    store.initialize()
    return store
