# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""SQLite-backed state store implementation."""

from __future__ import annotations

import os
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, MetaData, String, Table, Text, create_engine, delete, event, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from .base import BaseStateStore

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

_SQLITE_BUSY_TIMEOUT_MS = 30_000


def _configure_sqlite(dbapi_connection: SQLiteConnection, _connection_record: object) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute(f"PRAGMA busy_timeout={_SQLITE_BUSY_TIMEOUT_MS}")
    cursor.close()


class SQLiteStateStore(BaseStateStore):
    """SQLite-backed store with one row per storage key."""

    def __init__(self, path: str | Path = "plugin_diagnostics.db") -> None:
        """Initialize the store with a database path."""
        self._path = Path(path).expanduser().resolve()
        self._ensure_writable_path()
        self._engine: Engine = create_engine(
            f"sqlite:///{self._path}",
            future=True,
            connect_args={"timeout": _SQLITE_BUSY_TIMEOUT_MS / 1000},
        )
        event.listen(self._engine, "connect", _configure_sqlite)
        self._metadata = MetaData()
        self._blobs = Table(
            "state_blobs",
            self._metadata,
            Column("key", String, primary_key=True),
            Column("value", Text, nullable=False),
            Column("updated_at", DateTime(timezone=True), nullable=False),
        )

    @property
    def path(self) -> Path:
        """Return the resolved database path."""
        return self._path

    def initialize(self) -> None:
        """Create the blob table."""
        self._metadata.create_all(self._engine)

    def get(self, key: str) -> str | None:
        """Return the stored blob."""
        with self._engine.begin() as conn:
            value = conn.execute(select(self._blobs.c.value).where(self._blobs.c.key == key)).scalar_one_or_none()
        return str(value) if value is not None else None

    def set(self, key: str, value: str) -> None:
        """Insert or replace the blob for a key."""
        now = datetime.now(UTC)
        stmt = sqlite_insert(self._blobs).values(key=key, value=value, updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=[self._blobs.c.key],
            set_={"value": value, "updated_at": now},
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)

    def delete(self, key: str) -> None:
        """Remove the blob for a key."""
        with self._engine.begin() as conn:
            conn.execute(delete(self._blobs).where(self._blobs.c.key == key))

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        self._engine.dispose()

    def _ensure_writable_path(self) -> None:
        parent = self._path.parent
        parent.mkdir(parents=True, exist_ok=True)
        if not os.access(parent, os.W_OK):
            message = f"State database directory is not writable: {parent}"
            raise PermissionError(message)
