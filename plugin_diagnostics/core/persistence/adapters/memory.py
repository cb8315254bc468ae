# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""In-memory state store implementation."""

from __future__ import annotations

from .base import BaseStateStore


class MemoryStateStore(BaseStateStore):
    """In-memory store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Initialize storage, optionally pre-seeded."""
        self._values: dict[str, str] = dict(initial or {})

    def initialize(self) -> None:
        """Nothing to create."""

    def get(self, key: str) -> str | None:
        """Return the stored blob."""
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a blob."""
        self._values[key] = value

    def delete(self, key: str) -> None:
        """Remove a blob."""
        self._values.pop(key, None)

    def close(self) -> None:
        """Nothing to release."""
