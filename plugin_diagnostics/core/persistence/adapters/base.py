# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Abstract state store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseStateStore(ABC):
    """Subclass to provide a custom storage backend."""

    @abstractmethod
    def initialize(self) -> None:
        """Initialize backend schema and storage."""
        ...

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the raw blob stored under a key."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a raw blob under a key, replacing any previous value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key if present."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release backend resources."""
        ...
