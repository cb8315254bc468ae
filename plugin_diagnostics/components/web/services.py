# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Process-wide diagnostics session used by the web views."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from plugin_diagnostics.config import get_settings
from plugin_diagnostics.core.persistence import PersistenceCodec, store_from_config
from plugin_diagnostics.core.queue_client import MemoryTaskQueueClient
from plugin_diagnostics.core.session import DiagnosticsSession

if TYPE_CHECKING:
    from plugin_diagnostics.config import DiagnosticsConfig
    from plugin_diagnostics.core.queue_client import TaskQueueClient

_LOGGER = logging.getLogger(__name__)
_LOCK = threading.Lock()
_SESSION: list[DiagnosticsSession | None] = [None]


def _client_for(config: DiagnosticsConfig) -> TaskQueueClient:
    snapshot = config.frontend.tasks_snapshot_path if config.frontend is not None else None
    if snapshot is None:
        return MemoryTaskQueueClient()
    _LOGGER.info("Loading task snapshot from %s", snapshot)
    return MemoryTaskQueueClient.from_snapshot_file(snapshot)


def build_session(
    config: DiagnosticsConfig | None = None,
    *,
    client: TaskQueueClient | None = None,
) -> DiagnosticsSession:
    """Create a session from configuration and load its first snapshot."""
    resolved = config or get_settings()
    store = store_from_config(resolved.storage)
    codec = PersistenceCodec(store, resolved.storage.storage_key)
    session = DiagnosticsSession(client or _client_for(resolved), codec, config=resolved.runtime)
    session.reload()
    return session


def get_session() -> DiagnosticsSession:
    """Return the shared session, building it on first use."""
    with _LOCK:
        session = _SESSION[0]
        if session is None:
            session = build_session()
            _SESSION[0] = session
        return session


def set_session(session: DiagnosticsSession | None) -> None:
    """Install a session, or drop the current one with None."""
    with _LOCK:
        previous = _SESSION[0]
        _SESSION[0] = session
    if previous is not None and previous is not session:
        previous.stop()
