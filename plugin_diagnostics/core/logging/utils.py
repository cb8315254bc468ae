# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Log file naming and level parsing."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

LOG_FILE_PREFIX = "plugin_diagnostics"
LOG_FORMAT = "[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s"

_COMPONENT_RE = re.compile(r"[^a-zA-Z0-9._-]+")


def sanitize_component(component: str) -> str:
    """Return a filesystem-safe component identifier."""
    cleaned = _COMPONENT_RE.sub("_", component).strip("._-")
    return cleaned or "app"


def log_file_path(log_dir: Path, component: str | None) -> Path:
    """Return the log path for a component, or the shared file without one."""
    name = f"{LOG_FILE_PREFIX}-{sanitize_component(component)}" if component else LOG_FILE_PREFIX
    return log_dir / f"{name}.log"


def resolve_log_level(value: str | int | None) -> int:
    """Map a level name or number to logging's numeric constant, defaulting to INFO."""
    if isinstance(value, int):
        return value
    normalized = (value or "").strip().upper()
    if normalized.isdigit():
        return int(normalized)
    resolved = logging.getLevelNamesMapping().get(normalized)
    return resolved if resolved is not None else logging.INFO


__all__ = ["LOG_FILE_PREFIX", "LOG_FORMAT", "log_file_path", "resolve_log_level", "sanitize_component"]
