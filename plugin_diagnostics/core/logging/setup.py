# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Attach a rotating file handler to the root logger."""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from plugin_diagnostics.config import DiagnosticsConfig, LoggingConfigFile, get_settings
from plugin_diagnostics.core.logging.utils import LOG_FORMAT, log_file_path, resolve_log_level

_BACKUP_COUNT = 7


def _find_handler(logger: logging.Logger, log_file: Path) -> TimedRotatingFileHandler | None:
    target = str(log_file.resolve())
    return next(
        (
            handler
            for handler in logger.handlers
            if isinstance(handler, TimedRotatingFileHandler) and handler.baseFilename == target
        ),
        None,
    )


def configure_process_logging(
    config: DiagnosticsConfig | LoggingConfigFile | None = None,
    *,
    component: str | None = None,
) -> Path:
    """Install the file handler for ``component`` once and return its path.

    Calling this again with the same component only refreshes the level.
    """
    resolved = config or get_settings()
    log_config = resolved.logging if isinstance(resolved, DiagnosticsConfig) else resolved
    log_dir = Path(log_config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_file_path(log_dir, component)
    level = resolve_log_level(log_config.log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    handler = _find_handler(root_logger, log_file)
    if handler is None:
        handler = TimedRotatingFileHandler(
            log_file,
            when="h",
            interval=int(log_config.log_rotation_hours),
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)
    handler.setLevel(level)
    return log_file


__all__ = ["configure_process_logging"]
