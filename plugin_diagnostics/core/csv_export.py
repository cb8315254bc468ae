# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""CSV rendering of the filtered task list."""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING

from plugin_diagnostics.shared.schemas.domain import state_label

if TYPE_CHECKING:
    from collections.abc import Iterable

    from plugin_diagnostics.shared.schemas.domain import TaskRecord

__all__ = ["CSV_HEADERS", "export_csv", "export_filename"]

CSV_HEADERS: tuple[str, ...] = (
    "taskId",
    "pluginId",
    "operation",
    "state",
    "attempt",
    "maxRetries",
    "startedAt",
    "endedAt",
    "durationMs",
    "errorCode",
    "errorMessage",
    "retryable",
)


def _cell(value: str | int | bool | None) -> str:  # noqa: FBT001
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _row(task: TaskRecord) -> list[str]:
    error = task.error
    return [
        _cell(task.task_id),
        _cell(task.plugin_id),
        _cell(task.operation),
        _cell(state_label(task.state)),
        _cell(task.attempt),
        _cell(task.max_retries),
        _cell(task.started_at),
        _cell(task.ended_at),
        _cell(task.duration_ms),
        _cell(error.code if error is not None else None),
        _cell(error.message if error is not None else None),
        _cell(error.retryable if error is not None else None),
    ]


def export_csv(tasks: Iterable[TaskRecord]) -> str:
    """Render tasks as CSV text.

    The header row is bare; every data field is double-quoted with embedded
    quotes doubled. Lines are joined with ``\\n`` and the result is stripped.
    """
    buffer = io.StringIO()
    buffer.write(",".join(CSV_HEADERS))
    buffer.write("\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(_row(task) for task in tasks)
    return buffer.getvalue().strip()


def export_filename(now_ms: int) -> str:
    """Return the download file name for an export taken at ``now_ms``."""
    return f"plugin-diagnostics-{now_ms}.csv"
