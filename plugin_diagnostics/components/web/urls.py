# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Django URL patterns for the diagnostics JSON API."""

from __future__ import annotations

from django.urls import path

from .views import diagnostics

_PREFIX = "api/diagnostics/"

urlpatterns = [
    path(_PREFIX, diagnostics.overview, name="diagnostics"),
    path(f"{_PREFIX}filters/", diagnostics.update_filters, name="diagnostics-filters"),
    path(f"{_PREFIX}ranges/quick/", diagnostics.quick_range, name="diagnostics-range-quick"),
    path(f"{_PREFIX}ranges/last/", diagnostics.last_range, name="diagnostics-range-last"),
    path(f"{_PREFIX}ranges/clear/", diagnostics.clear_range, name="diagnostics-range-clear"),
    path(f"{_PREFIX}reset/", diagnostics.reset, name="diagnostics-reset"),
    path(f"{_PREFIX}history/clear/", diagnostics.history_clear, name="diagnostics-history-clear"),
    path(f"{_PREFIX}history/export/", diagnostics.history_export, name="diagnostics-history-export"),
    path(f"{_PREFIX}history/import/", diagnostics.history_import, name="diagnostics-history-import"),
    path(f"{_PREFIX}history/<str:history_id>/apply/", diagnostics.history_apply, name="diagnostics-history-apply"),
    path(f"{_PREFIX}history/<str:history_id>/pin/", diagnostics.history_pin, name="diagnostics-history-pin"),
    path(f"{_PREFIX}history/<str:history_id>/rename/", diagnostics.history_rename, name="diagnostics-history-rename"),
    path(f"{_PREFIX}history/<str:history_id>/delete/", diagnostics.history_delete, name="diagnostics-history-delete"),
    path(f"{_PREFIX}tasks.csv", diagnostics.tasks_csv, name="diagnostics-tasks-csv"),
    path(f"{_PREFIX}tasks/<str:task_id>/", diagnostics.task_detail, name="diagnostics-task-detail"),
    path(f"{_PREFIX}tasks/<str:task_id>/cancel/", diagnostics.task_cancel, name="diagnostics-task-cancel"),
    path(f"{_PREFIX}refresh/", diagnostics.refresh, name="diagnostics-refresh"),
]
