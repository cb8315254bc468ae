# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Plugin task-queue diagnostics: filters, range history and exports."""

from __future__ import annotations

from plugin_diagnostics.config import DiagnosticsConfig
from plugin_diagnostics.core.session import DiagnosticsSession

__all__ = ["DiagnosticsConfig", "DiagnosticsSession"]
