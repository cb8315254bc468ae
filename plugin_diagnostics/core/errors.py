# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Exceptions raised by the diagnostics core."""

from __future__ import annotations


class PluginDiagnosticsError(Exception):
    """Base class for recoverable diagnostics failures."""


class ImportPayloadError(PluginDiagnosticsError):
    """An imported history payload could not be used."""


class ClipboardError(PluginDiagnosticsError):
    """No clipboard strategy managed to copy the text."""


__all__ = ["ClipboardError", "ImportPayloadError", "PluginDiagnosticsError"]
