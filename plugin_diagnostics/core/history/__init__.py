# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Custom time range history: storage and presentation."""

from .store import HistoryStore, build_history_id, coerce_history, coerce_history_item, normalize_history
from .view import build_history_view, collation_key, view_mode_state

__all__ = [
    "HistoryStore",
    "build_history_id",
    "build_history_view",
    "coerce_history",
    "coerce_history_item",
    "collation_key",
    "normalize_history",
    "view_mode_state",
]
