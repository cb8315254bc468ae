# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Persistence of the dashboard filter state."""

from .adapters import BaseStateStore, MemoryStateStore, SQLiteStateStore, store_from_config
from .codec import DecodeResult, PersistenceCodec, decode_state, encode_state

__all__ = [
    "BaseStateStore",
    "DecodeResult",
    "MemoryStateStore",
    "PersistenceCodec",
    "SQLiteStateStore",
    "decode_state",
    "encode_state",
    "store_from_config",
]
