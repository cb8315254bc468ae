# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Portable JSON export and import of the range history."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING

from plugin_diagnostics.core.errors import ClipboardError, ImportPayloadError
from plugin_diagnostics.core.history.store import coerce_history
from plugin_diagnostics.shared.schemas.domain import ActionResult
from plugin_diagnostics.shared.timeutil import to_iso

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from plugin_diagnostics.core.clipboard import ClipboardWriter
    from plugin_diagnostics.core.history.store import HistoryStore
    from plugin_diagnostics.shared.schemas.domain import CustomRangeHistoryItem

__all__ = ["EXPORT_VERSION", "ImportExportCodec"]

EXPORT_VERSION = 1

_NOTHING_TO_EXPORT = "No range history to export"
_NO_VALID_ITEMS = "JSON contains no valid range history entries"
_EMPTY_INPUT = "No JSON content provided"


class ImportExportCodec:
    """Convert the history to and from the portable envelope."""

    def export_payload(self, items: Sequence[CustomRangeHistoryItem], *, now: datetime) -> dict[str, object]:
        """Return the export envelope as plain data."""
        return {
            "version": EXPORT_VERSION,
            "exportedAt": to_iso(now),
            "customRangeHistory": [item.model_dump(by_alias=True) for item in items],
        }

    def export_json(self, items: Sequence[CustomRangeHistoryItem], *, now: datetime) -> str:
        """Return the export envelope as indented JSON."""
        return json.dumps(self.export_payload(items, now=now), ensure_ascii=False, indent=2)

    def parse(self, raw: str) -> list[CustomRangeHistoryItem]:
        """Parse an import payload into validated, deduplicated entries.

        Accepts a bare list or an object with ``customRangeHistory`` or
        ``history``. Raises :class:`ImportPayloadError` for invalid JSON or
        when no entry survives validation.
        """
        text = raw.strip()
        if not text:
            raise ImportPayloadError(_EMPTY_INPUT)
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            message = f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})"
            raise ImportPayloadError(message) from exc
        candidates: object = parsed
        if isinstance(parsed, Mapping):
            candidates = parsed.get("customRangeHistory")
            if candidates is None:
                candidates = parsed.get("history")
        items = coerce_history(candidates)
        if not items:
            raise ImportPayloadError(_NO_VALID_ITEMS)
        return items

    def export_to_clipboard(
        self,
        items: Sequence[CustomRangeHistoryItem],
        clipboard: ClipboardWriter,
        *,
        now: datetime,
    ) -> ActionResult:
        """Copy the export JSON and report the outcome."""
        if not items:
            return ActionResult.warning(_NOTHING_TO_EXPORT)
        payload = self.export_json(items, now=now)
        try:
            clipboard.write_text(payload)
        except ClipboardError as exc:
            return ActionResult.error(f"Failed to export range history JSON: {exc}")
        return ActionResult.success(
            f"Copied {len(items)} range history entries as JSON",
            count=len(items),
            payload=payload,
        )

    def import_into(self, store: HistoryStore, raw: str) -> ActionResult:
        """Replace the store content with an import, or leave it untouched."""
        if not raw.strip():
            return ActionResult.warning(_EMPTY_INPUT)
        try:
            items = self.parse(raw)
        except ImportPayloadError as exc:
            return ActionResult.error(f"Failed to import range history JSON: {exc}")
        store.replace_all(items)
        return ActionResult.success(f"Imported {len(store)} range history entries", count=len(store))
