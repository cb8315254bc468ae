# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Datetime parsing and formatting shared by the filter and history code.

Two string forms travel through the dashboard state:

* *datetime-local* values (``2026-10-18T09:30``) as typed into a browser
  ``<input type="datetime-local">``; they carry no offset and are read as
  local wall-clock time.
* ISO timestamps (``2026-10-18T07:30:00.000Z``) used for ``updatedAt`` fields;
  they are always rendered in UTC with millisecond precision.

Epoch milliseconds are the common currency for comparisons.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
DATETIME_LOCAL_FORMAT = "%Y-%m-%dT%H:%M"

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ONE_MS = timedelta(milliseconds=1)


def parse_datetime(value: object) -> datetime | None:
    """Parse an ISO-8601 or datetime-local string into an aware datetime.

    Date-only strings are read as UTC midnight, other strings without an offset
    as local time. Anything else, including non-strings, yields ``None``.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        if _DATE_ONLY_RE.match(text):
            return parsed.replace(tzinfo=UTC)
        return parsed.astimezone()
    return parsed


def to_ms(value: datetime) -> int:
    """Return epoch milliseconds for an aware datetime."""
    if value.tzinfo is None:
        value = value.astimezone()
    return (value - EPOCH) // _ONE_MS


def parse_ms(value: object) -> int | None:
    """Parse a string straight to epoch milliseconds."""
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    return to_ms(parsed)


def from_ms(value: int) -> datetime:
    """Return an aware UTC datetime for epoch milliseconds."""
    return EPOCH + timedelta(milliseconds=value)


def to_datetime_local(value: datetime | int) -> str:
    """Format a moment as a minute-precision local datetime string."""
    moment = from_ms(value) if isinstance(value, int) else value
    return moment.astimezone().strftime(DATETIME_LOCAL_FORMAT)


def to_iso(value: datetime) -> str:
    """Format a moment as a UTC ISO timestamp with millisecond precision."""
    moment = value.astimezone(UTC)
    millis = moment.microsecond // 1000
    return f"{moment.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}Z"


def utc_now() -> datetime:
    """Return the current aware UTC time."""
    return datetime.now(UTC)


def valid_datetime_local(value: object) -> str:
    """Return the value unchanged when it parses, otherwise an empty string."""
    if not isinstance(value, str) or not value:
        return ""
    return value if parse_datetime(value) is not None else ""


def valid_iso_timestamp(value: object) -> str:
    """Return the value normalized to UTC ISO form, or an empty string."""
    parsed = parse_datetime(value)
    if parsed is None:
        return ""
    return to_iso(parsed)


__all__ = [
    "DATETIME_LOCAL_FORMAT",
    "EPOCH",
    "from_ms",
    "parse_datetime",
    "parse_ms",
    "to_datetime_local",
    "to_iso",
    "to_ms",
    "utc_now",
    "valid_datetime_local",
    "valid_iso_timestamp",
]
