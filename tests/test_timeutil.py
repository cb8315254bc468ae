# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from datetime import UTC, datetime

from plugin_diagnostics.shared import timeutil


def test_datetime_local_is_read_as_local_time() -> None:
    parsed = timeutil.parse_datetime("2026-10-18T09:30")
    assert parsed == datetime(2026, 10, 18, 9, 30, tzinfo=UTC)


def test_date_only_is_read_as_utc_midnight() -> None:
    assert timeutil.parse_datetime("2026-10-18") == datetime(2026, 10, 18, tzinfo=UTC)


def test_unparseable_values_yield_none() -> None:
    assert timeutil.parse_datetime("not a date") is None
    assert timeutil.parse_datetime("") is None
    assert timeutil.parse_datetime(42) is None
    assert timeutil.parse_ms(None) is None


def test_iso_timestamps_carry_millisecond_precision() -> None:
    moment = datetime(2026, 10, 18, 7, 30, 0, 123_456, tzinfo=UTC)
    assert timeutil.to_iso(moment) == "2026-10-18T07:30:00.123Z"
    assert timeutil.valid_iso_timestamp("2026-10-18T07:30:00Z") == "2026-10-18T07:30:00.000Z"
    assert timeutil.valid_iso_timestamp("yesterday") == ""


def test_datetime_local_round_trip_through_epoch_ms() -> None:
    millis = timeutil.parse_ms("2026-10-18T09:30")
    assert millis is not None
    assert timeutil.to_datetime_local(millis) == "2026-10-18T09:30"
    assert timeutil.from_ms(millis) == datetime(2026, 10, 18, 9, 30, tzinfo=UTC)


def test_valid_datetime_local_keeps_the_original_text() -> None:
    assert timeutil.valid_datetime_local("2026-10-18T09:30") == "2026-10-18T09:30"
    assert timeutil.valid_datetime_local("2026-13-01T00:00") == ""
    assert timeutil.valid_datetime_local(None) == ""
