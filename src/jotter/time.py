# SPDX-License-Identifier: MIT

import datetime

import pendulum


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def python_to_pendulum_utc(python_value: datetime.datetime) -> pendulum.DateTime:
    # naive values are taken as UTC, which is what the store writes
    if python_value.tzinfo is None:
        return pendulum.instance(python_value, tz="UTC")
    return pendulum.instance(python_value).in_tz("UTC")


def datetime_to_iso_str(datetime: pendulum.DateTime) -> str:
    return datetime.isoformat()


def datetime_from_str(datetime: str) -> pendulum.DateTime:
    parsed = pendulum.parse(datetime)
    if not isinstance(parsed, pendulum.DateTime):
        raise ValueError(f"not a date-time: {datetime!r}")
    return parsed.in_tz("UTC")


def datetime_to_display_local_datetime_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format("YYYY-MM-DD ddd HH:mm")
