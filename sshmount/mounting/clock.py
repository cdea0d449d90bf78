# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import time
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """An object that can tell time."""

    def unixtime(self) -> int:
        """Get the current unixtime."""


class ClockImpl:
    def unixtime(self) -> int:
        return int(time.time())


def unixtime_to_isoformat(ts: int) -> str:
    """Return unixtime as an ISO-8601 UTC string.

    >>> unixtime_to_isoformat(0)
    '1970-01-01T00:00:00Z'
    """
    ds = datetime.fromtimestamp(ts, tz=timezone.utc)
    return ds.strftime("%Y-%m-%dT%H:%M:%SZ")


def isoformat_to_date(s: str) -> str:
    """Return the date portion of a stored creation timestamp, or the input unchanged
    if it cannot be parsed.

    >>> isoformat_to_date('2024-05-01T10:00:00.123Z')
    '2024-05-01'
    >>> isoformat_to_date('yesterday')
    'yesterday'
    """
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return s
