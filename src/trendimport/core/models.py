"""Shared dataclasses for imported time-series samples."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Union

NS_PER_SECOND = 1_000_000_000
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class AlarmSeverity(Enum):
    NONE = "NONE"
    MINOR = "MINOR"
    MAJOR = "MAJOR"
    INVALID = "INVALID"
    UNDEFINED = "UNDEFINED"


@dataclass(frozen=True)
class Alarm:
    """Severity plus status message attached to every sample."""

    severity: AlarmSeverity = AlarmSeverity.NONE
    message: str = "None"

    @classmethod
    def none(cls) -> "Alarm":
        """Return the neutral "no alarm" status."""
        return NO_ALARM


NO_ALARM = Alarm()


def _to_ns(timestamp: datetime) -> int:
    delta = timestamp - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * NS_PER_SECOND + delta.microseconds * 1_000


@dataclass(frozen=True)
class ScalarSample:
    timestamp: datetime
    value: float
    alarm: Alarm = NO_ALARM

    @property
    def timestamp_ns(self) -> int:
        return _to_ns(self.timestamp)

    @property
    def severity(self) -> AlarmSeverity:
        return self.alarm.severity

    @property
    def message(self) -> str:
        return self.alarm.message


@dataclass(frozen=True)
class StatisticalSample:
    """
    Value with a min/max envelope, e.g. an averaged archive bin.

    Imported records always describe a single sample (``count == 1``) with no
    standard deviation.
    """

    timestamp: datetime
    value: float
    minimum: float
    maximum: float
    stddev: float = 0.0
    count: int = 1
    alarm: Alarm = NO_ALARM

    @classmethod
    def from_record(
        cls,
        timestamp: datetime,
        value: float,
        negative: float,
        positive: float,
    ) -> "StatisticalSample":
        """
        Build a sample from a ``value, negative, positive`` record.

        The two trailing fields are offsets from ``value``, not absolute bounds.
        """
        return cls(
            timestamp=timestamp,
            value=value,
            minimum=value - negative,
            maximum=value + positive,
        )

    @property
    def timestamp_ns(self) -> int:
        return _to_ns(self.timestamp)

    @property
    def severity(self) -> AlarmSeverity:
        return self.alarm.severity

    @property
    def message(self) -> str:
        return self.alarm.message


Sample = Union[ScalarSample, StatisticalSample]
