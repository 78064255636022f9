"""Sample model shared by the importers and the sample table."""

from .models import (
    NO_ALARM,
    Alarm,
    AlarmSeverity,
    Sample,
    ScalarSample,
    StatisticalSample,
)

__all__ = [
    "NO_ALARM",
    "Alarm",
    "AlarmSeverity",
    "Sample",
    "ScalarSample",
    "StatisticalSample",
]
