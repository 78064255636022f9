"""Tabular views of imported samples: display rows, NumPy arrays and CSV export."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Sequence, Tuple

import numpy as np

from ..core.models import Sample, StatisticalSample

TABLE_HEADERS = ("Time", "Value", "Severity", "Status")
CSV_HEADERS = ("Time", "Value", "Minimum", "Maximum", "Severity", "Status")

SampleRow = Tuple[str, str, str, str]


def format_timestamp(timestamp: datetime) -> str:
    """Render ``YYYY-MM-DD HH:MM:SS.mmm`` in UTC."""
    stamp = timestamp.astimezone(timezone.utc)
    return stamp.strftime("%Y-%m-%d %H:%M:%S.") + f"{stamp.microsecond // 1000:03d}"


def format_value(sample: Sample) -> str:
    if isinstance(sample, StatisticalSample):
        return f"{sample.value!r} [{sample.minimum!r} ... {sample.maximum!r}]"
    return repr(sample.value)


def sample_rows(samples: Sequence[Sample]) -> List[SampleRow]:
    """One ``(time, value, severity, status)`` row per sample, in input order."""
    return [
        (
            format_timestamp(sample.timestamp),
            format_value(sample),
            sample.severity.value,
            sample.message,
        )
        for sample in samples
    ]


@dataclass
class SampleArrays:
    timestamps_ns: np.ndarray
    values: np.ndarray
    minimum: np.ndarray
    maximum: np.ndarray

    def __len__(self) -> int:
        return int(self.values.shape[0])


def samples_to_arrays(samples: Sequence[Sample]) -> SampleArrays:
    """
    Convert samples into parallel NumPy arrays.

    Scalar samples use their value as both envelope bounds so plots can draw
    one min/max band for mixed input.
    """
    count = len(samples)
    if count == 0:
        empty = np.empty(0, dtype=np.float64)
        return SampleArrays(np.empty(0, dtype=np.int64), empty, empty.copy(), empty.copy())

    times = np.fromiter((s.timestamp_ns for s in samples), dtype=np.int64, count=count)
    values = np.fromiter((s.value for s in samples), dtype=np.float64, count=count)
    minimum = np.fromiter(
        (s.minimum if isinstance(s, StatisticalSample) else s.value for s in samples),
        dtype=np.float64,
        count=count,
    )
    maximum = np.fromiter(
        (s.maximum if isinstance(s, StatisticalSample) else s.value for s in samples),
        dtype=np.float64,
        count=count,
    )
    return SampleArrays(times, values, minimum, maximum)


def write_samples_csv(path: Path, samples: Sequence[Sample]) -> None:
    """
    Write a header row and one row per sample to a CSV file.

    Directories are created as needed. Scalar rows leave the bounds empty.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(CSV_HEADERS)
        for sample in samples:
            if isinstance(sample, StatisticalSample):
                bounds = [repr(sample.minimum), repr(sample.maximum)]
            else:
                bounds = ["", ""]
            writer.writerow(
                [
                    format_timestamp(sample.timestamp),
                    repr(sample.value),
                    *bounds,
                    sample.severity.value,
                    sample.message,
                ]
            )
