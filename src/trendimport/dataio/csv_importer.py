"""
Importer for comma, space or tab separated ``time, value`` text files.

Each line is either::

    YYYY-MM-DD HH:MM:SS.SSS   value   [ignored...]

or, for statistical data::

    YYYY-MM-DD HH:MM:SS.SSS   value   negative   positive   [ignored...]

where the date may also use ``/`` and the fraction may carry any number of
digits. Blank lines and ``#`` comments are skipped; lines that cannot be
parsed are reported through a diagnostic sink and skipped.
"""

from __future__ import annotations

import locale
import logging
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import IO, Callable, List, Optional, Tuple, Union

from ..config.number_format import NumberFormat
from ..config.runtime import ImportConfig
from ..core.models import Sample, ScalarSample, StatisticalSample
from ..tools.debug import time_block

logger = logging.getLogger(__name__)

_TIME = r"([0-9]{4}[-/][0-9]{2}[-/][0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}\.[0-9]*)"
_NUMBER = r"([-+0-9.,eE]+)"
_SEP = r"[ \t,]+"

SIMPLE_PATTERN = re.compile(r"\s*" + _TIME + _SEP + _NUMBER + r"\s*.*", re.DOTALL)
STATISTICS_PATTERN = re.compile(
    r"\s*" + _TIME + _SEP + _NUMBER + _SEP + _NUMBER + _SEP + _NUMBER + r"\s*.*",
    re.DOTALL,
)

# "YYYY-MM-DD HH:MM:SS.mmm": parsing stops at milliseconds
TIMESTAMP_MAX_LENGTH = 23

LineSource = Union[IO[str], IO[bytes], Iterable[Union[str, bytes]]]


class LineKind(Enum):
    BLANK_OR_COMMENT = "blank_or_comment"
    STATISTICAL = "statistical"
    SIMPLE = "simple"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Diagnostic:
    """A skipped line: 1-based line number, trimmed text and why it was skipped."""

    line_number: int
    line: str
    reason: str


DiagnosticSink = Callable[[Diagnostic], None]


class StreamReadError(OSError):
    """The input stream itself failed; the whole import is abandoned."""


def log_diagnostic(diagnostic: Diagnostic) -> None:
    logger.info("Ignored input: %s (%s)", diagnostic.line, diagnostic.reason)


def classify_line(line: str) -> Tuple[LineKind, Optional[re.Match]]:
    """
    Decide which record shape ``line`` has.

    The statistical shape is tried first: a simple line would otherwise
    swallow the two trailing numbers as ignored text.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return LineKind.BLANK_OR_COMMENT, None
    match = STATISTICS_PATTERN.fullmatch(line)
    if match is not None:
        return LineKind.STATISTICAL, match
    match = SIMPLE_PATTERN.fullmatch(line)
    if match is not None:
        return LineKind.SIMPLE, match
    return LineKind.UNRECOGNIZED, None


def parse_timestamp(text: str, tz: tzinfo = timezone.utc) -> datetime:
    """
    Convert ``YYYY-MM-DD HH:MM:SS.fff`` (``-`` or ``/`` dates) into a UTC datetime.

    Digits beyond milliseconds are dropped. ``tz`` is the zone the wall-clock
    text is expressed in. Raises ``ValueError`` for impossible dates.
    """
    text = text.strip().replace("/", "-")
    if len(text) > TIMESTAMP_MAX_LENGTH:
        text = text[:TIMESTAMP_MAX_LENGTH]
    base, _, fraction = text.partition(".")
    if fraction and not (fraction.isascii() and fraction.isdigit()):
        raise ValueError(f"Invalid fraction in timestamp {text!r}")
    stamp = datetime.strptime(base, "%Y-%m-%d %H:%M:%S")
    millis = int(fraction.ljust(3, "0")) if fraction else 0
    stamp = stamp.replace(microsecond=millis * 1000, tzinfo=tz)
    try:
        return stamp.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError(f"Timestamp {text!r} is out of range in UTC") from exc


def parse_number(
    text: str,
    number_format: NumberFormat,
    *,
    accept_non_finite: bool = False,
) -> float:
    """
    Convert a numeric token written with the given separators into a float.

    Raises ``ValueError`` when the normalized text is not a float literal, or
    is not finite and ``accept_non_finite`` is off.
    """
    normalized = number_format.normalize(text)
    if not normalized or "_" in normalized:
        raise ValueError(f"Not a number: {text!r}")
    value = float(normalized)
    if not accept_non_finite and not math.isfinite(value):
        raise ValueError(f"Number out of range: {text!r}")
    return value


def _decode_lines(stream: LineSource, encoding: Optional[str]) -> Iterable[str]:
    try:
        lines = iter(stream)
    except (OSError, ValueError) as exc:
        raise StreamReadError(f"Cannot read import stream: {exc}") from exc
    codec = None
    while True:
        try:
            raw = next(lines)
            if isinstance(raw, (bytes, bytearray)):
                if codec is None:
                    codec = encoding or locale.getpreferredencoding(False)
                raw = bytes(raw).decode(codec)
        except StopIteration:
            return
        except (OSError, ValueError, LookupError) as exc:
            # ValueError covers decode errors and reads from closed files
            raise StreamReadError(f"Cannot read import stream: {exc}") from exc
        yield raw


class CsvSampleImporter:
    """
    Sample importer for ``csv`` style text.

    One instance may run any number of imports; each call snapshots the
    configured separators and timezone once and keeps no state afterwards.
    """

    type = "csv"

    def __init__(
        self,
        config: ImportConfig | None = None,
        *,
        diagnostics: DiagnosticSink | None = None,
    ) -> None:
        self._config = config or ImportConfig()
        self._diagnostics = diagnostics or log_diagnostic

    @property
    def config(self) -> ImportConfig:
        return self._config

    def import_samples(self, stream: LineSource) -> List[Sample]:
        """Read ``stream`` to the end and return all recognized samples in order."""
        return import_samples(
            stream,
            self._config.number_format(),
            tz=self._config.tzinfo(),
            diagnostics=self._diagnostics,
            accept_non_finite=self._config.accept_non_finite,
            encoding=self._config.encoding,
        )


def _build_sample(
    kind: LineKind,
    match: re.Match,
    number_format: NumberFormat,
    tz: tzinfo,
    accept_non_finite: bool,
) -> Sample:
    stamp = parse_timestamp(match.group(1), tz)
    numbers = [
        parse_number(token, number_format, accept_non_finite=accept_non_finite)
        for token in match.groups()[1:]
    ]
    if kind is LineKind.STATISTICAL:
        value, negative, positive = numbers
        sample = StatisticalSample.from_record(stamp, value, negative, positive)
        if not accept_non_finite and not (
            math.isfinite(sample.minimum) and math.isfinite(sample.maximum)
        ):
            raise ValueError("Bounds out of range")
        return sample
    return ScalarSample(timestamp=stamp, value=numbers[0])


def import_samples(
    stream: LineSource,
    number_format: NumberFormat | None = None,
    *,
    tz: tzinfo = timezone.utc,
    diagnostics: DiagnosticSink | None = None,
    accept_non_finite: bool = False,
    encoding: Optional[str] = None,
) -> List[Sample]:
    """
    Parse every line of ``stream`` into samples.

    ``number_format`` defaults to the separators of the active locale, read
    once here. Bad lines are reported to ``diagnostics`` and skipped. A
    failing stream raises :class:`StreamReadError` and nothing is returned.
    """
    fmt = number_format or NumberFormat.from_locale()
    sink = diagnostics or log_diagnostic
    samples: List[Sample] = []
    line_number = 0

    with time_block("csv import"):
        for raw_line in _decode_lines(stream, encoding):
            line_number += 1
            line = raw_line.strip()
            kind, match = classify_line(line)
            if kind is LineKind.BLANK_OR_COMMENT:
                continue
            if kind is LineKind.UNRECOGNIZED:
                sink(Diagnostic(line_number, line, "unrecognized format"))
                continue
            try:
                sample = _build_sample(kind, match, fmt, tz, accept_non_finite)
            except ValueError as exc:
                sink(Diagnostic(line_number, line, str(exc)))
                continue
            samples.append(sample)

    logger.debug("Imported %d samples from %d lines", len(samples), line_number)
    return samples


__all__ = [
    "CsvSampleImporter",
    "Diagnostic",
    "DiagnosticSink",
    "LineKind",
    "StreamReadError",
    "classify_line",
    "import_samples",
    "parse_number",
    "parse_timestamp",
]
