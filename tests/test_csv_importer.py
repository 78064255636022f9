from __future__ import annotations

import io
from datetime import datetime, timedelta, timezone

import pytest

from trendimport.config.number_format import NumberFormat
from trendimport.config.runtime import ImportConfig
from trendimport.core.models import NO_ALARM, AlarmSeverity, ScalarSample, StatisticalSample
from trendimport.dataio.csv_importer import (
    CsvSampleImporter,
    LineKind,
    StreamReadError,
    classify_line,
    import_samples,
    parse_number,
    parse_timestamp,
)

US = NumberFormat(",", ".")
EU = NumberFormat(".", ",")


def _import(text: str, fmt: NumberFormat = US):
    diagnostics = []
    samples = import_samples(io.StringIO(text), fmt, diagnostics=diagnostics.append)
    return samples, diagnostics


def test_simple_line_yields_scalar_sample() -> None:
    samples, diagnostics = _import("2020-01-02 10:00:00.250  3.5\n")

    assert diagnostics == []
    assert len(samples) == 1
    sample = samples[0]
    assert isinstance(sample, ScalarSample)
    assert sample.timestamp == datetime(2020, 1, 2, 10, 0, 0, 250000, tzinfo=timezone.utc)
    assert sample.value == 3.5
    assert sample.alarm == NO_ALARM
    assert sample.severity is AlarmSeverity.NONE


def test_statistical_line_uses_offsets_for_bounds() -> None:
    samples, _ = _import("2020-01-02 10:00:00.000\t10.0\t2.0\t3.0\n")

    sample = samples[0]
    assert isinstance(sample, StatisticalSample)
    assert sample.value == 10.0
    assert sample.minimum == 8.0
    assert sample.maximum == 13.0
    assert sample.count == 1
    assert sample.stddev == 0.0
    assert sample.alarm == NO_ALARM


def test_statistical_shape_takes_priority_over_simple() -> None:
    samples, _ = _import("2020-01-02 10:00:00.000 1.0 0.5 0.25 trailing note\n")

    assert len(samples) == 1
    assert isinstance(samples[0], StatisticalSample)
    assert samples[0].minimum == 0.5
    assert samples[0].maximum == 1.25


def test_trailing_text_after_simple_value_is_ignored() -> None:
    samples, diagnostics = _import("2020-01-02 10:00:00.000, 7 units: volts\n")

    assert diagnostics == []
    assert isinstance(samples[0], ScalarSample)
    assert samples[0].value == 7.0


def test_blank_and_comment_lines_are_silent() -> None:
    samples, diagnostics = _import("\n   \n# header comment\n  # indented comment\n")

    assert samples == []
    assert diagnostics == []


def test_unrecognized_line_reports_diagnostic_and_continues() -> None:
    text = "\n".join(
        [
            "Time, Value",
            "2020-01-01 00:00:00.000 abc",
            "2020-01-01 00:00:01.000 2.0",
            "",
        ]
    )
    samples, diagnostics = _import(text)

    assert [s.value for s in samples] == [2.0]
    assert [d.line for d in diagnostics] == ["Time, Value", "2020-01-01 00:00:00.000 abc"]
    assert [d.line_number for d in diagnostics] == [1, 2]


def test_unconvertible_number_skips_line() -> None:
    # "e" passes the token filter but is not a float
    samples, diagnostics = _import(
        "2020-01-01 00:00:00.000 e\n2020-01-01 00:00:02.000 4\n"
    )

    assert [s.value for s in samples] == [4.0]
    assert len(diagnostics) == 1
    assert diagnostics[0].line_number == 1


def test_impossible_date_skips_line() -> None:
    samples, diagnostics = _import(
        "2020-02-30 00:00:00.000 1\n2020-02-29 00:00:00.000 2\n"
    )

    assert [s.value for s in samples] == [2.0]
    assert len(diagnostics) == 1


def test_slash_and_dash_dates_are_equivalent() -> None:
    samples, _ = _import("2020/01/02 10:00:00.0 1.0\n2020-01-02 10:00:00.0 1.0\n")

    assert samples[0].timestamp == samples[1].timestamp


def test_sub_millisecond_digits_are_dropped() -> None:
    samples, _ = _import(
        "2020-01-02 10:00:00.123456789 1\n2020-01-02 10:00:00.123999999 1\n"
    )

    assert samples[0].timestamp == samples[1].timestamp
    assert samples[0].timestamp.microsecond == 123000


def test_locale_separators_apply_to_whole_line() -> None:
    samples, _ = _import("2020-01-02 10:00:00.000 1.234,5\n", EU)

    assert samples[0].value == 1234.5


def test_output_preserves_input_order() -> None:
    lines = [
        "2020-01-01 00:00:05.000 5",
        "2020-01-01 00:00:01.000 1 0 0",
        "junk",
        "2020-01-01 00:00:03.000 3",
    ]
    samples, _ = _import("\n".join(lines))

    assert [s.value for s in samples] == [5.0, 1.0, 3.0]
    assert [type(s) for s in samples] == [ScalarSample, StatisticalSample, ScalarSample]


def test_classify_line_kinds() -> None:
    assert classify_line("  ")[0] is LineKind.BLANK_OR_COMMENT
    assert classify_line("#2020-01-01 00:00:00.000 1")[0] is LineKind.BLANK_OR_COMMENT
    assert classify_line("2020-01-01 00:00:00.000 1")[0] is LineKind.SIMPLE
    assert classify_line("2020-01-01 00:00:00.000 1,2,3")[0] is LineKind.STATISTICAL
    assert classify_line("2020-01-01T00:00:00.000 1")[0] is LineKind.UNRECOGNIZED
    assert classify_line("2020-01-01 00:00:00 1")[0] is LineKind.UNRECOGNIZED


def test_parse_timestamp_interprets_wall_clock_in_zone() -> None:
    plus_two = timezone(timedelta(hours=2))
    stamp = parse_timestamp("2020-01-02 10:00:00.", plus_two)

    assert stamp == datetime(2020, 1, 2, 8, 0, tzinfo=timezone.utc)
    assert stamp.tzinfo is timezone.utc


def test_parse_number_separator_conventions() -> None:
    assert parse_number("1,234.5", US) == 1234.5
    assert parse_number("1.234,5", EU) == 1234.5
    assert parse_number("-1.5e3", US) == -1500.0


@pytest.mark.parametrize("token", ["", "1.2.3", "+-1", "e", ","])
def test_parse_number_rejects_invalid_tokens(token: str) -> None:
    with pytest.raises(ValueError):
        parse_number(token, US)


def test_parse_number_non_finite_is_opt_in() -> None:
    with pytest.raises(ValueError):
        parse_number("1e999", US)
    assert parse_number("1e999", US, accept_non_finite=True) == float("inf")


def test_stream_failure_discards_everything() -> None:
    def _lines():
        yield "2020-01-01 00:00:00.000 1\n"
        raise OSError("device unplugged")

    with pytest.raises(StreamReadError) as excinfo:
        import_samples(_lines(), US)
    assert isinstance(excinfo.value.__cause__, OSError)


def test_closed_stream_is_fatal() -> None:
    stream = io.StringIO("2020-01-01 00:00:00.000 1\n")
    stream.close()

    with pytest.raises(StreamReadError):
        import_samples(stream, US)


def test_importer_reads_binary_stream_with_config() -> None:
    config = ImportConfig(grouping_separator=".", decimal_separator=",", encoding="utf-8")
    importer = CsvSampleImporter(config, diagnostics=lambda d: None)
    data = "# Wert in °C\n2021/06/01 12:00:00.5 21,5\n".encode("utf-8")

    samples = importer.import_samples(io.BytesIO(data))

    assert importer.type == "csv"
    assert len(samples) == 1
    assert samples[0].value == 21.5
    assert samples[0].timestamp == datetime(2021, 6, 1, 12, 0, 0, 500000, tzinfo=timezone.utc)


def test_undecodable_bytes_are_fatal() -> None:
    config = ImportConfig(grouping_separator=",", decimal_separator=".", encoding="ascii")
    importer = CsvSampleImporter(config)

    with pytest.raises(StreamReadError):
        importer.import_samples(io.BytesIO(b"2020-01-01 00:00:00.000 1 \xff\n"))


def test_default_sink_logs_ignored_lines(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("INFO", logger="trendimport.dataio.csv_importer"):
        import_samples(io.StringIO("not a sample\n# quiet\n"), US)

    messages = [r.getMessage() for r in caplog.records]
    assert len(messages) == 1
    assert "not a sample" in messages[0]


def test_importer_is_reusable() -> None:
    importer = CsvSampleImporter(ImportConfig(grouping_separator=",", decimal_separator="."))
    first = importer.import_samples(io.StringIO("2020-01-01 00:00:00.000 1\n"))
    second = importer.import_samples(io.StringIO("2020-01-01 00:00:00.000 2\n"))

    assert [s.value for s in first] == [1.0]
    assert [s.value for s in second] == [2.0]


def test_overflowing_bounds_skip_line() -> None:
    samples, diagnostics = _import(
        "2020-01-01 00:00:00.000 1e308 -1e308 -1e308\n2020-01-01 00:00:01.000 5 1 1\n"
    )

    assert [s.value for s in samples] == [5.0]
    assert len(diagnostics) == 1
    assert diagnostics[0].line_number == 1


def test_overflowing_bounds_kept_when_non_finite_allowed() -> None:
    samples = import_samples(
        io.StringIO("2020-01-01 00:00:00.000 1e308 -1e308 -1e308\n"),
        US,
        diagnostics=lambda d: None,
        accept_non_finite=True,
    )

    assert samples[0].minimum == float("inf")
    assert samples[0].maximum == 0.0


def test_timestamp_outside_utc_range_skips_line() -> None:
    minus_five = timezone(timedelta(hours=-5))
    diagnostics = []

    samples = import_samples(
        io.StringIO("9999-12-31 23:00:00.000 1\n2020-01-01 00:00:00.000 2\n"),
        US,
        tz=minus_five,
        diagnostics=diagnostics.append,
    )

    assert [s.value for s in samples] == [2.0]
    assert samples[0].timestamp == datetime(2020, 1, 1, 5, 0, tzinfo=timezone.utc)
    assert [d.line_number for d in diagnostics] == [1]


def test_parse_timestamp_out_of_range_is_value_error() -> None:
    with pytest.raises(ValueError):
        parse_timestamp("0001-01-01 00:00:00.000", timezone(timedelta(hours=3)))
