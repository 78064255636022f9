"""
Command line helper that imports a text file and prints the resulting samples.

Usage::

    python -m trendimport.tools.inspect_import data.txt --decimal , --grouping .
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Sequence, TextIO

from ..config.runtime import ImportConfig, load_config
from ..dataio.csv_importer import Diagnostic
from ..dataio.importers import get_importer, importer_types
from ..dataio.sample_table import (
    TABLE_HEADERS,
    SampleRow,
    sample_rows,
    write_samples_csv,
)

logger = logging.getLogger(__name__)


def _print_table(rows: Sequence[SampleRow], out: TextIO) -> None:
    widths = [len(h) for h in TABLE_HEADERS]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]
    fmt = "  ".join(f"{{:<{w}}}" for w in widths)
    print(fmt.format(*TABLE_HEADERS), file=out)
    for row in rows:
        print(fmt.format(*row), file=out)


def _apply_overrides(config: ImportConfig, args: argparse.Namespace) -> ImportConfig:
    if args.grouping is not None:
        config.grouping_separator = args.grouping
    if args.decimal is not None:
        config.decimal_separator = args.decimal
    if args.timezone is not None:
        config.timezone = args.timezone
    if args.encoding is not None:
        config.encoding = args.encoding
    return config.sanitized()


def main(argv: Sequence[str] | None = None, *, out: TextIO | None = None) -> int:
    out = out or sys.stdout
    parser = argparse.ArgumentParser(
        description="Import a time/value text file and list the samples."
    )
    parser.add_argument("file", type=str, help="Path to the text file to import.")
    parser.add_argument(
        "-t",
        "--type",
        default="csv",
        choices=importer_types(),
        help="Importer type (default: csv).",
    )
    parser.add_argument("-c", "--config", type=str, help="Optional import.yaml.")
    parser.add_argument("--grouping", type=str, help="Grouping separator, e.g. ','.")
    parser.add_argument("--decimal", type=str, help="Decimal separator, e.g. '.'.")
    parser.add_argument("--timezone", type=str, help="Zone of the file's timestamps.")
    parser.add_argument("--encoding", type=str, help="Text encoding of the file.")
    parser.add_argument("--export", type=str, help="Write the samples to this CSV file.")
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only print the summary line.",
    )

    args = parser.parse_args(argv)

    try:
        config = _apply_overrides(load_config(args.config), args)
        # Validate separators and zone before touching the file
        config.number_format()
        config.tzinfo()
    except ValueError as exc:
        parser.error(str(exc))

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    skipped: Counter[str] = Counter()

    def _on_skip(diagnostic: Diagnostic) -> None:
        skipped[diagnostic.reason] += 1
        logger.info("Line %d ignored: %s", diagnostic.line_number, diagnostic.line)

    path = Path(args.file).expanduser()
    importer = get_importer(args.type, config=config, diagnostics=_on_skip)
    try:
        with path.open("rb") as fh:
            samples = importer.import_samples(fh)
    except OSError as exc:
        print(f"[ERROR] Cannot import {path}: {exc}", file=sys.stderr)
        return 1

    if not args.quiet:
        _print_table(sample_rows(samples), out)
    if args.export:
        write_samples_csv(Path(args.export).expanduser(), samples)

    print(
        f"{len(samples)} samples imported, {sum(skipped.values())} lines skipped",
        file=out,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
