"""Data input/output for time-series samples.

- :mod:`csv_importer` parses ``time, value[, negative, positive]`` text.
- :mod:`importers` looks importers up by file type name.
- :mod:`sample_table` turns samples into table rows, NumPy arrays or CSV.
"""

from .csv_importer import (
    CsvSampleImporter,
    Diagnostic,
    StreamReadError,
    import_samples,
)
from .importers import get_importer, importer_types, register_importer

__all__ = [
    "CsvSampleImporter",
    "Diagnostic",
    "StreamReadError",
    "get_importer",
    "import_samples",
    "importer_types",
    "register_importer",
]
