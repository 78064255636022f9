from __future__ import annotations

import io
from typing import List

import pytest

from trendimport.config.runtime import ImportConfig
from trendimport.core.models import Sample
from trendimport.dataio import importers
from trendimport.dataio.csv_importer import CsvSampleImporter


class _NullImporter:
    type = "null"

    def import_samples(self, stream) -> List[Sample]:
        return []


def test_csv_importer_registered_by_default() -> None:
    importer = importers.get_importer("CSV", config=ImportConfig(grouping_separator=",", decimal_separator="."))

    assert isinstance(importer, CsvSampleImporter)
    samples = importer.import_samples(io.StringIO("2020-01-01 00:00:00.000 1\n"))
    assert len(samples) == 1


def test_unknown_type_lists_known_types() -> None:
    with pytest.raises(KeyError) as excinfo:
        importers.get_importer("xlsx")
    assert "csv" in str(excinfo.value)


def test_register_importer(monkeypatch) -> None:
    monkeypatch.setattr(importers, "_IMPORTERS", dict(importers._IMPORTERS))
    importers.register_importer(" Null ", _NullImporter)

    assert importers.importer_types() == ["csv", "null"]
    assert importers.get_importer("null").import_samples(io.StringIO("x")) == []


def test_register_importer_rejects_empty_type() -> None:
    with pytest.raises(ValueError):
        importers.register_importer("  ", _NullImporter)
