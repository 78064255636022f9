"""Registry of sample importers keyed by their file type name."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Protocol

from ..core.models import Sample
from .csv_importer import CsvSampleImporter, LineSource


class SampleImporter(Protocol):
    type: str

    def import_samples(self, stream: LineSource) -> List[Sample]:
        ...


ImporterFactory = Callable[..., SampleImporter]

_IMPORTERS: Dict[str, ImporterFactory] = {
    CsvSampleImporter.type: CsvSampleImporter,
}


def register_importer(type_name: str, factory: ImporterFactory) -> None:
    """Make ``factory`` available under ``type_name`` (case-insensitive)."""
    key = type_name.strip().lower()
    if not key:
        raise ValueError("Importer type must not be empty")
    _IMPORTERS[key] = factory


def importer_types() -> List[str]:
    return sorted(_IMPORTERS)


def get_importer(type_name: str, **kwargs: Any) -> SampleImporter:
    """Create the importer registered for ``type_name``, passing ``kwargs`` through."""
    key = type_name.strip().lower()
    factory = _IMPORTERS.get(key)
    if factory is None:
        known = ", ".join(importer_types())
        raise KeyError(f"No importer for type {type_name!r} (known: {known})")
    return factory(**kwargs)


__all__ = ["SampleImporter", "get_importer", "importer_types", "register_importer"]
