"""Runtime configuration for sample imports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .number_format import NumberFormat

_UTC_NAMES = {"utc", "z", "gmt"}


@dataclass(slots=True)
class ImportConfig:
    """
    Knobs for one import run.

    Separators left as ``None`` are taken from the active locale when the
    import starts, and stay fixed for the rest of that import.
    """

    grouping_separator: Optional[str] = None
    decimal_separator: Optional[str] = None
    timezone: str = "UTC"
    encoding: Optional[str] = None
    accept_non_finite: bool = False
    log_level: str = "INFO"

    def number_format(self) -> NumberFormat:
        """Resolve the separators, consulting the locale at most once."""
        if self.grouping_separator is not None and self.decimal_separator is not None:
            return NumberFormat(self.grouping_separator, self.decimal_separator)
        local = NumberFormat.from_locale()
        grouping = self.grouping_separator
        if grouping is None:
            grouping = local.grouping_separator
        decimal = self.decimal_separator or local.decimal_separator
        if grouping == decimal:
            grouping = None
        return NumberFormat(grouping, decimal)

    def tzinfo(self) -> tzinfo:
        """Return the zone used to interpret wall-clock timestamps."""
        name = (self.timezone or "UTC").strip()
        if name.lower() in _UTC_NAMES:
            return timezone.utc
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {name!r}") from exc

    def sanitized(self) -> ImportConfig:
        """Return a copy with empty strings dropped and the log level normalized."""
        level = str(self.log_level or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            level = "INFO"
        return ImportConfig(
            grouping_separator=self.grouping_separator or None,
            decimal_separator=self.decimal_separator or None,
            timezone=str(self.timezone or "UTC").strip(),
            encoding=self.encoding or None,
            accept_non_finite=bool(self.accept_non_finite),
            log_level=level,
        )


_SECTIONS = ("import", "number_format")
_FIELD_NAMES = frozenset(f.name for f in fields(ImportConfig))


def _flatten_sections(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """
    Merge the ``import:`` and ``number_format:`` blocks into one flat mapping.

    Keys inside a block win over the same key at the top level.
    """
    merged: MutableMapping[str, Any] = {
        key: value for key, value in data.items() if key not in _SECTIONS
    }
    for section in _SECTIONS:
        block = data.get(section)
        if isinstance(block, Mapping):
            merged.update(block)
    return merged


def _validated(config: ImportConfig) -> ImportConfig:
    """Reject separator pairs and zones that would only fail once an import starts."""
    if config.grouping_separator is not None and config.decimal_separator is not None:
        NumberFormat(config.grouping_separator, config.decimal_separator)
    else:
        for name in ("grouping_separator", "decimal_separator"):
            value = getattr(config, name)
            if value is not None and len(value) != 1:
                raise ValueError(f"{name} must be a single character, got {value!r}")
    config.tzinfo()
    return config


def config_from_mapping(data: Mapping[str, Any] | None) -> ImportConfig:
    """
    Build a validated :class:`ImportConfig` from ``data``.

    Unknown keys are ignored; bad separators or zones raise ``ValueError``.
    """
    if not data:
        return ImportConfig()
    flat = _flatten_sections(data)
    payload = {key: flat[key] for key in flat.keys() & _FIELD_NAMES}
    for name in ("grouping_separator", "decimal_separator"):
        if payload.get(name) is not None:
            payload[name] = str(payload[name])
    return _validated(ImportConfig(**payload).sanitized())


def load_config(path: str | Path | None) -> ImportConfig:
    """
    Load import settings from a YAML file such as::

        import:
          timezone: Europe/Zurich
        number_format:
          grouping_separator: "'"
          decimal_separator: "."

    A missing file gives the defaults (separators from the locale, UTC).
    """
    if path is None:
        return ImportConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return ImportConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    try:
        return config_from_mapping(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid import settings in {cfg_path}: {exc}") from exc


__all__ = ["ImportConfig", "config_from_mapping", "load_config"]
