"""Locale-dependent grouping/decimal separators for numeric text."""
from __future__ import annotations

import locale
from dataclasses import dataclass
from typing import Any, Mapping, Optional


def _check_separator(name: str, value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    text = str(value)
    if len(text) != 1:
        raise ValueError(f"{name} must be a single character, got {text!r}")
    return text


@dataclass(frozen=True)
class NumberFormat:
    """
    Separator pair applied to every numeric token of one import.

    grouping_separator: removed wherever it occurs (``None`` removes nothing).
    decimal_separator: replaced by ``.`` before parsing.
    """

    grouping_separator: Optional[str] = ","
    decimal_separator: str = "."

    def __post_init__(self) -> None:
        grouping = _check_separator("grouping_separator", self.grouping_separator)
        decimal = _check_separator("decimal_separator", self.decimal_separator)
        if decimal is None:
            raise ValueError("decimal_separator must not be empty")
        if grouping == decimal:
            raise ValueError(
                f"grouping and decimal separator are both {decimal!r}"
            )
        object.__setattr__(self, "grouping_separator", grouping)
        object.__setattr__(self, "decimal_separator", decimal)

    def normalize(self, text: str) -> str:
        """Return ``text`` rewritten with ``.`` as the only decimal mark."""
        if self.grouping_separator is not None:
            text = text.replace(self.grouping_separator, "")
        return text.replace(self.decimal_separator, ".")

    @classmethod
    def from_locale(cls) -> "NumberFormat":
        """Snapshot the separators of the active ``LC_NUMERIC`` locale."""
        conv = locale.localeconv()
        decimal = str(conv.get("decimal_point") or ".")
        grouping = str(conv.get("thousands_sep") or "") or None
        if grouping is not None and (len(grouping) != 1 or grouping == decimal):
            grouping = None
        return cls(grouping_separator=grouping, decimal_separator=decimal)

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any] | None,
        *,
        default: "NumberFormat | None" = None,
    ) -> "NumberFormat":
        """
        Construct a NumberFormat from a mapping such as ``import.yaml``.

        Supported shape::

            number_format:
              grouping_separator: "."
              decimal_separator: ","
        """
        base = default or cls()
        payload: Mapping[str, Any] = mapping or {}
        block = payload.get("number_format") if isinstance(payload, Mapping) else None
        if not isinstance(block, Mapping):
            return base

        grouping = block.get("grouping_separator", base.grouping_separator)
        decimal = block.get("decimal_separator", base.decimal_separator)
        return cls(grouping_separator=grouping, decimal_separator=decimal)

    def to_mapping(self) -> dict:
        return {
            "number_format": {
                "grouping_separator": self.grouping_separator,
                "decimal_separator": self.decimal_separator,
            }
        }
