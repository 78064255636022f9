"""Configuration objects for sample imports.

- :mod:`number_format` holds the grouping/decimal separator pair.
- :mod:`runtime` loads ``import.yaml`` style settings into :class:`ImportConfig`.
"""

from .number_format import NumberFormat
from .runtime import ImportConfig, config_from_mapping, load_config

__all__ = ["ImportConfig", "NumberFormat", "config_from_mapping", "load_config"]
