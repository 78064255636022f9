"""trendimport: text importer for timestamped scalar and statistical samples.

Layout:
- :mod:`trendimport.core` defines the sample model.
- :mod:`trendimport.config` holds separators and runtime settings.
- :mod:`trendimport.dataio` parses text into samples and tabulates them.
- :mod:`trendimport.tools` carries debug hooks and the inspection CLI.
"""

from .config import ImportConfig, NumberFormat, load_config
from .core import Alarm, AlarmSeverity, Sample, ScalarSample, StatisticalSample
from .dataio import CsvSampleImporter, StreamReadError, get_importer, import_samples

__version__ = "0.1.0"

__all__ = [
    "Alarm",
    "AlarmSeverity",
    "CsvSampleImporter",
    "ImportConfig",
    "NumberFormat",
    "Sample",
    "ScalarSample",
    "StatisticalSample",
    "StreamReadError",
    "get_importer",
    "import_samples",
    "load_config",
]
