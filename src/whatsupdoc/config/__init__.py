"""Config module exports."""

from whatsupdoc.config.loader import WhatsupdocSettings, load_config
from whatsupdoc.config.models import (
    LoggingConfig,
    LogOutputConfig,
    ParserConfig,
    WhatsupdocConfig,
)

__all__ = [
    "load_config",
    "WhatsupdocConfig",
    "WhatsupdocSettings",
    "LoggingConfig",
    "LogOutputConfig",
    "ParserConfig",
]
