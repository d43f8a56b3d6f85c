"""
docval Core - Shared configuration, logging and versioning for docval kernels

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from .version import __version__
from .logging_utils import DiagnosticLog, LogLevel
from .config import (
    DocvalConfig,
    LoggingConfig,
    find_config_file,
    load_config,
    save_config,
    get_config,
    reload_config,
)

__all__ = [
    "__version__",
    # Logging
    "DiagnosticLog",
    "LogLevel",
    # Configuration
    "DocvalConfig",
    "LoggingConfig",
    "find_config_file",
    "load_config",
    "save_config",
    "get_config",
    "reload_config",
]
