"""
docval Unified Configuration System
===================================

Loads and manages configuration from docval.yaml with environment variable overrides.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import os
import yaml
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from docval_kernels.values.config import ValuesConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "docval.yaml"


# =============================================================================
# Configuration Data Classes
# =============================================================================

@dataclass
class LoggingConfig:
    """Diagnostic log configuration. A relative ``log_dir`` is taken inside the kernel workspace."""
    level: str = "INFO"
    log_dir: str = "stage2"
    text_log: str = "diagnostics.log"
    json_log: str = "diagnostics.jsonl"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "log_dir": self.log_dir,
            "text_log": self.text_log,
            "json_log": self.json_log,
        }


@dataclass
class DocvalConfig:
    """Root configuration container."""
    values: ValuesConfig = field(default_factory=ValuesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    version: str = "0.3.0"


# =============================================================================
# Configuration Loader
# =============================================================================

def find_config_file(start_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find docval.yaml by searching upward from start_path.

    Search order:
    1. start_path / docval.yaml
    2. start_path / .docval / docval.yaml
    3. Parent directories (recursive)
    4. ~/.config/docval/docval.yaml

    Args:
        start_path: Starting directory (defaults to cwd)

    Returns:
        Path to config file or None if not found
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = Path(start_path).resolve()

    # Search upward
    current = start_path
    for _ in range(10):  # Max 10 levels up
        candidates = [
            current / CONFIG_FILE_NAME,
            current / ".docval" / CONFIG_FILE_NAME,
        ]
        for candidate in candidates:
            if candidate.exists():
                return candidate

        parent = current.parent
        if parent == current:
            break
        current = parent

    # Check user config
    user_config = Path.home() / ".config" / "docval" / CONFIG_FILE_NAME
    if user_config.exists():
        return user_config

    return None


def load_config(config_path: Optional[Path] = None) -> DocvalConfig:
    """
    Load configuration from YAML file with environment variable overrides.

    Environment variables override config file values:
    - DOCVAL_MAX_EDIT_DISTANCE -> values.suggestion.max_edit_distance
    - DOCVAL_TIE_BREAK -> values.suggestion.tie_break
    - DOCVAL_CASE_SENSITIVE -> values.matching.case_sensitive
    - DOCVAL_LOG_LEVEL -> logging.level
    - DOCVAL_LOG_DIR -> logging.log_dir

    Args:
        config_path: Path to config file (auto-detected if None)

    Returns:
        DocvalConfig instance
    """
    config = DocvalConfig()

    # Find and load config file
    if config_path is None:
        config_path = find_config_file()

    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        try:
            with open(config_path, 'r', encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            config = _parse_config_dict(data)
        except (yaml.YAMLError, OSError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Failed to load config: {e}, using defaults")
    else:
        logger.info("No config file found, using defaults")

    # Apply environment variable overrides
    config = _apply_env_overrides(config)

    # Validate configuration
    _validate_config(config)

    return config


def _parse_config_dict(data: Dict[str, Any]) -> DocvalConfig:
    """Parse configuration dictionary into DocvalConfig."""
    config = DocvalConfig()

    if "values" in data:
        config.values = ValuesConfig.from_dict(data["values"])

    if "logging" in data:
        log = data["logging"]
        config.logging = LoggingConfig(
            level=log.get("level", config.logging.level),
            log_dir=log.get("log_dir", config.logging.log_dir),
            text_log=log.get("text_log", config.logging.text_log),
            json_log=log.get("json_log", config.logging.json_log),
        )

    config.version = data.get("version", config.version)

    return config


def _env_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


def _apply_env_overrides(config: DocvalConfig) -> DocvalConfig:
    """Apply environment variable overrides to config."""

    if os.environ.get("DOCVAL_MAX_EDIT_DISTANCE"):
        raw = os.environ["DOCVAL_MAX_EDIT_DISTANCE"]
        try:
            config.values.suggestion.max_edit_distance = int(raw)
        except ValueError:
            logger.warning(f"Ignoring non-integer DOCVAL_MAX_EDIT_DISTANCE='{raw}'")

    if os.environ.get("DOCVAL_TIE_BREAK"):
        config.values.suggestion.tie_break = os.environ["DOCVAL_TIE_BREAK"]

    if os.environ.get("DOCVAL_CASE_SENSITIVE"):
        config.values.matching.case_sensitive = _env_bool(os.environ["DOCVAL_CASE_SENSITIVE"])

    if os.environ.get("DOCVAL_LOG_LEVEL"):
        config.logging.level = os.environ["DOCVAL_LOG_LEVEL"].upper()

    if os.environ.get("DOCVAL_LOG_DIR"):
        config.logging.log_dir = os.environ["DOCVAL_LOG_DIR"]

    return config


def _validate_config(config: DocvalConfig) -> None:
    """Validate configuration and log warnings."""

    # Re-run sub-config validation after env overrides
    config.values.suggestion.__post_init__()

    valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR")
    if config.logging.level not in valid_levels:
        logger.warning(f"Unknown log level '{config.logging.level}', defaulting to 'INFO'")
        config.logging.level = "INFO"


def save_config(config: DocvalConfig, path: Path) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: DocvalConfig instance
        path: Output path
    """
    data = {
        "version": config.version,
        "values": config.values.to_dict(),
        "logging": config.logging.to_dict(),
    }

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Configuration saved to: {path}")


# =============================================================================
# Global Config Instance
# =============================================================================

_global_config: Optional[DocvalConfig] = None


def get_config() -> DocvalConfig:
    """Get the global configuration instance (lazy-loaded)."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def reload_config(config_path: Optional[Path] = None) -> DocvalConfig:
    """Reload configuration from file."""
    global _global_config
    _global_config = load_config(config_path)
    return _global_config
