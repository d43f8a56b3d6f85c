"""
Logging Utilities for docval

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, Iterable, Optional
from enum import Enum


class LogLevel(str, Enum):
    """Log levels for docval diagnostic logs."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# Diagnostic severities as emitted by the values kernels
SEVERITY_TO_LEVEL: Dict[str, LogLevel] = {
    "note": LogLevel.INFO,
    "warning": LogLevel.WARNING,
    "error": LogLevel.ERROR,
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class DiagnosticLog:
    """
    File-based log for documentation diagnostics with structured JSONL support.

    Logs are written to:
    - {log_dir}/diagnostics.log - Human-readable text log
    - {log_dir}/diagnostics.jsonl - Structured JSONL log (one record per line)
    """

    def __init__(self, log_dir: Path, min_level: LogLevel = LogLevel.INFO,
                 text_name: str = "diagnostics.log", json_name: str = "diagnostics.jsonl"):
        """
        Initialize diagnostic log.

        Args:
            log_dir: Directory for log files
            min_level: Minimum log level to write
            text_name: File name of the text log
            json_name: File name of the JSONL log
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.min_level = min_level

        self.text_log = self.log_dir / text_name
        self.json_log = self.log_dir / json_name

    def _should_log(self, level: LogLevel) -> bool:
        """Check if a log level should be written."""
        levels = [LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARNING, LogLevel.ERROR]
        return levels.index(level) >= levels.index(self.min_level)

    def log_text(self, line: str, level: LogLevel = LogLevel.INFO):
        """
        Append a timestamped line to the text log.

        Args:
            line: Log message (timestamp will be prepended)
            level: Log level
        """
        if not self._should_log(level):
            return

        with self.text_log.open("a", encoding="utf-8") as f:
            f.write(f"[{_now()}] [{level.value}] {line}\n")

    def log_jsonl(self, event_type: str, data: Dict[str, Any], level: LogLevel = LogLevel.INFO):
        """
        Append structured JSONL event to the events log.

        Args:
            event_type: Type of event (e.g., "diagnostic", "kernel")
            data: Event data dictionary
            level: Log level
        """
        if not self._should_log(level):
            return

        event = {
            "timestamp": _now(),
            "level": level.value,
            "type": event_type,
            "data": data,
        }
        with self.json_log.open("a", encoding="utf-8") as f:
            f.write(json.dumps(event, sort_keys=True) + "\n")

    def log_diagnostic(self, diagnostic: Dict[str, Any]):
        """
        Log one serialized diagnostic to both text and JSONL logs.

        The text line follows the compiler convention
        ``source:line:column: severity: summary``.

        Args:
            diagnostic: Diagnostic as produced by ``Diagnostic.to_dict()``
        """
        level = SEVERITY_TO_LEVEL.get(diagnostic.get("severity", "warning"), LogLevel.WARNING)

        location = diagnostic.get("source") or "<unknown>"
        rng: Optional[Dict[str, Any]] = diagnostic.get("range")
        if rng:
            lower = rng["lower"]
            location += f":{lower['line']}:{lower['column']}"
        self.log_text(f"{location}: {diagnostic.get('severity', 'warning')}: {diagnostic.get('summary', '')}", level)

        self.log_jsonl("diagnostic", diagnostic, level)

    def log_diagnostics(self, diagnostics: Iterable[Dict[str, Any]]) -> int:
        """Log a batch of serialized diagnostics. Returns the number logged."""
        count = 0
        for diagnostic in diagnostics:
            self.log_diagnostic(diagnostic)
            count += 1
        return count

