"""
Configuration for the possible-values kernel family.

Small sub-configurations combined into one top-level dataclass, with dict
round-tripping for kernel configs and a process-global default.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


# Tie-break policies when several canonical names share the minimal distance
TIE_BREAK_NONE = "none"                         # ambiguous -> generic solution
TIE_BREAK_DECLARATION_ORDER = "declaration_order"
TIE_BREAK_ALPHABETICAL = "alphabetical"
TIE_BREAK_POLICIES = (TIE_BREAK_NONE, TIE_BREAK_DECLARATION_ORDER, TIE_BREAK_ALPHABETICAL)

DEFAULT_MAX_EDIT_DISTANCE = 2


@dataclass
class SuggestionConfig:
    """Near-miss suggestion parameters."""
    max_edit_distance: int = DEFAULT_MAX_EDIT_DISTANCE
    tie_break: str = TIE_BREAK_NONE

    def __post_init__(self):
        if self.max_edit_distance < 0:
            logger.warning(f"max_edit_distance={self.max_edit_distance} is negative, using 0")
            self.max_edit_distance = 0
        if self.tie_break not in TIE_BREAK_POLICIES:
            logger.warning(f"Unknown tie_break policy '{self.tie_break}', defaulting to '{TIE_BREAK_NONE}'")
            self.tie_break = TIE_BREAK_NONE


@dataclass
class MatchingConfig:
    """Name matching between authored and declared values."""
    case_sensitive: bool = True


@dataclass
class DirectiveConfig:
    """Keywords introducing possible-value documentation (matched case-insensitively)."""
    block_keywords: List[str] = field(default_factory=lambda: [
        "PossibleValues", "Possible Values",
    ])
    inline_keywords: List[str] = field(default_factory=lambda: [
        "PossibleValue", "Possible Value",
    ])


@dataclass
class ValuesConfig:
    """
    Top-level configuration for possible-values reconciliation.

    Combines suggestion, matching and directive sub-configurations.
    """
    suggestion: SuggestionConfig = field(default_factory=SuggestionConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    directives: DirectiveConfig = field(default_factory=DirectiveConfig)

    # Worker threads for multi-symbol passes
    max_workers: int = 4

    def __post_init__(self):
        self.max_workers = max(1, self.max_workers)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suggestion": {
                "max_edit_distance": self.suggestion.max_edit_distance,
                "tie_break": self.suggestion.tie_break,
            },
            "matching": {
                "case_sensitive": self.matching.case_sensitive,
            },
            "directives": {
                "block_keywords": list(self.directives.block_keywords),
                "inline_keywords": list(self.directives.inline_keywords),
            },
            "max_workers": self.max_workers,
        }

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "ValuesConfig":
        d = d or {}
        sugg_d = d.get("suggestion", {})
        match_d = d.get("matching", {})
        dir_d = d.get("directives", {})
        defaults = DirectiveConfig()
        return cls(
            suggestion=SuggestionConfig(
                max_edit_distance=int(sugg_d.get("max_edit_distance", DEFAULT_MAX_EDIT_DISTANCE)),
                tie_break=sugg_d.get("tie_break", TIE_BREAK_NONE),
            ),
            matching=MatchingConfig(
                case_sensitive=bool(match_d.get("case_sensitive", True)),
            ),
            directives=DirectiveConfig(
                block_keywords=dir_d.get("block_keywords", defaults.block_keywords),
                inline_keywords=dir_d.get("inline_keywords", defaults.inline_keywords),
            ),
            max_workers=d.get("max_workers", 4),
        )


# ---------------------------------------------------------------------------
# Global singleton
# ---------------------------------------------------------------------------

_global_config: Optional[ValuesConfig] = None


def get_values_config() -> ValuesConfig:
    """Get global possible-values configuration (lazy-loaded default)."""
    global _global_config
    if _global_config is None:
        _global_config = ValuesConfig()
    return _global_config


def set_values_config(config: Optional[ValuesConfig]) -> None:
    """Set the global possible-values configuration (None restores defaults)."""
    global _global_config
    _global_config = config
