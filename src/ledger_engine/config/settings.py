import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
import json
from typing import Dict, Any, FrozenSet, Optional

from ledger_engine.domain.enums import EntryType

# Package defaults (bundled with code)
PACKAGE_CONFIG_DIR = Path(__file__).parent / "defaults"

# User configs (in project root, gitignored)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
USER_CONFIG_DIR = Path(os.getenv("LEDGER_ENGINE_CONFIG_DIR", PROJECT_ROOT / "config"))

class ConfigLoader:
    """Load configuration with user overrides"""

    @staticmethod
    def load_config(config_name: str) -> Dict[str, Any]:
        """
        Load config with fallback: user config -> default config

        Args:
            config_name: Name of the config file (e.g., 'matching.json')

        Raises:
            FileNotFoundError: If no config file was found

        Returns:
            Parsed JSON configuration
        """
        user_config_path = USER_CONFIG_DIR / config_name
        if user_config_path.exists():
            with open(user_config_path) as f:
                return json.load(f)

        default_config_path = PACKAGE_CONFIG_DIR / config_name
        if default_config_path.exists():
            with open(default_config_path) as f:
                return json.load(f)

        raise FileNotFoundError(
            f"Config file '{config_name}' not found in:\n"
            f" - {user_config_path}\n"
            f" - {default_config_path}"
        )

    @staticmethod
    def load_matching_config():
        """Load duplicate matching thresholds"""
        return ConfigLoader.load_config('matching.json')

    @staticmethod
    def load_analytics_config():
        """Load analytics and insight thresholds"""
        return ConfigLoader.load_config('analytics.json')

    @staticmethod
    def load_classification_config():
        """Load user classification rules"""
        return ConfigLoader.load_config('classification_rules.json')


@dataclass(frozen=True)
class MatchingSettings:
    """Thresholds the duplicate matcher applies to every candidate pair"""
    amount_tolerance: Decimal = Decimal("0.05")
    max_day_gap: int = 4
    min_similarity: float = 0.55
    duplicate_types: FrozenSet[EntryType] = frozenset({
        EntryType.EXPENSE,
        EntryType.FEE,
        EntryType.TAX,
    })

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "MatchingSettings":
        """
        Build settings from a config dict.

        Args:
            config: Optional config dict. If None, loads from ConfigLoader.
                Missing keys keep their defaults.
        """
        if config is None:
            config = ConfigLoader.load_matching_config()

        defaults = cls()
        duplicate_types = config.get("duplicate_types")
        return cls(
            amount_tolerance=Decimal(str(config.get("amount_tolerance", defaults.amount_tolerance))),
            max_day_gap=int(config.get("max_day_gap", defaults.max_day_gap)),
            min_similarity=float(config.get("min_similarity", defaults.min_similarity)),
            duplicate_types=(
                frozenset(EntryType(t) for t in duplicate_types)
                if duplicate_types is not None
                else defaults.duplicate_types
            ),
        )


@dataclass(frozen=True)
class AnalyticsSettings:
    """Windows and ratios used by insights and risk signals"""
    risk_window_days: int = 60
    margin_risk_ratio: Decimal = Decimal("0.85")
    concentration_threshold: Decimal = Decimal("25")
    top_cost_centers: int = 3

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "AnalyticsSettings":
        """
        Build settings from a config dict.

        Args:
            config: Optional config dict. If None, loads from ConfigLoader.
                Missing keys keep their defaults.
        """
        if config is None:
            config = ConfigLoader.load_analytics_config()

        defaults = cls()
        return cls(
            risk_window_days=int(config.get("risk_window_days", defaults.risk_window_days)),
            margin_risk_ratio=Decimal(str(config.get("margin_risk_ratio", defaults.margin_risk_ratio))),
            concentration_threshold=Decimal(
                str(config.get("concentration_threshold", defaults.concentration_threshold))
            ),
            top_cost_centers=int(config.get("top_cost_centers", defaults.top_cost_centers)),
        )
