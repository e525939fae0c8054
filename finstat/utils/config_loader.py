# finstat/utils/config_loader.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv

from finstat.domain.errors import ConfigError
from finstat.domain.numeric import coerce, resolve_numeric_type
from finstat.domain.services.account_aggregator import AggregationPolicy
from finstat.infrastructure.schemas.analysis_config_schema import (
    ANALYSIS_DEFAULTS,
    validate_analysis_config,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "analysis.yaml"


@dataclass(frozen=True)
class AnalysisConfig:
    balance_tolerance: float
    aggregation_policy: AggregationPolicy
    numeric_type: type
    log_level: str

    def tolerance_as(self, numeric_type: type):
        return coerce(self.balance_tolerance, numeric_type)


def _config_path(path: Optional[Union[str, Path]]) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.getenv("FINSTAT_CONFIG")
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def load_analysis_config(path: Optional[Union[str, Path]] = None) -> AnalysisConfig:
    """
    Load config/analysis.yaml (or FINSTAT_CONFIG) over ANALYSIS_DEFAULTS.

    A missing file is not an error: the defaults apply. The file may hold
    the keys at top level or under an `analysis:` section.
    """
    load_dotenv()
    config_path = _config_path(path)

    raw: dict = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Invalid config file {config_path}: expected a mapping")
        raw = loaded.get("analysis", loaded)
        if not isinstance(raw, dict):
            raise ConfigError(f"Invalid config file {config_path}: 'analysis' must be a mapping")
    else:
        logger.info(
            "Analysis config not found, using defaults",
            extra={"path": str(config_path)},
        )

    validate_analysis_config(raw)
    merged = {**ANALYSIS_DEFAULTS, **{k: v for k, v in raw.items() if v is not None}}

    logger.info(
        "Resolved analysis config",
        extra={
            "path": str(config_path),
            "aggregation_policy": merged["aggregation_policy"],
            "numeric_type": merged["numeric_type"],
        },
    )

    return AnalysisConfig(
        balance_tolerance=float(merged["balance_tolerance"]),
        aggregation_policy=AggregationPolicy(merged["aggregation_policy"]),
        numeric_type=resolve_numeric_type(merged["numeric_type"]),
        log_level=str(merged["log_level"]),
    )
