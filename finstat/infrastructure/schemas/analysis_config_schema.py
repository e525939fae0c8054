# finstat/infrastructure/schemas/analysis_config_schema.py

from finstat.domain.errors import ConfigError

ANALYSIS_CONFIG_FIELDS = {
    "balance_tolerance",
    "aggregation_policy",
    "numeric_type",
    "log_level",
}

ANALYSIS_DEFAULTS = {
    "balance_tolerance": 0.01,
    "aggregation_policy": "intersection",
    "numeric_type": "float",
    "log_level": "INFO",
}

ANALYSIS_LIMITS = {
    "balance_tolerance": {"min": 0.0},
}

ANALYSIS_CHOICES = {
    "aggregation_policy": {"intersection", "union_zero_fill"},
    "numeric_type": {"float", "decimal"},
    "log_level": {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"},
}


def validate_analysis_config(config: dict) -> None:
    unknown = set(config) - ANALYSIS_CONFIG_FIELDS
    if unknown:
        raise ConfigError(f"Invalid config: unknown keys {sorted(unknown)}")

    for key, rule in ANALYSIS_LIMITS.items():
        if key not in config or config[key] is None:
            continue

        value = config[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"Invalid config: {key} must be a number")
        if "min" in rule and value < rule["min"]:
            raise ConfigError(f"Invalid config: {key} must be >= {rule['min']}")

    for key, choices in ANALYSIS_CHOICES.items():
        if key not in config or config[key] is None:
            continue
        if config[key] not in choices:
            raise ConfigError(
                f"Invalid config: {key} must be one of {sorted(choices)} (got {config[key]!r})"
            )
