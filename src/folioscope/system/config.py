"""
System configuration for folioscope.

One configuration for the whole tool: analysis constants, report output
and logging. Values come from built-in defaults, optionally overridden by a
YAML file. Partial files are deep-merged over the defaults and ``${VAR}``
placeholders are substituted from the environment.

Lookup order for the config file:
    1. Explicit path passed to ``SystemConfig.load()``
    2. ``$FOLIOSCOPE_CONFIG``
    3. ``config/folioscope.yaml`` in the working directory
"""

import os
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from folioscope.system.log_system import LoggingConfig as LoggerConfig

DEFAULT_CONFIG_PATH = Path("config/folioscope.yaml")
CONFIG_ENV_VAR = "FOLIOSCOPE_CONFIG"

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


@dataclass
class AnalysisConfig:
    """Constants used by the analysis engines."""

    risk_free_rate: float = 0.03  # annual, as a fraction (Sharpe/Sortino)
    benchmark_risk_free_pct: float = 3.0  # percentage points (CAPM alpha)
    trading_days_per_year: int = 252
    drawdown_threshold_pct: float = 0.1
    benchmark_names: list[str] = field(default_factory=lambda: ["SHA", "SHE", "CSI300"])

    def __post_init__(self) -> None:
        if len(self.benchmark_names) != 3:
            raise ValueError(f"benchmark_names must name exactly 3 benchmarks, got {len(self.benchmark_names)}")
        if self.trading_days_per_year <= 0:
            raise ValueError("trading_days_per_year must be positive")
        if self.drawdown_threshold_pct < 0:
            raise ValueError("drawdown_threshold_pct cannot be negative")


@dataclass
class OutputConfig:
    """Console report settings."""

    detail_level: str = "standard"  # summary | standard | full
    drawdown_history_rows: int = 5


@dataclass
class LoggingConfig:
    """Logging section as written in the YAML file."""

    level: str = "INFO"
    format: str = "console"
    timestamp_format: str = "compact"
    enable_file: bool = False
    file_path: str = "logs/folioscope.log"
    file_level: str = "WARNING"
    file_rotation: bool = True
    max_file_size_mb: int = 10
    backup_count: int = 3
    stream: str = "stderr"

    def to_logger_config(self) -> LoggerConfig:
        """Convert to the pydantic config consumed by LoggerFactory."""
        return LoggerConfig(
            level=self.level,  # type: ignore[arg-type]
            format=self.format,  # type: ignore[arg-type]
            timestamp_format=self.timestamp_format,  # type: ignore[arg-type]
            enable_file=self.enable_file,
            file_path=Path(self.file_path),
            file_level=self.file_level,  # type: ignore[arg-type]
            file_rotation=self.file_rotation,
            max_file_size_mb=self.max_file_size_mb,
            backup_count=self.backup_count,
            stream=self.stream,  # type: ignore[arg-type]
        )


@dataclass
class SystemConfig:
    """Container for every configuration section."""

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "SystemConfig":
        """
        Load configuration, merging a YAML file over the built-in defaults.

        Args:
            path: Config file. If None, uses $FOLIOSCOPE_CONFIG or
                config/folioscope.yaml. A missing file means defaults only.

        Returns:
            SystemConfig instance
        """
        if path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

        config_path = Path(path)
        defaults = asdict(cls())

        if not config_path.exists():
            return cls._from_dict(defaults)

        with open(config_path, encoding="utf-8") as f:
            file_data = yaml.safe_load(f) or {}

        if not isinstance(file_data, dict):
            raise ValueError(f"Config file must contain a mapping at the top level: {config_path}")

        merged = _deep_merge(defaults, _substitute_env_vars(file_data))
        return cls._from_dict(merged)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SystemConfig":
        """Build config from a (possibly partial) dictionary."""
        return cls(
            analysis=AnalysisConfig(**data.get("analysis", {})),
            output=OutputConfig(**data.get("output", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base (override wins)."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _substitute_env_vars(value: Any) -> Any:
    """Replace ${VAR} placeholders with environment values.

    Undefined variables keep their placeholder.
    """
    if isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    if isinstance(value, str):
        return _ENV_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
    return value


_system_config: SystemConfig | None = None


def get_system_config(path: Path | str | None = None) -> SystemConfig:
    """Return the cached system config, loading it on first use.

    An explicit path always reloads and replaces the cached instance.
    """
    global _system_config
    if path is not None or _system_config is None:
        _system_config = SystemConfig.load(path)
    return _system_config


def reload_system_config(path: Path | str | None = None) -> SystemConfig:
    """Force a reload of the system config."""
    global _system_config
    _system_config = SystemConfig.load(path)
    return _system_config
