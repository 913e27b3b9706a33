"""
Configuration management for Qara.

Loads settings from environment variables and provides a centralized
configuration object for the CLI entry point. Library classes receive the
values they need through their constructors.

Configuration precedence (highest to lowest):
1. Explicit kwargs passed to QaraConfig
2. Environment variables (QARA_* prefix)
3. .env file
4. pyproject.toml [tool.qara] section
5. Hardcoded defaults
"""

import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from ..models.enums import LogLevel, OutputFormat

logger = logging.getLogger(__name__)


def load_pyproject_defaults(path: Path = Path("pyproject.toml")) -> dict[str, Any]:
    """
    Load defaults from the [tool.qara] section of pyproject.toml.

    Args:
        path: Location of the pyproject file

    Returns:
        Dictionary of configuration overrides from pyproject.toml
    """
    if not path.exists():
        return {}

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        logger.warning(f"Could not load {path}: {e}")
        return {}
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Could not parse {path}: {e}")
        return {}

    tool_config = data.get("tool", {}).get("qara", {})
    if tool_config:
        logger.debug(f"Loaded {len(tool_config)} settings from {path}")
    return tool_config


class PyProjectTomlSettingsSource(PydanticBaseSettingsSource):
    """
    A pydantic-settings source that loads configuration from pyproject.toml.
    """

    def get_field_value(self, field_name: str, field_info: Any) -> tuple[Any, str, bool]:
        """Not used in this implementation."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        """Load and return configuration from pyproject.toml."""
        return load_pyproject_defaults()


class QaraConfig(BaseSettings):
    """
    Runtime configuration for routing, research and observability.
    """

    model_config = SettingsConfigDict(
        env_prefix="QARA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Language model
    model: str = Field(
        default="gemini/gemini-2.0-flash-exp",
        description="Model in LiteLLM format (provider/model)",
    )
    llm_timeout: int = Field(default=60, description="Request timeout in seconds")
    temperature: float = Field(default=0.7, description="Sampling temperature")
    max_output_tokens: int | None = Field(
        default=None, description="Maximum output tokens per call (None = provider default)"
    )

    # Routing
    fuzzy_threshold: float = Field(
        default=0.3, description="Minimum keyword-overlap score for fuzzy routing"
    )

    # Research defaults
    default_depth: int = Field(default=2, description="Research depth when a skill sets none")
    default_output_format: OutputFormat = Field(
        default=OutputFormat.EXECUTIVE, description="Report format: executive, full, bullets, table"
    )

    # Logging
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_file: Path | None = Field(
        default=None,
        description="Path to main application log file (None disables file logging)",
    )
    log_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Maximum log file size before rotation"  # 10MB
    )
    log_backup_count: int = Field(default=5, description="Number of backup log files to keep")

    # Event tracing
    events_enabled: bool = Field(default=True, description="Emit trace events")
    events_log_file: Path | None = Field(
        default=None, description="Append every trace event to this JSONL file"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize the sources and their priority for loading configuration.

        Returns:
            Tuple of settings sources in priority order
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            PyProjectTomlSettingsSource(settings_cls),
            file_secret_settings,
        )

    @field_validator("fuzzy_threshold")
    @classmethod
    def validate_fuzzy_threshold(cls, v: float) -> float:
        """Threshold is a ratio"""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"fuzzy_threshold must be 0.0-1.0, got {v}")
        if v < 0.1:
            logger.warning(
                f"Very low fuzzy_threshold ({v}). Unrelated input may be routed to a skill."
            )
        return v

    @field_validator("default_depth")
    @classmethod
    def validate_default_depth(cls, v: int) -> int:
        if not 1 <= v <= 4:
            raise ValueError(f"default_depth must be 1-4, got {v}")
        return v

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"temperature must be 0.0-2.0, got {v}")
        return v

    @field_validator("llm_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"llm_timeout must be positive, got {v}")
        return v

    def ensure_log_directory(self) -> None:
        """Ensure the log directories exist."""
        for log_path in [self.log_file, self.events_log_file]:
            if log_path and log_path.parent:
                log_path.parent.mkdir(parents=True, exist_ok=True)


# Lazily loaded instance for the CLI entry point
_config: QaraConfig | None = None


def get_config() -> QaraConfig:
    """
    Get the CLI configuration instance, loading it on first use.

    Returns:
        QaraConfig instance
    """
    global _config
    if _config is None:
        _config = QaraConfig()
        _config.ensure_log_directory()
    return _config


def reset_config() -> None:
    """Reset the cached configuration (mainly for testing)."""
    global _config
    _config = None
