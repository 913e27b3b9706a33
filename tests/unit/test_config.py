"""
Unit tests for configuration loading and validation.

Tests cover:
- pyproject.toml [tool.qara] loading
- Precedence (kwargs > env > pyproject.toml > defaults)
- Field validation
- Cached CLI configuration
"""

import os

import pytest
from pydantic import ValidationError
from qara.core.config import QaraConfig, get_config, load_pyproject_defaults, reset_config
from qara.models.enums import LogLevel, OutputFormat


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run in an empty directory with no QARA_* variables"""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("QARA_"):
            monkeypatch.delenv(key)
    return tmp_path


class TestPyProjectLoading:
    """Tests for pyproject.toml configuration loading."""

    def test_load_tool_section(self, isolated):
        (isolated / "pyproject.toml").write_text(
            """
[tool.qara]
model = "openai/gpt-4o"
fuzzy_threshold = 0.5
default_depth = 3
"""
        )

        defaults = load_pyproject_defaults()
        assert defaults == {"model": "openai/gpt-4o", "fuzzy_threshold": 0.5, "default_depth": 3}

    def test_missing_file(self, isolated):
        assert load_pyproject_defaults() == {}

    def test_missing_tool_section(self, isolated):
        (isolated / "pyproject.toml").write_text('[project]\nname = "other"\n')
        assert load_pyproject_defaults() == {}

    def test_invalid_toml(self, isolated):
        (isolated / "pyproject.toml").write_text("invalid [[ toml syntax")
        assert load_pyproject_defaults() == {}

    def test_explicit_path(self, isolated):
        path = isolated / "custom.toml"
        path.write_text('[tool.qara]\nlog_level = "DEBUG"\n')
        assert load_pyproject_defaults(path) == {"log_level": "DEBUG"}


class TestPrecedence:
    """Tests for configuration source precedence."""

    def test_defaults(self, isolated):
        config = QaraConfig()

        assert config.model == "gemini/gemini-2.0-flash-exp"
        assert config.fuzzy_threshold == 0.3
        assert config.default_depth == 2
        assert config.default_output_format == OutputFormat.EXECUTIVE
        assert config.log_level == LogLevel.INFO
        assert config.events_enabled is True
        assert config.events_log_file is None

    def test_pyproject_over_defaults(self, isolated):
        (isolated / "pyproject.toml").write_text("[tool.qara]\nfuzzy_threshold = 0.5\n")
        assert QaraConfig().fuzzy_threshold == 0.5

    def test_env_over_pyproject(self, isolated, monkeypatch):
        (isolated / "pyproject.toml").write_text("[tool.qara]\nfuzzy_threshold = 0.5\n")
        monkeypatch.setenv("QARA_FUZZY_THRESHOLD", "0.4")
        assert QaraConfig().fuzzy_threshold == 0.4

    def test_kwargs_over_env(self, isolated, monkeypatch):
        monkeypatch.setenv("QARA_FUZZY_THRESHOLD", "0.4")
        assert QaraConfig(fuzzy_threshold=0.7).fuzzy_threshold == 0.7

    def test_env_enum_values(self, isolated, monkeypatch):
        monkeypatch.setenv("QARA_DEFAULT_OUTPUT_FORMAT", "full")
        monkeypatch.setenv("QARA_LOG_LEVEL", "DEBUG")

        config = QaraConfig()
        assert config.default_output_format == OutputFormat.FULL
        assert config.log_level == LogLevel.DEBUG


class TestValidation:
    """Tests for field validators."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("fuzzy_threshold", 1.5),
            ("fuzzy_threshold", -0.1),
            ("default_depth", 0),
            ("default_depth", 5),
            ("temperature", 3.0),
            ("llm_timeout", 0),
            ("default_output_format", "prose"),
        ],
    )
    def test_rejects_out_of_range(self, isolated, field, value):
        with pytest.raises(ValidationError):
            QaraConfig(**{field: value})

    def test_ensure_log_directory(self, isolated):
        config = QaraConfig(
            log_file=isolated / "logs" / "qara.log",
            events_log_file=isolated / "events" / "events.jsonl",
        )
        config.ensure_log_directory()

        assert (isolated / "logs").is_dir()
        assert (isolated / "events").is_dir()


class TestGetConfig:
    """Tests for the cached CLI configuration."""

    def test_cached_until_reset(self, isolated):
        first = get_config()
        assert get_config() is first

        reset_config()
        assert get_config() is not first
