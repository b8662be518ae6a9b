"""
Tests for configuration loading and validation.
"""

import json

import pytest
from pydantic import ValidationError

from image_checker.config.configuration import (
    BatchConfig,
    ConfigurationManager,
    LoggingConfig,
    load_config,
)
from image_checker.utils.error_handler import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run every test in an empty directory without IMAGE_CHECKER_* variables."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "IMAGE_CHECKER_CONCURRENCY",
        "IMAGE_CHECKER_REQUEST_TIMEOUT",
        "IMAGE_CHECKER_MAX_ATTEMPTS",
        "IMAGE_CHECKER_BATCH_DELAY",
        "IMAGE_CHECKER_CACHE_TTL",
        "IMAGE_CHECKER_USER_AGENT",
        "IMAGE_CHECKER_LOG_LEVEL",
        "IMAGE_CHECKER_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Default values."""

    def test_defaults(self):
        config = load_config()

        assert config.batch.concurrency == 3
        assert config.batch.request_timeout == 8.0
        assert config.batch.max_attempts == 2
        assert config.batch.backoff_base == 1.0
        assert config.batch.batch_delay == 0.5
        assert config.batch.max_content_length == 10 * 1024 * 1024
        assert config.cache.ttl_seconds == 300.0
        assert config.http.url_field == "imageUrl"
        assert config.logging.level == "INFO"


class TestModelValidation:
    """Field range checks."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("concurrency", 0),
            ("request_timeout", 0),
            ("max_attempts", 0),
            ("backoff_base", -1),
            ("batch_delay", -0.1),
        ],
    )
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            BatchConfig(**{field: value})

    def test_high_concurrency_warns(self):
        with pytest.warns(UserWarning, match="High concurrency"):
            BatchConfig(concurrency=20)

    def test_log_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="chatty")


class TestConfigurationFiles:
    """Loading from TOML and JSON files."""

    def test_toml_file(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text(
            "[batch]\nconcurrency = 5\nrequest_timeout = 3.5\n\n"
            "[cache]\nttl_seconds = 60\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.batch.concurrency == 5
        assert config.batch.request_timeout == 3.5
        assert config.cache.ttl_seconds == 60

    def test_json_file(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"http": {"user_agent": "Bot/1"}}), encoding="utf-8")

        assert load_config(path).http.user_agent == "Bot/1"

    def test_default_file_in_working_directory(self, tmp_path):
        (tmp_path / "image_checker.toml").write_text(
            "[batch]\nmax_attempts = 4\n", encoding="utf-8"
        )

        assert load_config().batch.max_attempts == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "nope.toml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("batch: {}", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Unsupported configuration"):
            load_config(path)

    def test_malformed_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[batch\nconcurrency = ", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Failed to load"):
            load_config(path)

    def test_invalid_value_reports_location(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"batch": {"concurrency": 0}}), encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert "batch.concurrency" in str(exc_info.value)


class TestEnvironmentOverrides:
    """IMAGE_CHECKER_* environment variables."""

    def test_env_overrides_defaults(self, monkeypatch):
        monkeypatch.setenv("IMAGE_CHECKER_CONCURRENCY", "5")
        monkeypatch.setenv("IMAGE_CHECKER_CACHE_TTL", "30")
        monkeypatch.setenv("IMAGE_CHECKER_LOG_LEVEL", "debug")

        config = load_config()

        assert config.batch.concurrency == 5
        assert config.cache.ttl_seconds == 30.0
        assert config.logging.level == "DEBUG"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.toml"
        path.write_text("[batch]\nrequest_timeout = 3\n", encoding="utf-8")
        monkeypatch.setenv("IMAGE_CHECKER_REQUEST_TIMEOUT", "12")

        assert load_config(path).batch.request_timeout == 12.0

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("IMAGE_CHECKER_MAX_ATTEMPTS", "many")

        with pytest.raises(ConfigurationError, match="batch.max_attempts"):
            ConfigurationManager()

    def test_empty_env_value_ignored(self, monkeypatch):
        monkeypatch.setenv("IMAGE_CHECKER_CONCURRENCY", "")

        assert load_config().batch.concurrency == 3
