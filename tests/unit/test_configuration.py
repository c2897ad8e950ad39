"""
Unit tests for configuration loading, precedence and source tracking.
"""

import pytest

from usersapi.config.properties import (
    ConfigurationProperties,
    get_config,
    log_config_sources,
)
from usersapi.exceptions import ConfigurationException


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary YAML config file."""
    path = tmp_path / "custom.yml"
    path.write_text(
        """
server:
  host: 127.0.0.1
  port: 9000

database:
  url: postgresql://localhost/testdb
  connect:
    max_attempts: 3

app:
  name: TestApp
  debug: true
"""
    )
    return path


class TestDefaults:
    def test_packaged_defaults(self, tmp_path):
        config = ConfigurationProperties(base_dir=str(tmp_path))

        assert config.get("server.port") == 8000
        assert config.get("server.host") == "0.0.0.0"
        assert config.get("database.connect.max_attempts") == 5
        assert config.get("database.connect.base_delay") == 1.0
        assert config.get("logging.level") == "INFO"
        assert config.get("cors.allow_origin") == "*"

    def test_database_url_has_no_default(self, tmp_path):
        config = ConfigurationProperties(base_dir=str(tmp_path))
        assert config.get("database.url") is None


class TestConfigurationLoading:
    def test_load_config_from_file(self, tmp_path, temp_config_file):
        config = ConfigurationProperties(base_dir=str(tmp_path))
        config.load_from_file(temp_config_file)

        assert config.get("server.port") == 9000
        assert config.get("server.host") == "127.0.0.1"
        assert config.get("database.url") == "postgresql://localhost/testdb"
        assert config.get("app.name") == "TestApp"

    def test_merge_keeps_sibling_defaults(self, tmp_path, temp_config_file):
        config = ConfigurationProperties(base_dir=str(tmp_path))
        config.load_from_file(temp_config_file)

        assert config.get("database.connect.max_attempts") == 3
        assert config.get("database.connect.base_delay") == 1.0

    def test_get_with_default(self, tmp_path):
        config = ConfigurationProperties(base_dir=str(tmp_path))

        assert config.get("nonexistent.key", "default_value") == "default_value"
        assert config.get("also.missing", 42) == 42

    def test_get_bool(self, tmp_path, temp_config_file):
        config = ConfigurationProperties(base_dir=str(tmp_path))
        config.load_from_file(temp_config_file)

        assert config.get_bool("app.debug") is True
        assert config.get_bool("app.production", False) is False

    def test_get_bool_from_string(self, tmp_path):
        config = ConfigurationProperties(base_dir=str(tmp_path))
        config.set("feature.enabled", "yes")
        config.set("feature.disabled", "off")

        assert config.get_bool("feature.enabled") is True
        assert config.get_bool("feature.disabled") is False

    def test_get_bool_invalid(self, tmp_path):
        config = ConfigurationProperties(base_dir=str(tmp_path))
        config.set("feature.enabled", "maybe")

        with pytest.raises(ConfigurationException):
            config.get_bool("feature.enabled")

    def test_get_int_and_float(self, tmp_path):
        config = ConfigurationProperties(base_dir=str(tmp_path))
        config.set("numbers.int", "12")
        config.set("numbers.float", "0.5")

        assert config.get_int("numbers.int") == 12
        assert config.get_float("numbers.float") == 0.5
        assert config.get_int("numbers.missing") is None

    def test_get_int_invalid(self, tmp_path):
        config = ConfigurationProperties(base_dir=str(tmp_path))
        config.set("numbers.int", "twelve")

        with pytest.raises(ConfigurationException, match="numbers.int"):
            config.get_int("numbers.int")

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "application.yml").write_text("server: [unclosed\n")

        with pytest.raises(ConfigurationException, match="Invalid YAML"):
            ConfigurationProperties(base_dir=str(tmp_path))

    def test_non_mapping_yaml(self, tmp_path):
        (tmp_path / "application.yml").write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationException):
            ConfigurationProperties(base_dir=str(tmp_path))


class TestPrecedence:
    def test_application_yml_overrides_defaults(self, tmp_path):
        (tmp_path / "application.yml").write_text("server:\n  port: 9100\n")

        config = ConfigurationProperties(base_dir=str(tmp_path))

        assert config.get("server.port") == 9100
        assert config.get_config_sources()["server.port"] == "application.yml"

    def test_profile_overrides_application_yml(self, tmp_path):
        (tmp_path / "application.yml").write_text("server:\n  port: 9100\n")
        (tmp_path / "application-dev.yml").write_text(
            "server:\n  port: 9200\nlogging:\n  level: DEBUG\n"
        )

        config = ConfigurationProperties(profile="dev", base_dir=str(tmp_path))

        assert config.get("server.port") == 9200
        assert config.get("logging.level") == "DEBUG"
        sources = config.get_config_sources()
        assert sources["server.port"] == "application-dev.yml"

    def test_profile_from_environment(self, tmp_path, monkeypatch):
        (tmp_path / "application-test.yml").write_text("server:\n  port: 9300\n")
        monkeypatch.setenv("USERS_API_PROFILE", "test")

        config = ConfigurationProperties(base_dir=str(tmp_path))

        assert config.profile == "test"
        assert config.get("server.port") == 9300

    def test_database_url_environment_overrides_files(self, tmp_path, monkeypatch):
        (tmp_path / "application.yml").write_text(
            "database:\n  url: sqlite:///from-file.db\n"
        )
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db/users")

        config = ConfigurationProperties(base_dir=str(tmp_path))

        assert config.get("database.url") == "postgres://u:p@db/users"
        assert (
            config.get_config_sources()["database.url"]
            == "environment variable (DATABASE_URL)"
        )

    def test_environment_fallback_for_unknown_keys(self, tmp_path, monkeypatch):
        monkeypatch.setenv("USERS_API_CUSTOM_API_KEY", "test-key")

        config = ConfigurationProperties(base_dir=str(tmp_path))

        assert config.get("custom.api_key") == "test-key"
        assert (
            config.get_config_sources()["custom.api_key"]
            == "environment variable (USERS_API_CUSTOM_API_KEY)"
        )

    def test_config_files_win_over_environment_fallback(self, tmp_path, monkeypatch):
        monkeypatch.setenv("USERS_API_SERVER_PORT", "1234")

        config = ConfigurationProperties(base_dir=str(tmp_path))

        assert config.get("server.port") == 8000
        assert config.get_config_sources()["server.port"] == "default configuration"


class TestConfigSources:
    def test_sources_sorted(self, tmp_path):
        config = ConfigurationProperties(base_dir=str(tmp_path))
        keys = list(config.get_config_sources().keys())
        assert keys == sorted(keys)

    def test_defaults_tracked(self, tmp_path):
        sources = ConfigurationProperties(base_dir=str(tmp_path)).get_config_sources()
        assert sources["server.port"] == "default configuration"
        assert sources["logging.format"] == "default configuration"


class MockLogger:
    """Mock logger for testing log output."""

    def __init__(self):
        self.messages = []

    def info(self, msg):
        self.messages.append(msg)


class TestLogConfigSources:
    def test_groups_by_source(self, tmp_path):
        (tmp_path / "application.yml").write_text("server:\n  port: 9100\n")
        config = ConfigurationProperties(base_dir=str(tmp_path))
        logger = MockLogger()

        log_config_sources(config, logger, max_cols=2)

        assert logger.messages[0] == "Configuration sources:"
        assert "[default configuration]" in logger.messages
        assert "[application.yml]" in logger.messages

    def test_table_borders(self, tmp_path):
        logger = MockLogger()

        log_config_sources(
            ConfigurationProperties(base_dir=str(tmp_path)), logger, max_cols=3
        )

        assert any("┌" in msg and "┐" in msg for msg in logger.messages)
        assert any("└" in msg and "┘" in msg for msg in logger.messages)
        assert any("│" in msg for msg in logger.messages)

    def test_single_column(self, tmp_path):
        logger = MockLogger()

        log_config_sources(
            ConfigurationProperties(base_dir=str(tmp_path)), logger, max_cols=1
        )

        table_lines = [msg for msg in logger.messages if "│" in msg]
        assert table_lines
        for line in table_lines:
            assert line.count("│") == 2
            assert len(line.strip("│ ").split()) == 1


class TestGlobalConfig:
    def test_loaded_once_from_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "application.yml").write_text("server:\n  port: 9100\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("usersapi.config.properties._config", None)

        config = get_config()

        assert config.get_int("server.port") == 9100
        assert get_config() is config
