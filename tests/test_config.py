"""
Unit tests for pear_calc/config.py

Environment variables are set per test with monkeypatch.
"""
import pytest

from pear_calc.config import Config, get_config

_VARS = ("PEAR_LOG_LEVEL", "PEAR_FACTORS_FILE", "PEAR_API_CORS_ORIGINS", "PEAR_OUTPUT_DIR")


@pytest.fixture
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestGetConfig:

    def test_defaults(self, clean_env):
        assert get_config() == Config()

    def test_log_level_is_upper_cased(self, clean_env):
        clean_env.setenv("PEAR_LOG_LEVEL", "debug")
        assert get_config().log_level == "DEBUG"

    def test_invalid_log_level_raises(self, clean_env):
        clean_env.setenv("PEAR_LOG_LEVEL", "chatty")
        with pytest.raises(EnvironmentError):
            get_config()

    def test_cors_origins_are_split(self, clean_env):
        clean_env.setenv("PEAR_API_CORS_ORIGINS", "http://localhost:3000, https://pear.example ,")
        assert get_config().cors_origins == ["http://localhost:3000", "https://pear.example"]

    def test_output_dir(self, clean_env):
        clean_env.setenv("PEAR_OUTPUT_DIR", "reports")
        assert get_config().output_dir == "reports"

    def test_existing_factors_file(self, clean_env, tmp_path):
        path = tmp_path / "factors.json"
        path.write_text("{}", encoding="utf-8")
        clean_env.setenv("PEAR_FACTORS_FILE", str(path))
        assert get_config().factors_file == str(path)

    def test_missing_factors_file_raises(self, clean_env, tmp_path):
        clean_env.setenv("PEAR_FACTORS_FILE", str(tmp_path / "absent.json"))
        with pytest.raises(EnvironmentError):
            get_config()
