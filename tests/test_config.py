"""
Tests for browser/config.py
"""

import os
import sys
import pytest
from pathlib import Path
from dataclasses import FrozenInstanceError
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from browser.config import (
    ID_PATTERNS,
    MAX_ROWS,
    ConfigError,
    Credentials,
    RunConfig,
    Timeouts,
    load_credentials,
)


@pytest.fixture
def clean_env(monkeypatch):
    """Environment without challenge variables; restored after the test (load_dotenv writes os.environ)."""
    with patch.dict(os.environ):
        for name in ("EMAIL", "PASSWORD", "CHALLENGE_BASE_URL", "CHALLENGE_EXCEL_PATH", "CHALLENGE_SHEET_NAME"):
            monkeypatch.delenv(name, raising=False)
        yield monkeypatch


class TestRunConfig:

    def test_defaults(self):
        config = RunConfig()

        assert config.base_url == "https://www.theautomationchallenge.com/"
        assert config.sheet_name == "data"
        assert config.max_rows == MAX_ROWS == 50
        assert config.timeouts == Timeouts()
        assert config.id_patterns == ID_PATTERNS

    def test_id_patterns_cover_all_columns(self):
        assert set(ID_PATTERNS) == {
            "employer_identification_number",
            "company_name",
            "sector",
            "company_address",
            "automation_tool",
            "annual_automation_saving",
            "date_of_first_project",
        }

    def test_frozen(self):
        config = RunConfig()

        with pytest.raises(FrozenInstanceError):
            config.max_rows = 10

    def test_id_patterns_read_only(self):
        """A frozen config must not be changed through its pattern mapping."""
        config = RunConfig()

        with pytest.raises(TypeError):
            config.id_patterns["sector"] = "other_"

        assert config.id_patterns["sector"] == "sector_input_field_"

    def test_id_patterns_override_copied(self):
        patterns = {"custom": "x_"}
        config = RunConfig().with_overrides(id_patterns=patterns)

        patterns["custom"] = "y_"

        assert config.id_patterns == {"custom": "x_"}
        with pytest.raises(TypeError):
            config.id_patterns["custom"] = "z_"

    def test_from_env_reads_overrides(self, clean_env, tmp_path):
        clean_env.setenv("CHALLENGE_BASE_URL", "http://localhost:8000/")
        clean_env.setenv("CHALLENGE_SHEET_NAME", "Sheet2")

        config = RunConfig.from_env(env_file=None)

        assert config.base_url == "http://localhost:8000/"
        assert config.sheet_name == "Sheet2"

    def test_explicit_overrides_beat_env(self, clean_env):
        clean_env.setenv("CHALLENGE_SHEET_NAME", "Sheet2")

        config = RunConfig.from_env(env_file=None, sheet_name="cli", max_rows=None, headless=True)

        assert config.sheet_name == "cli"
        assert config.max_rows == 50
        assert config.headless is True

    def test_excel_path_coerced(self, clean_env):
        config = RunConfig.from_env(env_file=None, excel_path="some/file.xlsx")

        assert config.excel_path == Path("some/file.xlsx")

    def test_env_file_loaded(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("CHALLENGE_SHEET_NAME=fromfile\n")

        config = RunConfig.from_env(env_file=env_file)

        assert config.sheet_name == "fromfile"

    def test_non_positive_max_rows_rejected(self):
        with pytest.raises(ConfigError):
            RunConfig().with_overrides(max_rows=0)


class TestLoadCredentials:

    def test_present(self, clean_env):
        clean_env.setenv("EMAIL", "  bot@example.com ")
        clean_env.setenv("PASSWORD", "s3cret")

        creds = load_credentials(env_file=None)

        assert creds == Credentials("bot@example.com", "s3cret")

    def test_missing_both(self, clean_env):
        with pytest.raises(ConfigError) as exc_info:
            load_credentials(env_file=None)

        assert "EMAIL" in str(exc_info.value)
        assert "PASSWORD" in str(exc_info.value)

    def test_missing_password(self, clean_env):
        clean_env.setenv("EMAIL", "bot@example.com")

        with pytest.raises(ConfigError) as exc_info:
            load_credentials(env_file=None)

        assert "PASSWORD" in str(exc_info.value)
        assert "EMAIL" not in str(exc_info.value)

    def test_repr_hides_password(self):
        assert "s3cret" not in repr(Credentials("a@b.c", "s3cret"))
