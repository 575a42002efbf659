# Browser automation configuration

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from dotenv import load_dotenv


PROJECT_DIR = Path(__file__).parent.parent
ENV_FILE = PROJECT_DIR / ".env"

# Challenge defaults
BASE_URL = "https://www.theautomationchallenge.com/"
EXCEL_PATH = PROJECT_DIR / "data" / "challenge.xlsx"
SHEET_NAME = "data"
MAX_ROWS = 50

RUN_LOG_DIR = PROJECT_DIR / "logs" / "runs"

# Browser settings
VIEWPORT = {"width": 1400, "height": 900}

# Bubble generates ids like ein_input_field_2, ein_input_field_9 ...
# Only the prefix survives a form regeneration.
ID_PATTERNS = {
    "employer_identification_number": "ein_input_field_",
    "company_name": "company_name_input_field_",
    "sector": "sector_input_field_",
    "company_address": "address_input_field_",
    "automation_tool": "automation_tool_input_field_",
    "annual_automation_saving": "annual_saving_input_field_",
    "date_of_first_project": "date_input_field_",
}

INPUT_TAGS = ("input", "textarea", "select")

# Selectors
POPUP_SELECTOR = ".bubble-element.Popup"
POPUP_CONFIRM_SELECTOR = "button.bubble-element.Button.clickable-element"
GREYOUT_SELECTOR = ".greyout"
VISIBLE_INPUT_SELECTOR = "input:visible"


@dataclass(frozen=True)
class Timeouts:
    """Timeouts in milliseconds."""
    default: int = 30000
    form_ready: int = 10000
    login: int = 10000
    settle: int = 150
    poll_interval: int = 50


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, password='***')"


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class RunConfig:
    """Settings for one run. Built once in main and passed to each component."""
    base_url: str = BASE_URL
    excel_path: Path = EXCEL_PATH
    sheet_name: str = SHEET_NAME
    max_rows: int = MAX_ROWS
    headless: bool = False
    slow_mo: int = 0
    write_run_log: bool = True
    run_log_dir: Path = RUN_LOG_DIR
    timeouts: Timeouts = field(default_factory=Timeouts)
    id_patterns: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(ID_PATTERNS)))

    @classmethod
    def from_env(cls, env_file: Optional[Path] = ENV_FILE, **overrides) -> "RunConfig":
        """
        Build config from defaults, then environment, then explicit overrides.

        Overrides whose value is None are ignored so argparse results can be
        passed straight through.
        """
        if env_file is not None and Path(env_file).exists():
            load_dotenv(env_file)

        config = cls()
        env_values = {
            "base_url": os.getenv("CHALLENGE_BASE_URL"),
            "excel_path": os.getenv("CHALLENGE_EXCEL_PATH"),
            "sheet_name": os.getenv("CHALLENGE_SHEET_NAME"),
        }
        config = config.with_overrides(**env_values)
        return config.with_overrides(**overrides)

    def with_overrides(self, **overrides) -> "RunConfig":
        values = {k: v for k, v in overrides.items() if v is not None}
        if "excel_path" in values:
            values["excel_path"] = Path(values["excel_path"])
        if "run_log_dir" in values:
            values["run_log_dir"] = Path(values["run_log_dir"])
        if "id_patterns" in values:
            values["id_patterns"] = MappingProxyType(dict(values["id_patterns"]))
        if "max_rows" in values and int(values["max_rows"]) < 1:
            raise ConfigError(f"max_rows must be positive, got {values['max_rows']}")
        return replace(self, **values)


def load_credentials(env_file: Optional[Path] = ENV_FILE) -> Credentials:
    """Read EMAIL / PASSWORD from the environment (after loading .env)."""
    if env_file is not None and Path(env_file).exists():
        load_dotenv(env_file)

    email = os.getenv("EMAIL", "").strip()
    password = os.getenv("PASSWORD", "")

    missing = [name for name, value in (("EMAIL", email), ("PASSWORD", password)) if not value]
    if missing:
        raise ConfigError(f"Missing credentials in environment: {', '.join(missing)}")

    return Credentials(email=email, password=password)
