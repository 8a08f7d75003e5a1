"""Configuration management for dayplan."""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DAYPLAN_HOME = Path(os.environ.get("DAYPLAN_HOME", Path.home() / "dayplan"))
CONFIG_FILE = DAYPLAN_HOME / "config" / "dayplan.conf"
DATA_DIR = DAYPLAN_HOME / "data"


@dataclass
class Config:
    """dayplan configuration."""

    data_file: str = ""
    host: str = "127.0.0.1"
    port: int = 3000
    # Empty means the machine's local time
    timezone: str = ""
    # When set, CLI commands talk to a running server instead of the local file
    server_url: str = ""
    request_timeout: float = 10.0

    @property
    def state_path(self) -> Path:
        """Resolve the state file, defaulting to DATA_DIR/state.json."""
        if self.data_file:
            return Path(self.data_file).expanduser()
        return DATA_DIR / "state.json"

    def now(self) -> datetime:
        """Current time in the configured timezone."""
        if not self.timezone:
            return datetime.now()
        try:
            return datetime.now(ZoneInfo(self.timezone))
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone {self.timezone!r}, using local time")
            return datetime.now()


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from dayplan.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "data_file":
                config.data_file = value
            case "host":
                config.host = value
            case "port":
                try:
                    config.port = int(value)
                except ValueError:
                    logger.warning(f"Invalid PORT {value!r}, keeping {config.port}")
            case "timezone":
                config.timezone = value
            case "server_url":
                config.server_url = value.rstrip("/")
            case "request_timeout":
                try:
                    config.request_timeout = float(value)
                except ValueError:
                    logger.warning(f"Invalid REQUEST_TIMEOUT {value!r}, keeping {config.request_timeout}")

    return config
