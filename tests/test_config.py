"""Tests for configuration loading."""

from datetime import datetime
from pathlib import Path

import pytest

from dayplan.config import DATA_DIR, Config, load_config


@pytest.fixture
def conf_file(tmp_path):
    path = tmp_path / "dayplan.conf"

    def write(text: str) -> Path:
        path.write_text(text)
        return path

    return write


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.conf")
        assert config == Config()

    def test_parses_values(self, conf_file):
        path = conf_file(
            "# dayplan settings\n"
            "DATA_FILE=~/planner/state.json\n"
            "HOST = 0.0.0.0\n"
            "PORT=8080\n"
            'TIMEZONE="America/Toronto" # local\n'
            "SERVER_URL=http://localhost:8080/\n"
            "REQUEST_TIMEOUT=2.5\n"
        )
        config = load_config(path)
        assert config.data_file == "~/planner/state.json"
        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.timezone == "America/Toronto"
        assert config.server_url == "http://localhost:8080"
        assert config.request_timeout == 2.5

    def test_unquoted_inline_comment(self, conf_file):
        config = load_config(conf_file("HOST=example.local # laptop\n"))
        assert config.host == "example.local"

    def test_invalid_port_keeps_default(self, conf_file):
        config = load_config(conf_file("PORT=eighty\n"))
        assert config.port == Config().port

    def test_ignores_junk_lines(self, conf_file):
        config = load_config(conf_file("not a setting\nUNKNOWN=1\n\n"))
        assert config == Config()


class TestConfig:
    def test_default_state_path(self):
        assert Config().state_path == DATA_DIR / "state.json"

    def test_state_path_expands_user(self):
        config = Config(data_file="~/planner/state.json")
        assert config.state_path == Path.home() / "planner" / "state.json"

    def test_now_local(self):
        assert Config().now().tzinfo is None

    def test_unknown_timezone_falls_back(self):
        assert isinstance(Config(timezone="Mars/Olympus").now(), datetime)
