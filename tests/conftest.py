"""
ZappingTV Test Configuration

Shared fixtures and configuration for all tests.
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest

from zappingtv.services.models import Channel


# ============ Time Fixtures ============


@pytest.fixture
def reference_now() -> datetime:
    """Fixed reference instant: Saturday 2024-06-15 12:00 UTC."""
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


# ============ Temporary File Fixtures ============


@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(scope="function")
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_file = temp_dir / "config.yaml"
    config_content = f"""
api:
  user_agent: "ZappingTest/1.0"
  timeout: 5

player:
  path: "/usr/local/bin/mpv"
  heartbeat_interval: 10

credentials:
  token_file: "{temp_dir / 'token'}"

logging:
  level: "DEBUG"
  file: "{temp_dir / 'zappingtv.log'}"
"""
    config_file.write_text(config_content)
    return config_file


@pytest.fixture(autouse=True)
def isolated_environment(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the real token, log file and config."""
    monkeypatch.setenv("ZAPPINGTV_TOKEN_FILE", str(temp_dir / "token"))
    monkeypatch.setenv("ZAPPINGTV_LOG_FILE", str(temp_dir / "zappingtv.log"))
    monkeypatch.chdir(temp_dir)


# ============ Catalog Fixtures ============


@pytest.fixture
def channels() -> list[Channel]:
    """A small channel catalog sorted by number."""
    return [
        Channel(number=2, name="TVN", url="https://cdn.example.com/tvn/index.m3u8"),
        Channel(number=7, name="Canal 13", url="https://cdn.example.com/c13/index.m3u8"),
        Channel(number=13, name="Mega", url="https://cdn.example.com/mega/index.m3u8?hd=1"),
        Channel(number=24, name="24 Horas", url="https://cdn.example.com/24h/index.m3u8"),
    ]


# ============ Pytest Configuration ============


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "network: Network access required")
