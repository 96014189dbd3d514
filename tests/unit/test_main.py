"""
Unit tests for the command line entry point.
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from zappingtv import main as cli
from zappingtv.services.api_client import ZappingAPIClient

CATALOG = {
    "data": {
        "a": {"number": 7, "name": "Canal 13", "url": "https://cdn.example.com/c13.m3u8"},
        "b": {"number": 2, "name": "TVN", "url": "https://cdn.example.com/tvn.m3u8"},
    }
}


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "setup_from_config", MagicMock())


@pytest.fixture
def saved_token(temp_dir):
    (temp_dir / "token").write_text("device-token")


@pytest.fixture
def upstream(monkeypatch):
    """Serve API calls from a handler instead of the network."""
    state = {"handler": lambda request: httpx.Response(200, json=CATALOG)}

    def factory(config):
        return ZappingAPIClient(
            config,
            transport=httpx.MockTransport(lambda request: state["handler"](request)),
        )

    monkeypatch.setattr(cli, "ZappingAPIClient", factory)
    return state


@pytest.mark.unit
class TestArguments:
    """Argument validation."""

    def test_time_requires_channel(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--time", "2 hours ago"])

        assert exc_info.value.code == 2

    def test_until_requires_time(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--channel", "13", "--until", "1 hour ago"])

        assert exc_info.value.code == 2

    def test_examples(self, capsys):
        assert cli.main(["--examples"]) == 0

        out = capsys.readouterr().out
        assert "Supported time expressions:" in out
        assert "  - yesterday at 3pm" in out

    def test_invalid_time_fails_before_network(self, capsys, upstream):
        upstream["handler"] = MagicMock(side_effect=AssertionError("no request expected"))

        assert cli.main(["--channel", "13", "--time", "next year"]) == 1

        err = capsys.readouterr().err
        assert "Invalid time expression: next year" in err
        assert "--examples" in err
        upstream["handler"].assert_not_called()

    def test_logout(self, temp_dir, saved_token, capsys):
        assert cli.main(["--logout"]) == 0

        assert not (temp_dir / "token").exists()
        assert "Device token removed" in capsys.readouterr().out

    def test_logout_without_token(self, capsys):
        assert cli.main(["--logout"]) == 0

        assert "No saved device token" in capsys.readouterr().out


@pytest.mark.unit
class TestResolveWindow:
    """Tests for resolve_window."""

    def test_start_only(self, reference_now):
        start, end = cli.resolve_window("2 hours ago", now=reference_now)

        assert start.timestamp == 1718445600
        assert end is None

    def test_start_and_end(self, reference_now):
        start, end = cli.resolve_window("3 hours ago", "1 hour ago", now=reference_now)

        assert end.timestamp - start.timestamp == 7200

    def test_end_before_start(self, reference_now):
        with pytest.raises(cli.TimeWindowError, match="must be after"):
            cli.resolve_window("1 hour ago", "3 hours ago", now=reference_now)

    def test_unresolvable_end(self, reference_now):
        with pytest.raises(cli.TimeWindowError, match="Invalid time expression: next week"):
            cli.resolve_window("1 hour ago", "next week", now=reference_now)


@pytest.mark.unit
class TestRun:
    """Authenticated commands against a fake upstream."""

    def test_list_channels(self, saved_token, upstream, capsys):
        assert cli.main(["--list"]) == 0

        out = capsys.readouterr().out
        assert "  2: TVN" in out
        assert out.index("2: TVN") < out.index("7: Canal 13")

    def test_expired_token_suggests_logout(self, saved_token, upstream, capsys):
        upstream["handler"] = lambda request: httpx.Response(401, json={"message": "Invalid token"})

        assert cli.main(["--list"]) == 1

        err = capsys.readouterr().err
        assert "HTTP 401: Invalid token" in err
        assert "--logout" in err

    def test_unknown_channel(self, saved_token, upstream, capsys):
        assert cli.main(["--channel", "bbc"]) == 1

        assert "Channel not found: bbc" in capsys.readouterr().err

    def test_plays_at_resolved_time(self, saved_token, upstream, monkeypatch):
        player = MagicMock()
        player.play_channel_at_time = AsyncMock(return_value=0)
        monkeypatch.setattr(cli, "PlayerService", MagicMock(return_value=player))
        cli.PlayerService.check_mpv_available = AsyncMock(return_value=True)

        assert cli.main(["--channel", "tvn", "--time", "2 hours ago"]) == 0

        channel, token, start, end = player.play_channel_at_time.await_args.args
        assert channel.number == 2
        assert token == "device-token"
        assert isinstance(start, int)
        assert end is None

    def test_plays_live(self, saved_token, upstream, monkeypatch):
        player = MagicMock()
        player.play_channel = AsyncMock(return_value=0)
        monkeypatch.setattr(cli, "PlayerService", MagicMock(return_value=player))
        cli.PlayerService.check_mpv_available = AsyncMock(return_value=True)

        assert cli.main(["-c", "7"]) == 0

        player.play_channel.assert_awaited_once()
        assert player.play_channel.await_args.args[0].name == "Canal 13"

    def test_missing_mpv(self, saved_token, upstream, monkeypatch, capsys):
        monkeypatch.setattr(
            cli.PlayerService, "check_mpv_available", AsyncMock(return_value=False)
        )

        assert cli.main(["-c", "7"]) == 1

        assert "MPV player not found" in capsys.readouterr().err
