"""Tests for the command line application."""

import json
import sys
from unittest.mock import MagicMock, patch

import pytest

from switchbot_client import app
from switchbot_client.errors import RemoteError, TransportError


@pytest.fixture(autouse=True)
def env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SWITCHBOT_TOKEN", "tok")
    monkeypatch.setenv("SWITCHBOT_SECRET", "s3cr3t")
    monkeypatch.delenv("SWITCHBOT_API_URL", raising=False)


@pytest.fixture
def client():
    with patch("switchbot_client.app.SwitchBotClient") as client_cls:
        instance = client_cls.return_value
        instance.__enter__.return_value = instance
        yield client_cls


def run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["switchbot", *args])
    app.main()


class TestCommands:
    """Test command dispatch and output."""

    def test_help(self, monkeypatch, capsys):
        """Should print help without arguments."""
        run(monkeypatch)
        assert "Commands:" in capsys.readouterr().out

    def test_devices(self, monkeypatch, capsys, client):
        """Should list devices with the env credentials."""
        client.return_value.list_devices.return_value = {
            "deviceList": [{"deviceId": "ABC123", "deviceName": "Bot", "deviceType": "Bot"}],
            "infraredRemoteList": [{"deviceId": "IR1", "deviceName": "TV", "remoteType": "TV"}]
        }

        run(monkeypatch, "devices")

        out = capsys.readouterr().out
        assert "ABC123" in out
        assert "IR1" in out
        client.assert_called_once_with("tok", "s3cr3t", api_url="https://api.switch-bot.com")

    def test_status_json(self, monkeypatch, capsys, client):
        """Should print the status body as JSON."""
        client.return_value.get_device_status.return_value = {"power": "on"}

        run(monkeypatch, "status", "ABC123", "--json")

        data = json.loads(capsys.readouterr().out)
        assert data == {"success": True, "device_id": "ABC123", "body": {"power": "on"}}
        client.return_value.get_device_status.assert_called_once_with("ABC123")

    def test_command_default_parameter(self, monkeypatch, client):
        """Should send 'default' when no parameter is given."""
        client.return_value.set_device_status.return_value = {}

        run(monkeypatch, "command", "ABC123", "turnOn")

        client.return_value.set_device_status.assert_called_once_with("ABC123", "turnOn", "default")

    def test_command_with_parameter_and_flags(self, monkeypatch, client):
        """Should take credentials and URL from flags."""
        client.return_value.set_device_status.return_value = {}

        run(monkeypatch, "command", "ABC123", "setColor", "255:0:0",
            "--token", "t2", "--secret", "s2", "--api-url", "http://localhost:9000")

        client.assert_called_once_with("t2", "s2", api_url="http://localhost:9000")
        client.return_value.set_device_status.assert_called_once_with("ABC123", "setColor", "255:0:0")

    def test_sign(self, monkeypatch, capsys):
        """Should print Authorization, sign, nonce and t."""
        run(monkeypatch, "sign", "--json")

        data = json.loads(capsys.readouterr().out)
        assert set(data) == {"Authorization", "sign", "nonce", "t"}
        assert data["Authorization"] == "tok"

    def test_config_saves_url(self, monkeypatch, capsys, tmp_path):
        """Should save --api-url to .switchbot."""
        run(monkeypatch, "config", "--api-url", "http://localhost:9000")

        assert "http://localhost:9000" in capsys.readouterr().out
        assert "api_url" in (tmp_path / ".switchbot").read_text()


class TestFailures:
    """Test exit codes on errors."""

    def test_remote_error_json(self, monkeypatch, capsys, client):
        """Should exit 1 with a JSON error on RemoteError."""
        client.return_value.list_devices.side_effect = RemoteError(401, message="Unauthorized")

        with pytest.raises(SystemExit) as exc_info:
            run(monkeypatch, "devices", "--json")

        assert exc_info.value.code == 1
        data = json.loads(capsys.readouterr().out)
        assert data["success"] is False
        assert "Unauthorized" in data["error"]

    def test_transport_error(self, monkeypatch, capsys, client):
        """Should exit 1 on TransportError."""
        client.return_value.get_device_status.side_effect = TransportError("Connection aborted")

        with pytest.raises(SystemExit) as exc_info:
            run(monkeypatch, "status", "ABC123")

        assert exc_info.value.code == 1
        assert "Connection aborted" in capsys.readouterr().out

    def test_missing_credentials(self, monkeypatch, capsys, client):
        """Should exit 1 when no token is available."""
        monkeypatch.delenv("SWITCHBOT_TOKEN")

        with pytest.raises(SystemExit) as exc_info:
            run(monkeypatch, "devices")

        assert exc_info.value.code == 1
        assert "SWITCHBOT_TOKEN" in capsys.readouterr().out
        client.assert_not_called()

    def test_status_requires_device_id(self, monkeypatch):
        """Should exit 1 without a device id."""
        with pytest.raises(SystemExit):
            run(monkeypatch, "status")

    def test_unknown_command(self, monkeypatch):
        """Should exit 1 on an unknown command."""
        with pytest.raises(SystemExit):
            run(monkeypatch, "bogus")

    def test_unknown_option(self, monkeypatch):
        """Should exit 1 on an unknown option."""
        with pytest.raises(SystemExit):
            run(monkeypatch, "devices", "--bogus")

    def test_missing_option_value(self, monkeypatch, capsys):
        """Should report a missing value for a trailing --token."""
        with pytest.raises(SystemExit) as exc_info:
            run(monkeypatch, "devices", "--token")

        assert exc_info.value.code == 1
        assert "Missing value for --token" in capsys.readouterr().out

    def test_unknown_option_json(self, monkeypatch, capsys):
        """Should report option errors as JSON when --json comes later."""
        with pytest.raises(SystemExit) as exc_info:
            run(monkeypatch, "devices", "--bogus", "--json")

        assert exc_info.value.code == 1
        data = json.loads(capsys.readouterr().out)
        assert data == {"success": False, "error": "Unknown option: --bogus"}
