"""Tests for the CLI entry point — configuration fallbacks, startup failures, end-to-end file run."""

from unittest.mock import patch

import pytest

from sshwatch import main as cli


@pytest.fixture
def no_secret(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "_SECRETS_PATH", str(tmp_path / "no-such-secret"))
    monkeypatch.delenv(cli._ENV_VAR, raising=False)


@pytest.fixture
def quiet_signals():
    with patch("sshwatch.main.signal"):
        yield


class TestWebhookUrl:
    def test_flag_wins(self, no_secret, monkeypatch):
        monkeypatch.setenv(cli._ENV_VAR, "https://env.example.test")
        assert cli._read_webhook_url("https://flag.example.test") == "https://flag.example.test"

    def test_secret_file(self, tmp_path, monkeypatch):
        secret = tmp_path / "secret"
        secret.write_text("https://secret.example.test\n")
        monkeypatch.setattr(cli, "_SECRETS_PATH", str(secret))
        monkeypatch.setenv(cli._ENV_VAR, "https://env.example.test")
        assert cli._read_webhook_url(None) == "https://secret.example.test"

    def test_env_var(self, no_secret, monkeypatch):
        monkeypatch.setenv(cli._ENV_VAR, "https://env.example.test")
        assert cli._read_webhook_url(None) == "https://env.example.test"

    def test_nothing_configured(self, no_secret):
        assert cli._read_webhook_url(None) is None


class TestStartupFailures:
    def test_missing_webhook(self, no_secret, tmp_path, capsys):
        assert cli.main(["--log", str(tmp_path / "m.log")]) == 1
        assert "webhook" in capsys.readouterr().err
        assert not (tmp_path / "m.log").exists()

    def test_unopenable_log(self, tmp_path, quiet_signals):
        rc = cli.main(["--webhook", "https://hooks.example.test",
                       "--log", str(tmp_path / "missing-dir" / "m.log")])
        assert rc == 1

    def test_bad_patterns_file(self, tmp_path):
        rc = cli.main(["--webhook", "https://hooks.example.test",
                       "--log", str(tmp_path / "m.log"),
                       "--patterns", str(tmp_path / "nope.yml")])
        assert rc == 1

    def test_missing_source_file(self, tmp_path, quiet_signals, capsys):
        rc = cli.main(["--webhook", "https://hooks.example.test",
                       "--log", str(tmp_path / "m.log"),
                       "--source", "file", "--file", str(tmp_path / "auth.log")])
        assert rc == 1
        assert "Error attaching event source" in capsys.readouterr().err


class TestFileRun:
    def test_end_to_end(self, tmp_path, quiet_signals):
        auth = tmp_path / "auth.log"
        lines = [
            f"Oct 19 10:00:0{i} bastion sshd[{100 + i}]: "
            f"Failed password for root from 10.0.0.{i} port 22 ssh2"
            for i in range(1, 8)
        ]
        auth.write_text("\n".join(lines) + "\n")
        log = tmp_path / "ssh_monitor.log"

        with patch("sshwatch.main.WebhookNotifier") as notifier_cls, \
                patch("sshwatch.main.IpApiResolver") as geo_cls:
            geo_cls.return_value.lookup.return_value = "Unknown"
            rc = cli.main(["--webhook", "https://hooks.example.test",
                           "--log", str(log),
                           "--source", "file", "--file", str(auth)])

        assert rc == 0
        sent = [c.args[0] for c in notifier_cls.return_value.send.call_args_list]
        # start + 6 activity alerts + 1 block alert; the 7th line is suppressed
        assert len(sent) == 8
        assert sent[0].startswith("🔒 SSH Monitor Started")
        assert sent[-1] == "🚫 Subnet `10.0.0.0/24` blocked > 6 attempts in the last minute"
        notifier_cls.assert_called_once_with("https://hooks.example.test", timeout=10.0)

        text = log.read_text()
        assert text.count("] Raw: ") == 7
        assert "Blocked attempt from 10.0.0.7 (subnet 10.0.0.0/24)" in text

    def test_custom_threshold_and_window(self, tmp_path, quiet_signals):
        auth = tmp_path / "auth.log"
        auth.write_text(
            "sshd[1]: Failed password for root from 10.0.0.1 port 22 ssh2\n"
            "sshd[2]: Failed password for root from 10.0.0.2 port 22 ssh2\n"
        )
        with patch("sshwatch.main.WebhookNotifier") as notifier_cls, \
                patch("sshwatch.main.IpApiResolver") as geo_cls:
            geo_cls.return_value.lookup.return_value = "Unknown"
            rc = cli.main(["--webhook", "https://hooks.example.test",
                           "--log", str(tmp_path / "m.log"),
                           "--source", "file", "--file", str(auth),
                           "--threshold", "1", "--window", "30"])
        assert rc == 0
        sent = [c.args[0] for c in notifier_cls.return_value.send.call_args_list]
        assert sent[-1] == "🚫 Subnet `10.0.0.0/24` blocked > 2 attempts in the last 30 seconds"
