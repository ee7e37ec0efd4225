"""Unit tests for the CLI: Typer command registration and behavior.

Exercises the ``buildherald`` app via typer.testing.CliRunner.
"""

from __future__ import annotations

import json
import subprocess

from typer.testing import CliRunner

from buildherald.cli.app import app

runner = CliRunner()


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    """The CLI must register all expected commands and show help."""

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        # Typer's no_args_is_help may exit with 0 or 2 depending on version
        assert result.exit_code in (0, 2)
        assert "usage" in result.output.lower()

    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "host-info" in result.output
        assert "commits" in result.output
        assert "config" in result.output

    def test_host_info_command_exists(self):
        result = runner.invoke(app, ["host-info", "--help"])
        assert result.exit_code == 0

    def test_commits_command_exists(self):
        result = runner.invoke(app, ["commits", "--help"])
        assert result.exit_code == 0


# ---------------------------------------------------------------------------
# Test: host-info
# ---------------------------------------------------------------------------


class TestHostInfoCommand:
    def _write(self, tmp_path, data) -> str:
        path = tmp_path / "host.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    def test_prints_filtered_json(self, tmp_path):
        path = self._write(tmp_path, {
            "kind": "GitHubActions",
            "repository": "acme/widget",
            "run_id": 9,
            "actor": "dev",
            "token": "ghs_secret",
        })
        result = runner.invoke(app, ["host-info", path])
        assert result.exit_code == 0
        data = json.loads(result.stdout.strip())
        assert data["Repository"] == "acme/widget"
        assert data["RunId"] == 9
        assert "Token" not in data
        assert "Actor" not in data

    def test_authorized_flag_adds_sensitive_fields(self, tmp_path):
        path = self._write(tmp_path, {"kind": "GitHubActions", "token": "ghs_secret"})
        result = runner.invoke(app, ["host-info", path, "--authorized"])
        assert result.exit_code == 0
        assert json.loads(result.stdout.strip())["Token"] == "ghs_secret"

    def test_authorized_defaults_to_configuration(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BUILDHERALD_ENABLE_AUTHORIZED_ACTIONS", "true")
        path = self._write(tmp_path, {"kind": "TeamCity", "auth_password": "pw"})
        result = runner.invoke(app, ["host-info", path])
        assert result.exit_code == 0
        assert json.loads(result.stdout.strip())["AuthPassword"] == "pw"

    def test_unknown_kind_exits_nonzero(self, tmp_path):
        path = self._write(tmp_path, {"kind": "Jenkins"})
        result = runner.invoke(app, ["host-info", path])
        assert result.exit_code == 1

    def test_missing_file_exits_nonzero(self, tmp_path):
        result = runner.invoke(app, ["host-info", str(tmp_path / "absent.json")])
        assert result.exit_code != 0


# ---------------------------------------------------------------------------
# Test: commits
# ---------------------------------------------------------------------------


class TestCommitsCommand:
    def test_lists_commits(self, tmp_path, monkeypatch):
        outputs = {
            ("remote", "get-url", "origin"): "https://example.com/acme/widget.git\n",
            ("rev-parse", "HEAD"): "c0ffee1234567\n",
            ("rev-parse", "--abbrev-ref", "HEAD"): "main\n",
            ("describe", "--tags", "--abbrev=0", "c0ffee1234567^"): "v1.0.0\n",
        }

        def _run(cmd, **kwargs):
            if cmd[1] == "log":
                return subprocess.CompletedProcess(
                    cmd, 0, stdout="c0ffee1234567\tAda\tada@example.com\tShip it\n"
                )
            return subprocess.CompletedProcess(cmd, 0, stdout=outputs[tuple(cmd[1:])])

        monkeypatch.setattr(subprocess, "run", _run)
        result = runner.invoke(app, ["commits", "--repo", str(tmp_path)])
        assert result.exit_code == 0
        assert "https://example.com/acme/widget" in result.output
        assert "Ship it" in result.output

    def test_not_a_repository(self, tmp_path, monkeypatch):
        def _fail(cmd, **kwargs):
            raise subprocess.CalledProcessError(128, cmd)

        monkeypatch.setattr(subprocess, "run", _fail)
        result = runner.invoke(app, ["commits", "--repo", str(tmp_path)])
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# Test: config
# ---------------------------------------------------------------------------


class TestConfigCommand:
    def test_token_never_printed(self, monkeypatch):
        monkeypatch.setenv("BUILDHERALD_ENDPOINT", "https://status.example.com")
        monkeypatch.setenv("BUILDHERALD_ACCESS_TOKEN", "very-secret-token")
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "very-secret-token" not in result.output
        assert "status.example.com" in result.output

    def test_reports_disabled_delivery(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "not set" in result.output
