"""Tests for the command line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from vole.cli import main
from vole.core.report import DRY_RUN_REPORT_NAME

from conftest import write


@pytest.fixture
def home(isolate_home, monkeypatch):
    monkeypatch.setattr("vole.cli.is_root", lambda: False)
    write(isolate_home / ".cache" / "app" / "blob.bin", 2048)
    write(isolate_home / "Downloads" / "tool.zip", 100)
    write(isolate_home / "Downloads" / "tool" / "bin" / "tool", 300)
    write(isolate_home / "system" / "big.img", 4096)
    return isolate_home


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "vole.json"
    path.write_text(
        json.dumps(
            {
                "version": 1,
                "rules": [
                    {
                        "id": "cache",
                        "label": "User cache",
                        "description": "Caches",
                        "paths": ["~/.cache"],
                        "enabled_by_default": True,
                    },
                    {
                        "id": "downloads",
                        "label": "Downloads",
                        "kind": "downloads",
                        "paths": ["~/Downloads"],
                    },
                    {
                        "id": "system",
                        "label": "System",
                        "paths": ["~/system"],
                        "requires_sudo": True,
                        "enabled_by_default": True,
                    },
                ],
            }
        )
    )
    return path


def _run(config_file, home, *args, input=None):
    runner = CliRunner()
    return runner.invoke(
        main,
        ["--config", str(config_file), "clean", "--user-home", str(home), *args],
        input=input,
    )


class TestListRules:
    def test_lists_all_available(self, config_file, home):
        result = _run(config_file, home, "--list-rules")
        assert result.exit_code == 0
        assert "cache" in result.output
        assert "[default]" in result.output
        assert "(sudo)" in result.output
        assert "Caches" in result.output


class TestClean:
    def test_dry_run_deletes_nothing_and_saves_report(self, config_file, home):
        result = _run(config_file, home, "--dry-run")

        assert result.exit_code == 0, result.output
        assert "Cleanup plan:" in result.output
        assert "User cache" in result.output
        assert "System" not in result.output
        assert (home / ".cache" / "app" / "blob.bin").exists()
        report = (home / DRY_RUN_REPORT_NAME).read_text(encoding="utf-8")
        assert str(home / ".cache" / "app" / "blob.bin") in report
        assert "Dry-run listed 1 files and 1 directories" in result.output

    def test_apply_with_yes(self, config_file, home):
        (home / DRY_RUN_REPORT_NAME).write_text("stale")
        result = _run(config_file, home, "--yes")

        assert result.exit_code == 0, result.output
        assert "Removed 1 files and 1 directories" in result.output
        assert not (home / ".cache" / "app").exists()
        assert (home / "system" / "big.img").exists()
        assert not (home / DRY_RUN_REPORT_NAME).exists()

    def test_confirmation_declined(self, config_file, home):
        result = _run(config_file, home, input="n\n")
        assert "Canceled." in result.output
        assert (home / ".cache" / "app" / "blob.bin").exists()

    def test_confirmation_accepted(self, config_file, home):
        result = _run(config_file, home, input="y\n")
        assert result.exit_code == 0, result.output
        assert not (home / ".cache" / "app" / "blob.bin").exists()

    def test_unknown_rule_reported(self, config_file, home):
        result = _run(config_file, home, "--rule", "cache", "--rule", "nope", "--dry-run")
        assert result.exit_code == 0
        assert "Unknown rule ids: nope" in result.output

    def test_sudo_rules_dropped_without_sudo(self, config_file, home):
        result = _run(config_file, home, "--rule", "system", "--dry-run")
        assert "No rules selected." in result.output

    def test_downloads_requires_choice_with_yes(self, config_file, home):
        result = _run(config_file, home, "--rule", "downloads", "--yes")
        assert result.exit_code != 0
        assert "--downloads-remove" in result.output
        assert (home / "Downloads" / "tool.zip").exists()

    def test_downloads_choice_prompted(self, config_file, home):
        result = _run(config_file, home, "--rule", "downloads", "--dry-run", input="x\na\n")
        assert result.exit_code == 0, result.output
        assert "Please enter 'a' for archives or 'f' for folders." in result.output
        assert str(home / "Downloads" / "tool.zip") in result.output

    def test_downloads_folders(self, config_file, home):
        result = _run(config_file, home, "--rule", "downloads", "--downloads-remove", "folders", "--yes")
        assert result.exit_code == 0, result.output
        assert not (home / "Downloads" / "tool").exists()
        assert (home / "Downloads" / "tool.zip").exists()

    def test_json_dry_run(self, config_file, home):
        result = _run(config_file, home, "--json", "--dry-run")
        data = json.loads(result.output)
        assert data["status"] == "dry_run"
        assert data["scans"][0]["rule_id"] == "cache"
        assert data["scans"][0]["bytes"] == 2048
        assert (home / ".cache" / "app" / "blob.bin").exists()

    def test_sudo_reexecs_when_not_root(self, config_file, home, monkeypatch):
        calls = []
        monkeypatch.setattr("vole.cli.find_vole_command", lambda: ["/usr/bin/vole"])
        monkeypatch.setattr("vole.cli.reexec_with_sudo", lambda args: calls.append(args) or 0)

        result = _run(config_file, home, "--sudo", "--dry-run", "--rule", "system")

        assert result.exit_code == 0
        assert calls == [[
            "/usr/bin/vole", "--config", str(config_file), "clean", "--sudo",
            "--user-home", str(home), "--dry-run", "--rule", "system",
        ]]

    def test_sudo_json_apply_requires_yes(self, config_file, home, monkeypatch):
        calls = []
        monkeypatch.setattr("vole.cli.reexec_with_sudo", lambda args: calls.append(args) or 0)
        monkeypatch.setattr("vole.cli.is_root", lambda: True)

        result = _run(config_file, home, "--sudo", "--json", "--rule", "system")

        assert result.exit_code == 2
        assert "--yes" in result.output
        assert calls == []
        assert (home / "system" / "big.img").exists()

    def test_sudo_json_apply_with_yes(self, config_file, home, monkeypatch):
        monkeypatch.setattr("vole.cli.is_root", lambda: True)
        result = _run(config_file, home, "--sudo", "--json", "--yes", "--rule", "system")
        assert result.exit_code == 0
        assert not (home / "system" / "big.img").exists()

    def test_bad_config(self, tmp_path, home):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"version": 9}))
        result = _run(bad, home, "--dry-run")
        assert result.exit_code != 0
        assert "Unsupported config version 9" in result.output


class TestReportClear:
    def test_removes_report(self, home):
        (home / DRY_RUN_REPORT_NAME).write_text("stale")
        result = CliRunner().invoke(main, ["report", "clear", "--user-home", str(home)])
        assert result.exit_code == 0
        assert "removed" in result.output
        assert not (home / DRY_RUN_REPORT_NAME).exists()

    def test_nothing_to_remove(self, home):
        result = CliRunner().invoke(main, ["report", "clear", "--user-home", str(home)])
        assert "No dry-run report to remove." in result.output
