"""Tests for CLI commands — registry mocked, no network needed."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from pubsentinel.cli import main
from pubsentinel.core.config import DEFAULT_REGISTRY_URL, load_settings
from pubsentinel.core.logging import resolve_level, setup_logging
from pubsentinel.engines.health_classifier.models import (
    DependencyHealthRecord,
    Report,
    ReportStatus,
)
from pubsentinel.exceptions import RegistryError

# ── Settings ──


class TestLoadSettings:
    def test_defaults(self):
        keys = [
            "PUBSENTINEL_REGISTRY_URL",
            "PUBSENTINEL_HTTP_TIMEOUT",
            "PUBSENTINEL_FETCH_CONCURRENCY",
        ]
        with patch.dict(os.environ, {}, clear=False):
            for k in keys:
                os.environ.pop(k, None)
            settings = load_settings()
        assert settings.registry_url == DEFAULT_REGISTRY_URL
        assert settings.http_timeout == 15.0
        assert settings.fetch_concurrency == 10

    def test_overrides(self):
        env = {
            "PUBSENTINEL_REGISTRY_URL": "http://localhost:8080/api/",
            "PUBSENTINEL_HTTP_TIMEOUT": "2.5",
            "PUBSENTINEL_FETCH_CONCURRENCY": "0",
        }
        with patch.dict(os.environ, env):
            settings = load_settings()
        assert settings.registry_url == "http://localhost:8080/api"
        assert settings.http_timeout == 2.5
        assert settings.fetch_concurrency == 1


# ── Logging ──


class TestSetupLogging:
    def test_default_level_is_warning(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("PUBSENTINEL_LOG_LEVEL", None)
            assert resolve_level() == "WARNING"

    def test_env_level(self):
        with patch.dict(os.environ, {"PUBSENTINEL_LOG_LEVEL": "info"}):
            assert resolve_level() == "INFO"

    def test_explicit_level_wins(self):
        with patch.dict(os.environ, {"PUBSENTINEL_LOG_LEVEL": "ERROR"}):
            assert resolve_level("debug") == "DEBUG"

    def test_setup_applies_level_and_quiets_httpx(self):
        setup_logging("DEBUG")
        assert logging.getLogger("pubsentinel").level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
        setup_logging("WARNING")
        assert logging.getLogger("pubsentinel").level == logging.WARNING


# ── deps ──


class TestDepsCommand:
    def test_lists_dependencies(self, project_dir):
        result = CliRunner().invoke(main, ["deps", str(project_dir)])
        assert result.exit_code == 0
        assert "Found 5 dependencies" in result.output
        assert "http 1.1.0" in result.output
        assert "local_pkg path  (not version-checked)" in result.output
        assert "http 1.1.0  (not" not in result.output

    def test_json_output(self, project_dir):
        result = CliRunner().invoke(main, ["deps", str(project_dir), "--json"])
        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert rows[0] == {"name": "http", "version": "1.1.0", "registry": True}
        assert rows[3] == {"name": "local_pkg", "version": "path", "registry": False}

    def test_missing_manifest(self, tmp_path):
        result = CliRunner().invoke(main, ["deps", str(tmp_path)])
        assert result.exit_code == 1
        assert "No pubspec.yaml found" in result.output

    def test_no_dependencies(self, tmp_path):
        (tmp_path / "pubspec.yaml").write_text("name: x\n")
        result = CliRunner().invoke(main, ["deps", str(tmp_path)])
        assert result.exit_code == 0
        assert "No dependencies found." in result.output


# ── report ──


def _report(**overrides) -> Report:
    defaults = {
        "status": ReportStatus.OK,
        "records": (
            DependencyHealthRecord("old_pkg", "1.0.0", "1.0.0", is_discontinued=True),
            DependencyHealthRecord("http", "1.1.0", "1.2.0", is_outdated=True),
            DependencyHealthRecord("local_pkg", "path", None),
        ),
        "manifest_path": Path("/proj/pubspec.yaml"),
        "failed": ("local_pkg",),
    }
    defaults.update(overrides)
    return Report(**defaults)


class TestReportCommand:
    def test_text_report(self, tmp_path):
        with patch("pubsentinel.cli._build_report", AsyncMock(return_value=_report())):
            result = CliRunner().invoke(main, ["report", str(tmp_path)])
        assert result.exit_code == 0
        assert "3 dependencies (1 outdated, 1 deprecated/discontinued)" in result.output
        lines = [ln for ln in result.output.splitlines() if ln.startswith("  ")]
        assert lines[0].split()[0] == "old_pkg"
        assert lines[0].endswith("DISCONTINUED")
        assert lines[1].endswith("outdated")
        assert "Registry lookup failed for: local_pkg" in result.output

    def test_json_report(self, tmp_path):
        with patch("pubsentinel.cli._build_report", AsyncMock(return_value=_report())):
            result = CliRunner().invoke(main, ["report", str(tmp_path), "--json"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["status"] == "ok"
        assert [p["name"] for p in payload["packages"]] == ["old_pkg", "http", "local_pkg"]
        assert payload["packages"][2]["latest_version"] is None
        assert payload["unavailable"] == ["local_pkg"]

    def test_not_found_exits_nonzero(self, tmp_path):
        not_found = Report(status=ReportStatus.NOT_FOUND)
        with patch("pubsentinel.cli._build_report", AsyncMock(return_value=not_found)):
            result = CliRunner().invoke(main, ["report", str(tmp_path)])
        assert result.exit_code == 1
        assert "No pubspec.yaml found" in result.output

    def test_empty_report(self, tmp_path):
        empty = Report(status=ReportStatus.EMPTY, manifest_path=tmp_path / "pubspec.yaml")
        with patch("pubsentinel.cli._build_report", AsyncMock(return_value=empty)):
            result = CliRunner().invoke(main, ["report", str(tmp_path)])
        assert result.exit_code == 0
        assert "No dependencies declared" in result.output

    def test_commands_text(self, tmp_path):
        with patch("pubsentinel.cli._build_report", AsyncMock(return_value=_report())):
            result = CliRunner().invoke(main, ["report", str(tmp_path), "--commands"])
        assert result.exit_code == 0
        assert "update: flutter pub add http:1.2.0" in result.output
        assert result.output.count("update:") == 1
        for name in ("old_pkg", "http", "local_pkg"):
            assert f"remove: flutter pub remove {name}" in result.output

    def test_commands_hidden_by_default(self, tmp_path):
        with patch("pubsentinel.cli._build_report", AsyncMock(return_value=_report())):
            result = CliRunner().invoke(main, ["report", str(tmp_path)])
        assert "flutter pub" not in result.output

    def test_json_report_commands(self, tmp_path):
        with patch("pubsentinel.cli._build_report", AsyncMock(return_value=_report())):
            result = CliRunner().invoke(main, ["report", str(tmp_path), "--json"])
        packages = {p["name"]: p for p in json.loads(result.stdout)["packages"]}
        assert packages["http"]["commands"]["update"] == "flutter pub add http:1.2.0"
        assert packages["old_pkg"]["commands"] == {
            "update": None,
            "remove": "flutter pub remove old_pkg",
        }


# ── search / popular ──


class TestListingCommands:
    def test_search(self):
        listing = AsyncMock(return_value=["http", "dio"])
        with patch("pubsentinel.cli._list_packages", listing):
            result = CliRunner().invoke(main, ["search", "http", "--page", "2"])
        assert result.exit_code == 0
        listing.assert_awaited_once_with("http", 2, False)
        assert "flutter pub add dio" in result.output

    def test_search_json(self):
        listing = AsyncMock(return_value=["http"])
        with patch("pubsentinel.cli._list_packages", listing):
            result = CliRunner().invoke(main, ["search", "http", "--json"])
        assert json.loads(result.stdout) == [{"name": "http", "add": "flutter pub add http"}]

    def test_search_no_results(self):
        with patch("pubsentinel.cli._list_packages", AsyncMock(return_value=[])):
            result = CliRunner().invoke(main, ["search", "zzzz"])
        assert result.exit_code == 0
        assert "No packages found." in result.output

    def test_search_rejects_page_zero(self):
        result = CliRunner().invoke(main, ["search", "http", "--page", "0"])
        assert result.exit_code == 2

    def test_popular(self):
        listing = AsyncMock(return_value=["provider"])
        with patch("pubsentinel.cli._list_packages", listing):
            result = CliRunner().invoke(main, ["popular"])
        assert result.exit_code == 0
        listing.assert_awaited_once_with(None, 1, False)
        assert "provider" in result.output

    def test_popular_flutter(self):
        listing = AsyncMock(return_value=["provider"])
        with patch("pubsentinel.cli._list_packages", listing):
            CliRunner().invoke(main, ["popular", "--flutter"])
        listing.assert_awaited_once_with(None, 1, True)

    def test_registry_error_exits_nonzero(self):
        failing = AsyncMock(side_effect=RegistryError("popular", "HTTP 503"))
        with patch("pubsentinel.cli._list_packages", failing):
            result = CliRunner().invoke(main, ["popular"])
        assert result.exit_code == 1
        assert "HTTP 503" in result.output
