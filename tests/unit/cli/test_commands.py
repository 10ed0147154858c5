"""Unit tests for CLI commands."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
from typer.testing import CliRunner

from cli import app

runner = CliRunner()


class TestMainApp:
    """Tests for main app options."""

    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Viny notes backend CLI" in result.stdout

    def test_debug_flag(self) -> None:
        result = runner.invoke(app, ["--debug", "system", "info"])
        assert result.exit_code == 0
        assert "Debug mode enabled" in result.stdout


class TestSystemCommands:
    """Tests for system commands."""

    def test_system_info(self) -> None:
        result = runner.invoke(app, ["system", "info"])
        assert result.exit_code == 0
        assert "Application Info" in result.stdout
        assert "Viny Notes API" in result.stdout

    def test_system_config_section(self) -> None:
        result = runner.invoke(app, ["system", "config", "security"])
        assert result.exit_code == 0
        assert "refresh_cookie" in result.stdout
        assert "auth_rate_limit" in result.stdout

    def test_system_config_unknown_section(self) -> None:
        result = runner.invoke(app, ["system", "config", "secrets"])
        assert result.exit_code == 1
        assert "Unknown section: secrets" in result.stdout

    def test_system_health_ok(self) -> None:
        response = MagicMock(status_code=200)
        with patch("httpx.get", return_value=response) as mock_get:
            result = runner.invoke(app, ["system", "health", "--url", "http://api.test"])

        assert result.exit_code == 0
        assert "HEALTHY" in result.stdout
        assert mock_get.call_args.args[0] == "http://api.test/health/ready"

    def test_system_health_unreachable(self) -> None:
        with patch("httpx.get", side_effect=httpx.ConnectError("refused")):
            result = runner.invoke(app, ["system", "health", "--url", "http://api.test"])

        assert result.exit_code == 1
        assert "not reachable" in result.stdout

    def test_system_health_unhealthy(self) -> None:
        with patch("httpx.get", return_value=MagicMock(status_code=503)):
            result = runner.invoke(app, ["system", "health", "--url", "http://api.test"])

        assert result.exit_code == 1
        assert "UNHEALTHY" in result.stdout


class TestServerCommands:
    def test_start_uses_configured_address(self) -> None:
        with patch("viny.cli.commands.server.subprocess.run") as mock_run:
            result = runner.invoke(app, ["server", "start", "--port", "9000"])

        assert result.exit_code == 0
        cmd = mock_run.call_args.args[0]
        assert "viny.backend.main:app" in cmd
        assert cmd[cmd.index("--port") + 1] == "9000"
        assert cmd[cmd.index("--host") + 1] == "127.0.0.1"
        assert "--reload" not in cmd


class TestDbCommands:
    def test_drop_requires_confirmation(self) -> None:
        with patch("viny.cli.commands.db._drop") as mock_drop:
            result = runner.invoke(app, ["db", "drop"], input="n\n")

        assert result.exit_code == 1
        mock_drop.assert_not_called()


class TestDataCommands:
    def test_import_rejects_invalid_json(self, tmp_path) -> None:
        export = tmp_path / "backup.json"
        export.write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["data", "import", str(export), "--email", "me@example.com"])

        assert result.exit_code == 1
        assert "not a valid export" in result.stdout

    def test_import_rejects_wrong_shape(self, tmp_path) -> None:
        export = tmp_path / "backup.json"
        export.write_text('{"notes": 5}', encoding="utf-8")

        with patch("viny.cli.commands.data._import") as mock_import:
            result = runner.invoke(app, ["data", "import", str(export), "-e", "me@example.com"])

        assert result.exit_code == 1
        assert "not a valid export" in result.stdout
        mock_import.assert_not_called()

    def test_import_failure_is_not_reported_as_bad_file(self, tmp_path) -> None:
        export = tmp_path / "backup.json"
        export.write_text('{"notes": [{"title": "a"}]}', encoding="utf-8")

        async def broken(payload, email):
            assert payload.notes == [{"title": "a"}]
            raise ValueError("database went away")

        with patch("viny.cli.commands.data._import", side_effect=broken):
            result = runner.invoke(app, ["data", "import", str(export), "-e", "me@example.com"])

        assert isinstance(result.exception, ValueError)
        assert "not a valid export" not in result.stdout

    def test_import_unknown_user(self, tmp_path) -> None:
        export = tmp_path / "backup.json"
        export.write_text('{"notes": []}', encoding="utf-8")

        async def no_user(payload, email):
            return None

        with patch("viny.cli.commands.data._import", side_effect=no_user):
            result = runner.invoke(app, ["data", "import", str(export), "-e", "me@example.com"])

        assert result.exit_code == 1
        assert "no user with email me@example.com" in result.stdout

    def test_import_prints_results(self, tmp_path) -> None:
        export = tmp_path / "backup.json"
        export.write_text('{"notes": []}', encoding="utf-8")
        summary = SimpleNamespace(
            imported_notes=3,
            imported_notebooks=1,
            imported_tags=2,
            skipped=0,
            errors=[SimpleNamespace(kind="note", index=4, message="tags: too long")],
        )

        async def imported(payload, email):
            return summary

        with patch("viny.cli.commands.data._import", side_effect=imported):
            result = runner.invoke(app, ["data", "import", str(export), "-e", "me@example.com"])

        assert result.exit_code == 0
        assert "Import Results" in result.stdout
        assert "note #4: tags: too long" in result.stdout
