"""
Tests para la CLI (click.testing.CliRunner).

Cubre:
- launchkit costs: config de ejemplo, informe, --json, config corrupta
- launchkit snippets: save/search/insert, errores de portapapeles y almacenamiento
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from launchkit.cli import EXIT_CONFIG_ERROR, EXIT_FAILED, main
from launchkit.snippets import ClipboardError


class FakeClipboard:
    def __init__(self, text: str = "", fail_read: bool = False) -> None:
        self.text = text
        self.fail_read = fail_read
        self.written: list[str] = []

    def read(self) -> str:
        if self.fail_read:
            raise ClipboardError("missing")
        return self.text

    def write(self, text: str) -> bool:
        self.written.append(text)
        return True


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "LAUNCHKIT_LOG_LEVEL",
        "LAUNCHKIT_COSTS_CONFIG",
        "LEARNING_SNIPPET_NOTEBOOK",
        "LEARNING_SNIPPET_NOTEBOOK_PATH",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    """Settings YAML que apunta el almacenamiento a tmp_path."""
    path = tmp_path / "settings.yaml"
    path.write_text(
        "snippets:\n"
        f"  storage_dir: {tmp_path / 'store'}\n"
        f"  fallback_dir: {tmp_path / 'fallback'}\n",
        encoding="utf-8",
    )
    return path


# ── Tests: costs ──────────────────────────────────────────────────────────


class TestCostsCommand:
    """Tests para `launchkit costs`."""

    def test_first_run_writes_sample(self, runner: CliRunner, tmp_path: Path) -> None:
        """Primera ejecución: crea el ejemplo y termina sin informe."""
        config = tmp_path / "tracker" / "config.json"
        result = runner.invoke(main, ["costs", "--config", str(config), "--quiet"])

        assert result.exit_code == 0
        assert f"Created a starter config at {config}." in result.output
        assert "API Cost Tracker" not in result.output
        data = json.loads(config.read_text(encoding="utf-8"))
        assert {"currency", "overallMonthlyBudget", "providers", "projects"} <= set(data)

    def test_report(self, runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "config.json"
        config.write_text(
            json.dumps({
                "currency": "$",
                "overallMonthlyBudget": 3,
                "providers": {
                    "acme": {
                        "displayName": "Acme AI",
                        "pricing": {"type": "manual", "unit": "call", "price": 0.01},
                    }
                },
                "projects": [{"name": "Demo", "provider": "acme", "monthToDate": {"calls": 100}}],
            }),
            encoding="utf-8",
        )
        result = runner.invoke(
            main, ["costs", "--config", str(config), "--as-of", "2026-09-10", "--quiet"]
        )

        assert result.exit_code == 0, result.output
        assert "API Cost Tracker — September" in result.output
        assert "Demo (Acme AI) — $1.00 spent, projected $3.00" in result.output
        assert "Total month-to-date: $1.00 of $3.00 budget\n" in result.output
        assert "Projected month-end spend: $3.00" in result.output

    def test_report_json(self, runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "config.json"
        config.write_text(
            json.dumps({
                "providers": {"p": {"pricing": {"type": "manual", "price": 2}}},
                "projects": [{"name": "X", "provider": "p", "monthToDate": {"calls": 3}}],
            }),
            encoding="utf-8",
        )
        result = runner.invoke(
            main,
            ["costs", "--config", str(config), "--as-of", "2026-10-19", "--json", "--quiet"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["as_of"] == "2026-10-19"
        assert data["total_cost"] == 6
        assert data["projects"][0]["name"] == "X"

    def test_malformed_config(self, runner: CliRunner, tmp_path: Path) -> None:
        """Config corrupta: mensaje de error y código de salida 1."""
        config = tmp_path / "config.json"
        config.write_text("{ broken", encoding="utf-8")
        result = runner.invoke(main, ["costs", "--config", str(config), "--quiet"])

        assert result.exit_code == EXIT_FAILED
        assert "Failed to generate cost report" in result.output

    def test_config_from_env(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config = tmp_path / "env" / "config.json"
        monkeypatch.setenv("LAUNCHKIT_COSTS_CONFIG", str(config))
        result = runner.invoke(main, ["costs", "--quiet"])
        assert result.exit_code == 0
        assert config.exists()

    def test_warning_log_level_from_env(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LAUNCHKIT_LOG_LEVEL", "warning")
        config = tmp_path / "config.json"
        result = runner.invoke(main, ["costs", "--config", str(config), "--quiet"])
        assert result.exit_code == 0, result.output

    def test_missing_settings_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            main, ["costs", "--settings", str(tmp_path / "nope.yaml"), "--quiet"]
        )
        assert result.exit_code == EXIT_CONFIG_ERROR


# ── Tests: snippets ───────────────────────────────────────────────────────


class TestSnippetsCommand:
    """Tests para `launchkit snippets`."""

    def invoke(self, runner: CliRunner, settings_file: Path, clipboard: FakeClipboard, *args: str):
        with patch("launchkit.cli.CommandClipboard", return_value=clipboard):
            return runner.invoke(
                main, ["snippets", *args, "--settings", str(settings_file), "--quiet"]
            )

    def test_save_search_insert(self, runner: CliRunner, settings_file: Path, tmp_path: Path) -> None:
        clipboard = FakeClipboard("curl -H 'Authorization: {{token}}' {{ url }}")

        saved = self.invoke(runner, settings_file, clipboard, "save", "Curl auth | http, #curl | bash")
        assert saved.exit_code == 0, saved.output
        assert "Saved snippet:\n# Curl auth" in saved.output
        stored = json.loads((tmp_path / "store" / "snippets.json").read_text(encoding="utf-8"))
        assert stored[0]["tags"] == ["http", "curl"]
        assert stored[0]["templateVariables"] == ["token", "url"]

        found = self.invoke(runner, settings_file, clipboard, "search", "curl")
        assert found.exit_code == 0
        assert "# Curl auth" in found.output

        inserted = self.invoke(runner, settings_file, clipboard, "insert", "curl", "token=abc; url=https://x.dev")
        assert inserted.exit_code == 0
        assert clipboard.written == ["curl -H 'Authorization: abc' https://x.dev"]
        assert "Inserted snippet: Curl auth" in inserted.output

    def test_default_action_is_search(self, runner: CliRunner, settings_file: Path) -> None:
        result = self.invoke(runner, settings_file, FakeClipboard())
        assert result.exit_code == 0
        assert "No snippets saved yet." in result.output

    def test_save_without_metadata(self, runner: CliRunner, settings_file: Path, tmp_path: Path) -> None:
        result = self.invoke(runner, settings_file, FakeClipboard("x"), "save")
        assert result.exit_code == EXIT_FAILED
        assert "Provide metadata in argument2" in result.output
        assert not (tmp_path / "store" / "snippets.json").exists()

    def test_clipboard_read_failure(self, runner: CliRunner, settings_file: Path) -> None:
        result = self.invoke(runner, settings_file, FakeClipboard(fail_read=True), "save", "Title")
        assert result.exit_code == EXIT_FAILED
        assert "Could not read from the clipboard. Make sure pbpaste is available." in result.output

    def test_storage_unavailable(self, runner: CliRunner, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("file")
        settings = tmp_path / "settings.yaml"
        settings.write_text(
            f"snippets:\n  storage_dir: {blocker / 'a'}\n  fallback_dir: {blocker / 'b'}\n",
            encoding="utf-8",
        )
        result = self.invoke(runner, settings, FakeClipboard(), "search", "x")
        assert result.exit_code == EXIT_FAILED
        assert "Unable to create a storage directory for snippets." in result.output

    def test_notebook_option(self, runner: CliRunner, settings_file: Path, tmp_path: Path) -> None:
        notebook = tmp_path / "journal"
        with patch("launchkit.cli.CommandClipboard", return_value=FakeClipboard("ls -la")):
            result = runner.invoke(
                main,
                [
                    "snippets", "save", "List files | shell",
                    "--settings", str(settings_file),
                    "--notebook", str(notebook),
                    "--quiet",
                ],
            )
        assert result.exit_code == 0, result.output
        text = (notebook / "learning-snippets.md").read_text(encoding="utf-8")
        assert "## List files (plain text)" in text
        assert "- Tags: shell" in text


class TestVersion:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "launchkit" in result.output
