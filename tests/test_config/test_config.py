"""
Tests para la configuración de launchkit.

Cubre:
- deep_merge, overrides de entorno y de CLI
- load_settings con archivo YAML
- ensure_tracker_config (config de ejemplo) y load_tracker_config
- Modelos del tracker (pricing como unión discriminada, alias camelCase)
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from launchkit.config import (
    SAMPLE_TRACKER_CONFIG,
    ConfigError,
    ManualPricing,
    TrackerConfig,
    WebPricing,
    ensure_tracker_config,
    load_settings,
    load_tracker_config,
)
from launchkit.config.loader import apply_cli_overrides, deep_merge, load_env_overrides


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Elimina variables de entorno que afectan a los settings."""
    for var in (
        "LAUNCHKIT_LOG_LEVEL",
        "LAUNCHKIT_COSTS_CONFIG",
        "LEARNING_SNIPPET_NOTEBOOK",
        "LEARNING_SNIPPET_NOTEBOOK_PATH",
    ):
        monkeypatch.delenv(var, raising=False)


# ── Tests: merge y overrides ─────────────────────────────────────────────


class TestDeepMerge:
    """Tests para deep_merge."""

    def test_nested_override(self) -> None:
        """Las hojas del override ganan y el resto se conserva."""
        base = {"a": {"b": 1, "c": 2}, "d": 3}
        result = deep_merge(base, {"a": {"b": 99}, "e": 4})
        assert result == {"a": {"b": 99, "c": 2}, "d": 3, "e": 4}

    def test_base_not_mutated(self) -> None:
        """El diccionario base no se modifica."""
        base = {"a": 1}
        deep_merge(base, {"a": 2})
        assert base == {"a": 1}


class TestOverrides:
    """Tests para overrides de entorno y CLI."""

    def test_notebook_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LEARNING_SNIPPET_NOTEBOOK tiene prioridad sobre la variante _PATH."""
        monkeypatch.setenv("LEARNING_SNIPPET_NOTEBOOK_PATH", "b.md")
        monkeypatch.setenv("LEARNING_SNIPPET_NOTEBOOK", "a.md")
        assert load_env_overrides() == {"snippets": {"notebook": "a.md"}}

    def test_notebook_path_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Sin LEARNING_SNIPPET_NOTEBOOK se usa la variante _PATH."""
        monkeypatch.setenv("LEARNING_SNIPPET_NOTEBOOK_PATH", "notes")
        assert load_env_overrides()["snippets"]["notebook"] == "notes"

    def test_log_level_lowercased(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LAUNCHKIT_LOG_LEVEL", "DEBUG")
        assert load_env_overrides()["logging"]["level"] == "debug"

    def test_cli_overrides(self, tmp_path: Path) -> None:
        """--config, --notebook y -v llegan a sus secciones."""
        merged = apply_cli_overrides(
            {"logging": {"level": "info"}},
            {"config": tmp_path / "c.json", "notebook": "nb", "verbose": 2},
        )
        assert merged["costs"]["config_path"] == tmp_path / "c.json"
        assert merged["snippets"]["notebook"] == "nb"
        assert merged["logging"] == {"level": "info", "verbose": 2}


class TestLoadSettings:
    """Tests para load_settings."""

    def test_yaml_file(self, tmp_path: Path) -> None:
        """El YAML sobreescribe los defaults."""
        settings_file = tmp_path / "config.yaml"
        settings_file.write_text(
            "costs:\n"
            "  request_timeout: 5\n"
            "snippets:\n"
            f"  storage_dir: {tmp_path / 'store'}\n"
            "  clipboard_read: [xclip, -o]\n",
            encoding="utf-8",
        )
        settings = load_settings(settings_path=settings_file)
        assert settings.costs.request_timeout == 5
        assert settings.snippets.storage_dir == tmp_path / "store"
        assert settings.snippets.clipboard_read == ["xclip", "-o"]
        assert settings.snippets.clipboard_write == ["pbcopy"]

    def test_env_beats_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        settings_file = tmp_path / "config.yaml"
        settings_file.write_text("snippets:\n  notebook: from-yaml.md\n", encoding="utf-8")
        monkeypatch.setenv("LEARNING_SNIPPET_NOTEBOOK", "from-env.md")
        settings = load_settings(settings_path=settings_file)
        assert settings.snippets.notebook == "from-env.md"

    @pytest.mark.parametrize("value", ["warning", "WARNING", "Warn"])
    def test_warning_level_alias(self, value: str, monkeypatch: pytest.MonkeyPatch) -> None:
        """`warning` (nombre de la stdlib) equivale a `warn`."""
        monkeypatch.setenv("LAUNCHKIT_LOG_LEVEL", value)
        monkeypatch.setattr("launchkit.config.loader.DEFAULT_SETTINGS_PATH", Path("/nonexistent.yaml"))
        assert load_settings().logging.level == "warn"

    def test_warning_level_in_yaml(self, tmp_path: Path) -> None:
        settings_file = tmp_path / "config.yaml"
        settings_file.write_text("logging:\n  level: warning\n", encoding="utf-8")
        assert load_settings(settings_path=settings_file).logging.level == "warn"

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        """Un archivo indicado explícitamente que no existe es un error."""
        with pytest.raises(FileNotFoundError):
            load_settings(settings_path=tmp_path / "nope.yaml")

    def test_unknown_key_rejected(self, tmp_path: Path) -> None:
        settings_file = tmp_path / "config.yaml"
        settings_file.write_text("costs:\n  colour: red\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_settings(settings_path=settings_file)


# ── Tests: config del tracker ────────────────────────────────────────────


class TestTrackerConfigFile:
    """Tests para ensure_tracker_config y load_tracker_config."""

    def test_sample_created(self, tmp_path: Path) -> None:
        """Sin archivo se escribe el ejemplo completo con las claves documentadas."""
        path = tmp_path / "nested" / "dir" / "config.json"
        assert ensure_tracker_config(path) is True

        data = json.loads(path.read_text(encoding="utf-8"))
        assert set(data) == {"currency", "overallMonthlyBudget", "providers", "projects"}
        assert set(data["providers"]) == {"vertex_ai", "claude_haiku"}
        assert len(data["projects"]) == 2
        assert path.read_text(encoding="utf-8").endswith("\n")

    def test_existing_file_untouched(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text('{"currency": "$"}', encoding="utf-8")
        assert ensure_tracker_config(path) is False
        assert path.read_text(encoding="utf-8") == '{"currency": "$"}'

    def test_sample_parses(self, tmp_path: Path) -> None:
        """El ejemplo generado es una config válida."""
        path = tmp_path / "config.json"
        ensure_tracker_config(path)
        config = load_tracker_config(path)
        assert config.currency == "£"
        assert config.overall_monthly_budget == 500
        assert isinstance(config.providers["vertex_ai"].pricing, WebPricing)
        assert isinstance(config.providers["claude_haiku"].pricing, ManualPricing)
        assert config.providers["vertex_ai"].optimization.eligible_usage_ratio == 0.73
        assert config.projects[0].recent_7_days.calls == 140
        assert config.projects[0].threshold.monthly_budget == 50
        assert config.projects[1].month_to_date.tokens is None

    def test_malformed_json(self, tmp_path: Path) -> None:
        """Un JSON mal formado es fatal: ConfigError, sin reparación."""
        path = tmp_path / "config.json"
        path.write_text("{ not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_tracker_config(path)
        assert path.read_text(encoding="utf-8") == "{ not json"

    def test_non_object_json(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_tracker_config(path)

    def test_unknown_pricing_type(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps({"providers": {"p": {"pricing": {"type": "magic"}}}}),
            encoding="utf-8",
        )
        with pytest.raises(ConfigError):
            load_tracker_config(path)


class TestTrackerModels:
    """Tests para los modelos Pydantic del tracker."""

    def test_defaults(self) -> None:
        config = TrackerConfig()
        assert config.currency == "$"
        assert config.providers == {}
        assert config.projects == []

    def test_extra_keys_ignored(self) -> None:
        config = TrackerConfig.model_validate({"currency": "€", "_comment": "hi"})
        assert config.currency == "€"

    def test_sample_constant_validates(self) -> None:
        config = TrackerConfig.model_validate(SAMPLE_TRACKER_CONFIG)
        assert config.providers["vertex_ai"].pricing.fallback_price == 0.012
