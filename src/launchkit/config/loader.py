"""
Cargador de configuración con deep merge.

Settings de las herramientas, orden de precedencia (de menor a mayor):
1. Defaults (definidos en los schemas Pydantic)
2. Archivo YAML (~/.config/launchkit/config.yaml o --settings)
3. Variables de entorno
4. Argumentos CLI

El archivo JSON del cost tracker es otra cosa: se crea con un ejemplo si no
existe y se valida con TrackerConfig. Un JSON mal formado es un error fatal.
"""

import json
import os
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from .presets import write_sample_config
from .schema import AppSettings, TrackerConfig

logger = structlog.get_logger()

DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "launchkit" / "config.yaml"


class ConfigError(Exception):
    """Error raised when a configuration file cannot be read or validated."""
    pass


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge recursivo de diccionarios.

    Args:
        base: Diccionario base
        override: Diccionario que sobreescribe valores del base

    Returns:
        Nuevo diccionario con valores merged. Override gana en conflictos de hojas.

    Example:
        >>> deep_merge({"a": {"b": 1, "c": 2}}, {"a": {"b": 99}, "e": 4})
        {'a': {'b': 99, 'c': 2}, 'e': 4}
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_config(config_path: Path | None, required: bool = True) -> dict[str, Any]:
    """Carga configuración desde archivo YAML.

    Args:
        config_path: Path al archivo YAML, o None para omitir
        required: Si False, un archivo inexistente devuelve dict vacío

    Returns:
        Diccionario con la configuración, o dict vacío si no hay archivo
    """
    if not config_path:
        return {}

    if not config_path.exists():
        if not required:
            return {}
        raise FileNotFoundError(f"Archivo de configuración no encontrado: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
        return data if data else {}


def load_env_overrides() -> dict[str, Any]:
    """Carga overrides desde variables de entorno.

    Variables soportadas:
        LAUNCHKIT_LOG_LEVEL: sobreescribe logging.level
        LAUNCHKIT_COSTS_CONFIG: sobreescribe costs.config_path
        LEARNING_SNIPPET_NOTEBOOK / LEARNING_SNIPPET_NOTEBOOK_PATH:
            sobreescribe snippets.notebook (la primera gana)

    Returns:
        Diccionario con overrides desde env vars
    """
    overrides: dict[str, Any] = {}

    if log_level := os.environ.get("LAUNCHKIT_LOG_LEVEL"):
        overrides.setdefault("logging", {})["level"] = log_level.lower()

    if costs_config := os.environ.get("LAUNCHKIT_COSTS_CONFIG"):
        overrides.setdefault("costs", {})["config_path"] = costs_config

    notebook = os.environ.get("LEARNING_SNIPPET_NOTEBOOK") or os.environ.get(
        "LEARNING_SNIPPET_NOTEBOOK_PATH"
    )
    if notebook:
        overrides.setdefault("snippets", {})["notebook"] = notebook

    return overrides


def apply_cli_overrides(config_dict: dict[str, Any], cli_args: dict[str, Any]) -> dict[str, Any]:
    """Aplica overrides desde argumentos CLI.

    Args:
        config_dict: Configuración base (ya merged con YAML y env)
        cli_args: Diccionario con argumentos CLI

    Returns:
        Configuración con overrides de CLI aplicados
    """
    overrides: dict[str, Any] = {}

    if cli_args.get("config"):
        overrides.setdefault("costs", {})["config_path"] = cli_args["config"]

    if cli_args.get("notebook"):
        overrides.setdefault("snippets", {})["notebook"] = cli_args["notebook"]

    if cli_args.get("log_file"):
        overrides.setdefault("logging", {})["file"] = cli_args["log_file"]

    if cli_args.get("verbose") is not None:
        overrides.setdefault("logging", {})["verbose"] = cli_args["verbose"]

    return deep_merge(config_dict, overrides)


def load_settings(
    settings_path: Path | None = None,
    cli_args: dict[str, Any] | None = None,
) -> AppSettings:
    """Carga y valida los settings de las herramientas.

    Sin settings_path se intenta DEFAULT_SETTINGS_PATH y, si no existe,
    se usan los defaults.

    Raises:
        FileNotFoundError: Si settings_path se indicó explícitamente y no existe
        ValidationError: Si la configuración final no es válida
    """
    cli_args = cli_args or {}

    if settings_path is None:
        yaml_config = load_yaml_config(DEFAULT_SETTINGS_PATH, required=False)
    else:
        yaml_config = load_yaml_config(settings_path)

    merged = deep_merge(yaml_config, load_env_overrides())
    merged = apply_cli_overrides(merged, cli_args)

    return AppSettings(**merged)


# ── Cost tracker JSON ────────────────────────────────────────────────────────


def ensure_tracker_config(path: Path) -> bool:
    """Create the starter config at ``path`` if it does not exist yet.

    Returns:
        True if the file was created in this call.
    """
    if path.exists():
        return False
    write_sample_config(path)
    return True


def load_tracker_config(path: Path) -> TrackerConfig:
    """Parse and validate the cost tracker's JSON file.

    Raises:
        ConfigError: If the file is unreadable, is not valid JSON or does not
            match the expected schema.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Could not parse {path}: expected a JSON object")

    try:
        config = TrackerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    logger.info(
        "config.loaded",
        path=str(path),
        providers=len(config.providers),
        projects=len(config.projects),
    )
    return config
