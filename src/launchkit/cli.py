"""
Main CLI for launchkit using Click.

Two quick-launcher commands, usable as ``launchkit costs`` /
``launchkit snippets`` or through their own console scripts
``api-cost-tracker`` and ``snippet-manager``.
"""

import json
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable

import click
import yaml
from pydantic import ValidationError

from .config import AppSettings, ConfigError, ensure_tracker_config, load_settings, load_tracker_config
from .costs import CostTracker, PricingResolver, ReportRenderer
from .logging import configure_logging
from .snippets import (
    ClipboardError,
    CommandClipboard,
    NotebookAppender,
    SnippetInputError,
    SnippetManager,
    SnippetStore,
    StorageUnavailableError,
    locate_storage_dir,
)

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 3

_VERSION = "0.4.0"


def common_options(f: Callable) -> Callable:
    """Options shared by every command: settings file and logging."""
    f = click.option(
        "--settings",
        type=click.Path(path_type=Path),
        help="YAML settings file (default: ~/.config/launchkit/config.yaml)",
    )(f)
    f = click.option(
        "-v", "--verbose",
        count=True,
        help="Technical logs on stderr (-v info, -vv debug)",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(path_type=Path),
        help="Also write JSON logs to this file",
    )(f)
    f = click.option(
        "--quiet",
        is_flag=True,
        help="Silence logs and notices on stderr",
    )(f)
    return f


def _setup(kwargs: dict[str, Any]) -> AppSettings:
    """Load settings and configure logging, exiting on a bad settings file."""
    try:
        settings = load_settings(settings_path=kwargs.get("settings"), cli_args=kwargs)
    except FileNotFoundError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except (ValidationError, yaml.YAMLError) as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    configure_logging(settings.logging, quiet=kwargs.get("quiet", False))
    return settings


@click.group()
@click.version_option(version=_VERSION, prog_name="launchkit")
def main() -> None:
    """launchkit - Quick-launcher commands for AI API costs and learning snippets."""
    pass


@main.command("costs")
@click.option(
    "-c",
    "--config",
    type=click.Path(path_type=Path),
    help="Cost tracker JSON config (default: ~/.config/raycast/api-cost-tracker/config.json)",
)
@click.option(
    "--as-of",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Compute projections as if today were this date (YYYY-MM-DD)",
)
@click.option("--json", "json_output", is_flag=True, help="Print the report as JSON")
@common_options
def costs(**kwargs) -> None:
    """Month-to-date AI API spend, projections, budgets and savings ideas.

    The first run writes a starter config and exits; edit it and run again.
    """
    settings = _setup(kwargs)
    config_path = settings.costs.config_path
    as_of: datetime | None = kwargs.get("as_of")
    today = as_of.date() if as_of else date.today()

    try:
        if ensure_tracker_config(config_path):
            click.echo(
                f"Created a starter config at {config_path}.\n"
                "Edit it to match your providers, pricing, and usage before re-running the command."
            )
            return
        config = load_tracker_config(config_path)
    except (ConfigError, OSError) as e:
        click.echo(f"Failed to generate cost report: {e}", err=True)
        sys.exit(EXIT_FAILED)

    with PricingResolver(
        timeout=settings.costs.request_timeout,
        max_redirects=settings.costs.max_redirects,
    ) as resolver:
        pricing = resolver.resolve_all(config.providers)

    report = CostTracker(config, pricing, today=today).build_report()

    if kwargs.get("json_output"):
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        click.echo(ReportRenderer(report).render())


@main.command("snippets")
@click.argument("action", required=False, default="search")
@click.argument("text", metavar="INPUT", required=False, default="")
@click.argument("extra", required=False, default="")
@click.option(
    "--notebook",
    help="Markdown notebook file or folder to append saved snippets to",
)
@common_options
def snippets(action: str, text: str, extra: str, **kwargs) -> None:
    """Save, search and insert learning snippets.

    \b
    ACTION  save | search | insert (default: search)
    INPUT   save: 'Title | tags | language | notes'; search/insert: query
    EXTRA   insert: template variables 'key=value, key=value'
    """
    settings = _setup(kwargs)
    snippet_settings = settings.snippets

    try:
        storage_dir = locate_storage_dir(snippet_settings.storage_dir, snippet_settings.fallback_dir)
    except StorageUnavailableError as e:
        click.echo(str(e), err=True)
        sys.exit(EXIT_FAILED)

    clipboard = CommandClipboard(snippet_settings.clipboard_read, snippet_settings.clipboard_write)
    notebook = NotebookAppender(snippet_settings.notebook) if snippet_settings.notebook else None
    manager = SnippetManager(SnippetStore(storage_dir), clipboard, notebook)

    try:
        output = manager.run(action, text or "", extra or "")
    except SnippetInputError as e:
        click.echo(str(e), err=True)
        sys.exit(EXIT_FAILED)
    except ClipboardError:
        command = " ".join(snippet_settings.clipboard_read)
        click.echo(
            f"Could not read from the clipboard. Make sure {command} is available.",
            err=True,
        )
        sys.exit(EXIT_FAILED)

    click.echo(output)


if __name__ == "__main__":
    main()
