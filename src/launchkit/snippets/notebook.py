"""
Notebook export — appends each saved snippet to a Markdown file.

Enabled by the ``snippets.notebook`` setting (LEARNING_SNIPPET_NOTEBOOK).
A path with an extension is the target file; without one it is a folder and
entries go to ``learning-snippets.md`` inside it. Failures are reported and
never abort the save.
"""

from pathlib import Path

import structlog

from ..logging import HumanLog
from .store import Snippet

logger = structlog.get_logger()

NOTEBOOK_FILENAME = "learning-snippets.md"


def resolve_notebook_file(notebook: str, home: Path | None = None) -> Path:
    """Absolute path of the Markdown file entries are appended to."""
    path = Path(notebook).expanduser()
    if not path.is_absolute():
        path = (home or Path.home()) / path
    # "notes." is a file; ".notes" is not
    if path.name.rfind(".") > 0:
        return path
    return path / NOTEBOOK_FILENAME


def render_entry(snippet: Snippet) -> str:
    tags = ", ".join(snippet.tags) if snippet.tags else "none"
    lines = [
        f"## {snippet.title} ({snippet.language or 'plain text'})",
        f"- Saved: {snippet.created_at}",
        f"- Tags: {tags}",
        f"- Notes: {snippet.notes or 'none'}",
        "",
        f"```{snippet.language}\n{snippet.content.rstrip()}\n```",
        "",
    ]
    return "\n".join(lines)


class NotebookAppender:
    def __init__(self, notebook: str, home: Path | None = None) -> None:
        self.target = resolve_notebook_file(notebook, home)
        self._hlog = HumanLog(logger)

    def append(self, snippet: Snippet) -> bool:
        """Append ``snippet`` to the notebook. Returns False on failure."""
        try:
            self.target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._hlog.notebook_dir_failed(str(self.target.parent), str(e))
            return False

        try:
            with open(self.target, "a", encoding="utf-8") as f:
                f.write(render_entry(snippet))
        except OSError as e:
            self._hlog.notebook_write_failed(str(self.target), str(e))
            return False

        logger.info("notebook.appended", path=str(self.target), snippet=snippet.id)
        return True
