"""
Snippet actions — save, search and insert.

Each action returns the text to print on stdout. Notices for the user
(clipboard write failures, notebook problems) go through the HUMAN log
level; a clipboard read failure during ``save`` is raised as ClipboardError
because there is nothing to store without it.
"""

import re

import structlog

from ..logging import HumanLog
from .clipboard import Clipboard
from .notebook import NotebookAppender
from .search import find_best_matches
from .store import Snippet, SnippetStore
from .template import apply_template, parse_variables

logger = structlog.get_logger()

USAGE = "\n".join([
    "Learning Snippet Manager",
    "- save: Save clipboard content as a snippet. Format argument2 as 'Title | tags | language | notes'.",
    "- search: Find snippets by natural language query (titles, notes, tags, content).",
    "- insert: Insert best match and copy to clipboard. argument2 is the title/query, "
    "argument3 is 'var=value' pairs for templates.",
    "Environment: set LEARNING_SNIPPET_NOTEBOOK to sync entries into a Markdown notebook "
    "(file or folder path).",
])

_TAG_SPLIT_RE = re.compile(r"[,#]")


class SnippetInputError(Exception):
    """Raised when an action is missing required input."""
    pass


def parse_tags(text: str) -> list[str]:
    """``"python, #regex #tips"`` -> ``["python", "regex", "tips"]``."""
    if not text:
        return []
    tags = [part.strip() for part in _TAG_SPLIT_RE.split(text)]
    return [tag.removeprefix("#") for tag in tags if tag]


def parse_metadata(text: str) -> tuple[str, list[str], str, str]:
    """Split ``"Title | tags | language | notes"``; all but the title are optional."""
    parts = [part.strip() for part in text.split("|")]
    parts += [""] * (4 - len(parts))
    title, raw_tags, language, notes = parts[:4]
    return title, parse_tags(raw_tags), language, notes


def _fenced(language: str, content: str) -> str:
    return f"```{language}\n{content.rstrip()}\n```"


def format_snippet(snippet: Snippet) -> str:
    variables = ", ".join(snippet.template_variables) or "(none)"
    return "\n".join([
        f"# {snippet.title}",
        f"- Tags: {', '.join(snippet.tags) if snippet.tags else 'none'}",
        f"- Language: {snippet.language or 'plain text'}",
        f"- Notes: {snippet.notes or '(none)'}",
        f"- Template variables: {variables}",
        "",
        _fenced(snippet.language, snippet.content),
    ])


class SnippetManager:
    """Runs snippet actions against a store and a clipboard."""

    def __init__(
        self,
        store: SnippetStore,
        clipboard: Clipboard,
        notebook: NotebookAppender | None = None,
    ) -> None:
        self.store = store
        self.clipboard = clipboard
        self.notebook = notebook
        self._hlog = HumanLog(logger)

    def run(self, action: str, text: str = "", extra: str = "") -> str:
        """Dispatch ``action``; anything unknown is a search."""
        match (action or "search").lower():
            case "save":
                return self.save(text)
            case "insert":
                return self.insert(text, extra)
            case _:
                return self.search(text)

    def save(self, metadata: str) -> str:
        """Store the clipboard content as a new snippet.

        Raises:
            SnippetInputError: If ``metadata`` is empty.
            ClipboardError: If the clipboard cannot be read.
        """
        if not metadata:
            raise SnippetInputError(
                "Provide metadata in argument2: 'Title | tags | language | notes'."
            )

        title, tags, language, notes = parse_metadata(metadata)
        content = self.clipboard.read()
        snippets = self.store.load()

        snippet = Snippet.create(
            title=title or f"Snippet {len(snippets) + 1}",
            content=content,
            tags=tags,
            language=language,
            notes=notes,
        )
        snippets.insert(0, snippet)
        self.store.save(snippets)
        logger.info("snippets.saved", id=snippet.id, title=snippet.title, tags=snippet.tags)

        if self.notebook:
            self.notebook.append(snippet)

        return "Saved snippet:\n" + format_snippet(snippet)

    def search(self, query: str) -> str:
        snippets = self.store.load()
        if not snippets:
            return "No snippets saved yet. Use the 'save' action first.\n" + USAGE

        matches = find_best_matches(snippets, query)
        if not matches:
            return "No matches found for that query. Try different keywords or tags."

        logger.debug("snippets.search", query=query, matches=len(matches))
        return "\n\n".join(format_snippet(s) for s in matches)

    def insert(self, query: str, variables: str = "") -> str:
        """Fill the best match's placeholders and copy it to the clipboard."""
        snippets = self.store.load()
        if not snippets:
            return "No snippets to insert. Save something first."

        matches = find_best_matches(snippets, query or variables or "")
        if not matches:
            return "No snippets found for that description."

        selected = matches[0]
        content = apply_template(selected.content, parse_variables(variables))

        if not self.clipboard.write(content):
            self._hlog.clipboard_write_failed("clipboard write command failed")

        logger.info("snippets.inserted", id=selected.id, title=selected.title)
        tags = f"Tags: {', '.join(selected.tags)}" if selected.tags else "Tags: none"
        template_variables = (
            f"Template variables: {', '.join(selected.template_variables)}"
            if selected.template_variables
            else "Template variables: (none)"
        )
        return "\n".join([
            f"Inserted snippet: {selected.title}",
            tags,
            template_variables,
            "",
            "Preview:",
            _fenced(selected.language, content),
        ])
