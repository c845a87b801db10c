"""
Snippets module — personal clipboard-backed snippet library.

Exports the components used by the ``snippet-manager`` command.
"""

from .actions import (
    SnippetInputError,
    SnippetManager,
    format_snippet,
    parse_metadata,
    parse_tags,
)
from .clipboard import Clipboard, ClipboardError, CommandClipboard
from .notebook import NotebookAppender, resolve_notebook_file
from .search import find_best_matches, score_snippet
from .store import Snippet, SnippetStore, StorageUnavailableError, locate_storage_dir
from .template import apply_template, extract_template_variables, parse_variables

__all__ = [
    "SnippetManager",
    "SnippetInputError",
    "format_snippet",
    "parse_metadata",
    "parse_tags",
    "Clipboard",
    "ClipboardError",
    "CommandClipboard",
    "NotebookAppender",
    "resolve_notebook_file",
    "find_best_matches",
    "score_snippet",
    "Snippet",
    "SnippetStore",
    "StorageUnavailableError",
    "locate_storage_dir",
    "apply_template",
    "extract_template_variables",
    "parse_variables",
]
