"""
Snippet Store — Persistence of the snippet library.

The whole library is one JSON array (most recent first) in ``snippets.json``
inside the storage directory. Every save rewrites the file; there is no
locking and no partial update. Keys are camelCase so files written by
earlier versions of the tool keep loading.
"""

import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog

from ..logging import HumanLog
from .template import extract_template_variables

logger = structlog.get_logger()

SNIPPETS_FILE = "snippets.json"


class StorageUnavailableError(Exception):
    """Raised when neither storage directory can be created."""
    pass


def locate_storage_dir(primary: Path, fallback: Path) -> Path:
    """Return the first directory that exists or can be created.

    Raises:
        StorageUnavailableError: If both ``primary`` and ``fallback`` fail.
    """
    for candidate in (primary, fallback):
        try:
            candidate.mkdir(parents=True, exist_ok=True)
            return candidate
        except OSError as e:
            logger.debug("snippets.storage_dir_failed", path=str(candidate), error=str(e))
    raise StorageUnavailableError("Unable to create a storage directory for snippets.")


def generate_snippet_id() -> str:
    """Millisecond timestamp, unique enough for a single-user library."""
    return str(int(time.time() * 1000))


def utc_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2026-10-19T08:30:00.123Z."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


@dataclass
class Snippet:
    """A saved piece of text. Never modified after creation."""

    id: str
    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    language: str = ""
    notes: str = ""
    template_variables: list[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def create(
        cls,
        title: str,
        content: str,
        tags: list[str] | None = None,
        language: str = "",
        notes: str = "",
    ) -> "Snippet":
        now = utc_timestamp()
        return cls(
            id=generate_snippet_id(),
            title=title,
            content=content,
            tags=list(tags or []),
            language=language,
            notes=notes,
            template_variables=extract_template_variables(content),
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "tags": self.tags,
            "language": self.language,
            "notes": self.notes,
            "content": self.content,
            "templateVariables": self.template_variables,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Snippet":
        """Build a snippet from a stored record, tolerating missing keys."""
        content = str(data.get("content") or "")
        variables = data.get("templateVariables")
        if not isinstance(variables, list):
            variables = extract_template_variables(content)
        tags = data.get("tags")
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            content=content,
            tags=[str(t) for t in tags] if isinstance(tags, list) else [],
            language=str(data.get("language") or ""),
            notes=str(data.get("notes") or ""),
            template_variables=[str(v) for v in variables],
            created_at=str(data.get("createdAt") or ""),
            updated_at=str(data.get("updatedAt") or ""),
        )


class SnippetStore:
    """Loads and saves the snippet library file."""

    def __init__(self, storage_dir: Path) -> None:
        self.storage_dir = Path(storage_dir)
        self.path = self.storage_dir / SNIPPETS_FILE
        self._hlog = HumanLog(logger)

    def load(self) -> list[Snippet]:
        """Return the library, most recent first.

        A missing file is an empty library. An unreadable or malformed file
        is also treated as empty, with a notice; the next save replaces it.
        """
        if not self.path.exists():
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, list):
                raise ValueError("expected a JSON array")
            snippets = [Snippet.from_dict(item) for item in data if isinstance(item, dict)]
        except (OSError, ValueError) as e:
            self._hlog.library_unreadable(str(self.path), str(e))
            return []

        logger.debug("snippets.loaded", path=str(self.path), count=len(snippets))
        return snippets

    def save(self, snippets: list[Snippet]) -> None:
        """Overwrite the library file with ``snippets``."""
        self.path.write_text(
            json.dumps([s.to_dict() for s in snippets], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.debug("snippets.saved_library", path=str(self.path), count=len(snippets))

