"""
Snippet search — keyword scoring over titles, notes, tags and content.

Scoring for a lower-cased query split into whitespace tokens:

    +3  the whole query appears anywhere in the snippet
    +1  per token found anywhere
    +1  per token found in the title
    +2  per token equal to one of the tags

Snippets scoring 0 are dropped. Ties sort by title.
"""

from .store import Snippet

MAX_RESULTS = 5


def _haystack(snippet: Snippet) -> str:
    parts = [
        snippet.title,
        snippet.notes,
        snippet.language,
        " ".join(snippet.tags),
        snippet.content,
    ]
    return " ".join(parts).lower()


def score_snippet(snippet: Snippet, query: str) -> int:
    normalized = query.lower()
    haystack = _haystack(snippet)
    title = snippet.title.lower()
    tags = {tag.lower() for tag in snippet.tags}

    score = 3 if normalized in haystack else 0
    for token in normalized.split():
        if token in haystack:
            score += 1
        if token in title:
            score += 1
        if token in tags:
            score += 2
    return score


def find_best_matches(
    snippets: list[Snippet],
    query: str,
    limit: int = MAX_RESULTS,
) -> list[Snippet]:
    """Up to ``limit`` snippets ranked against ``query``.

    An empty query returns the first snippets in store order (most recent
    first). A query with no tokens (only whitespace) keeps every snippet.
    """
    if not query:
        return snippets[:limit]

    has_tokens = bool(query.split())
    scored = [(score_snippet(s, query), s) for s in snippets]
    kept = [(score, s) for score, s in scored if score > 0 or not has_tokens]
    kept.sort(key=lambda item: (-item[0], item[1].title.casefold(), item[1].title))
    return [s for _, s in kept[:limit]]
