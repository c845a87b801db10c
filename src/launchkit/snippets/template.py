"""
Template placeholders in snippet content.

A placeholder is ``{{ name }}`` where name matches ``[\\w.-]+``; whitespace
inside the braces is optional. Placeholders without a supplied value are
left exactly as written.
"""

import re

PLACEHOLDER_RE = re.compile(r"{{\s*([\w.-]+)\s*}}")
_VARIABLE_SPLIT_RE = re.compile(r"[,;]\s*")


def extract_template_variables(content: str) -> list[str]:
    """Distinct placeholder names in first-seen order."""
    return list(dict.fromkeys(PLACEHOLDER_RE.findall(content)))


def apply_template(content: str, variables: dict[str, str]) -> str:
    """Substitute every placeholder whose name is a key of ``variables``."""

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name in variables:
            return variables[name]
        return match.group(0)

    return PLACEHOLDER_RE.sub(_replace, content)


def parse_variables(text: str) -> dict[str, str]:
    """Parse ``"key=value, key=value; ..."`` into a dict.

    Each chunk is split on its first ``=``; chunks without one, or with an
    empty key, are ignored. Later keys win.
    """
    variables: dict[str, str] = {}
    if not text:
        return variables

    for chunk in _VARIABLE_SPLIT_RE.split(text):
        key, sep, value = chunk.partition("=")
        if sep and key.strip():
            variables[key.strip()] = value.strip()
    return variables
