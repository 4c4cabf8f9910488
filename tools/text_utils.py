"""Text utilities: word counts, prompt truncation, ids and file names."""

import re

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def truncate_for_prompt(text: str, limit: int) -> str:
    """Cap text sent to the model, marking the cut when one is made."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... (content truncated)"


def slugify(title: str) -> str:
    """Lowercase a title into a dash-separated identifier.

    "Alpha Draft" -> "alpha-draft". Falls back to "novel" when nothing
    alphanumeric is left.
    """
    slug = _NON_ALNUM_RE.sub("-", title.lower()).strip("-")
    return slug or "novel"


def sanitize_filename(title: str) -> str:
    """Lowercase a title and replace non-alphanumeric runs with underscores."""
    name = _NON_ALNUM_RE.sub("_", title.lower()).strip("_")
    return name or "untitled"


def plot_point_line(title: str, description: str) -> str:
    return f"{title}: {description}"
