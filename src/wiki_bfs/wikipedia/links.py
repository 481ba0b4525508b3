"""
Helper functions for Wikipedia title normalization and link extraction.
"""

import re
from typing import Iterable, Set

# Namespaces whose pages and links are not articles.
DEFAULT_SKIPPABLE_PREFIXES = ("File:", "Category:", "Portal:", "Wikipedia:", "Image:")

# Innermost [[...]] only, so links nested in image captions are still found.
LINK_RE = re.compile(r"\[\[([^\[\]]*)\]\]")


def normalize_title(title: str) -> str:
    """Returns the vertex id for a page title or link target.

    Args:
      title: The raw title as it appears in the dump or in link markup.

    Returns:
      The lowercased title with whitespace runs collapsed to one space and the
      ``|`` and ``#`` separator characters removed.

    Examples:
      "Paul Erdős"        =>   "paul erdős"
      " Kevin  Bacon "    =>   "kevin bacon"
    """
    return " ".join(title.split()).lower().replace("|", "").replace("#", "")


def has_skippable_prefix(title: str, prefixes: Iterable[str] = DEFAULT_SKIPPABLE_PREFIXES) -> bool:
    """Check whether a title belongs to a non-article namespace. Case-insensitive."""
    folded = title.strip().lower()
    return any(folded.startswith(prefix.lower()) for prefix in prefixes)


def extract_links(text: str, prefixes: Iterable[str] = DEFAULT_SKIPPABLE_PREFIXES) -> Set[str]:
    """Extracts the normalized, deduplicated link targets of a page's wikitext.

    Links are ``[[target]]`` or ``[[target|display text]]``. Display text and
    ``#section`` anchors are discarded; empty targets (``[[]]``, same-page
    ``[[#Section]]``) and targets under a skippable prefix are excluded.

    Examples:
      "[[Paul Erdős]] and [[paul erdős|famous mathematician]]"   =>   {"paul erdős"}
      "[[Category:Mathematicians]]"                             =>   set()
    """
    prefixes = tuple(prefixes)
    links = set()
    for match in LINK_RE.finditer(text):
        target = match.group(1).split("|", 1)[0]
        target = target.split("#", 1)[0]
        if not target.strip() or has_skippable_prefix(target, prefixes):
            continue
        normalized = normalize_title(target)
        if normalized:
            links.add(normalized)
    return links
