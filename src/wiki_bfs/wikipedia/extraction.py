"""
Turns raw dump pages into the initial generation of vertex records.
"""

from typing import Iterable, Optional

from wiki_bfs.types import Color, INFINITE_DISTANCE, VertexRecord
from wiki_bfs.wikipedia.dump_reader import RawPage
from wiki_bfs.wikipedia.links import (
    DEFAULT_SKIPPABLE_PREFIXES,
    extract_links,
    has_skippable_prefix,
    normalize_title,
)


def is_redirect(page: RawPage) -> bool:
    return page.is_redirect or page.text.lstrip().upper().startswith("#REDIRECT")


def is_stub(page: RawPage) -> bool:
    # Stub templates all end in "stub", e.g. {{math-stub}}
    return "stub}}" in page.text.lower()


def is_empty(page: RawPage) -> bool:
    return not page.text.strip()


def is_useful_page(page: RawPage, prefixes: Iterable[str] = DEFAULT_SKIPPABLE_PREFIXES) -> bool:
    """Check if a page is an article worth turning into a vertex."""
    return not (is_redirect(page) or is_empty(page) or is_stub(page) or has_skippable_prefix(page.title, prefixes))


def extract_vertex(
        page: RawPage,
        source_id: str,
        prefixes: Iterable[str] = DEFAULT_SKIPPABLE_PREFIXES
    ) -> Optional[VertexRecord]:
    """
    Build the generation-0 record for a page.

    Returns None for non-articles and for pages without outbound links
    (isolated vertices cannot start a path). The page whose normalized title
    equals ``source_id`` is seeded GRAY at distance 0; every other page starts
    WHITE at INFINITE_DISTANCE.
    """
    prefixes = tuple(prefixes)
    if not is_useful_page(page, prefixes):
        return None

    links = extract_links(page.text, prefixes)
    if not links:
        return None

    vertex_id = normalize_title(page.title)
    if not vertex_id:
        return None

    if vertex_id == source_id:
        return VertexRecord(id=vertex_id, neighbors=frozenset(links), distance=0, color=Color.GRAY)
    return VertexRecord(id=vertex_id, neighbors=frozenset(links), distance=INFINITE_DISTANCE, color=Color.WHITE)
