"""
Wikipedia module for wiki_bfs.

Reads MediaWiki dumps and turns article pages into initial vertex records.
"""

from .dump_reader import RawPage, iter_pages, list_dump_files
from .links import extract_links, has_skippable_prefix, normalize_title
from .extraction import extract_vertex, is_useful_page

__all__ = [
    'RawPage',
    'iter_pages',
    'list_dump_files',
    'extract_links',
    'has_skippable_prefix',
    'normalize_title',
    'extract_vertex',
    'is_useful_page',
]
