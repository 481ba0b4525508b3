"""
Pytest configuration and shared fixtures.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional
from xml.sax.saxutils import escape, quoteattr

import pytest

from wiki_bfs.bfs import jobs
from wiki_bfs.config import BFSConfig
from wiki_bfs.execution import TaskOutput
from wiki_bfs.types import BFSCounter

# Configure logging for tests
logging.basicConfig(level=logging.INFO)

MEDIAWIKI_NS = "http://www.mediawiki.org/xml/export-0.10/"


def build_dump(pages: Dict[str, str], redirects: Optional[Dict[str, str]] = None) -> str:
    """Render pages (title -> wikitext) and redirects (title -> target) as a MediaWiki export."""
    parts = [
        f'<mediawiki xmlns="{MEDIAWIKI_NS}" xml:lang="en">',
        "<siteinfo><sitename>Wikipedia</sitename><dbname>enwiki</dbname></siteinfo>",
    ]
    page_id = 0
    for title, text in pages.items():
        page_id += 1
        parts.append(
            f"<page><title>{escape(title)}</title><ns>0</ns><id>{page_id}</id>"
            f"<revision><id>{page_id + 1000}</id>"
            f'<text bytes="{len(text)}" xml:space="preserve">{escape(text)}</text>'
            f"</revision></page>"
        )
    for title, target in (redirects or {}).items():
        page_id += 1
        parts.append(
            f"<page><title>{escape(title)}</title><ns>0</ns><id>{page_id}</id>"
            f"<redirect title={quoteattr(target)} />"
            f'<revision><id>{page_id + 1000}</id><text xml:space="preserve">#REDIRECT [[{escape(target)}]]</text></revision>'
            f"</page>"
        )
    parts.append("</mediawiki>")
    return "\n".join(parts)


def graph_pages(edges: Dict[str, Iterable[str]]) -> Dict[str, str]:
    """Turn an adjacency mapping into article wikitext linking each neighbor once."""
    return {
        title: "Article text. " + " ".join(f"[[{target}]]" for target in targets)
        for title, targets in edges.items()
    }


@pytest.fixture
def render_dump() -> Callable[..., str]:
    return build_dump


@pytest.fixture
def write_dump(tmp_path: Path) -> Callable[..., Path]:
    """Write a MediaWiki export into tmp_path and return its path."""
    def _write(pages: Dict[str, str], redirects: Optional[Dict[str, str]] = None, name: str = "dump.xml") -> Path:
        path = tmp_path / name
        path.write_text(build_dump(pages, redirects), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def write_graph(write_dump) -> Callable[..., Path]:
    """Write a dump whose link structure is the given adjacency mapping."""
    def _write(edges: Dict[str, Iterable[str]], name: str = "graph.xml") -> Path:
        return write_dump(graph_pages(edges), name=name)
    return _write


@pytest.fixture
def bfs_config() -> BFSConfig:
    """Small, deterministic configuration with several partitions per job."""
    return BFSConfig(
        source_id="A",
        num_map_tasks=3,
        num_reduce_tasks=2,
        max_workers=2,
        max_task_attempts=2,
        keep_generations=True,
    )


@pytest.fixture
def output_base(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def corrupt_extraction(monkeypatch):
    """Make the first pass emit a source record whose distance field is not a number."""
    def _mapper(title, page, source_id, prefixes):
        output = TaskOutput()
        output.incr(BFSCounter.FOUND_SOURCE)
        output.emit(source_id, "b|x|1")
        return output
    monkeypatch.setattr(jobs, "extraction_mapper", _mapper)
