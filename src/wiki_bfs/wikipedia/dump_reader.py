"""
Streaming reader for MediaWiki XML exports (pages-articles dumps).

Pages are yielded one at a time and their elements cleared afterwards, so a
multi-gigabyte dump is read in constant memory.
"""

import bz2
import gzip
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import IO, Iterator, List, Tuple, Union

from pydantic import BaseModel, Field

from wiki_bfs.exceptions import InputNotFoundError

logger = logging.getLogger(__name__)

DUMP_SUFFIXES = (".xml", ".xml.gz", ".xml.bz2")


class RawPage(BaseModel):
    """A page as it appears in the dump, before any link extraction."""
    title: str = Field(..., description="Page title as written in the dump")
    namespace: int = Field(0, description="MediaWiki namespace id, 0 for articles")
    text: str = Field("", description="Wikitext of the latest revision")
    is_redirect: bool = Field(False, description="Whether the dump marks the page as a redirect")


def _local_name(tag: str) -> str:
    """Drop the ``{http://www.mediawiki.org/xml/export-0.10/}`` namespace from a tag."""
    return tag.rsplit("}", 1)[-1]


def _open_dump(path: Path) -> IO[bytes]:
    if path.name.endswith(".gz"):
        return gzip.open(path, "rb")
    if path.name.endswith(".bz2"):
        return bz2.open(path, "rb")
    return open(path, "rb")


def list_dump_files(input_path: Union[str, Path]) -> List[Path]:
    """Resolve the input collection to a sorted list of dump files.

    Raises:
      InputNotFoundError: If the path does not exist or a directory holds no dumps.
    """
    path = Path(input_path)
    if not path.exists():
        raise InputNotFoundError(f"Input collection not found: {path}")
    if path.is_file():
        return [path]

    files = sorted(p for p in path.iterdir() if p.is_file() and p.name.endswith(DUMP_SUFFIXES))
    if not files:
        raise InputNotFoundError(f"No dump files ({', '.join(DUMP_SUFFIXES)}) found in {path}")
    return files


def iter_pages(path: Union[str, Path]) -> Iterator[RawPage]:
    """Yield every ``<page>`` of one dump file."""
    path = Path(path)
    with _open_dump(path) as source:
        title, namespace, text, is_redirect = "", 0, "", False
        for event, elem in ET.iterparse(source, events=("end",)):
            name = _local_name(elem.tag)
            if name == "title":
                title = elem.text or ""
            elif name == "ns":
                namespace = int(elem.text or 0)
            elif name == "redirect":
                is_redirect = True
            elif name == "text":
                text = elem.text or ""
            elif name == "page":
                yield RawPage(title=title, namespace=namespace, text=text, is_redirect=is_redirect)
                title, namespace, text, is_redirect = "", 0, "", False
                elem.clear()


def read_dump_pairs(path: Union[str, Path]) -> Iterator[Tuple[str, RawPage]]:
    """Input format for the extraction job: ``(title, page)`` pairs."""
    count = 0
    for page in iter_pages(path):
        count += 1
        yield page.title, page
    logger.debug(f"Read {count:,} pages from {path}")
