import bz2
import gzip

import pytest

from wiki_bfs.exceptions import InputNotFoundError
from wiki_bfs.wikipedia.dump_reader import iter_pages, list_dump_files, read_dump_pairs

pytestmark = pytest.mark.unit

PAGES = {
    "Paul Erdős": "Paul Erdős was a [[Hungary|Hungarian]] [[mathematician]].",
    "Kevin Bacon": "Kevin Bacon is an [[actor]] & <b>film</b> star.",
}


class TestIterPages:

    def test_reads_titles_and_text(self, write_dump):
        path = write_dump(PAGES)
        pages = list(iter_pages(path))

        assert [p.title for p in pages] == ["Paul Erdős", "Kevin Bacon"]
        assert pages[0].text == PAGES["Paul Erdős"]
        assert pages[1].text == PAGES["Kevin Bacon"]
        assert all(p.namespace == 0 for p in pages)
        assert not any(p.is_redirect for p in pages)

    def test_redirect_element(self, write_dump):
        path = write_dump({"Erdős": "[[Budapest]]"}, redirects={"Erdos": "Paul Erdős"})
        pages = {p.title: p for p in iter_pages(path)}

        assert pages["Erdos"].is_redirect
        assert not pages["Erdős"].is_redirect

    def test_compressed_dumps(self, tmp_path, render_dump):
        xml = render_dump(PAGES).encode("utf-8")
        gz_path = tmp_path / "dump.xml.gz"
        bz_path = tmp_path / "dump.xml.bz2"
        with gzip.open(gz_path, "wb") as f:
            f.write(xml)
        with bz2.open(bz_path, "wb") as f:
            f.write(xml)

        assert [p.title for p in iter_pages(gz_path)] == list(PAGES)
        assert [p.title for p in iter_pages(bz_path)] == list(PAGES)

    def test_read_dump_pairs_keys_by_title(self, write_dump):
        path = write_dump(PAGES)
        pairs = list(read_dump_pairs(path))
        assert [title for title, _ in pairs] == list(PAGES)
        assert pairs[0][1].title == "Paul Erdős"


class TestListDumpFiles:

    def test_single_file(self, write_dump):
        path = write_dump(PAGES)
        assert list_dump_files(path) == [path]

    def test_directory(self, tmp_path, render_dump):
        (tmp_path / "b.xml").write_text(render_dump(PAGES), encoding="utf-8")
        (tmp_path / "a.xml.gz").write_bytes(gzip.compress(render_dump(PAGES).encode("utf-8")))
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

        files = list_dump_files(tmp_path)
        assert [f.name for f in files] == ["a.xml.gz", "b.xml"]

    def test_missing_path(self, tmp_path):
        with pytest.raises(InputNotFoundError):
            list_dump_files(tmp_path / "nope.xml")

    def test_directory_without_dumps(self, tmp_path):
        with pytest.raises(InputNotFoundError):
            list_dump_files(tmp_path)
