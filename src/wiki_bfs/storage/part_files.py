"""
On-disk layout of a job output directory.

    BFS-3/
        part-00000
        part-00001
        _SUCCESS

Part files are written under ``_temporary/`` and renamed into place; the
``_SUCCESS`` marker is written last, so a directory without it is incomplete.
"""

import logging
import shutil
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple

from wiki_bfs.codec import KEY_SEPARATOR, split_line

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "_SUCCESS"
TEMPORARY_DIR = "_temporary"


def part_file_name(index: int) -> str:
    return f"part-{index:05d}"


def is_complete(output_dir: Path) -> bool:
    return (Path(output_dir) / SUCCESS_MARKER).exists()


def list_part_files(output_dir: Path) -> List[Path]:
    return sorted(p for p in Path(output_dir).glob("part-*") if p.is_file())


def write_part_files(output_dir: Path, partitions: Sequence[Sequence[Tuple[str, str]]]) -> List[Path]:
    """Commit one part file per reduce partition, then the success marker."""
    output_dir = Path(output_dir)
    temporary = output_dir / TEMPORARY_DIR
    temporary.mkdir(parents=True, exist_ok=True)

    written = []
    for index, pairs in enumerate(partitions):
        staged = temporary / part_file_name(index)
        with open(staged, "w", encoding="utf-8") as f:
            for key, value in pairs:
                f.write(f"{key}{KEY_SEPARATOR}{value}\n")
        final = output_dir / part_file_name(index)
        staged.replace(final)
        written.append(final)

    shutil.rmtree(temporary)
    (output_dir / SUCCESS_MARKER).touch()
    logger.debug(f"Committed {len(written)} part files to {output_dir}")
    return written


def read_pairs(output_dir: Path) -> Iterator[Tuple[str, str]]:
    """Input format for jobs reading a previous job's output: ``(key, value)`` per line."""
    for part in list_part_files(output_dir):
        with open(part, "r", encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    yield split_line(line)
