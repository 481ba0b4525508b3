import logging
import re
import shutil
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Union

from wiki_bfs.bfs.merge import merge
from wiki_bfs.codec import decode_value
from wiki_bfs.types import PipelineResult, VertexRecord

from .part_files import is_complete, read_pairs

GENERATION_RE = re.compile(r"^BFS-(\d+)$")


class GenerationStore:
    """
    Owns the directories under the output base.

    ``BFS-<k>`` holds generation k (0 is the extraction output), ``BFS-FILTER``
    holds the near-distance rows and the run summary.
    """

    def __init__(self, output_base: Union[str, Path]):
        self.output_base = Path(output_base)
        self.logger = logging.getLogger(__name__)

    def generation_path(self, generation: int) -> Path:
        return self.output_base / f"BFS-{generation}"

    @property
    def filter_path(self) -> Path:
        return self.output_base / "BFS-FILTER"

    @property
    def summary_path(self) -> Path:
        return self.filter_path / "summary.json"

    def prepare(self, path: Path) -> None:
        """Remove a stale output directory so a job can write to it."""
        if path.exists():
            self.logger.info(f"Deleting stale output {path}")
            shutil.rmtree(path)
        path.parent.mkdir(parents=True, exist_ok=True)

    def clear_previous_run(self) -> None:
        """Delete every generation directory and the filter output under the base."""
        for generation in self.existing_generations():
            self.delete_generation(generation)
        if self.filter_path.exists():
            self.logger.info(f"Deleting stale output {self.filter_path}")
            shutil.rmtree(self.filter_path)

    def delete_generation(self, generation: int) -> None:
        path = self.generation_path(generation)
        if path.exists():
            self.logger.info(f"Deleting old generation {path}")
            shutil.rmtree(path)

    def existing_generations(self) -> List[int]:
        if not self.output_base.exists():
            return []
        generations = []
        for child in self.output_base.iterdir():
            match = GENERATION_RE.match(child.name)
            if match and child.is_dir():
                generations.append(int(match.group(1)))
        return sorted(generations)

    def is_complete(self, generation: int) -> bool:
        return is_complete(self.generation_path(generation))

    def load_generation(self, generation: int) -> Dict[str, VertexRecord]:
        """Read a whole generation into memory, merging repeated ids. Meant for small graphs and tests."""
        path = self.generation_path(generation)
        if not is_complete(path):
            raise FileNotFoundError(f"Generation {generation} is missing or incomplete: {path}")

        grouped = defaultdict(list)
        for key, value in read_pairs(path):
            record = decode_value(key, value)
            if record is not None:
                grouped[key].append(record)
        return {vertex_id: merge(records).record for vertex_id, records in grouped.items()}

    def read_filter_rows(self) -> Dict[str, int]:
        """Return the ``id -> distance`` rows written by the filter pass."""
        return {key: int(value) for key, value in read_pairs(self.filter_path)}

    def write_summary(self, result: PipelineResult) -> Path:
        self.summary_path.parent.mkdir(parents=True, exist_ok=True)
        self.summary_path.write_text(result.model_dump_json(indent=2), encoding="utf-8")
        return self.summary_path
