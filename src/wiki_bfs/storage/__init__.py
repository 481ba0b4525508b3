from .generation_store import GenerationStore
from .part_files import is_complete, read_pairs, write_part_files

__all__ = ["GenerationStore", "is_complete", "read_pairs", "write_part_files"]
