import os
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

from wiki_bfs.wikipedia.links import DEFAULT_SKIPPABLE_PREFIXES, normalize_title


class BFSConfig(BaseModel):
    """Configuration for one BFS run."""

    # Traversal
    source_id: str = Field("paul erdős", description="Source vertex; normalized like every other title")
    max_rounds: int = Field(60, ge=1, description="Hard cap on Propagate+Merge rounds")

    # Parallelism
    num_map_tasks: int = Field(100, ge=1, description="Number of map partitions per job")
    num_reduce_tasks: int = Field(30, ge=1, description="Number of reduce partitions per job")
    max_workers: Optional[int] = Field(None, ge=1, description="Pool size, None for the executor default")
    executor: str = Field("thread", description="'thread' or 'process'")
    max_task_attempts: int = Field(4, ge=1, description="Attempts per task before the job fails")

    # Storage
    keep_generations: bool = Field(False, description="Keep every generation instead of reclaiming old ones")

    # Extraction
    skippable_prefixes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SKIPPABLE_PREFIXES),
        description="Title prefixes of non-article namespaces"
    )

    @field_validator("source_id")
    @classmethod
    def source_must_be_normalized(cls, v: str) -> str:
        normalized = normalize_title(v)
        if not normalized:
            raise ValueError("source_id must not be empty")
        return normalized

    @field_validator("executor")
    @classmethod
    def executor_must_be_known(cls, v: str) -> str:
        if v not in ("thread", "process"):
            raise ValueError(f"executor must be 'thread' or 'process', got '{v}'")
        return v

    @classmethod
    def from_env(cls, **overrides) -> "BFSConfig":
        """Create config from environment variables (and a .env file), then apply overrides."""
        load_dotenv(find_dotenv(usecwd=True))
        values = {
            "source_id": os.getenv("WIKI_BFS_SOURCE", "paul erdős"),
            "max_rounds": int(os.getenv("WIKI_BFS_MAX_ROUNDS", "60")),
            "num_map_tasks": int(os.getenv("WIKI_BFS_MAP_TASKS", "100")),
            "num_reduce_tasks": int(os.getenv("WIKI_BFS_REDUCE_TASKS", "30")),
            "executor": os.getenv("WIKI_BFS_EXECUTOR", "thread"),
            "max_task_attempts": int(os.getenv("WIKI_BFS_TASK_ATTEMPTS", "4")),
            "keep_generations": os.getenv("WIKI_BFS_KEEP_GENERATIONS", "false").lower() == "true",
        }
        workers = os.getenv("WIKI_BFS_WORKERS")
        if workers:
            values["max_workers"] = int(workers)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
