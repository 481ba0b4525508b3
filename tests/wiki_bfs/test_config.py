import os

import pytest
from pydantic import ValidationError

from wiki_bfs.config import BFSConfig

pytestmark = pytest.mark.unit

ENV_VARS = [
    "WIKI_BFS_SOURCE", "WIKI_BFS_MAX_ROUNDS", "WIKI_BFS_MAP_TASKS", "WIKI_BFS_REDUCE_TASKS",
    "WIKI_BFS_WORKERS", "WIKI_BFS_EXECUTOR", "WIKI_BFS_TASK_ATTEMPTS", "WIKI_BFS_KEEP_GENERATIONS",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    # load_dotenv writes straight to os.environ
    for name in ENV_VARS:
        os.environ.pop(name, None)


def test_defaults():
    config = BFSConfig()
    assert config.source_id == "paul erdős"
    assert config.max_rounds == 60
    assert config.num_map_tasks == 100
    assert config.num_reduce_tasks == 30
    assert config.executor == "thread"
    assert not config.keep_generations
    assert "Category:" in config.skippable_prefixes


def test_source_is_normalized():
    assert BFSConfig(source_id="  Kevin   BACON ").source_id == "kevin bacon"


@pytest.mark.parametrize("kwargs", [
    {"source_id": "   "},
    {"executor": "cluster"},
    {"max_rounds": 0},
    {"num_reduce_tasks": 0},
])
def test_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        BFSConfig(**kwargs)


def test_from_env(clean_env):
    clean_env.setenv("WIKI_BFS_SOURCE", "Kevin Bacon")
    clean_env.setenv("WIKI_BFS_MAX_ROUNDS", "12")
    clean_env.setenv("WIKI_BFS_WORKERS", "3")
    clean_env.setenv("WIKI_BFS_EXECUTOR", "process")
    clean_env.setenv("WIKI_BFS_KEEP_GENERATIONS", "TRUE")

    config = BFSConfig.from_env()
    assert config.source_id == "kevin bacon"
    assert config.max_rounds == 12
    assert config.max_workers == 3
    assert config.executor == "process"
    assert config.keep_generations


def test_from_env_reads_dotenv(clean_env, tmp_path):
    (tmp_path / ".env").write_text("WIKI_BFS_REDUCE_TASKS=7\n", encoding="utf-8")
    assert BFSConfig.from_env().num_reduce_tasks == 7


def test_overrides_win_and_none_is_ignored(clean_env):
    clean_env.setenv("WIKI_BFS_MAX_ROUNDS", "12")
    config = BFSConfig.from_env(max_rounds=3, source_id=None)
    assert config.max_rounds == 3
    assert config.source_id == "paul erdős"
