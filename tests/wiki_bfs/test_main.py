"""
Command line entry point tests.
"""

import logging

import pytest
from typer.testing import CliRunner

from wiki_bfs.main import app

pytestmark = pytest.mark.integration

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch, tmp_path):
    """The CLI reconfigures the root logger; put pytest's handlers back afterwards."""
    monkeypatch.chdir(tmp_path)
    for name in ("WIKI_BFS_SOURCE", "WIKI_BFS_KEEP_GENERATIONS", "WIKI_BFS_EXECUTOR"):
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_successful_run(write_graph, output_base):
    path = write_graph({"A": ["B"], "B": ["C"]})
    result = runner.invoke(app, [str(path), str(output_base), "--source", "A", "--map-tasks", "2",
                                 "--reduce-tasks", "2", "--plain-logs"])

    assert result.exit_code == 0, result.output
    assert "NUM_5" in result.output
    assert (output_base / "BFS-FILTER" / "summary.json").exists()


def test_log_file_option(write_graph, output_base, tmp_path):
    path = write_graph({"A": ["B"]})
    log_path = tmp_path / "run.log"
    result = runner.invoke(app, [str(path), str(output_base), "--source", "A", "--plain-logs",
                                 "--log-file", str(log_path)])

    assert result.exit_code == 0, result.output
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "RUN SUMMARY" in log_path.read_text(encoding="utf-8")


def test_source_not_found(write_graph, output_base):
    path = write_graph({"A": ["B"]})
    result = runner.invoke(app, [str(path), str(output_base), "--source", "Z", "--plain-logs"])

    assert result.exit_code == 0
    assert "NUM_5" not in result.output
    assert not (output_base / "BFS-1").exists()


def test_missing_input(tmp_path, output_base):
    result = runner.invoke(app, [str(tmp_path / "missing.xml"), str(output_base), "--plain-logs"])
    assert result.exit_code == 1


def test_corrupt_record_exits_with_error(write_graph, output_base, corrupt_extraction):
    path = write_graph({"A": ["B"], "B": ["C"]})
    result = runner.invoke(app, [str(path), str(output_base), "--source", "A", "--plain-logs"])

    assert result.exit_code == 1
    assert not (output_base / "BFS-FILTER" / "summary.json").exists()


def test_invalid_executor(write_graph, output_base):
    path = write_graph({"A": ["B"]})
    result = runner.invoke(app, [str(path), str(output_base), "--executor", "cluster", "--plain-logs"])
    assert result.exit_code == 2


def test_missing_arguments():
    result = runner.invoke(app, [])
    assert result.exit_code == 2
