import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from wiki_bfs.bfs.orchestrator import BFSOrchestrator
from wiki_bfs.config import BFSConfig
from wiki_bfs.exceptions import WikiBFSException
from wiki_bfs.logging_config import setup_logging
from wiki_bfs.types import PipelineResult, PipelineState


app = typer.Typer()


def render_counters(result: PipelineResult) -> Table:
    """Build the counters table printed at the end of a run."""
    table = Table(title=f"BFS counters ({result.state.value}, {result.rounds} rounds)")
    table.add_column("Counter")
    table.add_column("Value", justify="right")

    for name, value in result.bucket_counts.items():
        table.add_row(name, f"{value:,}")
    table.add_row("NUM_RECORDS", f"{result.total_records:,}")
    for name, value in sorted(result.diagnostics.items()):
        table.add_row(name, f"{value:,}", style="dim")
    return table


@app.command()
def main(
    input_path: Path = typer.Argument(..., help="MediaWiki XML dump file, or a directory of dumps."),
    output_base: Path = typer.Argument(..., help="Base directory for generations and the filter output."),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Source page title."),
    max_rounds: Optional[int] = typer.Option(None, "--max-rounds", "-r", help="Maximum number of BFS rounds."),
    map_tasks: Optional[int] = typer.Option(None, "--map-tasks", help="Map partitions per job."),
    reduce_tasks: Optional[int] = typer.Option(None, "--reduce-tasks", help="Reduce partitions per job."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Worker pool size."),
    executor: Optional[str] = typer.Option(None, "--executor", help="'thread' or 'process'."),
    keep_generations: bool = typer.Option(False, "--keep-generations", help="Do not delete old generations."),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="DEBUG, INFO, WARNING or ERROR."),
    plain_logs: bool = typer.Option(False, "--plain-logs", help="Plain log lines instead of Rich output."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also append log lines to this file."),
):
    """
    Compute hop distances from a source article over a Wikipedia dump.
    """
    setup_logging(level=log_level, use_rich=not plain_logs, log_file=log_file)
    logger = logging.getLogger(__name__)

    try:
        config = BFSConfig.from_env(
            source_id=source,
            max_rounds=max_rounds,
            num_map_tasks=map_tasks,
            num_reduce_tasks=reduce_tasks,
            max_workers=workers,
            executor=executor,
            keep_generations=keep_generations or None,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        raise typer.Exit(code=2)

    orchestrator = BFSOrchestrator(config, output_base)
    try:
        result = asyncio.run(orchestrator.run(input_path))
    except WikiBFSException as e:
        logger.error(f"BFS failed: {e.message}")
        raise typer.Exit(code=1)

    if result.state == PipelineState.NO_SOURCE:
        logger.info("Didn't find source node, nothing to report.")
        return

    Console().print(render_counters(result))


if __name__ == "__main__":
    app()
