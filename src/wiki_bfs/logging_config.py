"""
Logging setup for BFS runs.

A full run over a dump takes hours, so plain and file output carry the full
date and the worker process name next to every line.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

BATCH_FORMAT = "%(asctime)s %(levelname)-7s [%(processName)s] %(name)s: %(message)s"
BATCH_DATEFMT = "%Y-%m-%d %H:%M:%S"


def batch_formatter() -> logging.Formatter:
    return logging.Formatter(BATCH_FORMAT, datefmt=BATCH_DATEFMT)


def setup_logging(
    level: str = "INFO",
    use_rich: bool = True,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure the root logger for a run.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        use_rich: Rich console output on stderr; plain batch lines otherwise
        log_file: Also append plain batch lines to this file
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if use_rich:
        console_handler = RichHandler(
            console=Console(file=sys.stderr),
            show_path=False,
            rich_tracebacks=True,
            markup=False,
            log_time_format="[%H:%M:%S]",
        )
        console_handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(batch_formatter())

    handlers = [console_handler]
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(batch_formatter())
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={level}, rich={use_rich}, file={log_file}"
    )
