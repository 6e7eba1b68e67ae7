"""
Package-level logging configuration.

* Rich console output on **stderr**, so listed paths on stdout stay
  pipeable.
* Rotating **JSON** log file, only when ``$BIDSUBSET_LOG_DIR`` is set.  Logs
  are never written into the input dataset: a list-only run must leave the
  filesystem untouched.
* Optional plain-text mirror controlled via ``--save-logfile`` on the CLI.

The public helper :func:`setup_logging` wires everything and is called once
by the CLI before any output is produced.
"""

from __future__ import annotations

import atexit
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

import structlog
from rich.console import Console
from rich.logging import RichHandler
from structlog.dev import ConsoleRenderer as StructlogConsoleRenderer
from structlog.stdlib import LoggerFactory

__all__ = ["setup_logging", "LOG_DIR_ENV"]

LOG_DIR_ENV = "BIDSUBSET_LOG_DIR"


# --------------------------------------------------------------------------- #
# Internal helpers – file-based handlers                                      #
# --------------------------------------------------------------------------- #
def _json_file_handler(level: int) -> logging.Handler | None:
    """Return a rotating JSON file handler or *None* when logging to file is off.

    The directory comes from ``$BIDSUBSET_LOG_DIR``; the file is
    ``bidsubset.log`` inside it.
    """
    env_dir = os.environ.get(LOG_DIR_ENV)
    if not env_dir:
        return None

    logdir = Path(env_dir).expanduser()
    logdir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=logdir / "bidsubset.log",
        maxBytes=5_000_000,  # ~5 MB before rollover
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def _plain_text_file_handler(
    path: Optional[Path], level: int
) -> logging.Handler | None:
    """Return a plain-text file handler or *None* when *path* is *None*."""
    if path is None:
        return None

    path = path.expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8", mode="a")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    # Ensure the buffer is flushed on interpreter exit.
    atexit.register(handler.close)
    return handler


# --------------------------------------------------------------------------- #
# Public API – main entry-point                                               #
# --------------------------------------------------------------------------- #
def setup_logging(
    *,
    verbose: bool = False,
    debug: bool = False,
    extra_text_log: Optional[Path] = None,
) -> None:
    """Configure rich console logging and optional file mirrors.

    Args:
        verbose: Emit INFO-level messages (run summary breadcrumbs).
        debug: Emit DEBUG-level messages (per-file events, resolved patterns).
        extra_text_log: Optional path for a plain-text mirror of console output.
    """
    console_lvl = (
        logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    )
    file_lvl = logging.DEBUG if debug else logging.INFO

    handlers: list[logging.Handler] = [
        RichHandler(
            level=console_lvl,
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
            show_path=debug,
        )
    ]

    json_handler = _json_file_handler(file_lvl)
    if json_handler:
        handlers.append(json_handler)

    txt_handler = _plain_text_file_handler(extra_text_log, console_lvl)
    if txt_handler:
        handlers.append(txt_handler)

    # Repeated CLI invocations in one interpreter (tests) replace the handlers.
    logging.basicConfig(
        level=logging.DEBUG,
        handlers=handlers,
        format="%(message)s",
        force=True,
    )

    lowest = min(h.level for h in handlers)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            (
                StructlogConsoleRenderer(colors=False)
                if verbose or debug
                else structlog.processors.JSONRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(lowest),
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=False,
    )
