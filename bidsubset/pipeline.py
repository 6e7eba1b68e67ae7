"""
Single-pass subset run: compile → walk → match → materialize.

:func:`subset_dataset` is the public entry point consumed by the CLI.  It is
synchronous and keeps no state beyond the per-outcome counters returned in
the :class:`~bidsubset.models.RunSummary`.
"""

from __future__ import annotations

import time
from collections import Counter
from pathlib import Path
from typing import Callable, Optional

import structlog

from .materialize import Materializer
from .models import FilterSpec, Outcome, RunSummary
from .patterns import compile_patterns
from .utils.display import echo_path, echo_warning
from .walker import DEFAULT_MAX_DEPTH, walk_dataset

log = structlog.get_logger()


def subset_dataset(
    root: Path | str,
    spec: FilterSpec,
    output: Optional[Path | str] = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    echo: Callable[[str], None] = echo_path,
    warn: Callable[[str], None] = echo_warning,
) -> RunSummary:
    """Select files under *root* matching *spec* and list, copy or link them.

    Parameters
    ----------
    root
        Input dataset root.
    spec
        Subject/session/datatype/file filter plus mode flags.
    output
        Destination root.  ``None`` lists matches without writing anything.
    max_depth
        Deepest level below *root* that is inspected.
    echo, warn
        Sinks for listed paths and skip warnings (``click.echo`` based by
        default).

    Returns
    -------
    RunSummary
        Counts per outcome and the elapsed wall-clock time.

    Raises
    ------
    PatternError
        Invalid glob fragment; raised before the filesystem is touched.
    DatasetError
        *root* is missing or unreadable.
    MaterializeError
        A copy, link or directory creation failed.  Earlier outputs stay.
    """
    patterns = compile_patterns(spec)
    log.debug("patterns_compiled", globs=list(patterns.globs))

    start = time.perf_counter()
    entries = walk_dataset(root, max_depth=max_depth)
    materializer = Materializer(
        Path(output) if output is not None else None,
        copy=spec.copy_files,
        echo=echo,
        warn=warn,
    )

    counts: Counter[Outcome] = Counter()
    for entry in entries:
        if entry.is_dir or not patterns.matches(entry.rel_path):
            continue
        counts[materializer.materialize(entry)] += 1
    elapsed = time.perf_counter() - start

    summary = RunSummary(
        matched=sum(counts.values()),
        copied=counts[Outcome.COPIED],
        linked=counts[Outcome.LINKED],
        skipped=counts[Outcome.SKIPPED],
        listed=counts[Outcome.LISTED],
        verb=materializer.verb,
        output=materializer.output,
        elapsed=elapsed,
    )
    log.info(
        "subset_complete",
        matched=summary.matched,
        skipped=summary.skipped,
        verb=summary.verb,
        output=str(summary.output) if summary.output else None,
        elapsed=round(elapsed, 6),
    )
    return summary


__all__ = ["subset_dataset"]
