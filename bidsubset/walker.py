"""
Depth-bounded enumeration of a dataset tree.

:func:`walk_dataset` validates the root eagerly, so an unreadable or missing
root fails before the first entry is requested, and then hands back a lazy
generator.  Subdirectories that cannot be listed, and entries whose type
cannot be determined, are dropped with a DEBUG breadcrumb instead of
aborting the walk.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List

import structlog

from .errors import DatasetError
from .models import DatasetEntry

log = structlog.get_logger()

DEFAULT_MAX_DEPTH = 5


def _scan(path: Path | str) -> List[os.DirEntry]:
    """Return the children of *path* sorted by name."""
    with os.scandir(path) as it:
        return sorted(it, key=lambda e: e.name)


def _relative(path: Path, root: Path) -> Path:
    try:
        return path.relative_to(root)
    except ValueError as err:  # walker is rooted at *root*; cannot happen
        raise RuntimeError(f"walked entry {path} escaped dataset root {root}") from err


def _iter_entries(
    root: Path,
    entries: List[os.DirEntry],
    depth: int,
    max_depth: int,
) -> Iterator[DatasetEntry]:
    for de in entries:
        try:
            is_dir = de.is_dir()
            is_link = de.is_symlink()
        except OSError as exc:
            log.debug("walk_entry_skipped", path=de.path, error=str(exc))
            continue

        path = Path(de.path)
        yield DatasetEntry(path=path, rel_path=_relative(path, root), is_dir=is_dir)

        # Linked directories are reported but not descended (no cycles).
        if not is_dir or is_link or depth >= max_depth:
            continue
        try:
            children = _scan(path)
        except OSError as exc:
            log.debug("walk_dir_unreadable", path=str(path), error=str(exc))
            continue
        yield from _iter_entries(root, children, depth + 1, max_depth)


def walk_dataset(root: Path | str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Iterator[DatasetEntry]:
    """Enumerate every node under *root* down to *max_depth* levels.

    Children of *root* sit at depth 1; a BIDS file at
    ``sub-01/ses-01/anat/x.nii.gz`` sits at depth 4.

    Args:
        root: Dataset root.  Resolved to an absolute path before walking.
        max_depth: Deepest level that is still reported.

    Returns:
        Lazy, single-use iterator of :class:`DatasetEntry` objects in
        depth-first, name-sorted order.  Directories are included.

    Raises:
        DatasetError: *root* does not exist, is not a directory, or cannot
            be listed.
        ValueError: *max_depth* is smaller than one.
    """
    if max_depth < 1:
        raise ValueError(f"max_depth must be >= 1, got {max_depth}")

    given = Path(root).expanduser()
    try:
        resolved = given.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise DatasetError(f"Dataset root {given} does not exist") from exc
    if not resolved.is_dir():
        raise DatasetError(f"Dataset root {given} is not a directory")
    try:
        top = _scan(resolved)
    except OSError as exc:
        raise DatasetError(f"Cannot read dataset root {given}: {exc.strerror or exc}") from exc

    log.debug("walk_start", root=str(resolved), max_depth=max_depth)
    return _iter_entries(resolved, top, 1, max_depth)


__all__ = ["DEFAULT_MAX_DEPTH", "walk_dataset"]
