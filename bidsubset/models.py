"""
Typed, immutable value objects that circulate between subset stages.

Every class inherits from :class:`pydantic.BaseModel` with ``frozen=True``
so a filter built from the command line cannot drift while the walk is in
progress, and entries can be hashed or collected into sets by callers.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, field_validator

# Dataset-wide metadata files that live next to the ``sub-*`` folders.
TOP_LEVEL_FILES: tuple[str, ...] = (
    "CHANGES",
    "dataset_description.json",
    "participants.tsv",
    "participants.json",
    "README",
)

MATCH_ALL = "*"


class FilterSpec(BaseModel, frozen=True):
    """User selection applied to a BIDS dataset.

    Attributes
    ----------
    subject, session, datatype, file
        Glob fragments substituted into ``sub-{subject}/[ses-{session}/]
        {datatype}/{file}``.  Missing or empty fragments fall back to ``*``.
    exclude_top_level
        Drop :data:`TOP_LEVEL_FILES` from the compiled pattern set.
    case_insensitive
        Match every pattern without regard to case.
    copy_files
        Copy bytes instead of creating symbolic links.
    """

    subject: str = MATCH_ALL
    session: str = MATCH_ALL
    datatype: str = MATCH_ALL
    file: str = MATCH_ALL
    exclude_top_level: bool = False
    case_insensitive: bool = False
    copy_files: bool = False

    @field_validator("subject", "session", "datatype", "file", mode="before")
    @classmethod
    def _default_to_wildcard(cls, value: Optional[str]) -> str:
        """Replace ``None`` / empty fragments with the match-all wildcard."""
        if value is None or value == "":
            return MATCH_ALL
        return value


class DatasetEntry(BaseModel, frozen=True):
    """Filesystem node discovered while walking the dataset.

    Attributes
    ----------
    path
        Absolute path of the node (dataset root already resolved).
    rel_path
        Path relative to the dataset root.
    is_dir
        ``True`` for directories, including symlinks that point to one.
    """

    path: Path
    rel_path: Path
    is_dir: bool = False


class Outcome(str, Enum):
    """What happened to a single matched entry."""

    COPIED = "copied"
    LINKED = "linked"
    SKIPPED = "skipped"
    LISTED = "listed"


class RunSummary(BaseModel, frozen=True):
    """Counters accumulated over one subset run.

    ``matched`` counts every matched file, including those skipped because
    the destination already existed.
    """

    matched: int = 0
    copied: int = 0
    linked: int = 0
    skipped: int = 0
    listed: int = 0
    verb: str = "matched"
    output: Optional[Path] = None
    elapsed: float = 0.0

    def summary_line(self) -> str:
        """Return the one-line report printed at the end of a run."""
        duration = format_duration(self.elapsed)
        if self.output is None:
            return f"{self.matched} files matched in {duration}."
        return f"{self.matched} files {self.verb} to '{self.output}' in {duration}."


def format_duration(seconds: float) -> str:
    """Render *seconds* with a unit suited to its magnitude (µs, ms or s)."""
    if seconds < 1e-3:
        return f"{seconds * 1e6:.1f}µs"
    if seconds < 1:
        return f"{seconds * 1e3:.1f}ms"
    return f"{seconds:.3f}s"


__all__ = [
    "TOP_LEVEL_FILES",
    "MATCH_ALL",
    "FilterSpec",
    "DatasetEntry",
    "Outcome",
    "RunSummary",
    "format_duration",
]
