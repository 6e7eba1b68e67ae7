"""
Reproduce matched files under an output root by copy or symbolic link.

The link/copy decision is taken once per run: :data:`SYMLINK_SUPPORTED` is
resolved at import time and :func:`select_materializer` picks the transfer
function before the walk starts, so the per-file path never branches on the
platform.

Behaviour per matched entry:
    * no output root → the relative path is echoed, nothing is written;
    * destination already present → skipped with a warning, never
      overwritten;
    * otherwise → parent folders are created and the file is copied or
      linked to its absolute source path.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Callable, Optional

import structlog

from .errors import MaterializeError, UnsupportedOperationError
from .models import DatasetEntry, Outcome
from .utils.display import echo_path, echo_warning

log = structlog.get_logger()

# Native symlinks are only relied upon on POSIX platforms.
SYMLINK_SUPPORTED: bool = os.name == "posix"

Transfer = Callable[[Path, Path], None]


# ─────────────────────────────────────────────────────────────────────────────
# Transfer primitives
# ─────────────────────────────────────────────────────────────────────────────
def copy_file(src: Path, dest: Path) -> None:
    """Copy the bytes (and timestamps) of *src* to *dest*."""
    shutil.copy2(src, dest)


def symlink_file(src: Path, dest: Path) -> None:
    """Create *dest* as a symbolic link pointing at *src*.

    Raises:
        UnsupportedOperationError: The platform has no native symlinks.  No
            filesystem call is attempted in that case.
    """
    if not SYMLINK_SUPPORTED:
        raise UnsupportedOperationError(
            f"symbolic links are not supported on this platform ({os.name})"
        )
    dest.symlink_to(src)


def effective_copy_mode(copy_requested: bool) -> bool:
    """Return ``True`` when files must be copied rather than linked."""
    return copy_requested or not SYMLINK_SUPPORTED


def select_materializer(copy: bool) -> Transfer:
    """Return the transfer function used for the whole run."""
    return copy_file if copy else symlink_file


# ─────────────────────────────────────────────────────────────────────────────
# Materializer
# ─────────────────────────────────────────────────────────────────────────────
class Materializer:
    """Apply one run's output policy to each matched entry.

    Args:
        output: Destination root, or ``None`` for list-only mode.
        copy: Copy was requested on the command line.  Ignored in favour of
            copy when symlinks are unsupported.
        echo: Sink for listed paths.
        warn: Sink for skip warnings.
    """

    def __init__(
        self,
        output: Optional[Path],
        *,
        copy: bool = False,
        echo: Callable[[str], None] = echo_path,
        warn: Callable[[str], None] = echo_warning,
    ) -> None:
        self.output = Path(output).expanduser() if output is not None else None
        self.copy = effective_copy_mode(copy)
        self._transfer = select_materializer(self.copy)
        self._echo = echo
        self._warn = warn

    @property
    def verb(self) -> str:
        if self.output is None:
            return "matched"
        return "copied" if self.copy else "linked"

    def destination(self, entry: DatasetEntry) -> Path:
        if self.output is None:
            raise ValueError("list-only mode has no destination")
        return self.output / entry.rel_path

    def materialize(self, entry: DatasetEntry) -> Outcome:
        """Handle a single matched file and report what happened.

        Raises:
            MaterializeError: Directory creation, copy or link failed.
        """
        if self.output is None:
            self._echo(str(entry.rel_path))
            return Outcome.LISTED

        dest = self.destination(entry)
        # lexists: a dangling link left by an earlier run still counts.
        if os.path.lexists(dest):
            self._warn(f"'{dest}' already exists")
            log.debug("destination_exists", dest=str(dest))
            return Outcome.SKIPPED

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            self._transfer(entry.path, dest)
        except OSError as exc:
            action = "copy" if self.copy else "link"
            raise MaterializeError(
                f"Could not {action} {entry.path} to {dest}: {exc.strerror or exc}"
            ) from exc

        outcome = Outcome.COPIED if self.copy else Outcome.LINKED
        log.debug("materialized", src=str(entry.path), dest=str(dest), outcome=outcome.value)
        return outcome


__all__ = [
    "SYMLINK_SUPPORTED",
    "Materializer",
    "copy_file",
    "symlink_file",
    "effective_copy_mode",
    "select_materializer",
]
