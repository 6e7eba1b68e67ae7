"""\b
Command-line interface entry point for *bidsubset*.

``bidsubset-cli`` is a single command (no sub-commands).  It configures
logging, merges *subset.yaml* defaults with the command-line flags, runs
:func:`bidsubset.pipeline.subset_dataset` and prints the summary line.
Every :class:`~bidsubset.errors.BidsubsetError` is reported as a
:class:`click.ClickException`, giving a non-zero exit status.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import click
import structlog

from bidsubset import __version__
from bidsubset.config import load_config
from bidsubset.errors import BidsubsetError
from bidsubset.pipeline import subset_dataset
from bidsubset.utils.display import echo_summary
from bidsubset.utils.logging import setup_logging

log = structlog.get_logger()

_CTX: Dict[str, Any] = dict(
    help_option_names=["-h", "--help"],
    max_content_width=120,
)


@click.command(
    context_settings=_CTX,
    help="""\b
bidsubset-cli – extract a subset of a BIDS dataset.

Files under PATH matching sub-<subject>/[ses-<session>/]<datatype>/<file>
are listed, or symlinked/copied into --output preserving their layout.
""",
)
@click.version_option(__version__)
@click.argument("path", type=click.Path(path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output dataset root. Without it, matching files are only listed.",
)
# ------------ filters -------------------------------------------------------
@click.option("-s", "--subject", metavar="<glob>", help="Subject glob pattern.  [default: *]")
@click.option("-e", "--session", metavar="<glob>", help="Session glob pattern.  [default: *]")
@click.option(
    "-d", "--datatype", metavar="<glob>", help="BIDS datatype glob pattern (anat, func, ...).  [default: *]"
)
@click.option("-f", "--file", "file_", metavar="<glob>", help="File name glob pattern.  [default: *]")
@click.option(
    "-x", "--exclude-top-level", is_flag=True, help="Exclude top level metadata files."
)
# ------------ modes ---------------------------------------------------------
@click.option("-c", "--copy", is_flag=True, help="Copy files instead of symlinking them.")
@click.option("-i", "--case-insensitive", is_flag=True, help="Case insensitive glob matching.")
# ------------ ambient -------------------------------------------------------
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML file with default filter values.",
)
@click.option("-v", "--verbose", is_flag=True, help="INFO-level console logging.")
@click.option("--debug", is_flag=True, help="DEBUG-level console logging.")
@click.option(
    "--save-logfile",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Mirror console logging into this plain-text file.",
)
def main(  # noqa: D401 – Click callback
    path: Path,
    output: Path | None,
    subject: str | None,
    session: str | None,
    datatype: str | None,
    file_: str | None,
    exclude_top_level: bool,
    copy: bool,
    case_insensitive: bool,
    config_path: Path | None,
    verbose: bool,
    debug: bool,
    save_logfile: Path | None,
) -> None:
    """Entry-point for ``bidsubset-cli``.

    Args:
        path: Input BIDS dataset root.
        output: Destination root; ``None`` selects list-only mode.
        subject: Subject glob fragment.
        session: Session glob fragment.
        datatype: Datatype glob fragment.
        file_: File name glob fragment.
        exclude_top_level: Drop the dataset-level metadata files.
        copy: Copy instead of symlinking.
        case_insensitive: Case-insensitive matching.
        config_path: Explicit *subset.yaml*.
        verbose: INFO-level console logging.
        debug: DEBUG-level console logging.
        save_logfile: Optional plain-text log mirror.
    """
    setup_logging(verbose=verbose, debug=debug, extra_text_log=save_logfile)

    try:
        cfg = load_config(
            config_path=config_path,
            dataset_root=path if path.is_dir() else None,
        )
        spec = cfg.filter_spec(
            subject=subject,
            session=session,
            datatype=datatype,
            file=file_,
            exclude_top_level=exclude_top_level,
            copy=copy,
            case_insensitive=case_insensitive,
        )
        log.debug("filter_spec", **spec.model_dump())
        summary = subset_dataset(path, spec, output, max_depth=cfg.max_depth)
    except BidsubsetError as exc:
        raise click.ClickException(str(exc)) from exc

    echo_summary(summary.summary_line())


cli = main
__all__: list[str] = ["main", "cli"]

if __name__ == "__main__":  # pragma: no cover
    cli()
