"""Test helpers for building small BIDS trees on disk."""

from __future__ import annotations

from pathlib import Path

# Relative paths of the files created by the ``bids_ds`` fixture.
DATASET_FILES = [
    "CHANGES",
    "README",
    "dataset_description.json",
    "participants.tsv",
    "participants.json",
    "sub-01/sub-01_scans.tsv",
    "sub-01/anat/sub-01_T1w.nii.gz",
    "sub-01/anat/sub-01_T1w.json",
    "sub-01/func/sub-01_task-rest_bold.nii.gz",
    "sub-02/anat/sub-02_T1w.nii.gz",
    "sub-03/ses-01/anat/sub-03_ses-01_T1w.nii.gz",
    "sub-03/ses-02/func/sub-03_ses-02_task-rest_bold.nii.gz",
    "derivatives/fmriprep/sub-01/anat/sub-01_desc-preproc_T1w.nii.gz",
]


def write_files(root: Path, rel_paths) -> Path:
    """Create every file in *rel_paths* below *root* with its own path as content.

    Args:
        root: Directory that receives the files (created when missing).
        rel_paths: POSIX-style relative paths.

    Returns:
        *root*, for chaining.
    """
    for rel in rel_paths:
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(rel.encode())
    return root


def snapshot(root: Path) -> dict[str, tuple[bool, int]]:
    """Map every node below *root* to ``(is_dir, mtime_ns)``."""
    return {
        p.relative_to(root).as_posix(): (p.is_dir(), p.lstat().st_mtime_ns)
        for p in root.rglob("*")
    }
