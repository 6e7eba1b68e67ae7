from pathlib import Path
import os
import subprocess
import sys

import pytest
from click.testing import CliRunner

from bidsubset import __version__
from bidsubset.cli import main as cli_main
from bidsubset.utils.logging import LOG_DIR_ENV

from .utils import snapshot, write_files

CLI = [sys.executable, "-m", "bidsubset.cli"]


@pytest.fixture(autouse=True)
def _no_json_log(monkeypatch):
    monkeypatch.delenv(LOG_DIR_ENV, raising=False)


def _stdout_lines(result) -> list[str]:
    return [line for line in result.stdout.splitlines() if line]


def test_list_only(bids_ds: Path):
    """Verify list-only output: one relative path per line, then the summary."""
    before = snapshot(bids_ds.parent)
    result = CliRunner().invoke(cli_main, [str(bids_ds), "--subject", "01", "-d", "anat"])

    assert result.exit_code == 0, result.output
    lines = _stdout_lines(result)
    assert [Path(p).as_posix() for p in lines[:-1]] == sorted(
        [
            "CHANGES",
            "README",
            "dataset_description.json",
            "participants.json",
            "participants.tsv",
            "sub-01/anat/sub-01_T1w.json",
            "sub-01/anat/sub-01_T1w.nii.gz",
        ]
    )
    assert lines[-1].startswith("7 files matched in ")
    assert snapshot(bids_ds.parent) == before


def test_copy_single_subject(tmp_path: Path):
    ds = write_files(
        tmp_path / "ds",
        ["sub-01/anat/sub-01_T1w.nii.gz", "sub-02/anat/sub-02_T1w.nii.gz"],
    )
    out = tmp_path / "out"

    result = CliRunner().invoke(
        cli_main, [str(ds), "-s", "01", "-o", str(out), "--copy", "-x"]
    )

    assert result.exit_code == 0, result.output
    assert (out / "sub-01/anat/sub-01_T1w.nii.gz").read_bytes() == b"sub-01/anat/sub-01_T1w.nii.gz"
    assert not (out / "sub-02").exists()
    assert f"1 files copied to '{out}' in " in result.stdout


def test_rerun_warns_and_succeeds(bids_ds: Path, tmp_path: Path):
    out = tmp_path / "out"
    args = [str(bids_ds), "-o", str(out), "-c", "-d", "anat", "-x"]
    runner = CliRunner()

    first = runner.invoke(cli_main, args)
    second = runner.invoke(cli_main, args)

    assert first.exit_code == 0 and second.exit_code == 0
    warnings = [l for l in _stdout_lines(second) if l.startswith("WARNING: ")]
    assert len(warnings) == 4
    assert all(l.endswith("already exists") for l in warnings)


def test_exclude_top_level_flag(tmp_path: Path):
    ds = write_files(tmp_path / "ds", ["dataset_description.json"])
    runner = CliRunner()

    plain = runner.invoke(cli_main, [str(ds)])
    excluded = runner.invoke(cli_main, [str(ds), "--exclude-top-level"])

    assert _stdout_lines(plain)[-1].startswith("1 files matched")
    assert _stdout_lines(excluded) and _stdout_lines(excluded)[-1].startswith("0 files matched")


def test_case_insensitive_flag(bids_ds: Path):
    runner = CliRunner()
    strict = runner.invoke(cli_main, [str(bids_ds), "-d", "ANAT", "-x"])
    loose = runner.invoke(cli_main, [str(bids_ds), "-d", "ANAT", "-x", "-i"])

    assert _stdout_lines(strict)[-1].startswith("0 files matched")
    assert _stdout_lines(loose)[-1].startswith("4 files matched")


def test_invalid_glob_exits_nonzero(bids_ds: Path, tmp_path: Path):
    out = tmp_path / "out"
    result = CliRunner().invoke(cli_main, [str(bids_ds), "-f", "[abc", "-o", str(out)])

    assert result.exit_code == 1
    assert "Invalid glob pattern '[abc'" in result.output
    assert not out.exists()


def test_missing_root_exits_nonzero(tmp_path: Path):
    result = CliRunner().invoke(cli_main, [str(tmp_path / "missing")])
    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_write_failure_exits_nonzero(bids_ds: Path, tmp_path: Path):
    blocker = tmp_path / "out"
    blocker.write_text("file, not folder")
    result = CliRunner().invoke(cli_main, [str(bids_ds), "-o", str(blocker), "-c"])
    assert result.exit_code != 0


def test_config_defaults_and_override(bids_ds: Path, tmp_path: Path):
    cfg = tmp_path / "subset.yaml"
    cfg.write_text("datatype: func\nexclude_top_level: true\n")
    runner = CliRunner()

    from_cfg = runner.invoke(cli_main, [str(bids_ds), "--config", str(cfg)])
    overridden = runner.invoke(cli_main, [str(bids_ds), "--config", str(cfg), "-d", "anat"])

    assert _stdout_lines(from_cfg)[-1].startswith("2 files matched")
    assert _stdout_lines(overridden)[-1].startswith("4 files matched")


def test_dataset_local_config(bids_ds: Path):
    local = bids_ds / "code" / "config" / "subset.yaml"
    local.parent.mkdir(parents=True)
    local.write_text("subject: '02'\nexclude_top_level: true\n")

    result = CliRunner().invoke(cli_main, [str(bids_ds)])
    lines = _stdout_lines(result)
    assert [Path(p).as_posix() for p in lines[:-1]] == ["sub-02/anat/sub-02_T1w.nii.gz"]


def test_json_log_written_outside_dataset(bids_ds: Path, tmp_path: Path, monkeypatch):
    logdir = tmp_path / "logs"
    monkeypatch.setenv(LOG_DIR_ENV, str(logdir))

    result = CliRunner().invoke(cli_main, [str(bids_ds)])

    assert result.exit_code == 0
    log_file = logdir / "bidsubset.log"
    assert log_file.exists()
    assert "subset_complete" in log_file.read_text()
    assert not (bids_ds / "code").exists()


def test_version():
    result = CliRunner().invoke(cli_main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_module_entry_point(tmp_path: Path):
    """Run the real entry-point in a subprocess."""
    ds = write_files(tmp_path / "ds", ["sub-01/anat/sub-01_T1w.nii.gz", "README"])
    env = os.environ.copy()
    env.pop(LOG_DIR_ENV, None)

    result = subprocess.run(
        CLI + [str(ds), "--exclude-top-level"],
        capture_output=True,
        text=True,
        check=True,
        env=env,
    )

    lines = result.stdout.splitlines()
    assert Path(lines[0]).as_posix() == "sub-01/anat/sub-01_T1w.nii.gz"
    assert lines[-1].startswith("1 files matched in ")


def test_package_entry_point():
    """``python -m bidsubset`` runs the same command as the console script."""
    result = subprocess.run(
        [sys.executable, "-m", "bidsubset", "--version"],
        capture_output=True,
        text=True,
        check=True,
    )
    assert __version__ in result.stdout


# --------------------------------------------------------------------------- #
# File names that are not valid UTF-8                                         #
# --------------------------------------------------------------------------- #
undecodable_names = pytest.mark.skipif(
    not sys.platform.startswith("linux"),
    reason="needs a filesystem that accepts arbitrary bytes in names",
)


def _undecodable_dataset(root: Path) -> Path:
    anat = root / "sub-01" / "anat"
    anat.mkdir(parents=True)
    (anat / os.fsdecode(b"sub-01_\xff.nii.gz")).write_bytes(b"nifti")
    return root


@undecodable_names
def test_undecodable_name_listed(tmp_path: Path):
    ds = _undecodable_dataset(tmp_path / "ds")

    result = CliRunner().invoke(cli_main, [str(ds), "-x"])

    assert result.exit_code == 0, result.output
    lines = _stdout_lines(result)
    assert [Path(p).as_posix() for p in lines[:-1]] == ["sub-01/anat/sub-01_\ufffd.nii.gz"]
    assert lines[-1].startswith("1 files matched in ")


@undecodable_names
def test_undecodable_name_rerun_warns(tmp_path: Path):
    ds = _undecodable_dataset(tmp_path / "ds")
    out = tmp_path / "out"
    args = [str(ds), "-x", "-c", "-o", str(out)]
    runner = CliRunner()

    first = runner.invoke(cli_main, args)
    second = runner.invoke(cli_main, args)

    assert first.exit_code == 0, first.output
    assert (out / "sub-01" / "anat" / os.fsdecode(b"sub-01_\xff.nii.gz")).read_bytes() == b"nifti"
    assert second.exit_code == 0, second.output
    warnings = [l for l in _stdout_lines(second) if l.startswith("WARNING: ")]
    assert len(warnings) == 1
    assert "sub-01_\ufffd.nii.gz' already exists" in warnings[0]


@undecodable_names
def test_undecodable_name_strict_stdout(tmp_path: Path):
    ds = _undecodable_dataset(tmp_path / "ds")
    env = os.environ.copy()
    env.pop(LOG_DIR_ENV, None)
    env["PYTHONIOENCODING"] = "utf-8:strict"

    result = subprocess.run(CLI + [str(ds), "-x"], capture_output=True, env=env)

    assert result.returncode == 0, result.stderr
    assert "sub-01_\ufffd.nii.gz".encode() in result.stdout
