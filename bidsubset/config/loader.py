"""
YAML configuration loader.

Locates, reads and validates *subset.yaml* before returning a
:class:`bidsubset.config.schema.SubsetConfig` instance.

Search precedence (first match wins)
1. An explicit path argument (``--config`` on the CLI).
2. ``<dataset>/code/config/subset.yaml`` – project-local override.
3. The packaged default shipped inside the wheel.
"""

from __future__ import annotations

from importlib.resources import as_file, files
from pathlib import Path
from typing import Optional

import structlog
import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .schema import SubsetConfig

log = structlog.get_logger()

CONFIG_NAME = "subset.yaml"

# --------------------------------------------------------------------------- #
# Wheel-internal fallback (works even from a zipped wheel)                    #
# --------------------------------------------------------------------------- #
try:
    _DEFAULT_CONFIG = files("bidsubset.resources") / "default_subset.yaml"
except ModuleNotFoundError:
    _DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "resources" / "default_subset.yaml"


def _dataset_local(root: Optional[str | Path]) -> Optional[Path]:
    """Return ``<root>/code/config/subset.yaml`` or *None* without a root."""
    if root is None:
        return None
    return Path(root).expanduser().resolve() / "code" / "config" / CONFIG_NAME


def _load_yaml(path: Path) -> dict:
    """Read a YAML mapping; an empty document yields an empty dict.

    Raises:
        ConfigError: The file cannot be read, is not YAML, or is not a mapping.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


def _resolve_yaml(explicit: Optional[Path], dataset_root: Optional[Path]) -> Path:
    if explicit is not None:
        if not explicit.exists():
            raise ConfigError(f"Configuration file {explicit} does not exist")
        return explicit
    local = _dataset_local(dataset_root)
    if local is not None and local.exists():
        return local
    with as_file(_DEFAULT_CONFIG) as p:
        return Path(p)


def load_config(
    *,
    config_path: Optional[str | Path] = None,
    dataset_root: Optional[str | Path] = None,
) -> SubsetConfig:
    """Return a fully validated :class:`SubsetConfig`.

    Args:
        config_path: Explicit YAML path.  ``None`` triggers the search
            sequence described in the module doc-string.
        dataset_root: Input dataset root, used for the project-local override.

    Raises:
        ConfigError: Missing explicit file, unreadable YAML or schema violation.
    """
    explicit = Path(config_path).expanduser().resolve() if config_path else None
    path = _resolve_yaml(explicit, Path(dataset_root) if dataset_root else None)
    log.debug("config_resolved", path=str(path))

    try:
        return SubsetConfig(**_load_yaml(path))
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path} – {exc}") from exc
