"""
bidsubset package initialisation.

Exposes the version string and re-exports the handful of objects external
code needs to drive a subset run programmatically::

    from bidsubset import FilterSpec, subset_dataset

    subset_dataset("/data/ds000001", FilterSpec(datatype="anat"), "/tmp/anat-only")
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__: str = version("bidsubset")
except PackageNotFoundError:
    __version__ = "0.0.0"

from .models import TOP_LEVEL_FILES, FilterSpec, Outcome, RunSummary  # noqa: E402
from .patterns import compile_patterns  # noqa: E402
from .pipeline import subset_dataset  # noqa: E402

__all__: list[str] = [
    "TOP_LEVEL_FILES",
    "FilterSpec",
    "Outcome",
    "RunSummary",
    "compile_patterns",
    "subset_dataset",
    "__version__",
]
