"""
Configuration package façade.

* :func:`load_config` – locate and validate *subset.yaml*.
* :class:`SubsetConfig` – Pydantic model of the validated document.
"""

from .loader import load_config  # noqa: F401
from .schema import SubsetConfig  # noqa: F401

__all__: list[str] = ["load_config", "SubsetConfig"]
