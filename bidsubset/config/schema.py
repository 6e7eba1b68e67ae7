"""
Pydantic model mirroring *subset.yaml*.

The YAML only supplies defaults; command-line flags are merged on top via
:meth:`SubsetConfig.filter_spec`.  Unknown keys are rejected so a misspelt
option fails loudly instead of silently matching everything.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models import FilterSpec


class SubsetConfig(BaseModel):
    """Validated contents of *subset.yaml*."""

    model_config = ConfigDict(extra="forbid")

    subject: Optional[str] = None
    session: Optional[str] = None
    datatype: Optional[str] = None
    file: Optional[str] = None
    exclude_top_level: bool = False
    copy_files: bool = Field(False, alias="copy")
    case_insensitive: bool = False
    max_depth: int = Field(5, ge=1, le=32, description="Levels below the dataset root to inspect")

    def filter_spec(
        self,
        *,
        subject: Optional[str] = None,
        session: Optional[str] = None,
        datatype: Optional[str] = None,
        file: Optional[str] = None,
        exclude_top_level: bool = False,
        copy: bool = False,
        case_insensitive: bool = False,
    ) -> FilterSpec:
        """Return a :class:`FilterSpec` with CLI values layered over the YAML.

        Fragments passed here replace the configured ones; boolean flags can
        only switch a behaviour on.
        """
        return FilterSpec(
            subject=subject if subject is not None else self.subject,
            session=session if session is not None else self.session,
            datatype=datatype if datatype is not None else self.datatype,
            file=file if file is not None else self.file,
            exclude_top_level=exclude_top_level or self.exclude_top_level,
            copy_files=copy or self.copy_files,
            case_insensitive=case_insensitive or self.case_insensitive,
        )
