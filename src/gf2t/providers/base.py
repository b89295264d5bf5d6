"""Interfaces between the analysis engine and its data sources."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..core.models import BranchFact, ProbeOutcome


@runtime_checkable
class MergeConflictProbe(Protocol):
    """Dry-runs a merge of *develop* into *trunk* without touching the work tree."""

    def check(self, trunk: str, develop: str) -> ProbeOutcome:
        ...


@runtime_checkable
class FactProvider(Protocol):
    """Delivers the raw branch facts for one repository.

    ``list_branches`` returns one fact per distinct branch name, or raises
    :class:`~gf2t.core.errors.FactProviderError`. It never returns a
    partial list after a fatal error.
    """

    @property
    def source(self) -> str:
        """Repository identifier reported as the analysis ``repo_path``."""
        ...

    def list_branches(self) -> list[BranchFact]:
        ...

    def merge_probe(self) -> MergeConflictProbe | None:
        ...
