"""Classify branch names by the Git Flow naming convention."""

from __future__ import annotations

from .models import BranchType

MAIN_NAMES = frozenset({"main", "master"})
DEVELOP_NAMES = frozenset({"develop", "dev"})
ENVIRONMENT_NAMES = frozenset({"qa", "staging", "uat", "test", "pre-prod", "preprod"})

# Prefix rules, checked in order after the exact-name rules
_PREFIXES: tuple[tuple[str, BranchType], ...] = (
    ("feature/", BranchType.FEATURE),
    ("release/", BranchType.RELEASE),
    ("hotfix/", BranchType.HOTFIX),
)


def classify_branch(name: str) -> BranchType:
    """Return the :class:`BranchType` for *name*.

    Matching is exact and case-sensitive. A bare ``feature`` (no slash)
    is ``other``.
    """
    if name in MAIN_NAMES:
        return BranchType.MAIN
    if name in DEVELOP_NAMES:
        return BranchType.DEVELOP
    for prefix, branch_type in _PREFIXES:
        if name.startswith(prefix):
            return branch_type
    if name in ENVIRONMENT_NAMES:
        return BranchType.ENVIRONMENT
    return BranchType.OTHER
