"""Git Flow detection from a classified branch list."""

from __future__ import annotations

from typing import Iterable

from .models import Branch, BranchType, FlowConfig


def _first(branches: list[Branch], branch_type: BranchType) -> Branch | None:
    return next((b for b in branches if b.type == branch_type), None)


def _of_type(branches: Iterable[Branch], branch_type: BranchType) -> list[Branch]:
    return [b for b in branches if b.type == branch_type]


def detect_git_flow(branches: list[Branch]) -> FlowConfig:
    """Derive the :class:`FlowConfig` for *branches*.

    The first ``main``- and ``develop``-typed branches in input order
    name the trunk and the integration branch. Groupings keep input order.
    """
    main = _first(branches, BranchType.MAIN)
    develop = _first(branches, BranchType.DEVELOP)

    return FlowConfig(
        has_main=main is not None,
        has_develop=develop is not None,
        main_branch=main.name if main else "main",
        develop_branch=develop.name if develop else "develop",
        feature_branches=_of_type(branches, BranchType.FEATURE),
        release_branches=_of_type(branches, BranchType.RELEASE),
        hotfix_branches=_of_type(branches, BranchType.HOTFIX),
        environment_branches=_of_type(branches, BranchType.ENVIRONMENT),
        other_branches=_of_type(branches, BranchType.OTHER),
    )
