"""Migration blocker detection.

Rules are evaluated in a fixed order and every finding is critical:

1. ``not-gitflow``: no develop branch. Nothing else is checked.
2. ``merge-conflicts``: develop does not merge cleanly into the trunk
   (only when a merge probe is available and a trunk exists).
3. ``too-many-features``: too many active feature branches.
4. ``unmerged-release-<name>``: one per release branch not merged.
5. ``unmerged-hotfix-<name>``: one per hotfix branch not merged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import Blocker, Branch, FlowConfig, ProbeOutcome
from .settings import DEFAULT_SETTINGS, AnalysisSettings

if TYPE_CHECKING:
    from ..providers.base import MergeConflictProbe

logger = logging.getLogger(__name__)


def detect_blockers(
    config: FlowConfig,
    branches: list[Branch],
    merge_probe: MergeConflictProbe | None = None,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
) -> list[Blocker]:
    """Return the blockers for *config*, in rule order."""
    if not config.has_develop:
        return [_not_gitflow()]

    blockers: list[Blocker] = []

    # Without a trunk there is nothing to merge into
    if merge_probe is not None and config.has_main and _has_merge_conflict(merge_probe, config):
        blockers.append(_merge_conflicts(config))

    active_features = [b for b in config.feature_branches if not b.is_stale]
    if len(active_features) > settings.active_feature_threshold:
        blockers.append(_too_many_features(len(active_features), settings.active_feature_threshold))

    for release in config.release_branches:
        if not release.is_merged:
            blockers.append(_unmerged(release, "release", config))

    for hotfix in config.hotfix_branches:
        if not hotfix.is_merged:
            blockers.append(_unmerged(hotfix, "hotfix", config))

    logger.debug("Detected %d blocker(s) across %d branches", len(blockers), len(branches))
    return blockers


def _has_merge_conflict(probe: MergeConflictProbe, config: FlowConfig) -> bool:
    try:
        outcome = probe.check(config.main_branch, config.develop_branch)
    except Exception as exc:
        logger.warning("Merge conflict probe failed, skipping check: %s", exc)
        return False
    if outcome is ProbeOutcome.UNSUPPORTED:
        logger.debug("Merge conflict probe unsupported for %s..%s",
                     config.main_branch, config.develop_branch)
    return outcome is ProbeOutcome.CONFLICT


# ---------------------------------------------------------------------------
# Blocker factories
# ---------------------------------------------------------------------------

def _not_gitflow() -> Blocker:
    return Blocker(
        id="not-gitflow",
        title="Not a Git Flow repository",
        description="No develop branch found. This repository does not appear to use Git Flow.",
        remediation='This tool is designed for Git Flow repositories. Ensure a "develop" branch exists.',
    )


def _merge_conflicts(config: FlowConfig) -> Blocker:
    main, develop = config.main_branch, config.develop_branch
    return Blocker(
        id="merge-conflicts",
        title="Unresolved merge conflicts",
        description=(
            f"{develop} and {main} have merge conflicts that must be resolved before migration."
        ),
        remediation=(
            f'Resolve merge conflicts between "{develop}" and "{main}" manually, '
            "then re-run analysis."
        ),
    )


def _too_many_features(count: int, threshold: int) -> Blocker:
    return Blocker(
        id="too-many-features",
        title="Too many active feature branches",
        description=f"{count} active feature branches detected (threshold: {threshold}).",
        remediation="Reduce in-flight work by merging or closing feature branches before migrating.",
        details={"count": count, "threshold": threshold},
    )


def _unmerged(branch: Branch, kind: str, config: FlowConfig) -> Blocker:
    main, develop = config.main_branch, config.develop_branch
    return Blocker(
        id=f"unmerged-{kind}-{branch.name}",
        title=f"Active {kind} branch: {branch.name}",
        description=f'{kind.capitalize()} branch "{branch.name}" has not been merged into {main}.',
        remediation=(
            f'Complete the {kind} by merging "{branch.name}" into "{main}" and "{develop}".'
        ),
    )
