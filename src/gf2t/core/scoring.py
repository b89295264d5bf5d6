"""Readiness score: a 0-100 heuristic of how much cleanup remains."""

from __future__ import annotations

from .models import Blocker, Branch, FlowConfig
from .settings import DEFAULT_SETTINGS, AnalysisSettings


def calculate_readiness_score(
    config: FlowConfig,
    blockers: list[Blocker],
    branches: list[Branch],
    settings: AnalysisSettings = DEFAULT_SETTINGS,
) -> int:
    """Score a repository for migration readiness.

    Any blocker, or a missing develop branch, scores 0. Otherwise start at
    100 and deduct for stale clutter, feature branches above the soft
    limit, environment branches and active unclassified branches. The
    feature deduction is uncapped. The result is clamped to ``[0, 100]``.
    """
    if blockers or not config.has_develop:
        return 0

    score = 100

    stale_count = sum(1 for b in branches if b.is_stale)
    score -= min(stale_count * settings.stale_penalty, settings.stale_penalty_cap)

    active_features = sum(1 for b in config.feature_branches if not b.is_stale)
    if active_features > settings.feature_soft_limit:
        score -= (active_features - settings.feature_soft_limit) * settings.feature_penalty

    score -= len(config.environment_branches) * settings.environment_penalty

    other_active = sum(1 for b in config.other_branches if not b.is_stale)
    score -= min(other_active * settings.other_penalty, settings.other_penalty_cap)

    return max(0, min(100, score))
