"""Tunable thresholds and score weights for the analysis engine."""

from __future__ import annotations

from dataclasses import dataclass, replace as _replace


@dataclass(frozen=True)
class AnalysisSettings:
    """Named constants used by the blocker detector and readiness scorer.

    The defaults reproduce the reference heuristics exactly; change them
    only through :meth:`replace` so a run stays internally consistent.
    """

    # A branch whose last commit is older than this many days is stale.
    stale_threshold_days: int = 90

    # More active feature branches than this blocks migration.
    active_feature_threshold: int = 10

    # Score deductions
    stale_penalty: int = 2
    stale_penalty_cap: int = 20
    feature_soft_limit: int = 5
    feature_penalty: int = 5
    environment_penalty: int = 5
    other_penalty: int = 3
    other_penalty_cap: int = 15

    def replace(self, **changes: int) -> AnalysisSettings:
        """Return a copy with *changes* applied."""
        return _replace(self, **changes)


DEFAULT_SETTINGS = AnalysisSettings()
