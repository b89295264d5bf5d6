"""Analysis orchestrator: branch facts in, :class:`AnalysisReport` out."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterable

from pydantic import ValidationError

from .blockers import detect_blockers
from .classifier import classify_branch
from .flow import detect_git_flow
from .models import AnalysisReport, Branch, BranchFact
from .scoring import calculate_readiness_score
from .settings import DEFAULT_SETTINGS, AnalysisSettings

if TYPE_CHECKING:
    from ..providers.base import MergeConflictProbe

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 24 * 60 * 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_commit_date(value: str) -> datetime:
    """Parse an ISO-8601 commit timestamp, treating naive values as UTC.

    Raises ValueError if *value* is not a parseable absolute timestamp.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def age_in_days(commit_date: datetime, now: datetime) -> int:
    """Whole days elapsed between *commit_date* and *now*, floored."""
    return math.floor((now - commit_date).total_seconds() / _SECONDS_PER_DAY)


def build_branches(
    facts: Iterable[BranchFact],
    now: datetime,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
) -> list[Branch]:
    """Classify *facts* into branches, keeping the first fact per name.

    Facts whose commit timestamp cannot be parsed, or that fail branch
    validation (empty name, ``HEAD``), are logged and dropped.
    """
    branches: list[Branch] = []
    seen: set[str] = set()

    for fact in facts:
        if fact.name in seen:
            continue
        try:
            committed = parse_commit_date(fact.last_commit_date)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Skipping branch %r: unreadable commit date %r (%s)",
                           fact.name, fact.last_commit_date, exc)
            continue

        age = age_in_days(committed, now)
        try:
            branch = Branch(
                **fact.model_dump(),
                type=classify_branch(fact.name),
                age_in_days=age,
                is_stale=age > settings.stale_threshold_days,
            )
        except ValidationError as exc:
            logger.warning("Skipping branch %r: %s", fact.name, exc)
            continue
        branches.append(branch)
        seen.add(fact.name)

    return branches


class Analyzer:
    """Runs the full analysis for one fact list at a time.

    Usage::

        analyzer = Analyzer(merge_probe=provider.merge_probe())
        report = analyzer.analyze(provider.list_branches(), provider.source)
    """

    def __init__(
        self,
        *,
        settings: AnalysisSettings = DEFAULT_SETTINGS,
        merge_probe: MergeConflictProbe | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.settings = settings
        self.merge_probe = merge_probe
        self.clock = clock

    def analyze(self, facts: Iterable[BranchFact], repo_path: str) -> AnalysisReport:
        now = self.clock()
        if now.tzinfo is None:
            # Same convention as naive commit timestamps
            now = now.replace(tzinfo=timezone.utc)
        branches = build_branches(facts, now, self.settings)
        config = detect_git_flow(branches)
        blockers = detect_blockers(config, branches, self.merge_probe, self.settings)
        score = calculate_readiness_score(config, blockers, branches, self.settings)

        stale = sum(1 for b in branches if b.is_stale)
        logger.info(
            "Analyzed %s: %d branches (%d stale), %d blocker(s), score %d",
            repo_path, len(branches), stale, len(blockers), score,
        )

        return AnalysisReport(
            repo_path=repo_path,
            analyzed_at=now.isoformat(),
            git_flow_detected=config.has_develop,
            git_flow_config=config,
            all_branches=branches,
            total_branches=len(branches),
            active_branches=len(branches) - stale,
            stale_branches=stale,
            readiness_score=score,
            blockers=blockers,
            is_ready=not blockers,
        )


def analyze(
    facts: Iterable[BranchFact],
    repo_path: str,
    *,
    merge_probe: MergeConflictProbe | None = None,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
    now: datetime | None = None,
) -> AnalysisReport:
    """Analyze *facts* for *repo_path* in one call.

    Pass *now* to freeze the clock (ages, staleness and ``analyzed_at``).
    """
    clock = (lambda: now) if now is not None else _utcnow
    analyzer = Analyzer(settings=settings, merge_probe=merge_probe, clock=clock)
    return analyzer.analyze(facts, repo_path)
