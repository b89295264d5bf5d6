"""Shared fixtures: a frozen clock and factories for facts and branches."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from gf2t.core.classifier import classify_branch
from gf2t.core.models import Branch, BranchFact

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def days_ago(days: int) -> str:
    return (NOW - timedelta(days=days)).isoformat()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_fact():
    """Build a BranchFact whose last commit is *age* days before NOW."""
    def _make(
        name: str,
        *,
        age: int = 1,
        ahead: int = 0,
        behind: int = 0,
        merged: bool = False,
    ) -> BranchFact:
        return BranchFact(
            name=name,
            last_commit_date=days_ago(age),
            last_commit_hash=f"sha-{name}",
            last_commit_message=f"work on {name}",
            author="Dev",
            ahead_of_main=ahead,
            behind_main=behind,
            is_merged=merged,
        )
    return _make


@pytest.fixture
def make_branch():
    """Build a classified Branch directly, bypassing the clock."""
    def _make(name: str, *, age: int = 1, merged: bool = False) -> Branch:
        return Branch(
            name=name,
            last_commit_date=days_ago(age),
            type=classify_branch(name),
            age_in_days=age,
            is_stale=age > 90,
            is_merged=merged,
        )
    return _make
