"""Tests for the analysis orchestrator."""

from __future__ import annotations

from datetime import timedelta

import pytest

from gf2t.core.analyzer import Analyzer, age_in_days, analyze, build_branches, parse_commit_date
from gf2t.core.models import BranchFact, BranchType, ProbeOutcome


class ConflictProbe:
    def check(self, trunk: str, develop: str) -> ProbeOutcome:
        return ProbeOutcome.CONFLICT


# ---------------------------------------------------------------------------
# Timestamps & age
# ---------------------------------------------------------------------------

class TestCommitDates:
    def test_parse_zulu(self):
        parsed = parse_commit_date("2025-05-01T12:00:00Z")
        assert parsed.utcoffset() == timedelta(0)

    def test_parse_offset(self):
        parsed = parse_commit_date("2025-05-01T14:00:00+02:00")
        assert parsed == parse_commit_date("2025-05-01T12:00:00Z")

    def test_naive_is_utc(self):
        assert parse_commit_date("2025-05-01T12:00:00") == parse_commit_date("2025-05-01T12:00:00Z")

    def test_unparseable_raises(self):
        with pytest.raises(ValueError):
            parse_commit_date("last tuesday")

    def test_age_floors_partial_days(self, now):
        assert age_in_days(now - timedelta(days=3, hours=23), now) == 3


# ---------------------------------------------------------------------------
# Branch building
# ---------------------------------------------------------------------------

class TestBuildBranches:
    def test_staleness_boundary(self, make_fact, now):
        branches = build_branches([make_fact("a", age=90), make_fact("b", age=91)], now)
        assert branches[0].age_in_days == 90
        assert branches[0].is_stale is False
        assert branches[1].age_in_days == 91
        assert branches[1].is_stale is True

    def test_deduplicates_first_wins(self, make_fact, now):
        facts = [make_fact("develop", ahead=2), make_fact("develop", ahead=7)]
        branches = build_branches(facts, now)
        assert len(branches) == 1
        assert branches[0].ahead_of_main == 2

    def test_classifies(self, make_fact, now):
        branches = build_branches([make_fact("hotfix/x")], now)
        assert branches[0].type == BranchType.HOTFIX

    def test_unreadable_date_dropped(self, make_fact, now, caplog):
        bad = BranchFact(name="feature/broken", last_commit_date="not a date")
        branches = build_branches([bad, make_fact("main")], now)
        assert [b.name for b in branches] == ["main"]
        assert "feature/broken" in caplog.text

    @pytest.mark.parametrize("name", ["", "HEAD"])
    def test_invalid_name_dropped(self, make_fact, now, name):
        # model_construct skips validation, as an untrusted provider might
        bad = BranchFact.model_construct(
            name=name, last_commit_date="2025-05-01T00:00:00Z", last_commit_hash="",
            last_commit_message="", author="", ahead_of_main=0, behind_main=0, is_merged=False,
        )
        branches = build_branches([bad, make_fact("main")], now)
        assert [b.name for b in branches] == ["main"]

    def test_later_duplicate_fills_dropped_entry(self, make_fact, now):
        bad = BranchFact(name="develop", last_commit_date="???")
        branches = build_branches([bad, make_fact("develop")], now)
        assert [b.name for b in branches] == ["develop"]

    def test_copies_fact_fields(self, make_fact, now):
        fact = make_fact("feature/x", ahead=3, behind=4, merged=True)
        branch = build_branches([fact], now)[0]
        assert branch.last_commit_hash == "sha-feature/x"
        assert branch.author == "Dev"
        assert branch.behind_main == 4
        assert branch.is_merged is True


# ---------------------------------------------------------------------------
# Full analysis
# ---------------------------------------------------------------------------

class TestAnalyze:
    def test_clean_repo(self, make_fact, now):
        facts = [
            make_fact("main"),
            make_fact("develop", ahead=2),
            make_fact("feature/x", ahead=1),
        ]
        report = analyze(facts, "/repo", now=now)

        assert report.git_flow_detected is True
        assert report.git_flow_config.has_develop is True
        assert report.blockers == []
        assert report.readiness_score == 100
        assert report.is_ready is True
        assert report.total_branches == 3
        assert report.active_branches == 3
        assert report.stale_branches == 0
        assert report.repo_path == "/repo"
        assert report.analyzed_at == now.isoformat()

    def test_not_gitflow(self, make_fact, now):
        facts = [make_fact("main"), make_fact("release/1", merged=False)]
        facts += [make_fact(f"feature/{i}") for i in range(15)]
        report = analyze(facts, "/repo", merge_probe=ConflictProbe(), now=now)

        assert [b.id for b in report.blockers] == ["not-gitflow"]
        assert report.readiness_score == 0
        assert report.is_ready is False
        assert report.git_flow_detected is False

    def test_remote_duplicate_collapses(self, make_fact, now):
        report = analyze([make_fact("develop"), make_fact("develop")], "/repo", now=now)
        assert [b.name for b in report.all_branches] == ["develop"]

    def test_unmerged_release_monotonic(self, make_fact, now):
        facts = [make_fact("main"), make_fact("develop")]
        clean = analyze(facts, "/repo", now=now)
        dirty = analyze(facts + [make_fact("release/3.0")], "/repo", now=now)

        assert len(dirty.blockers) == len(clean.blockers) + 1
        assert clean.readiness_score == 100
        assert dirty.readiness_score == 0

    def test_unmerged_hotfix(self, make_fact, now):
        facts = [make_fact("main"), make_fact("develop"), make_fact("hotfix/bug")]
        report = analyze(facts, "/repo", now=now)
        assert "unmerged-hotfix-hotfix/bug" in [b.id for b in report.blockers]
        assert report.is_ready is False
        assert report.readiness_score == 0

    def test_feature_threshold_boundary(self, make_fact, now):
        base = [make_fact("main"), make_fact("develop")]
        ten = analyze(base + [make_fact(f"feature/{i}") for i in range(10)], "/r", now=now)
        eleven = analyze(base + [make_fact(f"feature/{i}") for i in range(11)], "/r", now=now)

        assert "too-many-features" not in [b.id for b in ten.blockers]
        too_many = [b for b in eleven.blockers if b.id == "too-many-features"]
        assert len(too_many) == 1
        assert too_many[0].details["count"] == 11

    def test_counts_partition(self, make_fact, now):
        facts = [make_fact("main"), make_fact("develop"), make_fact("old", age=365)]
        report = analyze(facts, "/repo", now=now)
        assert report.stale_branches == 1
        assert report.active_branches == 2
        assert report.active_branches + report.stale_branches == report.total_branches

    def test_idempotent_with_frozen_clock(self, make_fact, now):
        facts = [make_fact("main"), make_fact("develop"), make_fact("release/1")]
        first = analyze(facts, "/repo", now=now)
        second = analyze(facts, "/repo", now=now)
        assert first == second

    def test_empty_fact_list(self, now):
        report = analyze([], "/repo", now=now)
        assert report.total_branches == 0
        assert [b.id for b in report.blockers] == ["not-gitflow"]


class TestAnalyzerClass:
    def test_uses_clock_and_probe(self, make_fact, now):
        analyzer = Analyzer(merge_probe=ConflictProbe(), clock=lambda: now)
        report = analyzer.analyze([make_fact("main"), make_fact("develop")], "/repo")
        assert [b.id for b in report.blockers] == ["merge-conflicts"]
        assert report.analyzed_at == now.isoformat()

    def test_naive_clock_is_utc(self, make_fact, now):
        naive = now.replace(tzinfo=None)
        facts = [make_fact("main"), make_fact("develop", age=91)]
        report = analyze(facts, "/repo", now=naive)
        assert report.analyzed_at == now.isoformat()
        assert report.all_branches[1].age_in_days == 91
        assert report.all_branches[1].is_stale is True

    def test_custom_stale_threshold(self, make_fact, now):
        settings = Analyzer().settings.replace(stale_threshold_days=30)
        analyzer = Analyzer(settings=settings, clock=lambda: now)
        report = analyzer.analyze([make_fact("develop", age=45)], "/repo")
        assert report.all_branches[0].is_stale is True
