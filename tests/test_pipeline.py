"""Tests for the end-to-end pipeline."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from gf2t import pipeline
from gf2t.core.errors import FactProviderError
from gf2t.core.models import ProbeOutcome
from gf2t.pipeline import analyze_local, analyze_provider, clone_repository, is_remote_url


class StubProvider:
    """In-memory provider recording the order in which it is used."""

    def __init__(self, facts, probe=None, error=None):
        self.facts = facts
        self.probe = probe
        self.error = error
        self.calls: list[str] = []

    @property
    def source(self) -> str:
        return "stub://repo"

    def list_branches(self):
        self.calls.append("list_branches")
        if self.error is not None:
            raise self.error
        return self.facts

    def merge_probe(self):
        self.calls.append("merge_probe")
        return self.probe


class ConflictProbe:
    def check(self, trunk: str, develop: str) -> ProbeOutcome:
        return ProbeOutcome.CONFLICT


class TestIsRemoteUrl:
    @pytest.mark.parametrize("target", [
        "https://github.com/acme/shop.git",
        "http://git.local/shop",
        "git@github.com:acme/shop.git",
        "ssh://git@host/shop",
    ])
    def test_remote(self, target):
        assert is_remote_url(target) is True

    @pytest.mark.parametrize("target", [".", "/srv/repos/shop", "~/shop", "C:\\repos\\shop"])
    def test_local(self, target):
        assert is_remote_url(target) is False


class TestAnalyzeProvider:
    def test_report_uses_source_and_probe(self, make_fact, now):
        provider = StubProvider([make_fact("main"), make_fact("develop")], probe=ConflictProbe())
        report = analyze_provider(provider, now=now)

        assert report.repo_path == "stub://repo"
        assert [b.id for b in report.blockers] == ["merge-conflicts"]
        assert provider.calls == ["list_branches", "merge_probe"]

    def test_provider_error_propagates(self):
        provider = StubProvider([], error=FactProviderError("boom"))
        with pytest.raises(FactProviderError, match="boom"):
            analyze_provider(provider)
        assert provider.calls == ["list_branches"]


class TestCloneRepository:
    def test_missing_git(self, tmp_path):
        with patch.object(pipeline.subprocess, "run", side_effect=FileNotFoundError):
            with pytest.raises(FactProviderError, match="not found"):
                clone_repository("https://example.com/x.git", tmp_path / "x")

    def test_clone_failure(self, tmp_path):
        error = subprocess.CalledProcessError(128, ["git", "clone"], stderr="fatal: not found\n")
        with patch.object(pipeline.subprocess, "run", side_effect=error):
            with pytest.raises(FactProviderError, match="fatal: not found"):
                clone_repository("https://example.com/x.git", tmp_path / "x")


class TestAnalyzeLocal:
    def test_local_path_uses_provider_in_place(self, make_fact, now):
        with patch.object(pipeline, "LocalGitProvider") as provider_cls:
            provider_cls.return_value = StubProvider([make_fact("main")])
            report = analyze_local("/srv/shop", fetch=False, now=now)

        provider_cls.assert_called_once_with("/srv/shop", fetch=False)
        assert report.total_branches == 1

    def test_remote_clone_is_cleaned_up(self, make_fact, now):
        seen: list[Path] = []

        def fake_clone(url, dest, **kwargs):
            dest.mkdir(parents=True)
            seen.append(dest)
            return dest

        with patch.object(pipeline, "clone_repository", side_effect=fake_clone), \
                patch.object(pipeline, "LocalGitProvider") as provider_cls:
            provider_cls.return_value = StubProvider([make_fact("main")])
            analyze_local("https://github.com/acme/shop.git", now=now)

        assert provider_cls.call_args.kwargs["fetch"] is False
        assert not seen[0].parent.exists()

    def test_remote_clone_cleaned_up_on_error(self):
        seen: list[Path] = []

        def failing_clone(url, dest, **kwargs):
            seen.append(dest)
            raise FactProviderError("git clone failed")

        with patch.object(pipeline, "clone_repository", side_effect=failing_clone):
            with pytest.raises(FactProviderError):
                analyze_local("git@github.com:acme/shop.git")

        assert not seen[0].parent.exists()


class TestAnalyzeGithub:
    def test_builds_provider_with_token(self, make_fact, now):
        with patch.object(pipeline, "GitHubProvider") as provider_cls:
            provider_cls.return_value = StubProvider([make_fact("main"), make_fact("develop")])
            report = pipeline.analyze_github("acme", "shop", token="tok", now=now)

        provider_cls.assert_called_once_with("acme", "shop", token="tok")
        assert report.git_flow_detected is True
