"""Orchestration pipeline — ties fact providers and the analysis engine together."""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from datetime import datetime
from pathlib import Path

from .core.analyzer import analyze
from .core.errors import FactProviderError
from .core.models import AnalysisReport
from .core.settings import DEFAULT_SETTINGS, AnalysisSettings
from .providers.base import FactProvider
from .providers.github import GitHubProvider
from .providers.local import LocalGitProvider

logger = logging.getLogger(__name__)

_REMOTE_PREFIXES = ("http://", "https://", "git@", "ssh://")


def is_remote_url(target: str) -> bool:
    """Return True if *target* should be cloned rather than opened in place."""
    return target.startswith(_REMOTE_PREFIXES)


def analyze_provider(
    provider: FactProvider,
    *,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
    now: datetime | None = None,
) -> AnalysisReport:
    """Collect facts from *provider* and analyze them.

    Any FactProviderError propagates unchanged; no report is produced.
    """
    facts = provider.list_branches()
    return analyze(
        facts,
        provider.source,
        merge_probe=provider.merge_probe(),
        settings=settings,
        now=now,
    )


def clone_repository(url: str, dest: Path, *, timeout: float = 300.0) -> Path:
    """Clone *url* into *dest* with full history.

    Raises FactProviderError if git is missing or the clone fails.
    """
    logger.info("Cloning %s → %s", url, dest)
    try:
        subprocess.run(
            ["git", "clone", "--no-single-branch", url, str(dest)],
            check=True, capture_output=True, text=True, timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise FactProviderError("git executable not found on PATH") from exc
    except subprocess.CalledProcessError as exc:
        logger.error("Clone failed: %s", exc.stderr)
        raise FactProviderError(f"git clone failed: {exc.stderr.strip()}") from exc
    except subprocess.TimeoutExpired as exc:
        raise FactProviderError(f"git clone timed out after {timeout:.0f}s") from exc
    return dest


def analyze_local(
    target: str | Path,
    *,
    fetch: bool = True,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
    now: datetime | None = None,
) -> AnalysisReport:
    """Analyze a local working copy, or clone a remote URL first.

    A cloned copy lives in a temporary directory that is always removed,
    even when the analysis fails.
    """
    target = str(target)
    if not is_remote_url(target):
        return analyze_provider(LocalGitProvider(target, fetch=fetch), settings=settings, now=now)

    temp_dir = Path(tempfile.mkdtemp(prefix="gf2t-"))
    try:
        repo_dir = clone_repository(target, temp_dir / "repo")
        # A fresh clone is already up to date
        provider = LocalGitProvider(repo_dir, fetch=False)
        return analyze_provider(provider, settings=settings, now=now)
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


def analyze_github(
    owner: str,
    repo: str,
    *,
    token: str | None = None,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
    now: datetime | None = None,
) -> AnalysisReport:
    """Analyze ``owner/repo`` using only the GitHub API."""
    provider = GitHubProvider(owner, repo, token=token)
    return analyze_provider(provider, settings=settings, now=now)


__all__ = [
    "analyze_provider",
    "analyze_local",
    "analyze_github",
    "clone_repository",
    "is_remote_url",
]
