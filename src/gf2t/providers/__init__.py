"""Fact providers: adapters that collect raw branch facts for the engine."""

from .base import FactProvider, MergeConflictProbe
from .github import GitHubProvider, is_github_url, parse_github_url
from .local import GitMergeProbe, LocalGitProvider

__all__ = [
    "FactProvider",
    "MergeConflictProbe",
    "GitHubProvider",
    "GitMergeProbe",
    "LocalGitProvider",
    "is_github_url",
    "parse_github_url",
]
