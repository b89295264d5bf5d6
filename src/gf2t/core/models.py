"""Pydantic models for branch facts, Git Flow configuration and reports.

These models are the contract between the fact providers, the analysis
engine and every consumer of its output (CLI printer, JSON exporter,
dashboard). Python attributes are snake_case; the serialised JSON uses
the camelCase keys the dashboard reads, so always dump with
``by_alias=True``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BranchType(str, Enum):
    """Semantic category of a branch under the Git Flow naming convention."""
    MAIN = "main"
    DEVELOP = "develop"
    FEATURE = "feature"
    RELEASE = "release"
    HOTFIX = "hotfix"
    ENVIRONMENT = "environment"
    OTHER = "other"


class Severity(str, Enum):
    """Blocker severity. Every blocker prevents migration, so there is one level."""
    CRITICAL = "critical"


class ProbeOutcome(str, Enum):
    """Result of a dry-run merge of develop into the trunk."""
    CLEAN = "clean"
    CONFLICT = "conflict"
    UNSUPPORTED = "unsupported"


class LinkCategory(str, Enum):
    """Topics for the educational reference links."""
    TRUNK_BASED_DEV = "trunk-based-dev"
    GIT_FLOW = "git-flow"
    FEATURE_FLAGS = "feature-flags"
    CI_CD = "ci-cd"


# ---------------------------------------------------------------------------
# Branches
# ---------------------------------------------------------------------------

class BranchFact(BaseModel):
    """A raw branch observation delivered by a fact provider."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    last_commit_date: str = Field(..., alias="lastCommitDate")
    last_commit_hash: str = Field("", alias="lastCommitHash")
    last_commit_message: str = Field("", alias="lastCommitMessage")
    author: str = ""
    ahead_of_main: int = Field(0, ge=0, alias="aheadOfMain")
    behind_main: int = Field(0, ge=0, alias="behindMain")
    is_merged: bool = Field(False, alias="isMerged")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value:
            raise ValueError("branch name must not be empty")
        if value == "HEAD":
            raise ValueError("HEAD is not a branch")
        return value


class Branch(BranchFact):
    """A classified branch with derived age and staleness."""

    type: BranchType
    age_in_days: int = Field(..., alias="ageInDays")
    is_stale: bool = Field(..., alias="isStale")


# ---------------------------------------------------------------------------
# Git Flow configuration
# ---------------------------------------------------------------------------

class FlowConfig(BaseModel):
    """Git Flow layout derived from the classified branch list."""

    model_config = ConfigDict(populate_by_name=True)

    has_main: bool = Field(False, alias="hasMain")
    has_develop: bool = Field(False, alias="hasDevelop")
    main_branch: str = Field("main", alias="mainBranch")
    develop_branch: str = Field("develop", alias="developBranch")
    feature_branches: list[Branch] = Field(default_factory=list, alias="featureBranches")
    release_branches: list[Branch] = Field(default_factory=list, alias="releaseBranches")
    hotfix_branches: list[Branch] = Field(default_factory=list, alias="hotfixBranches")
    environment_branches: list[Branch] = Field(default_factory=list, alias="environmentBranches")
    other_branches: list[Branch] = Field(default_factory=list, alias="otherBranches")


# ---------------------------------------------------------------------------
# Blockers & report
# ---------------------------------------------------------------------------

class Blocker(BaseModel):
    """A condition that must be resolved before migrating to trunk-based development."""

    id: str
    severity: Severity = Severity.CRITICAL
    title: str
    description: str
    remediation: str
    details: Optional[dict[str, Any]] = None


class AnalysisReport(BaseModel):
    """The engine's only output. Self-contained so it can be serialised verbatim."""

    model_config = ConfigDict(populate_by_name=True)

    repo_path: str = Field(..., alias="repoPath")
    analyzed_at: str = Field(..., alias="analyzedAt")
    git_flow_detected: bool = Field(..., alias="gitFlowDetected")
    git_flow_config: FlowConfig = Field(..., alias="gitFlowConfig")
    all_branches: list[Branch] = Field(default_factory=list, alias="allBranches")
    total_branches: int = Field(0, alias="totalBranches")
    active_branches: int = Field(0, alias="activeBranches")
    stale_branches: int = Field(0, alias="staleBranches")
    readiness_score: int = Field(0, ge=0, le=100, alias="readinessScore")
    blockers: list[Blocker] = Field(default_factory=list)
    is_ready: bool = Field(False, alias="isReady")


class RepoExportData(BaseModel):
    """Versioned JSON envelope uploaded to the web dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    version: str
    exported_at: str = Field(..., alias="exportedAt")
    repo_path: str = Field(..., alias="repoPath")
    branches: list[Branch] = Field(default_factory=list)
    git_flow_config: FlowConfig = Field(..., alias="gitFlowConfig")
    report: AnalysisReport


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------

class ReferenceLink(BaseModel):
    """A curated article about trunk-based development or Git Flow."""
    title: str
    url: str
    category: LinkCategory
    description: str = ""
