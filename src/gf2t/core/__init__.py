"""The gf2t analysis engine.

Pure functions over an already-collected list of branch facts:

Modules
-------
models      — BranchFact, Branch, FlowConfig, Blocker, AnalysisReport
settings    — thresholds and score weights (AnalysisSettings)
errors      — Gf2tError hierarchy
classifier  — branch name → BranchType
flow        — Git Flow configuration detection
blockers    — migration blocker rules
scoring     — readiness score
analyzer    — orchestrates the above into an AnalysisReport
"""

from .analyzer import Analyzer, analyze, build_branches
from .blockers import detect_blockers
from .classifier import classify_branch
from .errors import FactProviderError, Gf2tError, NotARepositoryError
from .flow import detect_git_flow
from .models import (
    AnalysisReport,
    Blocker,
    Branch,
    BranchFact,
    BranchType,
    FlowConfig,
    ProbeOutcome,
    Severity,
)
from .scoring import calculate_readiness_score
from .settings import DEFAULT_SETTINGS, AnalysisSettings

__all__ = [
    "Analyzer",
    "analyze",
    "build_branches",
    "detect_blockers",
    "classify_branch",
    "detect_git_flow",
    "calculate_readiness_score",
    "AnalysisSettings",
    "DEFAULT_SETTINGS",
    "AnalysisReport",
    "Blocker",
    "Branch",
    "BranchFact",
    "BranchType",
    "FlowConfig",
    "ProbeOutcome",
    "Severity",
    "Gf2tError",
    "FactProviderError",
    "NotARepositoryError",
]
