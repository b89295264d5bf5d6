"""JSON export of an analysis report for the web dashboard."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from .core.models import AnalysisReport, RepoExportData

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"
DEFAULT_EXPORT_FILE = "gf2t-export.json"


def build_export(report: AnalysisReport, exported_at: datetime | None = None) -> RepoExportData:
    """Wrap *report* in the versioned export envelope."""
    stamp = exported_at or datetime.now(timezone.utc)
    return RepoExportData(
        version=EXPORT_VERSION,
        exported_at=stamp.isoformat(),
        repo_path=report.repo_path,
        branches=report.all_branches,
        git_flow_config=report.git_flow_config,
        report=report,
    )


def export_json(report: AnalysisReport, exported_at: datetime | None = None) -> str:
    """Serialise the export envelope with the dashboard's camelCase keys."""
    data = build_export(report, exported_at)
    return data.model_dump_json(indent=2, by_alias=True, exclude_none=True)


def write_export(
    report: AnalysisReport,
    path: str | Path = DEFAULT_EXPORT_FILE,
    exported_at: datetime | None = None,
) -> Path:
    """Write the export envelope to *path* and return the resolved path."""
    out_path = Path(path).expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(export_json(report, exported_at), encoding="utf-8")
    logger.info("Exported analysis of %s → %s", report.repo_path, out_path)
    return out_path
