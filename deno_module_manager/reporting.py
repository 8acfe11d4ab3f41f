"""
Reporting and export utilities.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import pandas as pd

from .commands import CommandResult
from .models import ModuleInfo, RewriteStatus
from .selector import describe_updates, version_delta


logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "name",
    "std",
    "line",
    "imported_version",
    "latest_version",
    "delta",
    "status",
    "repository_url",
    "error",
]


def check_lines(result: CommandResult) -> List[str]:
    lines = []
    names = []
    for name, imported, latest in describe_updates(result.selection):
        names.append(name)
        lines.append(f"{name} can be updated from {imported} to {latest}")
    lines.extend(failure_lines(result))
    if result.failures:
        lines.append(f"{len(result.failures)} module(s) could not be checked")

    if names:
        lines.append("To update, run: \n    dmm update " + " ".join(names))
    elif not result.failures:
        lines.append("Your dependencies are up to date")
    return lines


def update_lines(result: CommandResult) -> List[str]:
    lines = []
    statuses = result.rewrite.statuses if result.rewrite else {}
    for record in result.selection.updatable:
        status = statuses.get(record.key)
        if status is RewriteStatus.APPLIED:
            lines.append(
                f"{record.name} was updated from {record.imported_version} to {record.latest_version}"
            )
        elif status is RewriteStatus.MISMATCH:
            lines.append(
                f"{record.name} could not be updated: {record.import_url} was not found in "
                f"{result.manifest_path}"
            )
    lines.extend(failure_lines(result))

    mismatches = result.rewrite.with_status(RewriteStatus.MISMATCH) if result.rewrite else []
    if result.failures:
        lines.append(f"{len(result.failures)} module(s) could not be checked")
    if mismatches:
        lines.append(f"{len(mismatches)} module(s) could not be updated")
    if result.failures or mismatches:
        return lines

    if result.rewrite is None or not result.rewrite.changed:
        lines.append("Everything is already up to date")
    return lines


def failure_lines(result: CommandResult) -> List[str]:
    return [
        f"{failure.record.name} could not be checked: {failure.error}"
        for failure in result.failures
    ]


def info_lines(module: ModuleInfo) -> List[str]:
    return [
        f"Name: {module.name}",
        f"Description: {module.description}",
        f"deno.land Link: {module.deno_land_url}",
        f"Repository: {module.repository_url}",
        f"Import Statement: {module.import_statement}",
        f"Latest Version: {module.latest_version}",
    ]


def results_frame(result: CommandResult) -> pd.DataFrame:
    """One row per module seen by the command, failures included."""
    statuses = result.rewrite.statuses if result.rewrite else {}
    rows = []
    for record in result.records:
        if record.is_outdated:
            status = statuses.get(record.key, "outdated")
            delta = version_delta(record.imported_version, record.latest_version)
        else:
            status = "current"
            delta = ""
        rows.append({
            "name": record.name,
            "std": record.is_std,
            "line": record.line_number,
            "imported_version": record.imported_version,
            "latest_version": record.latest_version,
            "delta": delta,
            "status": getattr(status, "value", status),
            "repository_url": record.repository_url,
            "error": "",
        })
    for failure in result.failures:
        rows.append({
            "name": failure.record.name,
            "std": failure.record.is_std,
            "line": failure.record.line_number,
            "imported_version": failure.record.imported_version,
            "latest_version": None,
            "delta": "",
            "status": "unresolved",
            "repository_url": None,
            "error": failure.error,
        })

    df = pd.DataFrame(rows, columns=REPORT_COLUMNS)
    return df.sort_values("line", kind="stable").reset_index(drop=True)


def export_report(result: CommandResult, output_file: Path) -> Path:
    """Write the run summary as CSV, or JSON when the file ends in .json."""
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    df = results_frame(result)
    if output_file.suffix.lower() == ".json":
        df.to_json(output_file, orient="records", indent=2)
    else:
        df.to_csv(output_file, index=False)
    logger.debug("Report saved to %s", output_file)
    return output_file
