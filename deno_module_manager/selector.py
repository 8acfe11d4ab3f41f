"""
Comparison of imported and latest versions.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from packaging import version as pkg_version

from .errors import NoMatchingModules
from .models import ModuleRecord, Selection


logger = logging.getLogger(__name__)


def select_updates(records: Iterable[ModuleRecord]) -> Selection:
    """Split records into current, updatable and unresolved."""
    current, updatable, unresolved = [], [], []
    for record in records:
        if record.latest_version is None:
            unresolved.append(record)
        elif record.is_outdated:
            updatable.append(record)
        else:
            current.append(record)
    return Selection(current=current, updatable=updatable, unresolved=unresolved)


def describe_updates(selection: Selection) -> List[Tuple[str, str, str]]:
    """(name, imported version, latest version) for each updatable record."""
    return [
        (record.name, record.imported_version, record.latest_version)
        for record in selection.updatable
    ]


def ensure_matches(
    records: Sequence[ModuleRecord], requested_names: Optional[Iterable[str]]
) -> None:
    """Fail when modules were requested and none of them are declared."""
    requested = list(requested_names or ())
    if not requested:
        return
    if not records:
        raise NoMatchingModules("Modules specified do not exist in your dependencies.")

    declared = {record.name for record in records}
    for name in requested:
        if name not in declared:
            logger.warning("%s is not declared in the manifest", name)


def version_delta(imported: str, latest: str) -> str:
    """Classify the jump between two release tags as major, minor or patch."""
    try:
        old = pkg_version.parse(imported.lstrip("vV"))
        new = pkg_version.parse(latest.lstrip("vV"))
    except pkg_version.InvalidVersion:
        return "unknown"

    if old.major != new.major:
        return "major"
    if old.minor != new.minor:
        return "minor"
    if old.micro != new.micro:
        return "patch"
    return "unknown"
