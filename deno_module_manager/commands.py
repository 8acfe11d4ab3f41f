"""
The check, update and info commands.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .config import Settings
from .interfaces import ReleaseResolver
from .models import ModuleInfo, ModuleRecord, ResolutionFailure, RewriteResult, Selection
from .parser import parse_manifest, read_manifest, write_manifest
from .resolvers import DenoReleaseResolver, resolve_all
from .rewriter import anchors_overlap, rewrite_manifest
from .selector import ensure_matches, select_updates


logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Everything a command learned about the manifest."""

    manifest_path: Path
    records: List[ModuleRecord]
    selection: Selection
    failures: List[ResolutionFailure] = field(default_factory=list)
    rewrite: Optional[RewriteResult] = None


def check(
    requested_names: Sequence[str],
    settings: Settings,
    resolver: Optional[ReleaseResolver] = None,
) -> CommandResult:
    """Report which declared modules have a newer release."""
    manifest_path = Path(settings.manifest_path)
    raw_text = read_manifest(manifest_path)
    return _collect(manifest_path, raw_text, requested_names, settings, resolver)


def update(
    requested_names: Sequence[str],
    settings: Settings,
    resolver: Optional[ReleaseResolver] = None,
) -> CommandResult:
    """Rewrite outdated modules to their latest release.

    The manifest is written once, and only if something changed. With
    settings.strict an import that cannot be located raises RewriteMismatch
    before anything is written.
    """
    manifest_path = Path(settings.manifest_path)
    raw_text = read_manifest(manifest_path)
    result = _collect(manifest_path, raw_text, requested_names, settings, resolver)

    logger.info("Checking if your modules can be updated...")
    updating = {record.name for record in result.selection.updatable}
    declared = result.records + [failure.record for failure in result.failures]
    for name, other in anchors_overlap(declared, raw_text):
        if name in updating:
            logger.warning("Updating %s also changes the import of %s", name, other)
    result.rewrite = rewrite_manifest(
        raw_text, result.selection.updatable, strict=settings.strict
    )
    if result.rewrite.changed:
        write_manifest(manifest_path, result.rewrite.text)
    return result


def info(
    name: str,
    settings: Settings,
    resolver: Optional[ReleaseResolver] = None,
) -> ModuleInfo:
    resolver = resolver or DenoReleaseResolver(settings)
    return resolver.module_info(name)


def _collect(
    manifest_path: Path,
    raw_text: str,
    requested_names: Sequence[str],
    settings: Settings,
    resolver: Optional[ReleaseResolver],
) -> CommandResult:
    records = parse_manifest(raw_text, requested_names, strict=settings.strict)
    ensure_matches(records, requested_names)

    resolver = resolver or DenoReleaseResolver(settings)
    logger.info("Comparing versions...")
    outcome = resolve_all(records, resolver, max_workers=settings.max_workers)
    return CommandResult(
        manifest_path=manifest_path,
        records=outcome.records,
        selection=select_updates(outcome.records),
        failures=outcome.failures,
    )
