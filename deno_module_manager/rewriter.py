"""
Targeted version substitution in manifest text.

Each outdated record is turned into a fragment: the narrowest piece of text
that pins its version (``std@<version>/<name>/`` for the standard library,
the quoted import url for third party modules). Only fragments are replaced,
so every other character of the manifest is left as it was.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

from .errors import RewriteMismatch
from .models import Fragment, ModuleRecord, RewriteResult, RewriteStatus


logger = logging.getLogger(__name__)


def anchor_for(record: ModuleRecord) -> str:
    """Text that identifies the record's current version in the manifest."""
    if record.is_std:
        return f"std@{record.imported_version}/{record.name}/"
    # quotes stop mod.ts from matching inside mod.tsx
    return f"{record.quote}{record.import_url}{record.quote}"


def build_fragment(record: ModuleRecord) -> Fragment:
    if record.latest_version is None:
        raise ValueError(f"{record.name} has no latest version to rewrite to")

    old = anchor_for(record)
    if record.is_std:
        new = f"std@{record.latest_version}/{record.name}/"
    else:
        new = old.replace(
            f"{record.name}@{record.imported_version}",
            f"{record.name}@{record.latest_version}",
            1,
        )
    return Fragment(old=old, new=new)


def apply_fragment(text: str, fragment: Fragment) -> Tuple[str, int]:
    """Replace every occurrence of the fragment.

    Returns:
        Tuple of (new text, number of replacements)
    """
    count = text.count(fragment.old)
    if count == 0:
        return text, 0

    return text.replace(fragment.old, fragment.new), count


def rewrite_manifest(
    raw_text: str, records: Iterable[ModuleRecord], strict: bool = False
) -> RewriteResult:
    """Rewrite outdated records to their latest versions.

    Records that are not outdated are skipped. A record whose fragment is
    not in the text is reported as a mismatch and the text is not touched
    for it. With strict, a missing fragment raises RewriteMismatch instead.
    """
    text = raw_text
    statuses: Dict[Tuple[str, str], RewriteStatus] = {}
    applied: Dict[str, str] = {}

    for record in records:
        if not record.is_outdated:
            statuses[record.key] = RewriteStatus.SKIPPED
            continue

        fragment = build_fragment(record)
        if applied.get(fragment.old) == fragment.new:
            # identical import already rewritten by an earlier record
            statuses[record.key] = RewriteStatus.APPLIED
            continue

        text, count = apply_fragment(text, fragment)
        if count == 0:
            if strict:
                raise RewriteMismatch(
                    f"Could not find {fragment.old} in the manifest to update {record.name}"
                )
            logger.warning(
                "Could not find %s in the manifest, leaving %s at %s",
                fragment.old,
                record.name,
                record.imported_version,
            )
            statuses[record.key] = RewriteStatus.MISMATCH
            continue

        logger.debug("Replaced %d occurrence(s) of %s", count, fragment.old)
        applied[fragment.old] = fragment.new
        statuses[record.key] = RewriteStatus.APPLIED

    return RewriteResult(text=text, statuses=statuses)


def anchors_overlap(
    records: Iterable[ModuleRecord], raw_text: str
) -> List[Tuple[str, str]]:
    """Pairs (a, b) of differently named modules where a's anchor occurs on b's line."""
    lines = raw_text.split("\n")
    records = list(records)
    overlaps = []
    for record in records:
        anchor = anchor_for(record)
        for other in records:
            if other.name == record.name or not 0 < other.line_number <= len(lines):
                continue
            if anchor in lines[other.line_number - 1]:
                overlaps.append((record.name, other.name))
    return overlaps
