"""
Manifest parsing and file access.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple, Union

from .config import DENO_LAND_URL
from .errors import ManifestNotFound, ParseAmbiguity
from .models import LineKind, LineOutcome, ModuleRecord


logger = logging.getLogger(__name__)

_MARKERS = (f'from "{DENO_LAND_URL}/', f"from '{DENO_LAND_URL}/")
_STD_PREFIX = f"{DENO_LAND_URL}/std@"
_UNPINNED_STD_PREFIX = f"{DENO_LAND_URL}/std/"
_REGISTRY_MARKER = "/x/"


def read_manifest(path: Union[str, Path]) -> str:
    """Read the whole manifest as UTF-8 text."""
    path = Path(path)
    logger.info("Reading %s", path)
    try:
        # newline="" keeps \r\n line endings as they are on disk
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestNotFound(f"Unable to read manifest {path}: {e}") from e


def write_manifest(path: Union[str, Path], text: str) -> None:
    """Replace the manifest content in a single write."""
    path = Path(path)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    logger.debug("Wrote %d characters to %s", len(text), path)


def classify_lines(raw_text: str) -> List[LineOutcome]:
    """Classify every non-empty line of a manifest.

    Lines without a quoted deno.land ``from`` clause are ignored. Lines
    that have one but do not follow the std or third party layout are
    reported as malformed instead of raising.
    """
    outcomes = []
    for line_number, line in enumerate(raw_text.split("\n"), start=1):
        if not line.strip():
            continue
        outcomes.append(_classify_line(line, line_number))
    return outcomes


def parse_manifest(
    raw_text: str,
    requested_names: Optional[Iterable[str]] = None,
    strict: bool = False,
) -> List[ModuleRecord]:
    """Extract module records in declaration order.

    Args:
        raw_text: Manifest content
        requested_names: Module names to keep. Empty or None keeps all.
        strict: Raise ParseAmbiguity on a malformed deno.land line instead
            of logging a warning and skipping it

    Returns:
        Unique records, first occurrence first
    """
    wanted: Set[str] = set(requested_names or ())
    seen: Set[Tuple[str, str]] = set()
    records = []

    for outcome in classify_lines(raw_text):
        if outcome.kind is LineKind.MALFORMED:
            if strict:
                raise ParseAmbiguity(
                    f"Line {outcome.line_number} ({outcome.reason}): {outcome.raw_line.strip()}"
                )
            logger.warning(
                "Skipping line %d (%s): %s",
                outcome.line_number,
                outcome.reason,
                outcome.raw_line.strip(),
            )
            continue
        if outcome.record is None:
            continue

        record = outcome.record
        if wanted and record.name not in wanted:
            continue
        if record.key in seen:
            logger.debug("Line %d repeats the import of %s", outcome.line_number, record.name)
            continue
        seen.add(record.key)
        records.append(record)
        logger.info("Added %s into the list", record.name)

    return records


def _classify_line(line: str, line_number: int) -> LineOutcome:
    start = -1
    for marker in _MARKERS:
        start = line.find(marker)
        if start != -1:
            break
    if start == -1:
        return LineOutcome(LineKind.IGNORED, line_number, line, "no deno.land import")

    quote = line[start + len("from ")]
    url_start = start + len("from ") + 1
    url_end = line.find(quote, url_start)
    if url_end == -1:
        return LineOutcome(LineKind.MALFORMED, line_number, line, "unterminated import url")
    url = line[url_start:url_end]

    if url.startswith(_STD_PREFIX):
        parsed = _parse_std_url(url)
    elif url.startswith(_UNPINNED_STD_PREFIX):
        return LineOutcome(LineKind.MALFORMED, line_number, line, "std import without a version")
    elif _REGISTRY_MARKER in url:
        parsed = _parse_third_party_url(url)
    else:
        return LineOutcome(LineKind.MALFORMED, line_number, line, "unknown deno.land path")

    if isinstance(parsed, str):
        return LineOutcome(LineKind.MALFORMED, line_number, line, parsed)

    name, version = parsed
    record = ModuleRecord(
        name=name,
        is_std=url.startswith(_STD_PREFIX),
        imported_version=version,
        import_url=url,
        line_number=line_number,
        quote=quote,
    )
    return LineOutcome(LineKind.RECOGNIZED, line_number, line, record=record)


def _parse_std_url(url: str) -> Union[Tuple[str, str], str]:
    # https://deno.land/std@<version>/<name>/<file>
    rest = url[len(_STD_PREFIX):]
    version, _, path = rest.partition("/")
    name, slash, _ = path.partition("/")
    if not version:
        return "empty std version"
    if not name or not slash:
        return "std import without a module path"
    return name, version


def _parse_third_party_url(url: str) -> Union[Tuple[str, str], str]:
    # https://deno.land/x/<name>@<version>/<entry point>
    rest = url[url.find(_REGISTRY_MARKER) + len(_REGISTRY_MARKER):]
    segment, slash, _ = rest.partition("/")
    if "@" not in segment:
        return "third party import without a version"
    name, _, version = segment.rpartition("@")
    if not name or not version:
        return "third party import without a name or version"
    if not slash:
        return "third party import without an entry point"
    return name, version
