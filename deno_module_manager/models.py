"""
Core data models for the module manager.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ModuleRecord:
    """A module import as declared in a manifest."""

    name: str
    is_std: bool
    imported_version: str
    import_url: str
    line_number: int = 0
    repository_url: Optional[str] = None
    latest_version: Optional[str] = None
    # quote character around import_url in the manifest
    quote: str = "\""

    @property
    def key(self) -> Tuple[str, str]:
        return (self.name, self.import_url)

    @property
    def is_outdated(self) -> bool:
        return self.latest_version is not None and self.latest_version != self.imported_version


class LineKind(str, Enum):
    RECOGNIZED = "recognized"
    IGNORED = "ignored"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class LineOutcome:
    """What the parser made of a single manifest line."""

    kind: LineKind
    line_number: int
    raw_line: str
    reason: str = ""
    record: Optional[ModuleRecord] = None


@dataclass(frozen=True)
class Fragment:
    """Text anchor to replace in the manifest and its replacement."""

    old: str
    new: str


class RewriteStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class RewriteResult:
    """New manifest text plus the outcome for each record."""

    text: str
    statuses: Dict[Tuple[str, str], RewriteStatus] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return any(status is RewriteStatus.APPLIED for status in self.statuses.values())

    def with_status(self, status: RewriteStatus) -> List[Tuple[str, str]]:
        return [key for key, value in self.statuses.items() if value is status]


@dataclass(frozen=True)
class ResolutionFailure:
    """A record the release resolver could not handle."""

    record: ModuleRecord
    error: str


@dataclass(frozen=True)
class ResolutionOutcome:
    records: List[ModuleRecord]
    failures: List[ResolutionFailure]


@dataclass(frozen=True)
class Selection:
    """Records split by whether a newer release exists."""

    current: List[ModuleRecord]
    updatable: List[ModuleRecord]
    unresolved: List[ModuleRecord]


@dataclass(frozen=True)
class ModuleInfo:
    """Details shown by the info command."""

    name: str
    is_std: bool
    description: str
    repository_url: str
    deno_land_url: str
    latest_version: str

    @property
    def import_statement(self) -> str:
        return f'export * as {self.name.replace("-", "_")} from "{self.deno_land_url}/mod.ts";'
