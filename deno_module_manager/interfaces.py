"""
Interfaces for release resolvers.
"""

from __future__ import annotations

from typing import Protocol

from .models import ModuleInfo, ModuleRecord


class ReleaseResolver(Protocol):
    """Look up where a module lives and what its newest release is."""

    def resolve_repository(self, record: ModuleRecord) -> str:
        ...

    def resolve_latest_version(self, record: ModuleRecord) -> str:
        ...

    def module_info(self, name: str) -> ModuleInfo:
        ...
