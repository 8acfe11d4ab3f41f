"""
Runtime settings shared by the resolver and the commands.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


DENO_LAND_URL = "https://deno.land"
STD_REPOSITORY_URL = "https://github.com/denoland/deno_std"


@dataclass(frozen=True)
class Settings:
    """Endpoints and limits used for a single invocation."""

    manifest_path: str = "deps.ts"
    database_url: str = (
        "https://raw.githubusercontent.com/denoland/deno_website2/master/database.json"
    )
    std_versions_url: str = "https://cdn.deno.land/std/meta/versions.json"
    github_url: str = "https://github.com"
    deno_land_url: str = DENO_LAND_URL
    std_repository_url: str = STD_REPOSITORY_URL
    timeout: float = 10.0
    max_workers: int = 8
    # Fail on malformed or unlocatable deno.land imports instead of skipping them.
    strict: bool = False
    # Pins the latest std version instead of querying the CDN.
    std_version: Optional[str] = None

    def override(self, **changes) -> "Settings":
        """Return a copy with every non-None change applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
