"""
Release resolution against deno.land and GitHub.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence

import requests

from .config import Settings
from .errors import NoMatchingModules, ResolutionError
from .interfaces import ReleaseResolver
from .models import ModuleInfo, ModuleRecord, ResolutionFailure, ResolutionOutcome


logger = logging.getLogger(__name__)

STD_DESCRIPTION = "Deno standard library module"


@dataclass
class ResolverCache:
    """Shared in-memory caches for resolver operations."""

    database: Optional[Dict[str, Dict]] = None
    std_latest_version: Optional[str] = None
    latest_release_cache: Dict[str, str] = field(default_factory=dict)
    session: requests.Session = field(default_factory=requests.Session)
    lock: threading.Lock = field(default_factory=threading.Lock)


class DenoReleaseResolver(ReleaseResolver):
    """Resolver for std and deno.land/x modules."""

    def __init__(self, settings: Settings, cache: Optional[ResolverCache] = None) -> None:
        self.settings = settings
        self.cache = cache or ResolverCache()

    def fetch_database(self) -> Dict[str, Dict]:
        """Fetch the deno.land/x module database (name -> owner/repo/desc)."""
        with self.cache.lock:
            if self.cache.database is not None:
                logger.debug("Cache hit: module database")
                return self.cache.database

            logger.info("Fetching module database")
            self.cache.database = self._get_json(self.settings.database_url)
            return self.cache.database

    def std_latest_version(self) -> str:
        if self.settings.std_version:
            return self.settings.std_version

        with self.cache.lock:
            if self.cache.std_latest_version is not None:
                return self.cache.std_latest_version

            data = self._get_json(self.settings.std_versions_url)
            latest = data.get("latest")
            if not latest:
                raise ResolutionError(f"No latest std version in {self.settings.std_versions_url}")
            self.cache.std_latest_version = latest
            return latest

    def resolve_repository(self, record: ModuleRecord) -> str:
        if record.is_std:
            return self.settings.std_repository_url
        entry = self._database_entry(record.name)
        return f"{self.settings.github_url}/{entry['owner']}/{entry['repo']}"

    def resolve_latest_version(self, record: ModuleRecord) -> str:
        if record.is_std:
            return self.std_latest_version()

        repository_url = record.repository_url or self.resolve_repository(record)
        return self._latest_release(repository_url)

    def module_info(self, name: str) -> ModuleInfo:
        database = self.fetch_database()
        if name in database:
            record = ModuleRecord(name=name, is_std=False, imported_version="", import_url="")
            repository_url = self.resolve_repository(record)
            latest = self._latest_release(repository_url)
            return ModuleInfo(
                name=name,
                is_std=False,
                description=database[name].get("desc") or "",
                repository_url=repository_url,
                deno_land_url=f"{self.settings.deno_land_url}/x/{name}@{latest}",
                latest_version=latest,
            )

        latest = self.std_latest_version()
        std_url = f"{self.settings.deno_land_url}/std@{latest}/{name}"
        if not self._exists(f"{std_url}/mod.ts"):
            raise NoMatchingModules(f"No module named {name} was found")
        return ModuleInfo(
            name=name,
            is_std=True,
            description=STD_DESCRIPTION,
            repository_url=f"{self.settings.std_repository_url}/tree/{latest}/{name}",
            deno_land_url=std_url,
            latest_version=latest,
        )

    def _database_entry(self, name: str) -> Dict:
        entry = self.fetch_database().get(name)
        if not entry:
            raise ResolutionError(f"{name} is not listed in the module database")
        if entry.get("type", "github") != "github" or "owner" not in entry or "repo" not in entry:
            raise ResolutionError(f"{name} is not hosted on GitHub")
        return entry

    def _latest_release(self, repository_url: str) -> str:
        with self.cache.lock:
            cached = self.cache.latest_release_cache.get(repository_url)
        if cached is not None:
            logger.debug("Cache hit: latest release %s", repository_url)
            return cached

        url = f"{repository_url}/releases/latest"
        logger.info("Fetching latest release from %s", url)
        try:
            with self.cache.session.get(
                url, allow_redirects=True, timeout=self.settings.timeout
            ) as response:
                response.raise_for_status()
                final_url = response.url
        except requests.RequestException as e:
            raise ResolutionError(f"Error fetching {url}: {e}") from e

        # GitHub redirects to /releases/tag/<tag>, or to /releases when none exist
        tag = final_url.rstrip("/").split("/")[-1]
        if not tag or tag in ("latest", "releases"):
            raise ResolutionError(f"{repository_url} has no published release")
        with self.cache.lock:
            self.cache.latest_release_cache[repository_url] = tag
        return tag

    def _get_json(self, url: str) -> Dict:
        try:
            with self.cache.session.get(url, timeout=self.settings.timeout) as response:
                response.raise_for_status()
                return response.json()
        except (requests.RequestException, ValueError) as e:
            raise ResolutionError(f"Error fetching {url}: {e}") from e

    def _exists(self, url: str) -> bool:
        try:
            with self.cache.session.head(
                url, allow_redirects=True, timeout=self.settings.timeout
            ) as response:
                return response.status_code == 200
        except requests.RequestException as e:
            raise ResolutionError(f"Error fetching {url}: {e}") from e


def resolve_record(record: ModuleRecord, resolver: ReleaseResolver) -> ModuleRecord:
    """Return a copy of the record with repository and latest version set."""
    repository_url = resolver.resolve_repository(record)
    enriched = replace(record, repository_url=repository_url)
    return replace(enriched, latest_version=resolver.resolve_latest_version(enriched))


def resolve_all(
    records: Sequence[ModuleRecord],
    resolver: ReleaseResolver,
    max_workers: int = 8,
) -> ResolutionOutcome:
    """Resolve every record in parallel.

    A failing record does not stop the others. Resolved records keep
    their manifest order; failures are collected for reporting.
    """
    if not records:
        return ResolutionOutcome(records=[], failures=[])

    resolved: List[Optional[ModuleRecord]] = [None] * len(records)
    failures = []

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(records)))) as executor:
        future_to_idx = {
            executor.submit(resolve_record, record, resolver): idx
            for idx, record in enumerate(records)
        }
        for future in as_completed(future_to_idx):
            idx = future_to_idx[future]
            record = records[idx]
            try:
                resolved[idx] = future.result()
            except ResolutionError as e:
                logger.warning("Could not resolve %s: %s", record.name, e)
                failures.append(ResolutionFailure(record=record, error=str(e)))

    failures.sort(key=lambda failure: records.index(failure.record))
    return ResolutionOutcome(
        records=[record for record in resolved if record is not None],
        failures=failures,
    )
