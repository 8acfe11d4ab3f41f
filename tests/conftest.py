from pathlib import Path

import pytest

from deno_module_manager import commands
from deno_module_manager.errors import ResolutionError
from deno_module_manager.models import ModuleInfo


class FakeResolver:
    """Release resolver backed by a name -> latest version mapping."""

    def __init__(self, latest, failing=()):
        self.latest = dict(latest)
        self.failing = set(failing)
        self.calls = []

    def resolve_repository(self, record):
        if record.name in self.failing:
            raise ResolutionError(f"{record.name} is unreachable")
        if record.is_std:
            return "https://github.com/denoland/deno_std"
        return f"https://github.com/example/{record.name}"

    def resolve_latest_version(self, record):
        self.calls.append(record.name)
        return self.latest[record.name]

    def module_info(self, name):
        return ModuleInfo(
            name=name,
            is_std=False,
            description="A test module",
            repository_url=f"https://github.com/example/{name}",
            deno_land_url=f"https://deno.land/x/{name}@{self.latest[name]}",
            latest_version=self.latest[name],
        )


@pytest.fixture
def make_resolver():
    return FakeResolver


@pytest.fixture
def use_resolver(monkeypatch):
    """Route commands through a FakeResolver and return it."""

    def install(latest, failing=()):
        resolver = FakeResolver(latest, failing)
        monkeypatch.setattr(commands, "DenoReleaseResolver", lambda settings: resolver)
        return resolver

    return install


@pytest.fixture
def manifest_file(tmp_path: Path):
    def write(content: str, name: str = "deps.ts") -> Path:
        path = tmp_path / name
        path.write_bytes(content.encode("utf-8"))
        return path

    return write
