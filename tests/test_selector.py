"""Tests for update selection."""

import logging

import pytest

from deno_module_manager.errors import NoMatchingModules
from deno_module_manager.models import ModuleRecord
from deno_module_manager.selector import describe_updates, ensure_matches, select_updates, version_delta


def record(name, imported, latest=None, is_std=False):
    return ModuleRecord(
        name=name,
        is_std=is_std,
        imported_version=imported,
        import_url=f"https://deno.land/x/{name}@{imported}/mod.ts",
        latest_version=latest,
    )


def test_select_updates_partitions_records():
    records = [
        record("fs", "0.50.0", "0.60.0", is_std=True),
        record("drash", "v1.2.0", "v1.2.0"),
        record("rhum", "v1.0.0"),
        record("oak", "v5.0.0", "v6.0.0"),
    ]

    selection = select_updates(records)

    assert [r.name for r in selection.updatable] == ["fs", "oak"]
    assert [r.name for r in selection.current] == ["drash"]
    assert [r.name for r in selection.unresolved] == ["rhum"]
    assert describe_updates(selection) == [("fs", "0.50.0", "0.60.0"), ("oak", "v5.0.0", "v6.0.0")]


def test_any_difference_counts_as_updatable():
    # tags are compared as text, a "downgrade" is still a change to apply
    selection = select_updates([record("odd", "v2.0.0", "v1.9.0")])

    assert [r.name for r in selection.updatable] == ["odd"]


def test_ensure_matches_raises_when_nothing_matches():
    with pytest.raises(NoMatchingModules):
        ensure_matches([], ["unknownmodule"])


def test_ensure_matches_allows_empty_manifest_without_filter():
    ensure_matches([], [])
    ensure_matches([], None)


def test_ensure_matches_warns_about_partial_matches(caplog):
    with caplog.at_level(logging.WARNING, logger="deno_module_manager.selector"):
        ensure_matches([record("fs", "0.50.0")], ["fs", "nope"])

    assert "nope is not declared" in caplog.text


@pytest.mark.parametrize(
    "imported, latest, expected",
    [
        ("v1.0.0", "v2.0.0", "major"),
        ("0.50.0", "0.60.0", "minor"),
        ("1.0.0", "1.0.1", "patch"),
        ("1.0.0", "1.0.0", "unknown"),
        ("main", "v1.0.0", "unknown"),
    ],
)
def test_version_delta(imported, latest, expected):
    assert version_delta(imported, latest) == expected
