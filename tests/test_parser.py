"""Tests for manifest parsing."""

import logging
from pathlib import Path

import pytest

from deno_module_manager.errors import ManifestNotFound, ParseAmbiguity
from deno_module_manager.models import LineKind
from deno_module_manager.parser import classify_lines, parse_manifest, read_manifest, write_manifest


MANIFEST = (
    'export { ensureDir } from "https://deno.land/std@0.50.0/fs/mod.ts";\n'
    'export * as path from "https://deno.land/std@0.50.0/path/mod.ts";\n'
    "\n"
    'import { Drash } from "https://deno.land/x/drash@v1.0.0/mod.ts";\n'
    "export { Rhum } from 'https://deno.land/x/rhum@v1.1.0/mod.ts';\n"
    'export { Foo } from "https://example.com/foo.ts";\n'
    "const answer = 42;\n"
)


def test_parse_manifest_extracts_std_and_third_party():
    records = parse_manifest(MANIFEST)

    assert [r.name for r in records] == ["fs", "path", "drash", "rhum"]
    assert [r.is_std for r in records] == [True, True, False, False]
    assert [r.imported_version for r in records] == ["0.50.0", "0.50.0", "v1.0.0", "v1.1.0"]
    assert [r.line_number for r in records] == [1, 2, 4, 5]
    assert records[0].import_url == "https://deno.land/std@0.50.0/fs/mod.ts"
    assert records[3].import_url == "https://deno.land/x/rhum@v1.1.0/mod.ts"
    assert all(r.latest_version is None for r in records)


def test_parsed_fields_are_verbatim_substrings():
    for record in parse_manifest(MANIFEST):
        assert record.import_url in MANIFEST
        assert record.imported_version in record.import_url


def test_parse_manifest_filters_requested_names():
    records = parse_manifest(MANIFEST, ["drash", "fs", "missing"])

    assert [r.name for r in records] == ["fs", "drash"]


@pytest.mark.parametrize("requested", [[], ["fs"], ["path", "rhum"], ["nothing"], ["fs", "path", "drash", "rhum"]])
def test_filter_is_intersection_of_declared_and_requested(requested):
    declared = {"fs", "path", "drash", "rhum"}

    names = {r.name for r in parse_manifest(MANIFEST, requested)}

    expected = declared & set(requested) if requested else declared
    assert names == expected


def test_classify_lines_tags_each_non_empty_line():
    outcomes = classify_lines(MANIFEST)

    assert [o.line_number for o in outcomes] == [1, 2, 4, 5, 6, 7]
    assert [o.kind for o in outcomes] == [
        LineKind.RECOGNIZED,
        LineKind.RECOGNIZED,
        LineKind.RECOGNIZED,
        LineKind.RECOGNIZED,
        LineKind.IGNORED,
        LineKind.IGNORED,
    ]


@pytest.mark.parametrize(
    "line, reason",
    [
        ('export { a } from "https://deno.land/x/nover/mod.ts";', "third party import without a version"),
        ('export { a } from "https://deno.land/std/fs/mod.ts";', "std import without a version"),
        ('export { a } from "https://deno.land/std@0.50.0";', "std import without a module path"),
        ('export { a } from "https://deno.land/x/a@1.0.0";', "third party import without an entry point"),
        ('export { a } from "https://deno.land/manual/index.md";', "unknown deno.land path"),
        ('export { a } from "https://deno.land/x/a@1.0.0/mod.ts', "unterminated import url"),
    ],
)
def test_malformed_lines_are_reported_not_raised(line, reason):
    [outcome] = classify_lines(line)

    assert outcome.kind is LineKind.MALFORMED
    assert outcome.reason == reason
    assert outcome.record is None


def test_parse_manifest_warns_about_malformed_lines(caplog):
    text = MANIFEST + 'export { a } from "https://deno.land/x/nover/mod.ts";\n'

    with caplog.at_level(logging.WARNING, logger="deno_module_manager.parser"):
        records = parse_manifest(text)

    assert [r.name for r in records] == ["fs", "path", "drash", "rhum"]
    assert "Skipping line 8" in caplog.text


def test_strict_parse_raises_on_malformed_lines():
    text = MANIFEST + 'export { a } from "https://deno.land/std/fs/mod.ts";\n'

    with pytest.raises(ParseAmbiguity, match="Line 8"):
        parse_manifest(text, strict=True)


def test_identical_imports_are_kept_once():
    line = 'export { Drash } from "https://deno.land/x/drash@v1.0.0/mod.ts";\n'
    other = 'export { Http } from "https://deno.land/x/drash@v1.0.0/http.ts";\n'

    records = parse_manifest(line + line + other)

    assert [(r.name, r.line_number) for r in records] == [("drash", 1), ("drash", 3)]


def test_crlf_line_endings_do_not_leak_into_fields():
    text = MANIFEST.replace("\n", "\r\n")

    records = parse_manifest(text)

    assert [r.name for r in records] == ["fs", "path", "drash", "rhum"]
    assert all("\r" not in r.import_url for r in records)


def test_read_manifest_missing_file(tmp_path: Path):
    with pytest.raises(ManifestNotFound) as excinfo:
        read_manifest(tmp_path / "deps.ts")

    assert isinstance(excinfo.value, FileNotFoundError)


def test_read_and_write_preserve_bytes(tmp_path: Path):
    path = tmp_path / "deps.ts"
    original = MANIFEST.replace("\n", "\r\n").encode("utf-8")
    path.write_bytes(original)

    write_manifest(path, read_manifest(path))

    assert path.read_bytes() == original
