"""Tests for source map normalisation."""

import json

import pytest

from sassinline.errors import MapParseError
from sassinline.sourcemap import SourceMap, normalize_source_map, relativize_sources
from sassinline.sourcemap.normalize import directory_pattern


def _raw(*sources: str, **extra) -> str:
    data = {"version": 3, "file": "app.css", "sources": list(sources),
            "names": [], "mappings": "AAAA"}
    data.update(extra)
    return json.dumps(data)


@pytest.fixture
def root(tmp_path):
    return tmp_path.as_posix()


class TestDirectoryPattern:
    def test_matches_either_separator(self):
        pattern = directory_pattern("/work/proj")
        assert pattern.sub("", "/work/proj/src/a.scss") == "/src/a.scss"
        assert pattern.sub("", "\\work\\proj\\src\\a.scss") == "\\src\\a.scss"

    def test_requires_segment_boundary(self):
        pattern = directory_pattern("/work/proj")
        assert pattern.sub("", "/work/project/a.scss") == "/work/project/a.scss"
        assert pattern.sub("", "/homework/proj/a.scss") == "/homework/proj/a.scss"


class TestNormalizeSourceMap:
    def test_relative_source_resolves_against_root(self, root):
        sm = normalize_source_map(_raw("src/app/app.scss"), cwd=root, root=root)
        assert sm.sources == [f"{root}/src/app/app.scss"]

    def test_parent_hops_are_removed(self, root):
        sm = normalize_source_map(_raw("../../src/app/app.scss"), cwd=root, root=root)
        assert sm.sources == [f"{root}/src/app/app.scss"]

    def test_absolute_build_path_is_removed(self, root):
        sm = normalize_source_map(
            _raw("/build/agent/proj/src/a.scss"), cwd="/build/agent/proj", root=root
        )
        assert sm.sources == [f"{root}/src/a.scss"]

    def test_windows_build_path_is_removed(self, root):
        sm = normalize_source_map(
            _raw("C:\\work\\proj\\src\\a.scss"), cwd="C:\\work\\proj", root=root
        )
        assert sm.sources == [f"{root}/src/a.scss"]

    def test_repeated_separators_collapse(self, root):
        sm = normalize_source_map(_raw("src//app///a.scss"), cwd=root, root=root)
        assert sm.sources == [f"{root}/src/app/a.scss"]

    def test_other_fields_survive(self, root):
        sm = normalize_source_map(_raw("a.scss"), cwd=root, root=root)
        assert sm.file == "app.css"
        assert sm.lines == [[(0, 0, 0, 0)]]

    def test_idempotent(self, root):
        raw = _raw("../src/app/app.scss", "/ci/proj/src/_lib.scss")
        once = normalize_source_map(raw, cwd="/ci/proj", root=root)
        twice = normalize_source_map(once.to_json(), cwd="/ci/proj", root=root)
        assert twice == once

    def test_malformed_text_is_fatal(self, root):
        with pytest.raises(MapParseError):
            normalize_source_map("{", cwd=root, root=root)


class TestRelativizeSources:
    def test_sources_become_root_relative(self, root):
        sm = SourceMap(sources=[f"{root}/src/app/app.scss"], lines=[[(0, 0, 0, 0)]])
        assert relativize_sources(sm, root).sources == ["/src/app/app.scss"]

    def test_drops_file_and_content(self, root):
        sm = SourceMap(
            sources=[f"{root}/a.scss"],
            file="a.css",
            source_root="/",
            sources_content=["a {}"],
        )
        data = relativize_sources(sm, root).to_dict()
        assert set(data) == {"version", "sources", "names", "mappings"}

    def test_input_is_not_modified(self, root):
        sm = SourceMap(sources=[f"{root}/a.scss"], file="a.css")
        relativize_sources(sm, root)
        assert sm.sources == [f"{root}/a.scss"]
        assert sm.file == "a.css"
