"""Tests for the url() rewriter and inline source map helpers."""

import pytest

from sassinline.errors import MapParseError
from sassinline.events import AssetInlined, EventBus
from sassinline.inline import (
    AssetResolver,
    UrlRewriter,
    embed_source_map,
    read_inline_source_map,
    split_urls,
    strip_source_map_comment,
)
from sassinline.inline.datauri import parse_css_data_url
from sassinline.sourcemap import SourceMap

PNG = b"\x89PNG\r\n\x1a\nfake-icon"
STAR = b"\x89PNG\r\n\x1a\nfake-star"


@pytest.fixture
def proj(tmp_path):
    proj = tmp_path / "proj"
    (proj / "src" / "app").mkdir(parents=True)
    (proj / "src" / "lib").mkdir(parents=True)
    (proj / "src" / "app" / "icon.png").write_bytes(PNG)
    (proj / "src" / "lib" / "star.png").write_bytes(STAR)
    return proj


@pytest.fixture
def rewriter(proj):
    return UrlRewriter(AssetResolver(proj))


def _map(proj, source="src/app/app.scss", lines=None) -> SourceMap:
    return SourceMap(
        sources=[str(proj / source)],
        lines=lines if lines is not None else [[(0, 0, 0, 0), (3, 0, 1, 2)]],
    )


# ---------------------------------------------------------------------------
# split_urls
# ---------------------------------------------------------------------------


class TestSplitUrls:
    def test_alternates_text_and_tokens(self):
        parts = split_urls("url(a.png) no-repeat, url('b.svg#x')")
        assert parts == ["", "url(a.png)", " no-repeat, ", "url('b.svg#x')", ""]

    def test_no_tokens(self):
        assert split_urls("red") == ["red"]

    def test_double_quotes_and_spaces(self):
        assert split_urls('url( "a b.png" )')[1] == 'url( "a b.png" )'


# ---------------------------------------------------------------------------
# rewrite
# ---------------------------------------------------------------------------


class TestRewrite:
    def test_inlines_resolvable_reference(self, proj, rewriter):
        css, _ = rewriter.rewrite(".a{background:url(icon.png)}", _map(proj))
        assert css.startswith(".a{background:url(data:image/png;base64,")
        token = css[len(".a{background:") : -1]
        assert parse_css_data_url(token) == (PNG, "image/png")

    def test_passthrough_without_url(self, proj, rewriter):
        source = ".a{color:red;margin:0 auto}\n.b{padding:1px}"
        sm = _map(proj)
        css, adjusted = rewriter.rewrite(source, sm)
        assert css == source
        assert adjusted == sm

    def test_unresolved_reference_is_untouched(self, proj, rewriter):
        source = ".a{background:url('missing.png?v=1')}"
        css, _ = rewriter.rewrite(source, _map(proj))
        assert css == source

    def test_remote_reference_is_untouched(self, proj, rewriter):
        source = ".a{background:url(https://example.com/icon.png)}"
        css, _ = rewriter.rewrite(source, _map(proj))
        assert css == source

    def test_quoted_reference_with_query(self, proj, rewriter):
        css, _ = rewriter.rewrite('.a{background:url("icon.png?v=2")}', _map(proj))
        assert "icon.png" not in css
        assert "url(data:image/png;base64," in css

    def test_multiple_tokens_keep_order(self, proj, rewriter):
        source = ".a{background:url(icon.png),url(missing.png),url(icon.png)}"
        css, _ = rewriter.rewrite(source, _map(proj))
        value = css[len(".a{background:") : -1]
        parts = split_urls(value)
        assert parts[3] == "url(missing.png)"
        assert parts[1] == parts[5]
        assert parts[1].startswith("url(data:image/png")

    def test_declarations_inside_media_are_rewritten(self, proj, rewriter):
        source = "@media print{.a{background:url(icon.png)}}"
        sm = _map(proj, lines=[[(0, 0, 0, 0)]])
        css, _ = rewriter.rewrite(source, sm)
        assert "url(data:image/png" in css

    def test_source_map_is_not_mutated(self, proj, rewriter):
        sm = _map(proj, lines=[[(0, 0, 0, 0), (3, 0, 1, 2), (28, 0, 2, 2)]])
        before = sm.copy()
        rewriter.rewrite(".a{background:url(icon.png);color:red}", sm)
        assert sm == before

    def test_emits_asset_inlined(self, proj):
        bus = EventBus()
        events = []
        bus.subscribe(AssetInlined, events.append)
        UrlRewriter(AssetResolver(proj), event_bus=bus).rewrite(
            ".a{background:url(icon.png)}", _map(proj)
        )
        assert events == [AssetInlined(reference="icon.png", directory=str(proj / "src/app"))]


# ---------------------------------------------------------------------------
# Backward lookup through the map
# ---------------------------------------------------------------------------


class TestAuthoringDirectory:
    CSS = ".b{background:url(star.png)}"

    def test_mapped_source_directory_is_searched(self, proj, rewriter):
        sm = _map(proj, source="src/lib/_lib.scss")
        css, _ = rewriter.rewrite(self.CSS, sm, fallback_dir=str(proj / "src/app"))
        token = css[len(".b{background:") : -1]
        assert parse_css_data_url(token)[0] == STAR

    def test_fallback_directory_used_without_mapping(self, proj, rewriter):
        sm = _map(proj, source="src/lib/_lib.scss", lines=[[]])
        css, _ = rewriter.rewrite(self.CSS, sm, fallback_dir=str(proj / "src/app"))
        assert css == self.CSS

    def test_same_result_as_resolving_from_the_directory(self, proj, rewriter):
        sm = _map(proj, source="src/lib/_lib.scss")
        css, _ = rewriter.rewrite(self.CSS, sm)
        direct = AssetResolver(proj).resolve(proj / "src/lib", "star.png")
        assert css == f".b{{background:{direct}}}"

    def test_no_mapping_and_no_fallback_leaves_css(self, proj, rewriter):
        sm = _map(proj, lines=[])
        css, _ = rewriter.rewrite(".a{background:url(icon.png)}", sm)
        assert css == ".a{background:url(icon.png)}"


# ---------------------------------------------------------------------------
# Map adjustment
# ---------------------------------------------------------------------------


class TestMapAdjustment:
    def test_later_columns_shift_by_growth(self, proj, rewriter):
        source = ".a{background:url(icon.png);color:red}"
        assert source[28:33] == "color"
        sm = _map(proj, lines=[[(0, 0, 0, 0), (3, 0, 1, 2), (28, 0, 2, 2)]])
        css, adjusted = rewriter.rewrite(source, sm)
        delta = len(css) - len(source)
        assert [s[0] for s in adjusted.lines[0]] == [0, 3, 28 + delta]
        column = adjusted.lines[0][2][0]
        assert css[column : column + 5] == "color"
        assert adjusted.original_position_for(1, column).line == 3

    def test_other_lines_are_untouched(self, proj, rewriter):
        source = "a{x:1}\n.a{background:url(icon.png);color:red}"
        sm = _map(proj, lines=[[(0, 0, 0, 0), (2, 0, 0, 2)], [(0, 0, 1, 0), (3, 0, 2, 2), (28, 0, 3, 2)]])
        css, adjusted = rewriter.rewrite(source, sm)
        assert adjusted.lines[0] == sm.lines[0]
        second_line = css.split("\n")[1]
        column = adjusted.lines[1][2][0]
        assert second_line[column : column + 5] == "color"

    def test_two_substitutions_on_one_line(self, proj, rewriter):
        source = ".a{background:url(icon.png)}.b{background:url(icon.png)}.c{color:red}"
        start = source.index(".c")
        sm = _map(proj, lines=[[(0, 0, 0, 0), (3, 0, 1, 2), (start, 0, 9, 0)]])
        css, adjusted = rewriter.rewrite(source, sm)
        column = adjusted.lines[0][2][0]
        assert css[column : column + 2] == ".c"


# ---------------------------------------------------------------------------
# Inline source map comment
# ---------------------------------------------------------------------------


class TestInlineSourceMap:
    CSS = ".a{background:url(icon.png)}\n\n/*# sourceMappingURL=app.css.map */"

    def test_embed_replaces_comment(self, proj):
        embedded = embed_source_map(self.CSS, _map(proj))
        assert "sourceMappingURL=app.css.map" not in embedded
        assert "/*# sourceMappingURL=data:application/json;base64," in embedded

    def test_embedded_map_reads_back(self, proj):
        sm = _map(proj)
        assert read_inline_source_map(embed_source_map(self.CSS, sm)) == sm

    def test_embed_appends_when_comment_missing(self, proj):
        embedded = embed_source_map(".a{color:red}", _map(proj))
        assert embedded.startswith(".a{color:red}\n/*# sourceMappingURL=data:")

    def test_read_without_comment(self):
        assert read_inline_source_map(".a{color:red}") is None

    def test_strip_comment(self, proj):
        embedded = embed_source_map(self.CSS, _map(proj))
        assert strip_source_map_comment(embedded) == ".a{background:url(icon.png)}"

    def test_rewrite_uses_embedded_map(self, proj, rewriter):
        embedded = embed_source_map(self.CSS, _map(proj))
        css, adjusted = rewriter.rewrite(embedded)
        assert css.startswith(".a{background:url(data:image/png;base64,")
        assert adjusted.sources == [str(proj / "src/app/app.scss")]

    def test_rewrite_without_any_map(self, rewriter):
        with pytest.raises(MapParseError):
            rewriter.rewrite(".a{color:red}")
