"""Asset inlining: resolve url() references and rewrite compiled CSS."""

from sassinline.inline.resolver import AssetResolver
from sassinline.inline.rewriter import (
    URL_PATTERN,
    UrlRewriter,
    embed_source_map,
    read_inline_source_map,
    split_urls,
    strip_source_map_comment,
)

__all__ = [
    "AssetResolver",
    "UrlRewriter",
    "URL_PATTERN",
    "embed_source_map",
    "read_inline_source_map",
    "split_urls",
    "strip_source_map_comment",
]
