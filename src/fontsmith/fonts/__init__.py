"""Google Fonts request consolidation toolchain.

Architecture
: `is_google_fonts_url` recognises stylesheet requests aimed at the Google Fonts
  CSS endpoint, matching on host and path only.
: `parse_font_url` splits each URL into single-family `FontRequest` values
  carrying variants, subsets and the optional restriction text.
: `FontCollection` groups requests by restriction text and merges every group
  requested by at least two stylesheets into one URL (`CombinedResult`).
: `build_fonts_markup` renders the result as `<link>` elements or as a WebFont
  loader script, and `rewrite_markup` swaps the original links for it.

Goal
: Let a page issue one stylesheet request per distinct restriction text
  instead of one per theme, plugin or template that asked for a font.
"""

from fontsmith.fonts.collection import (
    CombinedResult,
    FontCollection,
    build_font_url,
    merge_requests,
)
from fontsmith.fonts.formatter import (
    build_fonts_markup,
    build_link_markup,
    build_script_markup,
)
from fontsmith.fonts.markup import (
    find_font_hrefs,
    insert_in_head,
    is_candidate_link,
    link_pattern,
    remove_links,
    rewrite_markup,
)
from fontsmith.fonts.request import FontRequest, parse_font_family, parse_font_url
from fontsmith.fonts.utils import is_google_fonts_url


__all__ = [
    "CombinedResult",
    "FontCollection",
    "FontRequest",
    "build_font_url",
    "build_fonts_markup",
    "build_link_markup",
    "build_script_markup",
    "find_font_hrefs",
    "insert_in_head",
    "is_candidate_link",
    "is_google_fonts_url",
    "link_pattern",
    "merge_requests",
    "parse_font_family",
    "parse_font_url",
    "remove_links",
    "rewrite_markup",
]
