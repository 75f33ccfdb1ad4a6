import json
import re

from fontsmith.core.config import OutputTagFormat
from fontsmith.fonts.collection import CombinedResult
from fontsmith.fonts.constants import WEBFONT_LOADER_URL
from fontsmith.fonts.formatter import build_fonts_markup, build_link_markup, build_script_markup


MAIN = "https://fonts.googleapis.com/css?family=Roboto:400,700|Open+Sans&subset=latin"
TEXT = "https://fonts.googleapis.com/css?family=Lato|Merriweather&text=AB"


def _result() -> CombinedResult:
    return CombinedResult(main_url=MAIN, restricted_urls=(TEXT,), original_urls=("a", "b"))


def test_link_markup_lists_main_then_restricted() -> None:
    markup = build_link_markup(_result())

    assert markup == (
        '<link rel="stylesheet" type="text/css" '
        'href="https://fonts.googleapis.com/css?family=Roboto:400,700|Open+Sans&amp;subset=latin">\n'
        '<link rel="stylesheet" type="text/css" '
        'href="https://fonts.googleapis.com/css?family=Lato|Merriweather&amp;text=AB">\n'
    )


def test_script_markup_loads_the_same_requests() -> None:
    markup = build_script_markup(_result())

    assert markup.startswith('<script type="text/javascript">')
    assert WEBFONT_LOADER_URL in markup
    payload = re.search(r"WebFontConfig = (.*);\n", markup)
    assert payload is not None
    config = json.loads(payload.group(1))
    assert config == {
        "google": {"families": ["Roboto:400,700:latin", "Open Sans::latin"]},
        "custom": {"families": ["Lato", "Merriweather"], "urls": [TEXT]},
    }


def test_script_markup_escapes_closing_tags() -> None:
    text_url = "https://fonts.googleapis.com/css?family=Lato&text=</script>"
    markup = build_script_markup(CombinedResult(restricted_urls=(text_url,)))

    assert markup.count("</script>") == 1
    assert "\\u003c/script\\u003e" in markup
    assert '"google"' not in markup


def test_fonts_markup_follows_requested_flavour() -> None:
    result = _result()

    assert build_fonts_markup(result) == build_link_markup(result)
    assert build_fonts_markup(result, OutputTagFormat.LOADER_SCRIPT) == build_script_markup(result)
    assert build_fonts_markup(CombinedResult()) == ""
