import textwrap

from fontsmith.core.config import OperationMode, OptimizerConfig, OutputTagFormat
from fontsmith.fonts.constants import COMBINED_HANDLE
from fontsmith.optimizer import FontOptimizer, OutputBufferStack, RequestContext, StyleRegistry
import pytest


ROBOTO = "https://fonts.googleapis.com/css?family=Roboto:400,700"
OPEN_SANS = "https://fonts.googleapis.com/css?family=Open+Sans&subset=latin"
COMBINED = "https://fonts.googleapis.com/css?family=Roboto:400,700|Open+Sans&subset=latin"
EXTENDED = "https://fonts.googleapis.com/css?family=Roboto:400,700|Open+Sans|Arvo&subset=latin"

DOCUMENT = textwrap.dedent(
    """\
    <!DOCTYPE html>
    <html>
    <head>
    <meta charset="utf-8">
    <link rel="stylesheet" href="https://fonts.googleapis.com/css?family=Roboto:400,700">
    <link rel="stylesheet" href="https://fonts.googleapis.com/css?family=Open+Sans&amp;subset=latin">
    <title>Demo</title>
    </head>
    <body><p>Hi</p></body>
    </html>
    """
)


def _markup_optimizer(**options: object) -> FontOptimizer:
    return FontOptimizer(
        OptimizerConfig(operation_mode=OperationMode.FULL_MARKUP_SCAN, **options)
    )


def test_process_style_handles_replaces_font_registrations() -> None:
    registry = StyleRegistry(
        {
            "theme": "/wp-content/themes/demo/style.css",
            "roboto": ROBOTO,
            "open-sans": OPEN_SANS,
            "lato-title": "https://fonts.googleapis.com/css?family=Lato&text=AB",
        }
    )
    optimizer = FontOptimizer()

    handles = optimizer.process_style_handles(
        ["theme", "roboto", "open-sans", "lato-title"], registry
    )

    assert handles == ["theme", "lato-title", COMBINED_HANDLE]
    assert registry.query(COMBINED_HANDLE) == COMBINED
    assert "roboto" not in registry
    assert "open-sans" not in registry
    assert registry.query("lato-title") is not None
    assert optimizer.get_enqueued() == {COMBINED_HANDLE: COMBINED}
    assert optimizer.get_enqueued(COMBINED_HANDLE) == COMBINED
    assert optimizer.candidates == [ROBOTO, OPEN_SANS, registry.query("lato-title")]


def test_process_style_handles_registers_restricted_requests() -> None:
    registry = StyleRegistry(
        {
            "lato": "https://fonts.googleapis.com/css?family=Lato",
            "lato-text": "https://fonts.googleapis.com/css?family=Lato&text=AB",
            "merriweather-text": "https://fonts.googleapis.com/css?family=Merriweather&text=AB",
        }
    )
    optimizer = FontOptimizer()

    handles = optimizer.process_style_handles(registry.handles, registry)

    assert handles == ["lato", "fontsmith-combined-txt-1"]
    assert registry.query("fontsmith-combined-txt-1") == (
        "https://fonts.googleapis.com/css?family=Lato|Merriweather&text=AB"
    )
    assert COMBINED_HANDLE not in registry


def test_process_style_handles_needs_two_candidates() -> None:
    registry = StyleRegistry({"theme": "/style.css", "roboto": ROBOTO, "missing": ""})
    optimizer = FontOptimizer()

    handles = optimizer.process_style_handles(["theme", "roboto", "missing", "unknown"], registry)

    assert handles == ["theme", "roboto", "missing", "unknown"]
    assert registry.to_mapping() == {"theme": "/style.css", "roboto": ROBOTO, "missing": ""}
    assert optimizer.get_enqueued() == {}


def test_process_style_handles_can_run_again_on_its_own_output() -> None:
    registry = StyleRegistry({"a": ROBOTO, "b": OPEN_SANS})
    optimizer = FontOptimizer()
    handles = optimizer.process_style_handles(["a", "b"], registry)
    registry.register("c", "https://fonts.googleapis.com/css?family=Arvo")

    handles = optimizer.process_style_handles([*handles, "c"], registry)

    assert handles == [COMBINED_HANDLE]
    assert registry.to_mapping() == {COMBINED_HANDLE: EXTENDED}
    assert optimizer.get_enqueued() == {COMBINED_HANDLE: EXTENDED}


def test_process_style_handles_keeps_unconsumed_combined_registrations() -> None:
    restricted = "https://fonts.googleapis.com/css?family=Lato&text=AB"
    registry = StyleRegistry(
        {
            "fontsmith-combined-txt-1": restricted,
            "inter-text": "https://fonts.googleapis.com/css?family=Inter&text=xyz",
            "arvo-text": "https://fonts.googleapis.com/css?family=Arvo&text=xyz",
        }
    )

    handles = FontOptimizer().process_style_handles(registry.handles, registry)

    assert handles == ["fontsmith-combined-txt-1", "fontsmith-combined-txt-2"]
    assert registry.query("fontsmith-combined-txt-1") == restricted
    assert registry.query("fontsmith-combined-txt-2") == (
        "https://fonts.googleapis.com/css?family=Inter|Arvo&text=xyz"
    )


def test_reset_clears_pass_bookkeeping() -> None:
    registry = StyleRegistry({"a": ROBOTO, "b": OPEN_SANS})
    optimizer = FontOptimizer()
    optimizer.process_style_handles(["a", "b"], registry)

    optimizer.reset()

    assert optimizer.get_enqueued() == {}
    assert optimizer.candidates == []


def test_process_markup_combines_links() -> None:
    optimizer = _markup_optimizer()

    result = optimizer.process_markup(DOCUMENT)

    assert result.count("fonts.googleapis.com") == 1
    assert (
        '<head><link rel="stylesheet" type="text/css" '
        'href="https://fonts.googleapis.com/css?family=Roboto:400,700|Open+Sans&amp;subset=latin">'
    ) in result
    assert "<title>Demo</title>" in result
    assert "<body><p>Hi</p></body>" in result


def test_process_markup_is_idempotent() -> None:
    optimizer = _markup_optimizer()

    once = optimizer.process_markup(DOCUMENT)
    twice = optimizer.process_markup(once)

    assert twice == once


def test_process_markup_leaves_single_request_untouched() -> None:
    markup = (
        "<html><head>"
        '<link rel="stylesheet" href="https://fonts.googleapis.com/css?family=Lato">'
        "</head></html>"
    )

    assert _markup_optimizer().process_markup(markup) == markup


def test_process_markup_can_emit_loader_script() -> None:
    optimizer = _markup_optimizer(output_tag_format=OutputTagFormat.LOADER_SCRIPT)

    result = optimizer.process_markup(DOCUMENT)

    assert "fonts.googleapis.com" not in result
    assert "WebFontConfig" in result
    assert '"Roboto:400,700:latin"' in result
    assert result.index("WebFontConfig") < result.index("<title>")


def test_markup_gate_rejects_non_html() -> None:
    assert FontOptimizer.is_markup_doable(DOCUMENT)
    assert FontOptimizer.is_markup_doable("<!doctype html><p>x</p>")
    assert FontOptimizer.is_markup_doable("<html lang='en'></html>")
    assert not FontOptimizer.is_markup_doable('{"html": true}')
    assert not FontOptimizer.is_markup_doable(
        '<?xml version="1.0"?><?xml-stylesheet href="feed.xsl"?><html></html>'
    )


def test_should_buffer_only_for_frontend_requests() -> None:
    assert FontOptimizer.should_buffer()
    assert FontOptimizer.should_buffer(RequestContext())
    for flag in ("admin", "feed", "cron", "cli", "app_request", "xmlrpc", "short_init"):
        assert not FontOptimizer.should_buffer(RequestContext(**{flag: True})), flag


def test_buffering_rewrites_captured_output() -> None:
    optimizer = _markup_optimizer()
    buffers = OutputBufferStack()

    assert optimizer.start_buffering(buffers)
    buffers.write(DOCUMENT)
    rewritten = buffers.end()

    assert rewritten == optimizer.process_markup(DOCUMENT)
    assert buffers.getvalue() == rewritten
    assert buffers.level == 0


def test_buffering_skipped_outside_frontend() -> None:
    optimizer = _markup_optimizer()
    buffers = OutputBufferStack()

    assert not optimizer.start_buffering(buffers, RequestContext(feed=True))
    assert buffers.level == 0


def test_buffering_cleans_nested_buffers_when_configured() -> None:
    buffers = OutputBufferStack()
    buffers.start()
    buffers.write("stale")
    optimizer = _markup_optimizer(clean_output_buffers=True)

    optimizer.start_buffering(buffers)
    buffers.write(DOCUMENT)

    assert buffers.level == 1
    assert buffers.end_all() == optimizer.process_markup(DOCUMENT)


def test_buffering_keeps_nested_buffers_by_default() -> None:
    buffers = OutputBufferStack()
    buffers.start()
    buffers.write("<!-- outer -->")
    optimizer = _markup_optimizer()

    optimizer.start_buffering(buffers)
    buffers.write(DOCUMENT)

    assert buffers.level == 2
    assert buffers.end_all() == "<!-- outer -->" + optimizer.process_markup(DOCUMENT)


def test_end_buffering_passes_through_non_html() -> None:
    feed = '<?xml version="1.0"?><?xml-stylesheet href="x.xsl"?><html><head></head></html>'

    assert _markup_optimizer().end_buffering(feed) == feed
    assert _markup_optimizer().process_output(DOCUMENT, RequestContext(admin=True)) == DOCUMENT


def test_buffer_stack_requires_an_open_level() -> None:
    with pytest.raises(RuntimeError):
        OutputBufferStack().end()


def test_process_markup_removes_entity_encoded_links() -> None:
    markup = (
        "<html><head>"
        '<link rel="stylesheet" href="https://fonts.googleapis.com/css?family=Lato&#124;Arvo">'
        '<link rel="stylesheet" href=" https://fonts.googleapis.com/css?family=Inter">'
        "</head></html>"
    )

    result = _markup_optimizer().process_markup(markup)

    assert result == (
        '<html><head><link rel="stylesheet" type="text/css" '
        'href="https://fonts.googleapis.com/css?family=Lato|Arvo|Inter">\n'
        "</head></html>"
    )


def test_process_markup_only_merges_links_it_can_remove(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    ghost = "https://fonts.googleapis.com/css?family=Ghost"
    monkeypatch.setattr(
        "fontsmith.optimizer.find_font_hrefs", lambda markup: [ROBOTO, OPEN_SANS, ghost]
    )

    result = _markup_optimizer().process_markup(DOCUMENT)

    assert "Ghost" not in result
    assert f'href="{COMBINED.replace("&", "&amp;")}"' in result
    assert result.count("fonts.googleapis.com") == 1
