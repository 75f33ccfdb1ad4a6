from fontsmith.fonts.collection import CombinedResult, FontCollection, build_font_url
from fontsmith.fonts.request import parse_font_url


BASE = "https://fonts.googleapis.com/css"


def _families(url: str) -> list[str]:
    return [request.family for request in parse_font_url(url)]


def test_two_plain_requests_share_main_url() -> None:
    roboto = f"{BASE}?family=Roboto:400,700"
    open_sans = f"{BASE}?family=Open+Sans"

    result = FontCollection([roboto, open_sans]).combine()

    assert result.main_url == f"{BASE}?family=Roboto:400,700|Open+Sans"
    assert result.restricted_urls == ()
    assert set(result.original_urls) == {roboto, open_sans}


def test_single_unrestricted_request_is_left_alone() -> None:
    lato = f"{BASE}?family=Lato"
    lato_text = f"{BASE}?family=Lato&text=AB"
    merriweather_text = f"{BASE}?family=Merriweather&text=AB"

    result = FontCollection([lato, lato_text, merriweather_text]).combine()

    assert result.main_url is None
    assert result.restricted_urls == (f"{BASE}?family=Lato|Merriweather&text=AB",)
    assert result.original_urls == (lato_text, merriweather_text)
    assert lato not in result.original_urls


def test_repeated_families_union_variants_and_subsets() -> None:
    urls = [
        f"{BASE}?family=Roboto:400",
        f"{BASE}?family=Roboto:700,400|Lato&subset=latin",
        f"{BASE}?family=Roboto:400italic&subset=cyrillic",
    ]

    result = FontCollection(urls).combine()

    assert result.main_url == f"{BASE}?family=Roboto:400,700,400italic|Lato&subset=latin,cyrillic"
    assert result.original_urls == tuple(urls)


def test_variant_order_does_not_duplicate_families() -> None:
    urls = [f"{BASE}?family=Roboto:400,700", f"{BASE}?family=Roboto:700,400"]

    result = FontCollection(urls).combine()

    assert result.main_url == f"{BASE}?family=Roboto:400,700"


def test_distinct_restriction_texts_never_share_a_url() -> None:
    urls = [
        f"{BASE}?family=Lato&text=AB",
        f"{BASE}?family=Oswald&text=CD",
        f"{BASE}?family=Roboto&text=AB",
        f"{BASE}?family=Inter&text=CD",
        f"{BASE}?family=Ubuntu&text=AB+",
        f"{BASE}?family=Arvo&text=AB+",
    ]

    result = FontCollection(urls).combine()

    assert result.main_url is None
    assert [_families(url) for url in result.restricted_urls] == [
        ["Lato", "Roboto"],
        ["Oswald", "Inter"],
        ["Ubuntu", "Arvo"],
    ]
    texts = [parse_font_url(url)[0].text for url in result.restricted_urls]
    assert texts == ["AB", "CD", "AB "]


def test_every_family_lands_in_exactly_one_url() -> None:
    urls = [
        f"{BASE}?family=Roboto:400|Lato",
        f"{BASE}?family=Open+Sans&subset=greek",
        f"{BASE}?family=Lato:700",
        f"{BASE}?family=Merriweather&text=Title",
        f"{BASE}?family=Oswald&text=Title",
    ]
    result = FontCollection(urls).combine()

    seen: list[tuple[str, str | None]] = []
    for url in result.urls:
        seen.extend((request.family, request.text) for request in parse_font_url(url))

    assert sorted(seen, key=str) == sorted(
        [
            ("Roboto", None),
            ("Lato", None),
            ("Open Sans", None),
            ("Merriweather", "Title"),
            ("Oswald", "Title"),
        ],
        key=str,
    )


def test_below_threshold_yields_empty_result() -> None:
    assert FontCollection([]).combine() == CombinedResult()
    single = FontCollection([f"{BASE}?family=Roboto|Lato"]).combine()
    assert single.is_empty
    assert single.original_urls == ()


def test_unusable_urls_do_not_count_towards_threshold() -> None:
    collection = FontCollection([f"{BASE}?family=Lato", f"{BASE}?family=%3Cb%3E", f"{BASE}"])

    assert collection.stylesheet_count == 1
    assert len(list(collection)) == 1
    assert collection.combine().is_empty


def test_duplicate_stylesheets_collapse_into_one() -> None:
    url = f"{BASE}?family=Lato:300"

    result = FontCollection([url, url]).combine()

    assert result.main_url == url
    assert result.original_urls == (url,)


def test_combined_urls_are_listed_main_first() -> None:
    result = CombinedResult(main_url="main", restricted_urls=("a", "b"))

    assert result.urls == ("main", "a", "b")
    assert CombinedResult(restricted_urls=("a",)).urls == ("a",)


def test_build_font_url_encodes_text_and_names() -> None:
    url = build_font_url(
        [("Open Sans", ("400",)), ("Lato", ())], subsets=("latin",), text="Hi & bye"
    )

    assert url == f"{BASE}?family=Open+Sans:400|Lato&subset=latin&text=Hi+%26+bye"
    assert parse_font_url(url)[0].text == "Hi & bye"


def test_collection_exposes_requests_in_order() -> None:
    collection = FontCollection([f"{BASE}?family=Roboto|Lato", f"{BASE}?family=Inter"])

    assert [request.family for request in collection] == ["Roboto", "Lato", "Inter"]
    assert collection.sources == (f"{BASE}?family=Roboto|Lato", f"{BASE}?family=Inter")
    assert collection.result == collection.combine()
