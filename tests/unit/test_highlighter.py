"""Tests for Highlight and the Highlighter registry.

Verifies:
- Round trip: add then remove restores the container exactly
- Degenerate ranges are ignored without touching the tree
- Markers wrap exactly the requested characters
- Lifecycle errors on reuse and not-found removal
"""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from hilite.config import MarkerConfig, Settings
from hilite.highlighter import (
    Highlight,
    Highlighter,
    HighlightNotFoundError,
    HighlightState,
    HighlightStateError,
)

_ROUND_TRIP_DOCS = [
    "<p>Hello world</p>",
    "<div>A</div> <div>B</div>",
    "<div><p>Hello <b>big</b> world</p>\n<p>Second <i>para</i>graph</p></div>",
    "<ul>\n  <li>one</li>\n  <li>two <em>three</em></li>\n</ul>",
    "<p>a<!-- note -->b<script>var x;</script>c</p>",
    '<div style="white-space: pre"><span>x</span>  <span>y</span></div>',
    "<p>a<ruby>b<rt>c</rt></ruby>d</p>",
]


def _marker_texts(highlight: Highlight) -> list[str]:
    return [marker.get_text() for marker in highlight.markers]


class TestRoundTrip:
    """Removing a highlight restores the document character for character."""

    @pytest.mark.parametrize("html", _ROUND_TRIP_DOCS)
    def test_every_range_round_trips(self, make_soup, settings, html: str) -> None:
        text = Highlighter(make_soup(html), settings=settings).get_rendered_text()

        for start in range(len(text)):
            for end in range(start + 1, len(text) + 1):
                soup = make_soup(html)
                highlighter = Highlighter(soup, settings=settings)
                highlighter.add(start, end, "hl")

                highlight = highlighter.last
                assert highlight is not None
                assert highlight.text == text[start:end], (start, end)

                highlighter.remove()
                assert str(soup) == html, (start, end)

    def test_overlapping_highlights_removed_in_any_order(
        self, make_soup, settings
    ) -> None:
        html = "<p>Hello <b>big</b> world</p>"
        for order in ("fifo", "lifo"):
            soup = make_soup(html)
            highlighter = Highlighter(soup, settings=settings)
            highlighter.add(0, 8, "a").add(4, 12, "b")
            first, second = highlighter.highlights
            assert first.text == "Hello bi"
            assert second.text == "o big wo"

            targets = [first, second] if order == "fifo" else [second, first]
            highlighter.remove(targets)
            assert str(soup) == html
            assert len(highlighter) == 0


class TestAdd:
    def test_multi_leaf_span(self, hello_world, settings) -> None:
        highlighter = Highlighter(hello_world, settings=settings)
        highlighter.add(3, 7, "hl")
        highlight = highlighter.last

        assert _marker_texts(highlight) == ["lo", "Wo"]
        assert highlight.text == "loWo"
        assert hello_world.get_text() == "HelloWorld"
        assert str(hello_world.contents[0]) == "Hel"
        assert str(hello_world.contents[-1]) == "rld"

        highlighter.remove(highlight)
        assert hello_world.get_text() == "HelloWorld"
        assert len(hello_world.contents) == 1

    def test_block_whitespace_example(self, make_soup, settings) -> None:
        soup = make_soup("<div>A</div> <div>B</div>")
        highlighter = Highlighter(soup, settings=settings)
        assert highlighter.get_rendered_text() == "AB"

        highlighter.add(1, 2, "hl")
        (marker,) = highlighter.last.markers
        assert marker.get_text() == "B"
        assert marker.parent is soup.find_all("div")[1]

    @pytest.mark.parametrize(("start", "end"), [(5, 5), (-1, 3), (4, 2)])
    def test_degenerate_ranges_ignored(
        self, make_soup, settings, start: int, end: int
    ) -> None:
        html = "<p>Hello world</p>"
        soup = make_soup(html)
        highlighter = Highlighter(soup, settings=settings)
        assert highlighter.add(start, end, "hl") is highlighter
        assert len(highlighter) == 0
        assert str(soup) == html

    def test_end_defaults_to_one_character(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello</p>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add(1)
        assert highlighter.last.text == "e"

    def test_start_defaults_to_zero(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello</p>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add()
        assert highlighter.last.text == "H"

    def test_chaining(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello world</p>")
        highlighter = Highlighter(soup, settings=settings)
        result = highlighter.add(0, 1).add(2, 3).add(6, 11)
        assert result is highlighter
        assert [h.text for h in highlighter] == ["H", "l", "world"]
        assert highlighter.remove() is highlighter
        assert str(soup) == "<p>Hello world</p>"

    def test_end_past_text(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello</p>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add(2, 50, "hl")
        assert highlighter.last.text == "llo"
        highlighter.remove()
        assert str(soup) == "<p>Hello</p>"

    def test_start_past_text_creates_empty_highlight(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello</p>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add(10, 12, "hl")
        assert highlighter.last.markers == []
        highlighter.remove()
        assert str(soup) == "<p>Hello</p>"

    def test_empty_container(self, make_soup, settings) -> None:
        soup = make_soup("<div></div>")
        highlighter = Highlighter(soup.div, settings=settings)
        highlighter.add(0, 3, "hl")
        assert highlighter.last.markers == []

    def test_script_content_untouched(self, make_soup, settings) -> None:
        soup = make_soup("<div>ab<script>xyz</script>cd</div>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add(1, 3, "hl")
        assert highlighter.last.text == "bc"
        assert soup.script.string == "xyz"
        assert soup.script.find("span") is None

    def test_offsets_after_ruby_annotation(self, make_soup, settings) -> None:
        soup = make_soup("<p>a<ruby>b<rt>c</rt></ruby>de</p>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add(2, 4, "hl")
        assert _marker_texts(highlighter.last) == ["c", "d"]
        assert highlighter.last.markers[0].parent is soup.rt


class TestMarkers:
    """Marker elements carry the requested styling."""

    def test_class_name_shorthand(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello</p>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add(0, 2, "match")
        highlight = highlighter.last
        (marker,) = highlight.markers
        assert marker.name == "span"
        assert marker["class"] == ["match"]
        assert marker["data-highlight"] == str(highlight.id)
        assert not marker.has_attr("style")

    def test_style_map_and_option_class(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello</p>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add(
            0, 2, {"background-color": "yellow"}, {"css_class": "hl"}
        )
        (marker,) = highlighter.last.markers
        assert marker["style"] == "background-color: yellow"
        assert marker["class"] == ["hl"]

    def test_marker_tag_from_settings(self, make_soup) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            marker=MarkerConfig(tag="mark", id_attribute=""),
        )
        soup = make_soup("<p>Hello</p>")
        Highlighter(soup, settings=settings).add(1, 3, "hl")
        assert str(soup) == '<p>H<mark class="hl">el</mark>lo</p>'

    def test_one_marker_per_fragment(self, make_soup, settings) -> None:
        soup = make_soup("<p>a<b>b</b><i>c</i>d</p>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add(0, 4, "hl")
        assert _marker_texts(highlighter.last) == ["a", "b", "c", "d"]
        assert len(soup.find_all("span")) == 4


class TestRemove:
    def test_remove_single(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello world</p>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add(0, 5, "a").add(6, 11, "b")
        first, second = highlighter.highlights

        highlighter.remove(first)
        assert highlighter.highlights == [second]
        assert first.state is HighlightState.REMOVED
        assert first.markers == []
        assert soup.find("span", class_="a") is None
        assert soup.find("span", class_="b") is not None

    def test_remove_all_by_default(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello world</p>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add(0, 5, "a").add(6, 11, "b")
        highlighter.remove()
        assert len(highlighter) == 0
        assert soup.find("span") is None

    def test_not_found_raises_without_mutation(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello world</p>")
        owner = Highlighter(soup, settings=settings)
        other = Highlighter(soup, settings=settings)
        owner.add(0, 5, "a")
        other.add(6, 11, "b")
        mine = owner.last
        foreign = other.last

        with pytest.raises(HighlightNotFoundError):
            owner.remove([mine, foreign])

        assert owner.highlights == [mine]
        assert mine.state is HighlightState.APPLIED
        assert len(soup.find_all("span")) == 2

    def test_repeated_highlight_removed_once(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello world</p>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add(0, 5, "a")
        highlight = highlighter.last
        highlighter.remove([highlight, highlight])
        assert len(highlighter) == 0
        assert str(soup) == "<p>Hello world</p>"

    def test_removed_highlight_cannot_be_removed_again(
        self, make_soup, settings
    ) -> None:
        soup = make_soup("<p>Hello world</p>")
        highlighter = Highlighter(soup, settings=settings)
        highlighter.add(0, 5, "a")
        highlight = highlighter.last
        highlighter.remove(highlight)

        with pytest.raises(HighlightNotFoundError):
            highlighter.remove(highlight)
        with pytest.raises(HighlightStateError, match="remove"):
            highlight.remove()


class TestHighlightLifecycle:
    def test_pending_until_applied(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello</p>")
        highlight = Highlight(soup, 0, 2, "hl", settings=settings)
        assert highlight.state is HighlightState.PENDING
        assert highlight.markers == []
        assert str(soup) == "<p>Hello</p>"

        highlight.apply()
        assert highlight.state is HighlightState.APPLIED
        assert highlight.text == "He"

    def test_apply_twice_raises(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello</p>")
        highlight = Highlight(soup, 0, 2, "hl", settings=settings)
        highlight.apply()
        with pytest.raises(HighlightStateError, match="apply"):
            highlight.apply()

    def test_reuse_after_remove_raises(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello</p>")
        highlight = Highlight(soup, 0, 2, "hl", settings=settings)
        highlight.apply()
        highlight.remove()
        with pytest.raises(HighlightStateError, match="removed"):
            highlight.apply()
        assert str(soup) == "<p>Hello</p>"

    def test_remove_before_apply_raises(self, make_soup, settings) -> None:
        soup = make_soup("<p>Hello</p>")
        highlight = Highlight(soup, 0, 2, "hl", settings=settings)
        with pytest.raises(HighlightStateError, match="pending"):
            highlight.remove()


class TestContainer:
    def test_document_uses_body(self, settings) -> None:
        soup = BeautifulSoup(
            "<html><head><title>Title</title></head><body><p>Text</p></body></html>",
            "html.parser",
        )
        highlighter = Highlighter(soup, settings=settings)
        assert highlighter.container is soup.body
        assert highlighter.get_rendered_text() == "Text"

    def test_lxml_document_round_trip(self, settings) -> None:
        html = "<div>Hello <b>big</b> world</div> <p>Again</p>"
        soup = BeautifulSoup(html, "lxml")
        before = str(soup)
        highlighter = Highlighter(soup, settings=settings)
        assert highlighter.get_rendered_text() == "Hello big worldAgain"

        highlighter.add(4, 17, "hl")
        assert highlighter.last.text == "o big worldAg"
        highlighter.remove()
        assert str(soup) == before

    def test_injected_style_resolver(self, make_soup, settings, fake_resolver) -> None:
        soup = make_soup("<div><x-a>A</x-a> <x-a>B</x-a></div>")
        resolver = fake_resolver({"x-a": {"display": "block"}})
        highlighter = Highlighter(soup, style_resolver=resolver, settings=settings)
        assert highlighter.get_rendered_text() == "AB"
        highlighter.add(1, 2, "hl")
        assert highlighter.last.text == "B"
