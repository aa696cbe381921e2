"""Computed-style lookups for the text linearizer.

The linearizer only needs two rendering properties, ``display`` and
``white-space``. They are obtained through a ``StyleResolver`` so callers can
plug in real computed styles (e.g. from a browser) or a fake in tests.

``DefaultStyleResolver`` approximates a user-agent stylesheet: inline
``style`` declarations win, ``white-space`` is inherited, and everything
else falls back to the HTML defaults for the tag name.
"""

from __future__ import annotations

from typing import Protocol

from bs4 import Tag

# Tag name -> default CSS display value.  Anything not listed is "inline".
_DEFAULT_DISPLAY: dict[str, str] = {
    **dict.fromkeys(
        (
            "address",
            "article",
            "aside",
            "blockquote",
            "body",
            "center",
            "dd",
            "details",
            "dialog",
            "dir",
            "div",
            "dl",
            "dt",
            "fieldset",
            "figcaption",
            "figure",
            "footer",
            "form",
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            "header",
            "hgroup",
            "hr",
            "html",
            "legend",
            "listing",
            "main",
            "menu",
            "nav",
            "ol",
            "p",
            "plaintext",
            "pre",
            "search",
            "section",
            "summary",
            "ul",
            "xmp",
        ),
        "block",
    ),
    "li": "list-item",
    "table": "table",
    "caption": "table-caption",
    "colgroup": "table-column-group",
    "col": "table-column",
    "thead": "table-header-group",
    "tbody": "table-row-group",
    "tfoot": "table-footer-group",
    "tr": "table-row",
    "td": "table-cell",
    "th": "table-cell",
    **dict.fromkeys(
        (
            "area",
            "base",
            "basefont",
            "datalist",
            "head",
            "link",
            "meta",
            "noembed",
            "noframes",
            "param",
            "rp",
            "script",
            "style",
            "template",
            "title",
        ),
        "none",
    ),
    **dict.fromkeys(
        ("button", "input", "meter", "progress", "select", "textarea"),
        "inline-block",
    ),
}

_DEFAULT_WHITE_SPACE: dict[str, str] = {
    "pre": "pre",
    "listing": "pre",
    "xmp": "pre",
    "plaintext": "pre",
    "textarea": "pre-wrap",
}


def default_display(tag_name: str) -> str:
    """User-agent default ``display`` for an element name."""
    return _DEFAULT_DISPLAY.get(tag_name.lower(), "inline")


class StyleResolver(Protocol):
    """Host capability answering computed-style queries for an element."""

    def computed_style(self, element: Tag, prop: str) -> str | None:
        """Return the computed value of CSS *prop* for *element*, or None."""
        ...


def parse_inline_style(value: str | None) -> dict[str, str]:
    """Parse a ``style`` attribute into ``{property: value}``.

    Property names are lower-cased; values are stripped of ``!important``.
    Malformed declarations (no colon, empty name) are ignored.
    """
    declarations: dict[str, str] = {}
    if not value:
        return declarations

    for declaration in value.split(";"):
        name, sep, raw = declaration.partition(":")
        name = name.strip().lower()
        if not sep or not name:
            continue
        raw = raw.strip()
        if raw.lower().endswith("!important"):
            raw = raw[: -len("!important")].strip()
        declarations[name] = raw
    return declarations


def _inline_value(element: Tag, prop: str) -> str | None:
    style = element.get("style")
    if not style:
        return None
    if isinstance(style, list):
        style = " ".join(style)
    value = parse_inline_style(str(style)).get(prop)
    return value.lower() if value else None


class DefaultStyleResolver:
    """Static approximation of computed styles for parsed HTML."""

    def computed_style(self, element: Tag, prop: str) -> str | None:
        if prop == "display":
            return self._display(element)
        if prop == "white-space":
            return self._white_space(element)
        return _inline_value(element, prop)

    def _display(self, element: Tag) -> str | None:
        inline = _inline_value(element, "display")
        if inline:
            return inline
        if element.has_attr("hidden"):
            return "none"
        if element.name is None:
            return None
        return default_display(element.name)

    def _white_space(self, element: Tag) -> str:
        # white-space is inherited: nearest declaration or tag default wins
        node: Tag | None = element
        while node is not None:
            if isinstance(node, Tag):
                inline = _inline_value(node, "white-space")
                if inline:
                    return inline
                name = (node.name or "").lower()
                if name in _DEFAULT_WHITE_SPACE:
                    return _DEFAULT_WHITE_SPACE[name]
                if name in ("td", "th") and node.has_attr("nowrap"):
                    return "nowrap"
            node = node.parent
        return "normal"
