"""Marker elements: construction, wrapping, unwrapping and normalization.

A marker is a fresh inline element (``<span>`` by default) that replaces a
highlighted text fragment in the tree and holds that fragment as its only
child.  Unwrapping splices the marker's children back into its position and
``normalize`` merges the text leaves left side by side, so a wrap/unwrap pair
leaves the text of the tree unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from bs4 import BeautifulSoup, NavigableString, Tag

from hilite.dom.text_nodes import is_text_node

if TYPE_CHECKING:
    from uuid import UUID

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Highlight styling
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClassName:
    """Style the marker with a single class token."""

    name: str


@dataclass(frozen=True)
class StyleMap:
    """Style the marker with inline CSS declarations."""

    properties: Mapping[str, str] = field(default_factory=dict)


HighlightStyle = ClassName | StyleMap


def normalise_style(
    styles: HighlightStyle | Mapping[str, str] | str | None,
) -> HighlightStyle:
    """Coerce the caller's style argument to a ``HighlightStyle``.

    A plain string is shorthand for a class name; a mapping (or None) is a
    set of inline CSS declarations.
    """
    if isinstance(styles, (ClassName, StyleMap)):
        return styles
    if isinstance(styles, str):
        return ClassName(styles)
    if styles is None:
        return StyleMap()
    if isinstance(styles, Mapping):
        return StyleMap(dict(styles))
    msg = f"Highlight styles must be a class name or a mapping, got {styles!r}"
    raise TypeError(msg)


@dataclass(frozen=True)
class HighlightOptions:
    """Extra marker settings.

    Attributes:
        css_class: Class token added when the style is a ``StyleMap``.
            A ``ClassName`` style takes its place.
        attrs: Attributes copied onto every marker.
    """

    css_class: str | None = None
    attrs: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def coerce(
        cls, options: HighlightOptions | Mapping[str, Any] | None
    ) -> HighlightOptions:
        """Accept an options object, a ``{"css_class", "attrs"}`` dict, or None."""
        if options is None:
            return cls()
        if isinstance(options, HighlightOptions):
            return options
        unknown = set(options) - {"css_class", "attrs"}
        if unknown:
            msg = f"Unknown highlight options: {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        return cls(
            css_class=options.get("css_class"),
            attrs=dict(options.get("attrs") or {}),
        )


# ---------------------------------------------------------------------------
# Marker construction
# ---------------------------------------------------------------------------


def owner_document(node: Tag) -> BeautifulSoup:
    """Return the BeautifulSoup object owning *node*.

    A detached subtree gets a fresh empty document to create elements with.
    """
    if isinstance(node, BeautifulSoup):
        return node
    for parent in node.parents:
        if isinstance(parent, BeautifulSoup):
            return parent
    return BeautifulSoup("", "html.parser")


def _style_declarations(properties: Mapping[str, str]) -> str:
    return "; ".join(f"{prop}: {value}" for prop, value in properties.items())


def build_marker(
    document: BeautifulSoup,
    tag: str,
    style: HighlightStyle,
    options: HighlightOptions,
    *,
    highlight_id: UUID | None = None,
    id_attribute: str | None = None,
) -> Tag:
    """Create one detached marker element carrying the highlight styling."""
    marker = document.new_tag(tag)

    for name, value in options.attrs.items():
        marker[name] = value

    css_class = style.name if isinstance(style, ClassName) else options.css_class
    if css_class:
        classes = marker.get("class") or []
        if isinstance(classes, str):
            classes = classes.split()
        marker["class"] = [*classes, css_class]

    if isinstance(style, StyleMap) and style.properties:
        existing = marker.get("style")
        declarations = _style_declarations(style.properties)
        marker["style"] = f"{existing}; {declarations}" if existing else declarations

    if highlight_id is not None and id_attribute:
        marker[id_attribute] = str(highlight_id)

    return marker


# ---------------------------------------------------------------------------
# Tree mutation
# ---------------------------------------------------------------------------


def wrap_node(node: NavigableString, marker: Tag) -> Tag:
    """Put *marker* where *node* is and move *node* inside it."""
    return node.wrap(marker)


def unwrap_marker(marker: Tag) -> None:
    """Replace *marker* with its children, preserving their order."""
    if marker.parent is None:
        msg = f"Cannot unwrap detached marker <{marker.name}>"
        raise ValueError(msg)
    marker.unwrap()


def normalize(root: Tag) -> None:
    """Merge adjacent text leaves under *root* and drop empty ones.

    Only plain text leaves with a common parent are merged; comments and
    other special strings keep their boundaries.
    """
    empty = [
        node for node in root.descendants if is_text_node(node) and len(node) == 0
    ]
    for node in empty:
        node.extract()
    root.smooth()
