"""Rendered-text linearization of an HTML subtree.

Walks a BeautifulSoup subtree in document order and collects the text leaves
a reader would actually see, so that character offsets line up with the
visible text rather than the raw markup:

- ``<script>`` / ``<style>`` / ``<template>`` subtrees are skipped entirely
- comments, doctypes and other non-text strings contribute nothing
- whitespace-only leaves are dropped when they would collapse away
  (see ``is_unrendered_whitespace``)
"""

# Pattern: Functional Core (pure reads over the tree, no mutation)

from __future__ import annotations

import re

from bs4 import NavigableString, PageElement, Tag
from bs4.element import PreformattedString

from hilite.dom.styles import DefaultStyleResolver, StyleResolver

# Containers whose content never renders as text. <template> content is an
# inert fragment, not part of the rendered tree.
_OPAQUE_TAGS = frozenset(("script", "style", "template"))

# Anything outside the HTML whitespace set (plus zero-width space) is content
_HTML_NON_WHITESPACE = re.compile(r"[^\r\n\t\f \u200b]")

_LINE_BREAK = re.compile(r"[\r\n]")

_INLINE_DISPLAY = re.compile(r"^inline(-block|-table)?$", re.IGNORECASE)

_DEFAULT_RESOLVER = DefaultStyleResolver()


def is_text_node(node: PageElement | None) -> bool:
    """True for text leaves.

    Comments, CDATA, doctypes and processing instructions are
    ``PreformattedString`` subclasses and are not text.  Container-specific
    strings such as ``RubyTextString`` (text inside ``<rt>``) are.
    """
    return isinstance(node, NavigableString) and not isinstance(
        node, PreformattedString
    )


def _is_opaque(element: Tag) -> bool:
    return (element.name or "").lower() in _OPAQUE_TAGS


def is_non_inline_element(
    node: PageElement | None, style_resolver: StyleResolver
) -> bool:
    """True if *node* is an element whose computed display is not inline-flow."""
    if not isinstance(node, Tag):
        return False
    display = style_resolver.computed_style(node, "display")
    return display is not None and not _INLINE_DISPLAY.match(display)


def is_unrendered_whitespace(
    node: NavigableString, style_resolver: StyleResolver | None = None
) -> bool:
    """Judge whether a text leaf contributes nothing to the rendered text.

    A leaf is unrendered when it is empty, or when it is whitespace-only and
    neither its parent's ``white-space`` mode preserves it nor its siblings
    allow it to render.  Whitespace next to a non-inline element is treated
    as collapsed; whitespace between inline flows is kept.
    """
    if len(node) == 0:
        return True
    if _HTML_NON_WHITESPACE.search(node):
        return False

    resolver = style_resolver or _DEFAULT_RESOLVER
    parent = node.parent
    white_space = (
        resolver.computed_style(parent, "white-space") if parent is not None else None
    )

    if white_space in ("pre", "pre-wrap", "-moz-pre-wrap"):
        return False
    if white_space == "pre-line" and _LINE_BREAK.search(node):
        return False

    return is_non_inline_element(
        node.previous_sibling, resolver
    ) or is_non_inline_element(node.next_sibling, resolver)


def get_text_nodes(
    root: Tag, style_resolver: StyleResolver | None = None
) -> list[NavigableString]:
    """Collect the rendered text leaves under *root* in document order.

    Args:
        root: Container whose children are walked.
        style_resolver: Computed-style capability.  Defaults to
            ``DefaultStyleResolver``.

    Returns:
        Text leaves whose concatenation is the rendered text of *root*.
        Every returned leaf is non-empty.
    """
    resolver = style_resolver or _DEFAULT_RESOLVER
    nodes: list[NavigableString] = []

    for child in root.children:
        if is_text_node(child):
            if not is_unrendered_whitespace(child, resolver):
                nodes.append(child)
        elif isinstance(child, Tag) and not _is_opaque(child):
            nodes.extend(get_text_nodes(child, resolver))

    return nodes


def get_rendered_text(root: Tag, style_resolver: StyleResolver | None = None) -> str:
    """Return the rendered text of *root*; offsets index into this string."""
    return "".join(get_text_nodes(root, style_resolver))
