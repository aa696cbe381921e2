"""Tree-level building blocks: text linearization, range mapping, markers."""

from hilite.dom.markers import (
    ClassName,
    HighlightOptions,
    HighlightStyle,
    StyleMap,
    build_marker,
    normalise_style,
    normalize,
    unwrap_marker,
    wrap_node,
)
from hilite.dom.ranges import get_nodes_in_range, split_text_node
from hilite.dom.styles import (
    DefaultStyleResolver,
    StyleResolver,
    default_display,
    parse_inline_style,
)
from hilite.dom.text_nodes import (
    get_rendered_text,
    get_text_nodes,
    is_unrendered_whitespace,
)

__all__ = [
    "ClassName",
    "DefaultStyleResolver",
    "HighlightOptions",
    "HighlightStyle",
    "StyleMap",
    "StyleResolver",
    "build_marker",
    "default_display",
    "get_nodes_in_range",
    "get_rendered_text",
    "get_text_nodes",
    "is_unrendered_whitespace",
    "normalise_style",
    "normalize",
    "parse_inline_style",
    "split_text_node",
    "unwrap_marker",
    "wrap_node",
]
