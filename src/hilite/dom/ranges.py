"""Map rendered-text offsets onto boundary-aligned text leaves.

``get_nodes_in_range`` turns a half-open ``[start, end)`` interval over the
rendered text of a subtree into the list of text leaves covering exactly that
interval, splitting the first and last leaf when the interval boundaries fall
inside them.

The linearized leaves are snapshotted before any split.  Splitting replaces a
leaf with two new siblings, so the walk continues with the pieces returned by
``split_text_node`` and never re-reads the tree.
"""

from __future__ import annotations

import logging

from bs4 import NavigableString, Tag

from hilite.dom.styles import StyleResolver
from hilite.dom.text_nodes import get_text_nodes

logger = logging.getLogger(__name__)


def split_text_node(
    node: NavigableString, offset: int
) -> tuple[NavigableString, NavigableString]:
    """Split a text leaf in place at *offset*.

    The leaf is replaced by two adjacent siblings of the same string type,
    ``node[:offset]`` followed by ``node[offset:]``.

    Returns:
        ``(head, tail)`` -- the two new leaves now in the tree.

    Raises:
        ValueError: If *offset* is outside ``[0, len(node)]`` or the leaf is
            not attached to a parent.
    """
    if not 0 <= offset <= len(node):
        msg = f"Split offset {offset} outside text node of length {len(node)}"
        raise ValueError(msg)
    if node.parent is None:
        msg = f"Cannot split detached text node {str(node)!r}"
        raise ValueError(msg)

    string_type = type(node)
    head = string_type(node[:offset])
    tail = string_type(node[offset:])
    node.replace_with(head)
    head.insert_after(tail)

    logger.debug("Split text node at %d: %r | %r", offset, str(head), str(tail))
    return head, tail


def get_nodes_in_range(
    root: Tag,
    start: int,
    end: int,
    style_resolver: StyleResolver | None = None,
) -> list[NavigableString]:
    """Return the text leaves covering rendered offsets ``[start, end)``.

    The first returned leaf begins exactly at *start* and the last ends
    exactly at *end* (or at the end of the text when *end* overshoots it).
    No split happens when a boundary already coincides with a leaf boundary.

    Args:
        root: Container whose rendered text the offsets index into.
        start: Inclusive start offset, ``>= 0``.
        end: Exclusive end offset, ``> start``.  May exceed the text length.
        style_resolver: Computed-style capability passed to the linearizer.

    Returns:
        Leaves in document order.  Empty when *start* is at or past the end
        of the text.

    Raises:
        ValueError: If ``start < 0`` or ``end <= start``.
    """
    if start < 0 or end <= start:
        msg = f"Invalid range [{start}, {end}): expected 0 <= start < end"
        raise ValueError(msg)

    # Snapshot before any mutation
    nodes = get_text_nodes(root, style_resolver)

    length = 0
    nodes_in_range: list[NavigableString] = []

    for node in nodes:
        prev_length = length
        length += len(node)

        # Not caught up with start yet
        if start >= length:
            continue

        # start falls strictly inside this leaf
        if start > prev_length:
            _head, node = split_text_node(node, start - prev_length)
            prev_length = start

        if end <= length:
            if end != length:
                node, _tail = split_text_node(node, end - prev_length)
            nodes_in_range.append(node)
            break

        nodes_in_range.append(node)

    return nodes_in_range
