"""Highlight entities and the per-container Highlighter registry.

Usage::

    soup = BeautifulSoup(html, "html.parser")
    highlighter = Highlighter(soup)
    highlighter.add(3, 7, "match").add(12, 20, {"background-color": "yellow"})
    ...
    highlighter.remove()  # restores the original text

Offsets index into the rendered text of the container, as produced by
``hilite.dom.get_rendered_text``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from bs4 import BeautifulSoup, Tag

from hilite.config import Settings, get_settings
from hilite.dom.markers import (
    HighlightOptions,
    HighlightStyle,
    build_marker,
    normalise_style,
    normalize,
    owner_document,
    unwrap_marker,
    wrap_node,
)
from hilite.dom.ranges import get_nodes_in_range
from hilite.dom.styles import StyleResolver
from hilite.dom.text_nodes import get_rendered_text

logger = logging.getLogger(__name__)


class HighlightStateError(RuntimeError):
    """Raised when a highlight is applied or removed out of lifecycle order."""

    def __init__(self, highlight: Highlight, action: str) -> None:
        self.highlight = highlight
        self.action = action
        super().__init__(
            f"Cannot {action} highlight {highlight.id} in state "
            f"{highlight.state.value!r}"
        )


class HighlightNotFoundError(LookupError):
    """Raised when removing a highlight the registry does not own."""

    def __init__(self, highlight: Highlight) -> None:
        self.highlight = highlight
        super().__init__(f"Highlight {highlight.id} is not owned by this Highlighter")


class HighlightState(Enum):
    PENDING = "pending"
    APPLIED = "applied"
    REMOVED = "removed"


class Highlight:
    """One styled ``[start, end)`` range over a container's rendered text.

    The highlight owns the marker elements it creates.  It moves through
    pending -> applied -> removed; removed is terminal.
    """

    def __init__(
        self,
        container: Tag,
        start: int,
        end: int,
        styles: HighlightStyle | Mapping[str, str] | str | None = None,
        options: HighlightOptions | Mapping[str, Any] | None = None,
        *,
        style_resolver: StyleResolver | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.id: UUID = uuid4()
        self.container = container
        self.start = start
        self.end = end
        self.style = normalise_style(styles)
        self.options = HighlightOptions.coerce(options)
        self.markers: list[Tag] = []
        self.state = HighlightState.PENDING

        self._style_resolver = style_resolver
        self._settings = settings or get_settings()

    def __repr__(self) -> str:
        return (
            f"Highlight(id={self.id}, start={self.start}, end={self.end}, "
            f"state={self.state.value})"
        )

    @property
    def text(self) -> str:
        """Text currently wrapped by this highlight's markers."""
        return "".join(marker.get_text() for marker in self.markers)

    def apply(self) -> None:
        """Wrap every fragment of the range in a marker element."""
        if self.state is not HighlightState.PENDING:
            raise HighlightStateError(self, "apply")

        marker_config = self._settings.marker
        document = owner_document(self.container)
        nodes = get_nodes_in_range(
            self.container, self.start, self.end, self._style_resolver
        )

        for node in nodes:
            marker = build_marker(
                document,
                marker_config.tag,
                self.style,
                self.options,
                highlight_id=self.id,
                id_attribute=marker_config.id_attribute,
            )
            self.markers.append(wrap_node(node, marker))

        self.state = HighlightState.APPLIED
        logger.debug(
            "Applied highlight %s [%d, %d) with %d marker(s)",
            self.id,
            self.start,
            self.end,
            len(self.markers),
        )

    def remove(self) -> None:
        """Unwrap all markers and merge the text back together."""
        if self.state is not HighlightState.APPLIED:
            raise HighlightStateError(self, "remove")

        for marker in self.markers:
            unwrap_marker(marker)
        self.markers = []
        self.state = HighlightState.REMOVED

        # rejoin adjacent text nodes
        normalize(self.container)
        logger.debug("Removed highlight %s", self.id)


def _default_container(container: Tag) -> Tag:
    if isinstance(container, BeautifulSoup) and container.body is not None:
        return container.body
    return container


class Highlighter:
    """Registry of the active highlights on one container.

    Args:
        container: Root of the subtree to highlight.  A whole document uses
            its ``<body>`` when it has one.
        style_resolver: Computed-style capability for the linearizer.
        settings: Marker configuration; defaults to ``get_settings()``.
    """

    def __init__(
        self,
        container: Tag,
        style_resolver: StyleResolver | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.container = _default_container(container)
        self.style_resolver = style_resolver
        self.settings = settings or get_settings()
        self.highlights: list[Highlight] = []

    def __len__(self) -> int:
        return len(self.highlights)

    def __iter__(self) -> Iterator[Highlight]:
        return iter(list(self.highlights))

    @property
    def last(self) -> Highlight | None:
        """Most recently added highlight still owned, if any."""
        return self.highlights[-1] if self.highlights else None

    def get_rendered_text(self) -> str:
        """Rendered text of the container; the offset space for ``add``."""
        return get_rendered_text(self.container, self.style_resolver)

    def add(
        self,
        start: int = 0,
        end: int | None = None,
        styles: HighlightStyle | Mapping[str, str] | str | None = None,
        options: HighlightOptions | Mapping[str, Any] | None = None,
    ) -> Highlighter:
        """Highlight rendered offsets ``[start, end)``.

        Args:
            start: Offset to begin the highlight.
            end: Offset to end the highlight (exclusive).  Defaults to
                ``start + 1``.
            styles: Inline CSS declarations as a mapping, or a class name.
            options: ``HighlightOptions`` or a dict with ``css_class`` /
                ``attrs``.

        Returns:
            This Highlighter, for chaining.  Ranges with ``end <= start`` or
            ``start < 0`` are ignored.
        """
        if end is None:
            end = start + 1

        if not (end > start and start >= 0):
            logger.debug("Ignoring degenerate highlight range [%d, %d)", start, end)
            return self

        highlight = Highlight(
            self.container,
            start,
            end,
            styles,
            options,
            style_resolver=self.style_resolver,
            settings=self.settings,
        )
        highlight.apply()
        self.highlights.append(highlight)
        return self

    def remove(
        self, highlights: Highlight | Sequence[Highlight] | None = None
    ) -> Highlighter:
        """Remove highlights from the tree and from this registry.

        Args:
            highlights: A single Highlight or an ordered sequence of them.
                Removes every highlight owned by this Highlighter when omitted.

        Returns:
            This Highlighter, for chaining.

        Raises:
            HighlightNotFoundError: If any given highlight is not owned here.
                Nothing is removed in that case.
        """
        if highlights is None:
            targets = list(self.highlights)
        elif isinstance(highlights, Highlight):
            targets = [highlights]
        else:
            # drop repeats, keep first occurrence order
            targets = list({id(h): h for h in highlights}.values())

        for highlight in targets:
            if not any(owned is highlight for owned in self.highlights):
                raise HighlightNotFoundError(highlight)

        for highlight in targets:
            highlight.remove()
            self.highlights = [h for h in self.highlights if h is not highlight]

        return self
