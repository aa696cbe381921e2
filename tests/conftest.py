"""Shared pytest fixtures for hilite tests."""

from __future__ import annotations

from collections.abc import Callable, Mapping

import pytest
from bs4 import BeautifulSoup, NavigableString, Tag

from hilite.config import Settings, get_settings


class FakeStyleResolver:
    """Computed styles from a lookup table instead of a rendering engine.

    Keys are ``"#id"`` (checked first) or a tag name; values map CSS
    property names to computed values.  Every query is recorded in
    ``calls`` as ``(tag name, property)``.
    """

    def __init__(self, styles: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self.styles = dict(styles or {})
        self.calls: list[tuple[str | None, str]] = []

    def computed_style(self, element: Tag, prop: str) -> str | None:
        self.calls.append((element.name, prop))
        element_id = element.get("id")
        if element_id and f"#{element_id}" in self.styles:
            value = self.styles[f"#{element_id}"].get(prop)
            if value is not None:
                return value
        return self.styles.get(element.name or "", {}).get(prop)


@pytest.fixture
def make_soup() -> Callable[[str], BeautifulSoup]:
    """Parse an HTML fragment with the stdlib-backed html.parser builder."""

    def _make(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    return _make


@pytest.fixture
def hello_world() -> Tag:
    """A <p> holding two adjacent text leaves, "Hello" and "World".

    html.parser merges adjacent text, so the leaves are appended by hand.
    """
    soup = BeautifulSoup("<p></p>", "html.parser")
    p = soup.p
    p.append(NavigableString("Hello"))
    p.append(NavigableString("World"))
    return p


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any developer .env file."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def fresh_settings_cache():
    """Reset the get_settings() cache around a test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_resolver() -> type[FakeStyleResolver]:
    """Factory for table-driven StyleResolver fakes."""
    return FakeStyleResolver
