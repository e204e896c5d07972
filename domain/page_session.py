"""
Page session port.

The extractors read rendered pages through this interface only, so the same
domain logic runs against a live browser or against static HTML.
"""

from typing import List, NamedTuple, Optional, Protocol


class Locator(NamedTuple):
    """Structural query identifying an element on a page."""

    strategy: str
    query: str

    @classmethod
    def css(cls, query: str) -> "Locator":
        return cls("css", query)

    @classmethod
    def xpath(cls, query: str) -> "Locator":
        return cls("xpath", query)

    def __str__(self) -> str:
        return f"{self.strategy}={self.query}"


class PageElement(Protocol):
    """Element handle returned by ``PageSession.find_all``."""

    @property
    def text(self) -> str: ...

    def get_attribute(self, name: str) -> Optional[str]: ...


class PageSession(Protocol):
    """Single-owner handle on the page currently loaded in a session."""

    @property
    def current_url(self) -> str: ...

    def navigate(self, url: str) -> None: ...

    def wait_for_render(self) -> None: ...

    def click(self, locator: Locator, timeout: Optional[float] = None) -> None: ...

    def find_text(self, locator: Locator, timeout: Optional[float] = None) -> str: ...

    def find_attribute(
        self, locator: Locator, name: str, timeout: Optional[float] = None
    ) -> str: ...

    def find_all(
        self, locator: Locator, timeout: Optional[float] = None
    ) -> List[PageElement]: ...
