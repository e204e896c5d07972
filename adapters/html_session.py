"""
Page session over static HTML documents.

Used to extract records from saved pages or from pages fetched without a
browser. XPath locators are evaluated with lxml and CSS locators with
BeautifulSoup, over the same document.
"""

import logging
from typing import Dict, List, Mapping, Optional
from urllib.parse import urljoin

import lxml.html
from bs4 import BeautifulSoup, Tag
from lxml import etree

from adapters.http_client import HTTPClientAdapter
from domain.errors import ElementNotFoundError, NavigationError
from domain.page_session import Locator, PageElement

# Get logger for this module
logger = logging.getLogger(__name__)


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace the way a browser renders text."""
    return " ".join(text.split())


class StaticElement:
    """Snapshot of an element: its rendered text and attributes."""

    def __init__(self, text: str, attributes: Mapping[str, str]) -> None:
        self._text = text
        self.attributes = dict(attributes)

    @property
    def text(self) -> str:
        return self._text

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def __repr__(self) -> str:
        return f"StaticElement(text={self._text!r})"


class StaticHtmlSession:
    """Page session reading preloaded pages, falling back to plain HTTP."""

    def __init__(
        self,
        pages: Optional[Mapping[str, str]] = None,
        http_client: Optional[HTTPClientAdapter] = None,
    ) -> None:
        self.pages: Dict[str, str] = dict(pages or {})
        self.http_client = http_client
        self.history: List[str] = []
        self._url = "about:blank"
        self._tree: Optional[etree._Element] = None
        self._soup: Optional[BeautifulSoup] = None

    @property
    def current_url(self) -> str:
        return self._url

    def load_html(self, html: str, url: str) -> None:
        """Make a document the current page."""
        self._tree = lxml.html.document_fromstring(html)
        self._soup = BeautifulSoup(html, "lxml")
        self._url = url
        self.history.append(url)
        logger.debug("Loaded %s (%d chars)", url, len(html))

    def navigate(self, url: str) -> None:
        """
        Load a preloaded page, or fetch it over HTTP if a client is configured.

        Raises:
            NavigationError: If the page is neither preloaded nor fetchable
        """
        html = self.pages.get(url)
        fetchable = url.startswith(("http://", "https://"))
        if html is None and self.http_client is not None and fetchable:
            html, _ = self.http_client.get(url)
        if html is None:
            raise NavigationError("Page not available", page_url=url)
        self.load_html(html, url)

    def wait_for_render(self) -> None:
        """Static documents are rendered as soon as they are loaded."""

    def close(self) -> None:
        """Drop the current document."""
        self._tree = None
        self._soup = None

    def click(self, locator: Locator, timeout: Optional[float] = None) -> None:
        """Follow the href of the first element matching the locator."""
        elements = self._select(locator)
        href = elements[0].get_attribute("href") if elements else None
        if not href:
            raise ElementNotFoundError(
                locator, page_url=self._url, description="No link to follow"
            )
        self.navigate(urljoin(self._url, href))

    def find_text(self, locator: Locator, timeout: Optional[float] = None) -> str:
        elements = self._select(locator)
        if not elements:
            raise ElementNotFoundError(locator, page_url=self._url)
        return elements[0].text

    def find_attribute(
        self, locator: Locator, name: str, timeout: Optional[float] = None
    ) -> str:
        elements = self._select(locator)
        value = elements[0].get_attribute(name) if elements else None
        if value is None:
            raise ElementNotFoundError(
                locator,
                page_url=self._url,
                description=f"No element with a {name} attribute",
            )
        return value

    def find_all(
        self, locator: Locator, timeout: Optional[float] = None
    ) -> List[PageElement]:
        return list(self._select(locator))

    def _select(self, locator: Locator) -> List[StaticElement]:
        """Evaluate a locator against the current document."""
        if self._tree is None or self._soup is None:
            raise NavigationError("No page loaded", page_url=self._url)

        if locator.strategy == "xpath":
            results = self._tree.xpath(locator.query)
            return [self._from_lxml(node) for node in results]
        if locator.strategy == "css":
            return [self._from_soup(tag) for tag in self._soup.select(locator.query)]
        raise ValueError(f"Unsupported locator strategy: {locator.strategy}")

    @staticmethod
    def _from_lxml(node: object) -> StaticElement:
        if isinstance(node, etree._Element):
            return StaticElement(
                collapse_whitespace(node.text_content()), dict(node.attrib)
            )
        # Text and attribute results
        return StaticElement(collapse_whitespace(str(node)), {})

    @staticmethod
    def _from_soup(tag: Tag) -> StaticElement:
        attributes = {
            name: " ".join(value) if isinstance(value, list) else value
            for name, value in tag.attrs.items()
        }
        return StaticElement(collapse_whitespace(tag.get_text()), attributes)
