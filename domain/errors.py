"""
Exception hierarchy for scraping assumption violations.

Every extraction step makes assumptions about the structure of the pages it
reads. When one of them does not hold, the step raises one of the errors below
so the caller can decide whether it is fatal or recoverable.
"""

from typing import Any, Dict, Optional


class ScraperAssumptionError(Exception):
    """Base class for scraper assumption violations."""

    def __init__(
        self,
        message: str,
        page_url: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.page_url = page_url
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with URL and context lines."""
        parts = [self.message]
        if self.page_url:
            parts.append(f"URL: {self.page_url}")

        if self.context:
            parts.append("Context:")
            for key, value in self.context.items():
                parts.append(f"  {key}: {value}")

        return "\n".join(parts)


class FormatError(ScraperAssumptionError):
    """Raised when a locale-formatted number cannot be parsed."""

    def __init__(self, text: str, page_url: Optional[str] = None) -> None:
        self.text = text
        super().__init__(
            "Malformed locale number", page_url=page_url, context={"text": repr(text)}
        )


class PatternMismatchError(ScraperAssumptionError):
    """Raised when page text does not have the expected shape."""

    def __init__(
        self, pattern_name: str, text: str, page_url: Optional[str] = None
    ) -> None:
        self.pattern_name = pattern_name
        self.text = text
        super().__init__(
            f"Text does not match the {pattern_name} pattern",
            page_url=page_url,
            context={"text": repr(text)},
        )


class ElementNotFoundError(ScraperAssumptionError):
    """
    Raised when a bounded element lookup times out.

    Attributes:
        locator: The locator that was queried
        timeout: Seconds waited before giving up
    """

    def __init__(
        self,
        locator: Any,
        timeout: Optional[float] = None,
        page_url: Optional[str] = None,
        description: str = "Element not found",
    ) -> None:
        self.locator = locator
        self.timeout = timeout
        context: Dict[str, Any] = {"locator": locator}
        if timeout is not None:
            context["timeout"] = f"{timeout}s"
        super().__init__(description, page_url=page_url, context=context)


class RegionLinkNotFoundError(ElementNotFoundError):
    """Raised when the department index has no link for a region code."""

    def __init__(
        self,
        region_code: str,
        locator: Any,
        timeout: Optional[float] = None,
        page_url: Optional[str] = None,
    ) -> None:
        self.region_code = region_code
        super().__init__(
            locator,
            timeout=timeout,
            page_url=page_url,
            description=f"No department link for region {region_code}",
        )


class NavigationError(ScraperAssumptionError):
    """Raised when a page session cannot load the requested URL."""
