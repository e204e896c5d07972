"""
Fixed text patterns applied to page fragments.

All wording of the source site lives here, so a change of layout or locale
only touches these constants.
"""

import logging
import re
from typing import Optional, Tuple

from opentelemetry import trace

from domain.errors import PatternMismatchError
from domain.number_parser import NumberParser

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)

CITY_TITLE_PATTERN = re.compile(r"(?P<name>\S.*?)\s+\((?P<code>[0-9]+)\)")
INSEE_PATTERN = re.compile(r"Statistiques INSEE\s*:\s*(?P<code>[0-9]+)")
SAMPLE_SIZE_PATTERN = re.compile(
    r"Notes obtenues sur (?P<count>[0-9][0-9\s]*?) évaluations?"
)


class TextPatternExtractor:
    """Pure matching rules over already-fetched page text."""

    def __init__(self, number_parser: Optional[NumberParser] = None) -> None:
        self.number_parser = number_parser or NumberParser()

    def city_title(
        self, text: str, page_url: Optional[str] = None
    ) -> Tuple[str, str]:
        """
        Extract the name and code from a ``"<name> (<code>)"`` heading.

        Raises:
            PatternMismatchError: If the text lacks the trailing code group
        """
        match = CITY_TITLE_PATTERN.fullmatch(text.strip())
        if not match:
            raise PatternMismatchError("city title", text, page_url=page_url)
        name, code = match.group("name"), match.group("code")
        logger.debug("Extracted city title: name=%s, code=%s", name, code)
        return name, code

    def insee_code(self, text: str, page_url: Optional[str] = None) -> str:
        """
        Extract the INSEE code from the statistics reference text.

        Raises:
            PatternMismatchError: If no INSEE reference is present
        """
        match = INSEE_PATTERN.search(text)
        if not match:
            raise PatternMismatchError("INSEE reference", text, page_url=page_url)
        return match.group("code")

    def sample_size(self, text: str) -> Optional[int]:
        """
        Extract the number of evaluations behind a city's ratings.

        Returns:
            The evaluation count, or None if the text does not mention one
        """
        with tracer.start_as_current_span("text.sample_size") as span:
            match = SAMPLE_SIZE_PATTERN.search(text)
            if not match:
                logger.debug("No evaluation count in text: %r", text)
                span.set_attribute("sample.found", False)
                return None

            count = self.number_parser.parse_int(match.group("count"))
            span.set_attribute("sample.found", True)
            span.set_attribute("sample.count", count)
            return count
