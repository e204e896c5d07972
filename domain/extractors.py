"""
Domain logic for extracting department and city data from rendered pages.

This module contains the core business logic: which elements to read on a page,
how to interpret their text, and when a city's ratings are considered valid.
"""

import logging
from typing import Dict, Optional
from urllib.parse import urljoin

from opentelemetry import trace

from domain.errors import ElementNotFoundError, PatternMismatchError
from domain.models import CityRecord, DepartmentListing, RatingCategory
from domain.number_parser import NumberParser
from domain.page_session import Locator, PageSession
from domain.text_patterns import TextPatternExtractor

# Get tracer for this module
tracer = trace.get_tracer(__name__)

# Minimum number of evaluations for ratings to be kept
SAMPLE_THRESHOLD = 20

DEPARTMENT_TITLE = Locator.css("#titredept")
DEPARTMENT_CITY_LINKS = Locator.css("#depart > p > a")
DEPARTMENT_TITLE_DELIMITER = " - "

CITY_HEADING = Locator.xpath('/html/body/div/div[@id="colleft"]/h1')
CITY_STATISTICS_REFERENCE = Locator.xpath('//*[@id="info"]/p[2]/a')
CITY_SAMPLE_COUNT = Locator.xpath('//*[@id="nobt"]/a')


def rating_cell(category: RatingCategory) -> Locator:
    """Locator of the value cell in the ratings table row of a category."""
    return Locator.xpath(
        f'//*[@id="tablonotes"]/tbody/tr[th/text()="{category.label}"]/td'
    )


class CityExtractor:
    """Extract a CityRecord from a rendered city page."""

    def __init__(
        self,
        number_parser: Optional[NumberParser] = None,
        patterns: Optional[TextPatternExtractor] = None,
        sample_threshold: int = SAMPLE_THRESHOLD,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.number_parser = number_parser or NumberParser()
        self.patterns = patterns or TextPatternExtractor(self.number_parser)
        self.sample_threshold = sample_threshold
        self.logger = logger or logging.getLogger(__name__)

    def extract(self, session: PageSession) -> CityRecord:
        """
        Build a CityRecord from the page currently loaded in the session.

        Args:
            session: Page session positioned on a city page

        Returns:
            The city record, with either all nine ratings or none

        Raises:
            ElementNotFoundError: If the heading, statistics reference or a
                rating cell is missing
            PatternMismatchError: If the heading or statistics reference text
                has an unexpected shape
            FormatError: If a rating value is malformed
        """
        with tracer.start_as_current_span("city.extract") as span:
            page_url = session.current_url
            span.set_attribute("page.url", page_url)

            heading = session.find_text(CITY_HEADING)
            name, code = self.patterns.city_title(heading, page_url=page_url)
            span.set_attribute("city.code", code)

            reference = session.find_text(CITY_STATISTICS_REFERENCE)
            insee_code = self.patterns.insee_code(reference, page_url=page_url)

            ratings = self._extract_ratings(session, code)
            span.set_attribute("city.ratings", len(ratings))

            city = CityRecord(code=code, name=name, insee_code=insee_code, ratings=ratings)
            self.logger.debug("Extracted city: %s", city)
            return city

    def _extract_ratings(
        self, session: PageSession, city_code: str
    ) -> Dict[RatingCategory, float]:
        """Read every category rating, or none if the sample is missing or too small."""
        try:
            sample_text = session.find_text(CITY_SAMPLE_COUNT)
        except ElementNotFoundError:
            self.logger.info("City %s has no evaluations", city_code)
            return {}

        sample_size = self.patterns.sample_size(sample_text)
        if sample_size is None:
            self.logger.info("City %s has no evaluation count", city_code)
            return {}
        if sample_size < self.sample_threshold:
            self.logger.info(
                "City %s has %d evaluations (< %d), ratings ignored",
                city_code,
                sample_size,
                self.sample_threshold,
            )
            return {}

        ratings = {}
        for category in RatingCategory:
            text = session.find_text(rating_cell(category))
            ratings[category] = self.number_parser.parse(text)
        self.logger.debug("City %s ratings: %s", city_code, ratings)
        return ratings


class DepartmentExtractor:
    """Extract the identity and city links of a rendered department page."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def extract(self, session: PageSession) -> DepartmentListing:
        """
        Read the department title and its ordered city links.

        Raises:
            ElementNotFoundError: If the title is missing
            PatternMismatchError: If the title has no code delimiter
        """
        with tracer.start_as_current_span("department.extract") as span:
            page_url = session.current_url
            span.set_attribute("page.url", page_url)

            title = session.find_text(DEPARTMENT_TITLE)
            code, delimiter, name = title.strip().partition(DEPARTMENT_TITLE_DELIMITER)
            if not delimiter or not code:
                raise PatternMismatchError("department title", title, page_url=page_url)

            links = []
            for element in session.find_all(DEPARTMENT_CITY_LINKS):
                href = element.get_attribute("href")
                if not href:
                    self.logger.warning(
                        "City link without href on %s: %r", page_url, element.text
                    )
                    continue
                links.append(urljoin(page_url, href))

            span.set_attribute("department.code", code)
            span.set_attribute("department.cities", len(links))
            self.logger.info(
                "Department %s (%s) lists %d cities", code, name, len(links)
            )
            return DepartmentListing(code=code, name=name, city_links=tuple(links))
