"""
Application service driving the region → department → city traversal.

This module orchestrates the domain extractors over a single page session.
"""

import logging
from typing import List, Optional, Sequence

from domain.errors import (
    ElementNotFoundError,
    NavigationError,
    RegionLinkNotFoundError,
    ScraperAssumptionError,
)
from domain.extractors import CityExtractor, DepartmentExtractor
from domain.models import (
    PARIS_AND_SUBURBS,
    CityRecord,
    DepartmentRecord,
    ExtractionFailure,
    ResultSet,
)
from domain.page_session import Locator, PageSession
from infrastructure.config import DEFAULT_DEPARTMENT_INDEX_URL
from infrastructure.telemetry import get_tracer


def region_link(region_code: str) -> Locator:
    """Locator of the department index link whose text contains a region code."""
    return Locator.xpath(f"//*[@id=\"listedepts\"]/a[contains(text(),'{region_code}')]")


class TraversalEngine:
    """Service traversing the department index and collecting city ratings."""

    def __init__(
        self,
        session: PageSession,
        department_extractor: Optional[DepartmentExtractor] = None,
        city_extractor: Optional[CityExtractor] = None,
        index_url: str = DEFAULT_DEPARTMENT_INDEX_URL,
        region_codes: Sequence[str] = PARIS_AND_SUBURBS,
        isolate_failures: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.department_extractor = department_extractor or DepartmentExtractor()
        self.city_extractor = city_extractor or CityExtractor()
        self.index_url = index_url
        self.region_codes = tuple(region_codes)
        self.isolate_failures = isolate_failures
        self.logger = logger or logging.getLogger(__name__)
        self.failures: List[ExtractionFailure] = []

    def run(self) -> ResultSet:
        """
        Traverse every region code in order and build the result set.

        Regions without a link on the index are skipped. Any other
        structural error aborts the run unless failures are isolated.

        Returns:
            Tuple of DepartmentRecord in region order
        """
        self.failures = []
        departments: List[DepartmentRecord] = []

        with get_tracer().start_as_current_span("traversal.run") as span:
            span.set_attribute("traversal.regions", ",".join(self.region_codes))
            span.set_attribute("traversal.isolate_failures", self.isolate_failures)
            self.logger.info("Start scraping city ratings")

            for region_code in self.region_codes:
                try:
                    self._open_region(region_code)
                except RegionLinkNotFoundError as e:
                    self.logger.warning(
                        "Region %s skipped: no link on %s", region_code, e.page_url
                    )
                    continue

                department = self._scrape_department(region_code)
                if department is not None:
                    departments.append(department)

            span.set_attribute("traversal.departments", len(departments))
            span.set_attribute("traversal.failures", len(self.failures))
            self.logger.info(
                "Scraped %d departments, %d cities",
                len(departments),
                sum(len(d.cities) for d in departments),
            )
            return tuple(departments)

    # -------------------------------------------------------------------------
    # Private helper methods – one per navigation step of run
    # -------------------------------------------------------------------------

    def _open_region(self, region_code: str) -> None:
        """Load the department index and click the link of a region."""
        self.session.navigate(self.index_url)
        locator = region_link(region_code)
        try:
            self.session.click(locator)
        except ElementNotFoundError as e:
            raise RegionLinkNotFoundError(
                region_code, locator, timeout=e.timeout, page_url=self.index_url
            ) from e
        self.session.wait_for_render()

    def _scrape_department(self, region_code: str) -> Optional[DepartmentRecord]:
        """Extract the department currently displayed, then each of its cities."""
        with get_tracer().start_as_current_span("traversal.department") as span:
            span.set_attribute("region.code", region_code)
            try:
                listing = self.department_extractor.extract(self.session)
            except NavigationError:
                raise
            except ScraperAssumptionError as e:
                self._handle_failure(region_code, self.session.current_url, e)
                return None

            cities: List[CityRecord] = []
            for city_url in listing.city_links:
                city = self._scrape_city(region_code, city_url)
                if city is not None:
                    cities.append(city)

            span.set_attribute("department.code", listing.code)
            span.set_attribute("department.cities", len(cities))
            self.logger.info(
                "Department %s - %s: %d cities scraped",
                listing.code,
                listing.name,
                len(cities),
            )
            return DepartmentRecord(
                code=listing.code, name=listing.name, cities=tuple(cities)
            )

    def _scrape_city(self, region_code: str, city_url: str) -> Optional[CityRecord]:
        """Navigate to a city page and extract its record."""
        with get_tracer().start_as_current_span("traversal.city") as span:
            span.set_attribute("city.url", city_url)
            self.session.navigate(city_url)
            self.session.wait_for_render()
            try:
                city = self.city_extractor.extract(self.session)
            except NavigationError:
                raise
            except ScraperAssumptionError as e:
                self._handle_failure(region_code, city_url, e)
                return None

            self.logger.info(
                "City %s (%s): %d ratings", city.name, city.code, len(city.ratings)
            )
            return city

    def _handle_failure(
        self, region_code: str, url: str, error: ScraperAssumptionError
    ) -> None:
        """Record a structural failure when isolating, re-raise otherwise."""
        if not self.isolate_failures:
            raise error
        failure = ExtractionFailure(
            region_code=region_code,
            url=url,
            error_type=type(error).__name__,
            message=error.message,
        )
        self.failures.append(failure)
        self.logger.warning(
            "Extraction failed for %s (%s): %s", url, failure.error_type, error.message
        )
