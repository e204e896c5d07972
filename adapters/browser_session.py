"""
Selenium adapter for the page session port.

Pages of the ratings site are rendered by JavaScript, so the crawler drives a
real Chrome instance. Every lookup is bounded: an element that does not mount
within the wait time raises ElementNotFoundError instead of hanging.
"""

import logging
import time
from typing import Any, List, Optional

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from domain.errors import ElementNotFoundError, NavigationError
from domain.page_session import Locator, PageElement
from infrastructure.telemetry import get_tracer

# Get logger for this module
logger = logging.getLogger(__name__)

STRATEGIES = {"css": By.CSS_SELECTOR, "xpath": By.XPATH}


def to_selenium(locator: Locator) -> tuple:
    """Translate a Locator into a Selenium ``(By, query)`` pair."""
    try:
        return STRATEGIES[locator.strategy], locator.query
    except KeyError:
        raise ValueError(f"Unsupported locator strategy: {locator.strategy}") from None


def create_chrome_driver(
    driver_path: str, proxy: Optional[str] = None, headless: bool = False
) -> WebDriver:
    """
    Create and configure a Chrome WebDriver instance.

    Args:
        driver_path: Path to the chromedriver executable
        proxy: Proxy server for all browser traffic, e.g. socks5://localhost:9050
        headless: Whether to run in headless mode

    Returns:
        Configured WebDriver instance
    """
    options = Options()
    if headless:
        options.add_argument("--headless=new")
    options.add_argument("start-maximized")
    options.add_argument("disable-infobars")
    options.add_argument("--disable-extensions")
    if proxy:
        options.add_argument(f"--proxy-server={proxy}")

    logger.debug("Starting chromedriver %s (proxy=%s)", driver_path, proxy)
    return webdriver.Chrome(service=Service(executable_path=driver_path), options=options)


class SeleniumPageSession:
    """Page session backed by a Selenium WebDriver."""

    def __init__(
        self,
        driver: WebDriver,
        element_wait: float = 5.0,
        render_wait: float = 3.0,
    ) -> None:
        self.driver = driver
        self.element_wait = element_wait
        self.render_wait = render_wait

    def __enter__(self) -> "SeleniumPageSession":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        self.close()
        return False

    @property
    def current_url(self) -> str:
        return self.driver.current_url

    def navigate(self, url: str) -> None:
        """
        Load a URL in the browser.

        Raises:
            NavigationError: If the browser cannot load the page
        """
        with get_tracer().start_as_current_span("session.navigate") as span:
            span.set_attribute("url", url)
            logger.debug("Navigating to %s", url)
            try:
                self.driver.get(url)
            except WebDriverException as e:
                span.set_attribute("error", str(e))
                raise NavigationError(
                    "Browser could not load page", page_url=url, context={"error": e.msg}
                ) from e

    def wait_for_render(self) -> None:
        """Wait for the document to be complete, then let scripts settle."""
        try:
            WebDriverWait(self.driver, self.element_wait).until(
                lambda d: d.execute_script("return document.readyState") == "complete"
            )
        except TimeoutException:
            logger.warning("Page load timeout on %s, proceeding anyway", self.current_url)
        if self.render_wait > 0:
            time.sleep(self.render_wait)

    def click(self, locator: Locator, timeout: Optional[float] = None) -> None:
        element = self._wait_for(EC.element_to_be_clickable, locator, timeout)
        logger.debug("Clicking %s", locator)
        element.click()

    def find_text(self, locator: Locator, timeout: Optional[float] = None) -> str:
        element = self._wait_for(EC.presence_of_element_located, locator, timeout)
        return element.text

    def find_attribute(
        self, locator: Locator, name: str, timeout: Optional[float] = None
    ) -> str:
        element = self._wait_for(EC.presence_of_element_located, locator, timeout)
        value = element.get_attribute(name)
        if value is None:
            raise ElementNotFoundError(
                locator,
                page_url=self.current_url,
                description=f"Element has no {name} attribute",
            )
        return value

    def find_all(
        self, locator: Locator, timeout: Optional[float] = None
    ) -> List[PageElement]:
        """Return every matching element, or an empty list after the wait."""
        try:
            return list(
                self._wait_for(EC.presence_of_all_elements_located, locator, timeout)
            )
        except ElementNotFoundError:
            return []

    def close(self) -> None:
        """Close the browser and release resources."""
        try:
            self.driver.quit()
        except WebDriverException as e:
            logger.warning("Error closing WebDriver: %s", e)

    def _wait_for(self, condition: Any, locator: Locator, timeout: Optional[float]) -> Any:
        """Poll a Selenium expected condition until it holds or the wait expires."""
        wait = self.element_wait if timeout is None else timeout
        with get_tracer().start_as_current_span("session.lookup") as span:
            span.set_attribute("locator", str(locator))
            try:
                return WebDriverWait(self.driver, wait).until(condition(to_selenium(locator)))
            except TimeoutException as e:
                span.set_attribute("element.found", False)
                raise ElementNotFoundError(
                    locator, timeout=wait, page_url=self.current_url
                ) from e
