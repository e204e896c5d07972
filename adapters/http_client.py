import logging
import time
from typing import Dict, Optional, Tuple

import requests
from requests import Session
from requests.exceptions import ConnectionError, RequestException, Timeout

from domain.errors import NavigationError
from infrastructure.telemetry import get_tracer

# Get logger for this module
logger = logging.getLogger(__name__)


class HTTPClientAdapter:
    """Adapter fetching pages over plain HTTP, with retries and telemetry."""

    def __init__(
        self,
        timeout: int = 30,
        max_retries: int = 3,
        base_wait_time: int = 2,
        user_agent: str = "Mozilla/5.0 (compatible; VilleRatingsCrawler/1.0)",
        proxies: Optional[Dict[str, str]] = None,
        session: Optional[Session] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_wait_time = base_wait_time
        self.proxies = proxies
        self.session = session if session is not None else requests.Session()
        self.headers = {"User-Agent": user_agent, "Accept-Language": "fr-FR,fr;q=0.9"}

    def get(self, url: str) -> Tuple[str, int]:
        """
        Perform HTTP GET request and return the decoded body.

        Returns:
            Tuple of (content, status_code)

        Raises:
            NavigationError: If the server answers with an error status or
                every attempt fails
        """
        with get_tracer().start_as_current_span("http.get") as span:
            span.set_attribute("url", url)

            for attempt in range(self.max_retries + 1):
                try:
                    response = self.session.get(
                        url,
                        timeout=self.timeout,
                        headers=self.headers,
                        proxies=self.proxies,
                    )
                except (RequestException, ConnectionError, Timeout) as e:
                    if attempt < self.max_retries:
                        wait_time = (
                            0
                            if self.base_wait_time == 0
                            else self.base_wait_time**attempt
                        )
                        logger.debug(
                            "GET %s failed (%s), retrying in %ss", url, e, wait_time
                        )
                        time.sleep(wait_time)
                        continue
                    span.set_attribute("error", str(e))
                    raise NavigationError(
                        "HTTP request failed",
                        page_url=url,
                        context={"attempts": attempt + 1, "error": str(e)},
                    ) from e

                span.set_attributes(
                    {
                        "status_code": response.status_code,
                        "content_length": len(response.content),
                    }
                )
                if response.status_code >= 400:
                    raise NavigationError(
                        "HTTP error status",
                        page_url=url,
                        context={"status_code": response.status_code},
                    )
                if not response.encoding or response.encoding.lower() == "iso-8859-1":
                    response.encoding = response.apparent_encoding
                return (response.text, response.status_code)

        # Unreachable in normal flow; added for type checking
        return ("", 0)
