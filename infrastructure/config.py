"""
Runtime configuration.

Every tunable of the crawler is read once from environment variables at
process start; defaults match the public site and a local Tor daemon.
"""

import os
from dataclasses import dataclass

DEFAULT_DEPARTMENT_INDEX_URL = "https://www.ville-ideale.fr/villespardepts.php"
DEFAULT_TOR_PROXY = "socks5://localhost:9050"
DEFAULT_TOR_CHECK_URL = "http://check.torproject.org"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Settings:
    """Crawler settings."""

    department_index_url: str = DEFAULT_DEPARTMENT_INDEX_URL
    render_wait_seconds: float = 3.0
    element_wait_seconds: float = 5.0
    tor_proxy: str = DEFAULT_TOR_PROXY
    tor_check_url: str = DEFAULT_TOR_CHECK_URL
    tor_startup_seconds: float = 3.0
    browser_headless: bool = False
    http_timeout: int = 30
    http_max_retries: int = 3

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        return cls(
            department_index_url=os.getenv(
                "DEPARTMENT_INDEX_URL", DEFAULT_DEPARTMENT_INDEX_URL
            ),
            render_wait_seconds=_env_float("RENDER_WAIT_SECONDS", 3.0),
            element_wait_seconds=_env_float("ELEMENT_WAIT_SECONDS", 5.0),
            tor_proxy=os.getenv("TOR_PROXY", DEFAULT_TOR_PROXY),
            tor_check_url=os.getenv("TOR_CHECK_URL", DEFAULT_TOR_CHECK_URL),
            tor_startup_seconds=_env_float("TOR_STARTUP_SECONDS", 3.0),
            browser_headless=_env_bool("BROWSER_HEADLESS", False),
            http_timeout=_env_int("HTTP_TIMEOUT", 30),
            http_max_retries=_env_int("HTTP_MAX_RETRIES", 3),
        )
