"""
Launch of the external processes the crawler depends on.

The Tor daemon anonymizes browser traffic and chromedriver controls the
browser. Both are released on exit whatever the outcome of the crawl.
"""

import logging
import subprocess
import time
from typing import Optional

from adapters.browser_session import SeleniumPageSession, create_chrome_driver
from infrastructure.config import Settings

# Get logger for this module
logger = logging.getLogger(__name__)


class TorDaemon:
    """Handle on a Tor daemon subprocess."""

    def __init__(self, executable: str) -> None:
        self.executable = executable
        self.process: Optional[subprocess.Popen] = None

    def start(self) -> "TorDaemon":
        """
        Start the daemon.

        Raises:
            OSError: If the executable cannot be run
        """
        logger.info("Starting Tor daemon: %s", self.executable)
        self.process = subprocess.Popen(
            [self.executable],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        return self

    @property
    def running(self) -> bool:
        return self.process is not None and self.process.poll() is None

    def terminate(self, timeout: float = 10.0) -> None:
        """Stop the daemon, killing it if it does not exit in time."""
        if not self.running:
            return
        assert self.process is not None
        logger.info("Stopping Tor daemon (pid %d)", self.process.pid)
        self.process.terminate()
        try:
            self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("Tor daemon did not stop in %ss, killing it", timeout)
            self.process.kill()
            self.process.wait()


class ProcessLauncher:
    """Starts the Tor daemon and a browser session routed through it."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def start_daemon(self, executable: str) -> TorDaemon:
        daemon = TorDaemon(executable).start()
        if self.settings.tor_startup_seconds > 0:
            time.sleep(self.settings.tor_startup_seconds)
        return daemon

    def open_session(self, driver_path: str) -> SeleniumPageSession:
        """
        Open a Chrome session proxied through Tor.

        The session first loads the Tor check page so the circuit is up before
        the crawl starts.
        """
        driver = create_chrome_driver(
            driver_path,
            proxy=self.settings.tor_proxy,
            headless=self.settings.browser_headless,
        )
        session = SeleniumPageSession(
            driver,
            element_wait=self.settings.element_wait_seconds,
            render_wait=self.settings.render_wait_seconds,
        )
        try:
            session.navigate(self.settings.tor_check_url)
            session.wait_for_render()
        except Exception:
            session.close()
            raise
        return session
