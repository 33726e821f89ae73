"""
Authenticated control panel session.

A PanelSession owns one page driver. It is initialized lazily on the first
operation: the browser is launched with a random identity, the cookie banner
is dismissed and the login form is submitted until the dashboard is reached
or the attempt budget is spent.
"""

import logging
import os
import tempfile
from enum import Enum
from typing import Dict, Optional

from ..errors import LoginExhaustedError, NavigationError, SessionClosedError
from ..utils.user_agents import random_user_agent
from .page_driver import DEFAULT_VIEWPORT, PageDriver
from .selectors import PanelSelectors, PanelUrls

logger = logging.getLogger(__name__)


class SessionState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    AUTHENTICATING = "authenticating"
    READY = "ready"
    CLOSED = "closed"


class PanelSession:
    """Owns the page driver and its lifecycle."""

    def __init__(
        self,
        driver: PageDriver,
        username: str,
        password: str,
        max_login_attempts: int = 0,
        headless: bool = True,
        urls: Optional[PanelUrls] = None,
        selectors: Optional[PanelSelectors] = None,
        keystroke_delay_ms: int = 100,
        login_settle_ms: int = 1000,
        cookie_banner_timeout_ms: int = 5000,
        screenshot_path: Optional[str] = None,
        viewport: Optional[Dict] = None,
        log: Optional[logging.Logger] = None,
    ):
        if max_login_attempts < 0:
            raise ValueError("max_login_attempts must be non-negative")

        self.driver = driver
        self.username = username
        self.password = password
        self.max_login_attempts = max_login_attempts
        self.headless = headless
        self.urls = urls or PanelUrls()
        self.selectors = selectors or PanelSelectors()
        self.keystroke_delay_ms = keystroke_delay_ms
        self.login_settle_ms = login_settle_ms
        self.cookie_banner_timeout_ms = cookie_banner_timeout_ms
        self.screenshot_path = screenshot_path or os.path.join(
            tempfile.gettempdir(), "screenshot.jpg"
        )
        self.viewport = viewport or DEFAULT_VIEWPORT
        self.log = log or logger

        self.state = SessionState.UNINITIALIZED
        self.login_attempts = 0
        self._launched = False

    @property
    def is_ready(self) -> bool:
        return self.state is SessionState.READY

    def ensure_ready(self) -> PageDriver:
        """Launch and authenticate once; later calls return the same driver."""
        if self.state is SessionState.READY:
            return self.driver
        if self.state is SessionState.CLOSED:
            raise SessionClosedError()

        self.state = SessionState.INITIALIZING
        self.log.info("Initializing control panel session")

        try:
            user_agent = random_user_agent()
            self._launched = True
            self.driver.launch(
                headless=self.headless, user_agent=user_agent, viewport=self.viewport
            )
            self.log.debug(f"setting useragent to `{user_agent}`")

            self.driver.goto(self.urls.welcome)
            self._dismiss_cookie_banner()
            self._login()
        except Exception:
            # A failed start leaves nothing running, so the session can be retried.
            self._release_driver()
            self.state = SessionState.UNINITIALIZED
            raise

        self.state = SessionState.READY
        return self.driver

    def _dismiss_cookie_banner(self) -> None:
        """Reject all cookies if the consent banner shows up; never fails."""
        selector = self.selectors.cookies_reject_button
        try:
            self.driver.wait_for_selector(selector, timeout=self.cookie_banner_timeout_ms)
            self.driver.click(selector)
            self.log.debug("clicked `reject all cookies` button")
        except NavigationError as e:
            self.log.debug(f"cookie banner not dismissed: {e}")

    def _login(self) -> None:
        self.state = SessionState.AUTHENTICATING
        self.login_attempts = 0
        # 0 allows a single attempt without retry
        limit = self.max_login_attempts or 1

        while True:
            self.login_attempts += 1
            self._attempt_login()

            if self.driver.url == self.urls.dashboard:
                break

            if self.login_attempts >= limit:
                self.log.error(f"Login failed after {self.login_attempts} attempts")
                raise LoginExhaustedError(self.login_attempts)

            self.log.warning(f"Login attempt {self.login_attempts} did not reach the dashboard")

        self.log.info(f"logged in after {self.login_attempts} attempt(s)")

    def _attempt_login(self) -> None:
        limit = self.max_login_attempts or 1
        self.log.debug(f"performing login attempt {self.login_attempts} of {limit}")
        s = self.selectors

        self.driver.wait_for_selector(s.login_username)
        self.driver.wait_for_selector(s.login_password)
        self.driver.clear(s.login_username)
        self.driver.type(s.login_username, self.username, delay=self.keystroke_delay_ms)
        self.driver.clear(s.login_password)
        self.driver.type(s.login_password, self.password, delay=self.keystroke_delay_ms)

        self.log.debug("clicking `login` button")
        self.driver.click(s.login_button)
        self.driver.wait(self.login_settle_ms)
        self.driver.screenshot(self.screenshot_path)
        self.driver.wait_for_network_idle()

    def close(self) -> None:
        """Release the browser. Safe to call more than once, or before any operation."""
        if self.state is SessionState.CLOSED:
            return
        self._release_driver()
        self.state = SessionState.CLOSED
        self.log.info("Control panel session closed")

    def _release_driver(self) -> None:
        if not self._launched:
            return
        try:
            self.driver.close()
        except Exception as e:
            self.log.warning(f"Failed to close browser: {e}")
        self._launched = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
