"""
Page driver interface.

The session, navigator and provider only talk to the panel through this
narrow interface, so that they can run against a real browser
(PlaywrightPageDriver) or against a simulated panel in tests.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from playwright.sync_api import sync_playwright

from ..errors import translate_driver_errors

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT = {"width": 900, "height": 1366}


class PageDriver(ABC):
    """Abstract capability to drive a single browser page."""

    @abstractmethod
    def launch(
        self,
        headless: bool = True,
        user_agent: Optional[str] = None,
        viewport: Optional[Dict] = None,
    ) -> None:
        """Start the browser and open a page."""
        pass

    @property
    @abstractmethod
    def url(self) -> str:
        """URL of the current page."""
        pass

    @abstractmethod
    def goto(self, url: str) -> None:
        """Navigate to a URL."""
        pass

    @abstractmethod
    def wait_for_selector(self, selector: str, timeout: Optional[int] = None) -> None:
        """Wait until an element matching the selector is attached."""
        pass

    @abstractmethod
    def wait_for_network_idle(self) -> None:
        """Wait until the page has no in-flight network requests."""
        pass

    @abstractmethod
    def wait(self, milliseconds: int) -> None:
        """Pause for a fixed delay."""
        pass

    @abstractmethod
    def click(self, selector: str, navigate: bool = False) -> None:
        """Click the first matching element, optionally waiting for the navigation it triggers."""
        pass

    @abstractmethod
    def type(self, selector: str, text: str, delay: int = 0) -> None:
        """Type text into the first matching element, one keystroke at a time."""
        pass

    @abstractmethod
    def clear(self, selector: str) -> None:
        """Reset the value of the first matching field."""
        pass

    @abstractmethod
    def select_option(self, selector: str, value: str) -> None:
        """Choose an option of the first matching select element."""
        pass

    @abstractmethod
    def count(self, selector: str) -> int:
        """Number of elements matching the selector."""
        pass

    @abstractmethod
    def values(self, selector: str) -> List[str]:
        """Values of every element matching the selector, in document order."""
        pass

    @abstractmethod
    def screenshot(self, path: str) -> None:
        """Save a screenshot of the page."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the page and the browser behind it."""
        pass


class PlaywrightPageDriver(PageDriver):
    """Page driver backed by Playwright's synchronous Chromium API."""

    def __init__(self, default_timeout_ms: int = 30000, browser_args: Optional[List[str]] = None):
        self.default_timeout_ms = default_timeout_ms
        self.browser_args = browser_args or ["--no-sandbox", "--start-maximized"]
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None

    def launch(self, headless=True, user_agent=None, viewport=None):
        with translate_driver_errors("launch"):
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=headless, args=self.browser_args
            )
            context_options = {"viewport": viewport or DEFAULT_VIEWPORT}
            if user_agent:
                context_options["user_agent"] = user_agent
            self._context = self._browser.new_context(**context_options)
            self._page = self._context.new_page()
            self._page.set_default_timeout(self.default_timeout_ms)
            self._page.on("load", lambda page: logger.debug(f"page loaded `{page.url}`"))
            self._page.on("dialog", self._accept_dialog)
        logger.info(f"Chromium launched (headless={headless})")

    def _accept_dialog(self, dialog) -> None:
        logger.debug(f"accepting {dialog.type} dialog")
        dialog.accept()

    @property
    def url(self) -> str:
        return self._page.url if self._page else ""

    def goto(self, url):
        with translate_driver_errors("goto", url):
            self._page.goto(url)

    def wait_for_selector(self, selector, timeout=None):
        with translate_driver_errors("wait_for_selector", selector):
            self._page.wait_for_selector(selector, state="attached", timeout=timeout)

    def wait_for_network_idle(self):
        with translate_driver_errors("wait_for_network_idle"):
            self._page.wait_for_load_state("networkidle")

    def wait(self, milliseconds):
        self._page.wait_for_timeout(milliseconds)

    def click(self, selector, navigate=False):
        # DOM-level click: panel links are sometimes covered by overlays.
        with translate_driver_errors("click", selector):
            if navigate:
                with self._page.expect_navigation():
                    self._page.eval_on_selector(selector, "el => el.click()")
            else:
                self._page.eval_on_selector(selector, "el => el.click()")

    def type(self, selector, text, delay=0):
        with translate_driver_errors("type", selector):
            self._page.locator(selector).first.press_sequentially(text, delay=delay)

    def clear(self, selector):
        with translate_driver_errors("clear", selector):
            self._page.eval_on_selector(selector, "el => { el.value = ''; }")

    def select_option(self, selector, value):
        with translate_driver_errors("select_option", selector):
            self._page.locator(selector).first.select_option(value)

    def count(self, selector):
        with translate_driver_errors("count", selector):
            return len(self._page.query_selector_all(selector))

    def values(self, selector):
        with translate_driver_errors("values", selector):
            return self._page.eval_on_selector_all(
                selector, "elements => elements.map(element => element.value)"
            )

    def screenshot(self, path):
        with translate_driver_errors("screenshot"):
            self._page.screenshot(path=path)
        logger.debug(f"screenshot saved to {path}")

    def close(self):
        """Release the page, context, browser and Playwright, ignoring any that never started."""
        for name in ("_page", "_context", "_browser"):
            resource = getattr(self, name)
            if resource is not None:
                try:
                    resource.close()
                except Exception as e:
                    logger.warning(f"Failed to close {name.strip('_')}: {e}")
                setattr(self, name, None)
        if self._playwright is not None:
            try:
                self._playwright.stop()
            except Exception as e:
                logger.warning(f"Failed to stop Playwright: {e}")
            self._playwright = None
