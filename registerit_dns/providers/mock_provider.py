"""
Mock DNS provider for testing and demonstration.

SimulatedPanelPage is an in-memory model of the register.it control panel:
its login form, the click path to the Advanced DNS page, the record table
and the apply/submit dialogs. MockDNSProvider runs the real provider logic
against it, so no browser or account is needed.
"""

import logging
import re
from typing import Dict, List, Optional

from ..core.models import RecordType
from ..errors import NavigationError, NavigationTimeoutError, SelectorTimeoutError
from .page_driver import PageDriver
from .register_it_provider import RegisterItProvider
from .selectors import PanelSelectors, PanelUrls

logger = logging.getLogger(__name__)

ROW_SELECTOR = re.compile(r"^tr\[name=recordDNS_(-?\d+)\](?: (.+))?$")

CELL_FIELDS = {
    "input.recordName": "name",
    "input.recordTTL": "ttl",
    "select.recordType": "type",
    "textarea.recordValue": "value",
}
REMOVE_LINK = "td.col-actions a.recordRemove"

# page name -> page reached by clicking the link shown on it
CLICK_PATH = {
    "overview": "domain",
    "domain": "domain_dns",
    "domain_dns": "dns_config",
    "dns_config": "advanced",
}


class SimulatedPanelPage(PageDriver):
    """Scripted stand-in for a browser page on the control panel."""

    def __init__(
        self,
        records: Optional[List[Dict]] = None,
        username: str = "mock",
        password: str = "mock",
        domain: str = "example.com",
        failed_logins: Optional[int] = 0,
        show_cookie_banner: bool = True,
        urls: Optional[PanelUrls] = None,
        selectors: Optional[PanelSelectors] = None,
    ):
        """
        Args:
            records: Initial rows of the record table
            failed_logins: Number of login submissions rejected before one
                succeeds; None rejects every submission
        """
        self.records = [self._row(record) for record in records or []]
        self.username = username
        self.password = password
        self.domain = domain
        self.failed_logins = failed_logins
        self.cookie_banner = show_cookie_banner
        self.urls = urls or PanelUrls()
        self.selectors = selectors or PanelSelectors()
        self.type_options = [record_type.value for record_type in RecordType]

        self.launched = False
        self.closed = False
        self.launch_options: Dict = {}
        self.logged_in = False
        self.login_attempts = 0
        self.submitted_credentials: List[tuple] = []
        self.fields: Dict[str, str] = {}
        self.visited: List[str] = []
        self.clicks: List[str] = []
        self.screenshots: List[str] = []
        self.selector_timeouts: List[tuple] = []
        self.waited_ms = 0
        self.commits = 0

        self._page = "blank"
        self._url = "about:blank"
        self._draft: List[Dict[str, str]] = []
        self._modal: Optional[str] = None
        self._applied = False

    @staticmethod
    def _row(record: Dict) -> Dict[str, str]:
        return {key: str(record.get(key, "")) for key in ("name", "ttl", "type", "value")}

    def _page_url(self, page: str) -> str:
        if page == "welcome":
            return self.urls.welcome
        if page == "dashboard":
            return self.urls.dashboard
        if page == "overview":
            return self.urls.overview_for(self.domain)
        return f"{self.urls.dashboard}{page}.html?domain={self.domain}"

    def _load(self, page: str) -> None:
        self._page = page
        self._url = self._page_url(page)
        self._modal = None
        self._applied = False
        self._draft = [dict(row) for row in self.records] if page == "advanced" else []
        if page == "welcome":
            self.fields = {}
        self.visited.append(self._url)
        logger.debug(f"simulated page loaded `{self._url}`")

    def _static_selectors(self) -> List[str]:
        s = self.selectors
        present = []
        if self._page == "welcome":
            present += [s.login_username, s.login_password, s.login_button]
        if self._page in ("welcome", "dashboard") and self.cookie_banner:
            present.append(s.cookies_reject_button)
        link = {
            "overview": s.domain_link,
            "domain": s.domain_and_dns_link,
            "domain_dns": s.dns_configuration_link,
            "dns_config": s.advanced_tab_link,
        }.get(self._page)
        if link:
            present.append(link)
        if self._page == "advanced":
            present += [s.add_record_button, s.submit_button]
            if self._modal:
                present.append(s.modal_apply_link)
        return present

    def _row_target(self, selector: str):
        """(row index, cell) addressed by a per-row selector, or None."""
        if self._page != "advanced":
            return None
        match = ROW_SELECTOR.match(selector)
        if not match:
            return None
        index, cell = int(match.group(1)), match.group(2)
        if not 0 <= index < len(self._draft):
            return None
        if cell is not None and cell not in CELL_FIELDS and cell != REMOVE_LINK:
            return None
        return index, cell

    def _exists(self, selector: str) -> bool:
        return selector in self._static_selectors() or self._row_target(selector) is not None

    def _require(self, selector: str, action: str) -> None:
        if not self.launched or self.closed:
            raise NavigationError(f"Page is not open for {action}", action=action, selector=selector)
        if not self._exists(selector):
            raise NavigationError(
                f"No element matches `{selector}` for {action}", action=action, selector=selector
            )

    def _cell(self, selector: str):
        target = self._row_target(selector)
        if target is None or target[1] not in CELL_FIELDS:
            return None
        return target[0], CELL_FIELDS[target[1]]

    def launch(self, headless=True, user_agent=None, viewport=None):
        self.launched = True
        self.launch_options = {"headless": headless, "user_agent": user_agent, "viewport": viewport}

    @property
    def url(self) -> str:
        return self._url

    def goto(self, url):
        if not self.launched or self.closed:
            raise NavigationError("Page is not open for goto", action="goto", selector=url)
        if url == self.urls.welcome:
            self._load("dashboard" if self.logged_in else "welcome")
        elif url == self.urls.overview_for(self.domain):
            self._load("overview" if self.logged_in else "welcome")
        else:
            self._load("not_found")

    def wait_for_selector(self, selector, timeout=None):
        if not self._exists(selector):
            self.selector_timeouts.append((selector, timeout))
            raise SelectorTimeoutError(
                f"Timed out waiting for `{selector}` during wait_for_selector",
                action="wait_for_selector",
                selector=selector,
            )

    def wait_for_network_idle(self):
        pass

    def wait(self, milliseconds):
        self.waited_ms += milliseconds

    def click(self, selector, navigate=False):
        self._require(selector, "click")
        self.clicks.append(selector)
        s = self.selectors
        pages_loaded = len(self.visited)

        target = self._row_target(selector)
        if selector == s.cookies_reject_button:
            self.cookie_banner = False
        elif selector == s.login_button:
            self._submit_login()
        elif self._page in CLICK_PATH and selector in self._static_selectors():
            self._load(CLICK_PATH[self._page])
        elif selector == s.add_record_button:
            self._draft.append(self._row({}))
            self._modal = "edit"
        elif target is not None and target[1] == REMOVE_LINK:
            del self._draft[target[0]]
            self._modal = "edit"
        elif selector == s.modal_apply_link:
            self._apply_modal()
        elif selector == s.submit_button and self._applied:
            self._modal = "commit"
            self._applied = False

        if navigate and len(self.visited) == pages_loaded:
            raise NavigationTimeoutError(
                f"Timed out waiting for navigation after clicking `{selector}`",
                action="click",
                selector=selector,
            )

    def _submit_login(self) -> None:
        s = self.selectors
        self.login_attempts += 1
        credentials = (self.fields.get(s.login_username, ""), self.fields.get(s.login_password, ""))
        self.submitted_credentials.append(credentials)

        accepted = (
            credentials == (self.username, self.password)
            and self.failed_logins is not None
            and self.login_attempts > self.failed_logins
        )
        if accepted:
            self.logged_in = True
            self._load("dashboard")
        else:
            self._load("welcome")

    def _apply_modal(self) -> None:
        if self._modal == "edit":
            self._modal = None
            self._applied = True
        elif self._modal == "commit":
            self.records = [dict(row) for row in self._draft]
            self.commits += 1
            self._load("advanced")

    def type(self, selector, text, delay=0):
        self._require(selector, "type")
        cell = self._cell(selector)
        if cell is not None:
            index, field = cell
            self._draft[index][field] += text
            self._modal = "edit"
        else:
            self.fields[selector] = self.fields.get(selector, "") + text

    def clear(self, selector):
        self._require(selector, "clear")
        cell = self._cell(selector)
        if cell is not None:
            index, field = cell
            self._draft[index][field] = ""
            self._modal = "edit"
        else:
            self.fields[selector] = ""

    def select_option(self, selector, value):
        self._require(selector, "select_option")
        cell = self._cell(selector)
        if cell is None or cell[1] != "type":
            raise NavigationError(
                f"`{selector}` is not a select element", action="select_option", selector=selector
            )
        if value not in self.type_options:
            raise NavigationError(
                f"Option '{value}' not available in `{selector}`",
                action="select_option",
                selector=selector,
            )
        self._draft[cell[0]]["type"] = value
        self._modal = "edit"

    def count(self, selector):
        s = self.selectors
        if self._page == "advanced" and selector in (s.record_rows, s.record_row_count):
            return len(self._draft)
        return 0

    def values(self, selector):
        s = self.selectors
        columns = {
            s.record_names: "name",
            s.record_ttls: "ttl",
            s.record_types: "type",
            s.record_values: "value",
        }
        if self._page != "advanced" or selector not in columns:
            return []
        return [row[columns[selector]] for row in self._draft]

    def screenshot(self, path):
        self.screenshots.append(path)

    def close(self):
        self.closed = True


class MockDNSProvider(RegisterItProvider):
    """register.it provider running against a simulated control panel."""

    def __init__(self, config: Dict = None):
        """Initialize mock provider."""
        config = config or {}
        username = config.get("username") or "mock"
        password = config.get("password") or "mock"
        domain = config.get("domain") or "example.com"

        self.page = SimulatedPanelPage(
            records=config.get("records"),
            username=username,
            password=password,
            domain=domain,
            failed_logins=config.get("failed_logins", 0),
        )
        super().__init__(
            username,
            password,
            domain,
            max_login_attempts=int(config.get("max_login_attempts", 0)),
            driver=self.page,
            record_probe_timeout_ms=int(config.get("record_probe_timeout_ms", 1000)),
            settle_delay_ms=int(config.get("settle_delay_ms", 0)),
            keystroke_delay_ms=0,
            login_settle_ms=0,
        )
        logger.info("Mock DNS provider initialized")
