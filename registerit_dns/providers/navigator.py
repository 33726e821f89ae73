"""
Navigation from the account dashboard to the Advanced DNS editor.

The panel has no deep link to the record table: every read or write has to
follow the same click path, and each click loads a new page.
"""

import logging
from typing import List, Optional, Tuple

from .page_driver import PageDriver
from .selectors import PanelSelectors, PanelUrls

logger = logging.getLogger(__name__)


class Navigator:
    """Drives the fixed click path for one domain."""

    def __init__(
        self,
        domain: str,
        urls: Optional[PanelUrls] = None,
        selectors: Optional[PanelSelectors] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.domain = domain
        self.urls = urls or PanelUrls()
        self.selectors = selectors or PanelSelectors()
        self.log = log or logger

    def steps(self) -> List[Tuple[str, str]]:
        """(description, selector) of each link on the way to the Advanced tab."""
        s = self.selectors
        return [
            (f"`{self.domain}` link", s.domain_link),
            ("`DOMAIN & DNS` link", s.domain_and_dns_link),
            ("`DNS configuration` link", s.dns_configuration_link),
            ("`Advanced` link", s.advanced_tab_link),
        ]

    def open_advanced_dns(self, driver: PageDriver) -> None:
        """Walk from the domain overview to the Advanced DNS surface."""
        overview_url = self.urls.overview_for(self.domain)
        self.log.debug(f"opening domain overview `{overview_url}`")
        driver.goto(overview_url)

        for description, selector in self.steps():
            driver.wait_for_selector(selector)
            self.log.debug(f"clicking {description}")
            driver.click(selector, navigate=True)

        self.log.info(f"Advanced DNS editor opened for {self.domain}")
