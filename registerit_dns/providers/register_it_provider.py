"""
register.it DNS provider implementation.

Reads and edits DNS records through the Advanced DNS page of the register.it
control panel. Every operation re-walks the navigation path, so record ids
are only valid until the next operation re-renders the table.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

from ..core.models import DnsRecord, ExistingDnsRecord, ListingSnapshot
from ..errors import NavigationError, RecordNotFoundError, SelectorTimeoutError
from .base_provider import DNSProvider, RecordRef
from .navigator import Navigator
from .page_driver import PageDriver, PlaywrightPageDriver
from .selectors import PanelSelectors, PanelUrls
from .session import PanelSession

logger = logging.getLogger(__name__)


class CommitStage(Enum):
    """Progress of the apply/submit/apply sequence that saves the record table."""

    EDITING = "editing"
    AWAITING_APPLY_DIALOG = "awaiting apply dialog"
    APPLIED = "applied"
    AWAITING_SUBMIT = "awaiting submit"
    SUBMITTED = "submitted"
    AWAITING_FINAL_APPLY_DIALOG = "awaiting final apply dialog"
    COMMITTED = "committed"


class RegisterItProvider(DNSProvider):
    """DNS provider driving the register.it control panel through a page driver."""

    def __init__(
        self,
        username: str,
        password: str,
        domain: str,
        max_login_attempts: int = 0,
        headless: bool = True,
        driver: Optional[PageDriver] = None,
        record_probe_timeout_ms: int = 1000,
        settle_delay_ms: int = 1000,
        urls: Optional[PanelUrls] = None,
        selectors: Optional[PanelSelectors] = None,
        log: Optional[logging.Logger] = None,
        **session_options,
    ):
        self.domain = domain
        self.urls = urls or PanelUrls()
        self.selectors = selectors or PanelSelectors()
        self.record_probe_timeout_ms = record_probe_timeout_ms
        self.settle_delay_ms = settle_delay_ms
        self.log = log or logger

        self.session = PanelSession(
            driver or PlaywrightPageDriver(),
            username,
            password,
            max_login_attempts=max_login_attempts,
            headless=headless,
            urls=self.urls,
            selectors=self.selectors,
            log=self.log,
            **session_options,
        )
        self.navigator = Navigator(
            domain, urls=self.urls, selectors=self.selectors, log=self.log
        )
        self.commit_stage: Optional[CommitStage] = None
        self._generation = 0

        self.log.info(f"register.it provider initialized for domain {domain}")

    @classmethod
    def from_config(cls, config: Dict, driver: Optional[PageDriver] = None) -> "RegisterItProvider":
        """Build a provider from the `dns_providers.registerit` config section."""
        session_options = {}
        for key in ("keystroke_delay_ms", "login_settle_ms", "cookie_banner_timeout_ms", "screenshot_path", "viewport"):
            if config.get(key) is not None:
                session_options[key] = config[key]

        if driver is None:
            driver = PlaywrightPageDriver(
                default_timeout_ms=int(config.get("default_timeout_ms", 30000))
            )

        return cls(
            config.get("username", ""),
            config.get("password", ""),
            config.get("domain", ""),
            max_login_attempts=int(config.get("max_login_attempts", 0)),
            headless=bool(config.get("headless", True)),
            driver=driver,
            record_probe_timeout_ms=int(config.get("record_probe_timeout_ms", 1000)),
            settle_delay_ms=int(config.get("settle_delay_ms", 1000)),
            **session_options,
        )

    @property
    def snapshot(self) -> ListingSnapshot:
        """Token of the most recent traversal of the record table."""
        return ListingSnapshot(self.domain, self._generation)

    def _open_record_table(self) -> PageDriver:
        driver = self.session.ensure_ready()
        self.navigator.open_advanced_dns(driver)
        self._generation += 1
        return driver

    def list_records(self) -> List[ExistingDnsRecord]:
        """Get all DNS records from the Advanced DNS table."""
        driver = self._open_record_table()
        s = self.selectors

        names = driver.values(s.record_names)
        ttls = driver.values(s.record_ttls)
        types = driver.values(s.record_types)
        values = driver.values(s.record_values)

        if not len(names) == len(ttls) == len(types) == len(values):
            self.log.error("Record table columns have uneven lengths")
            raise NavigationError(
                f"Record table columns have uneven lengths: {len(names)} names, "
                f"{len(ttls)} ttls, {len(types)} types, {len(values)} values",
                action="values",
                selector=s.record_rows,
            )

        snapshot = self.snapshot
        records = []
        for index, (name, ttl, record_type, value) in enumerate(
            zip(names, ttls, types, values), start=1
        ):
            try:
                record = ExistingDnsRecord(
                    name=name, ttl=ttl, type=record_type, value=value, id=index, snapshot=snapshot
                )
            except ValueError as e:
                raise NavigationError(
                    f"Unreadable record at position {index}: {e}",
                    action="values",
                    selector=s.row_ttl(index),
                ) from e
            records.append(record)

        self.log.info(f"Retrieved {len(records)} records for {self.domain}")
        return records

    def create_record(self, record: DnsRecord) -> ExistingDnsRecord:
        """Append a row to the record table and save it."""
        driver = self._open_record_table()
        s = self.selectors

        driver.wait_for_selector(s.add_record_button)
        self.log.debug("clicking `add` link")
        driver.click(s.add_record_button)
        record_id = driver.count(s.record_row_count)

        self._fill_row(driver, record_id, record, clear_first=False)
        self._commit(driver)

        self.log.info(f"Created record {record.name} {record.type} -> {record.value} (id {record_id})")
        return ExistingDnsRecord.from_record(record_id, record, self.snapshot)

    def update_record(self, record_id: RecordRef, record: DnsRecord) -> ExistingDnsRecord:
        """Overwrite the four fields of the row at `record_id` and save it."""
        position = self._position(record_id)
        driver = self._open_record_table()

        self._probe_row(driver, self.selectors.row_name(position), position)
        self._fill_row(driver, position, record, clear_first=True)
        self._commit(driver)

        self.log.info(f"Updated record {position}: {record.name} {record.type} -> {record.value}")
        return ExistingDnsRecord.from_record(position, record, self.snapshot)

    def delete_record(self, record_id: RecordRef) -> None:
        """Remove the row at `record_id` and save the table."""
        position = self._position(record_id)
        driver = self._open_record_table()
        remove_link = self.selectors.row_remove_link(position)

        self._probe_row(driver, remove_link, position)
        self.log.debug("clicking `remove` link")
        driver.click(remove_link)
        self._commit(driver)

        self.log.info(f"Deleted record {position}")

    def _position(self, record_id: RecordRef) -> int:
        """Resolve a record reference to a 1-based row position."""
        if isinstance(record_id, ExistingDnsRecord):
            if record_id.snapshot is not None and record_id.snapshot.is_older_than(self.snapshot):
                self.log.warning(
                    f"Record {record_id.id} was listed before the table was last re-rendered, "
                    "its positional id may be stale"
                )
            record_id = record_id.id

        try:
            position = int(record_id)
        except (TypeError, ValueError):
            raise RecordNotFoundError(record_id)
        if position < 1:
            raise RecordNotFoundError(record_id)
        return position

    def _probe_row(self, driver: PageDriver, selector: str, position: int) -> None:
        """A short wait on the row; a timeout here means the row does not exist."""
        try:
            driver.wait_for_selector(selector, timeout=self.record_probe_timeout_ms)
        except SelectorTimeoutError:
            self.log.error(f"No DNS record at position {position}")
            raise RecordNotFoundError(position)

    def _fill_row(self, driver: PageDriver, position: int, record: DnsRecord, clear_first: bool) -> None:
        s = self.selectors
        text_fields = [
            ("name", s.row_name(position), record.name),
            ("ttl", s.row_ttl(position), str(record.ttl)),
        ]
        for label, selector, value in text_fields:
            if clear_first:
                driver.clear(selector)
            self.log.debug(f"updating `{label}` value")
            driver.type(selector, value)

        self.log.debug("updating `type` value")
        driver.select_option(s.row_type(position), record.type)

        if clear_first:
            driver.clear(s.row_value(position))
        self.log.debug("updating `value` value")
        driver.type(s.row_value(position), record.value)

    def _advance(self, stage: CommitStage) -> None:
        self.commit_stage = stage
        self.log.debug(f"commit stage: {stage.value}")

    def _commit(self, driver: PageDriver) -> None:
        """Confirm the edit dialog, submit the table, then confirm the commit dialog."""
        s = self.selectors
        self._advance(CommitStage.EDITING)

        self._advance(CommitStage.AWAITING_APPLY_DIALOG)
        driver.wait_for_selector(s.modal_apply_link)
        driver.wait(self.settle_delay_ms)
        self.log.debug("clicking `apply` button")
        driver.click(s.modal_apply_link)
        self._advance(CommitStage.APPLIED)

        self._advance(CommitStage.AWAITING_SUBMIT)
        driver.wait_for_selector(s.submit_button)
        self.log.debug("clicking `submit` button")
        driver.click(s.submit_button)
        self._advance(CommitStage.SUBMITTED)
        driver.wait(self.settle_delay_ms)

        self._advance(CommitStage.AWAITING_FINAL_APPLY_DIALOG)
        driver.wait_for_selector(s.modal_apply_link)
        self.log.debug("clicking `apply` button")
        driver.click(s.modal_apply_link, navigate=True)
        self._advance(CommitStage.COMMITTED)

    def close(self) -> None:
        self.session.close()
