#!/usr/bin/env python3
"""
Test suite for register.it DNS Manager

This module tests the session, navigation and record operations against the
simulated control panel, plus the validation, presentation and CLI layers.
"""

import argparse
import io
import os
import random
import tempfile
import unittest
from unittest.mock import MagicMock, Mock, patch

import yaml
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeout
from rich.console import Console

from registerit_dns.cli.main import apply_overrides, build_parser, main
from registerit_dns.core.dns_manager import DNSManager
from registerit_dns.core.models import DnsRecord, ExistingDnsRecord, ListingSnapshot
from registerit_dns.core.record_manager import RecordManager
from registerit_dns.errors import (
    LoginExhaustedError,
    NavigationError,
    NavigationTimeoutError,
    RecordNotFoundError,
    SelectorTimeoutError,
    SessionClosedError,
    classify_driver_error,
    translate_driver_errors,
)
from registerit_dns.providers.dns_client import DNSClient
from registerit_dns.providers.mock_provider import MockDNSProvider, SimulatedPanelPage
from registerit_dns.providers.navigator import Navigator
from registerit_dns.providers.page_driver import PlaywrightPageDriver
from registerit_dns.providers.register_it_provider import CommitStage, RegisterItProvider
from registerit_dns.providers.selectors import PanelSelectors, PanelUrls
from registerit_dns.providers.session import PanelSession, SessionState
from registerit_dns.utils.user_agents import build_user_agent, random_user_agent
from registerit_dns.utils.validators import (
    sanitize_fqdn,
    validate_fqdn,
    validate_ipv4,
    validate_ipv6,
    validate_record,
    validate_record_name,
    validate_record_type,
    validate_ttl,
)

SAMPLE_RECORDS = [
    {"name": "", "ttl": 3600, "type": "A", "value": "192.0.2.10"},
    {"name": "www", "ttl": 600, "type": "CNAME", "value": "example.com"},
    {"name": "", "ttl": 3600, "type": "MX", "value": "10 mail.example.com"},
]

PROVIDER_LOGGER = "registerit_dns.providers.register_it_provider"


def make_provider(records=None, max_login_attempts=3, **page_options):
    """A provider wired to a fresh simulated panel."""
    page = SimulatedPanelPage(records=records, **page_options)
    provider = RegisterItProvider(
        "mock",
        "mock",
        "example.com",
        max_login_attempts=max_login_attempts,
        driver=page,
        settle_delay_ms=1000,
        keystroke_delay_ms=0,
    )
    return provider, page


class TestValidators(unittest.TestCase):
    """Test the validation functions."""

    def test_validate_fqdn_valid(self):
        """Test valid FQDN validation."""
        valid_fqdns = [
            "example.com",
            "sub.example.com",
            "example.com.",
            "_dmarc.example.com",
            "a.b.c.d.e.f.g.h.i.j.k.l.m.n.o.p.q.r.s.t.u.v.w.x.y.z.com",
        ]

        for fqdn in valid_fqdns:
            with self.subTest(fqdn=fqdn):
                self.assertTrue(validate_fqdn(fqdn))

    def test_validate_fqdn_invalid(self):
        """Test invalid FQDN validation."""
        invalid_fqdns = [
            "",  # Empty
            "single",  # Single label
            ".example.com",  # Starts with dot
            "example..com",  # Consecutive dots
            "example-.com",  # Ends with hyphen
            "-example.com",  # Starts with hyphen
            "a" * 64 + ".com",  # Label too long
        ]

        for fqdn in invalid_fqdns:
            with self.subTest(fqdn=fqdn):
                self.assertFalse(validate_fqdn(fqdn))

    def test_validate_record_name(self):
        """Relative names, the apex and wildcards are accepted."""
        for name in ["", "@", "*", "www", "*.dev", "_sip._tcp", "mail.eu"]:
            with self.subTest(name=name):
                self.assertTrue(validate_record_name(name))

        for name in [None, "bad name", "-www", "a..b"]:
            with self.subTest(name=name):
                self.assertFalse(validate_record_name(name))

    def test_validate_ip_addresses(self):
        """Test IPv4 and IPv6 validation."""
        self.assertTrue(validate_ipv4("192.168.1.1"))
        self.assertTrue(validate_ipv4("0.0.0.0"))
        self.assertFalse(validate_ipv4("256.1.2.3"))
        self.assertFalse(validate_ipv4("192.168.1."))
        self.assertTrue(validate_ipv6("2001:db8::1"))
        self.assertFalse(validate_ipv6("2001:db8::g"))
        self.assertFalse(validate_ipv6("192.168.1.1"))

    def test_validate_ttl(self):
        """TTLs are non-negative integers."""
        for ttl in [0, 600, "3600", " 60 "]:
            with self.subTest(ttl=ttl):
                self.assertTrue(validate_ttl(ttl))
        for ttl in [-1, "abc", "1.5", True]:
            with self.subTest(ttl=ttl):
                self.assertFalse(validate_ttl(ttl))

    def test_validate_record_type(self):
        """Panel types and registry types are known, made-up ones are not."""
        self.assertTrue(validate_record_type("ALIAS"))
        self.assertTrue(validate_record_type("SPF"))
        self.assertTrue(validate_record_type("DS"))
        self.assertFalse(validate_record_type("BOGUS"))
        self.assertFalse(validate_record_type(""))

    def test_validate_record(self):
        """Values are checked against the record type."""
        self.assertEqual(validate_record(DnsRecord("www", "CNAME", 600, "example.com")), [])
        self.assertEqual(validate_record(DnsRecord("", "A", 600, "192.0.2.1")), [])

        warnings = validate_record(DnsRecord("www", "A", 600, "example.com"))
        self.assertEqual(len(warnings), 1)
        self.assertIn("IPv4", warnings[0])

        warnings = validate_record(DnsRecord("v6", "AAAA", 600, "192.0.2.1"))
        self.assertIn("IPv6", warnings[0])

        warnings = validate_record(DnsRecord("www", "DS", 600, "12345 8 2 ABCDEF"))
        self.assertIn("not offered by the panel", warnings[0])

        warnings = validate_record(DnsRecord("www", "TXT", 600, " "))
        self.assertIn("empty", warnings[0])

    def test_sanitize_fqdn(self):
        """Test FQDN normalization."""
        self.assertEqual(sanitize_fqdn(" Example.COM. "), "example.com")
        self.assertEqual(sanitize_fqdn("exa mple..com"), "example.com")


class TestModels(unittest.TestCase):
    """Test the record data model."""

    def test_ttl_is_coerced_to_int(self):
        self.assertEqual(DnsRecord("www", "A", "600", "192.0.2.1").ttl, 600)
        self.assertEqual(DnsRecord("www", "A", "", "192.0.2.1").ttl, 0)

    def test_invalid_ttl_rejected(self):
        for ttl in [-5, "abc", True]:
            with self.subTest(ttl=ttl):
                with self.assertRaises(ValueError):
                    DnsRecord("www", "A", ttl, "192.0.2.1")

    def test_unknown_type_is_kept(self):
        with self.assertLogs("registerit_dns.core.models", level="WARNING"):
            record = DnsRecord("www", "HTTPS", 600, "1 . alpn=h2")
        self.assertEqual(record.type, "HTTPS")

    def test_existing_record_round_trip(self):
        record = DnsRecord("www", "CNAME", 600, "example.com")
        existing = ExistingDnsRecord.from_record(4, record, ListingSnapshot("example.com", 2))

        self.assertEqual(existing.id, 4)
        self.assertEqual(existing.to_record(), record)
        self.assertEqual(
            existing.as_dict(),
            {"id": 4, "name": "www", "ttl": 600, "type": "CNAME", "value": "example.com"},
        )

    def test_snapshot_ordering(self):
        first = ListingSnapshot("example.com", 1)
        self.assertTrue(first.is_older_than(ListingSnapshot("example.com", 2)))
        self.assertFalse(first.is_older_than(ListingSnapshot("example.com", 1)))
        self.assertFalse(first.is_older_than(ListingSnapshot("other.com", 5)))


class TestErrorClassification(unittest.TestCase):
    """Test the mapping of driver failures to typed errors."""

    def test_selector_timeout(self):
        error = classify_driver_error(PlaywrightTimeout("Timeout 30000ms exceeded"), "wait_for_selector", "a.add")
        self.assertIsInstance(error, SelectorTimeoutError)
        self.assertEqual(error.selector, "a.add")

    def test_navigation_timeout(self):
        error = classify_driver_error(PlaywrightTimeout("Timeout 30000ms exceeded"), "wait_for_network_idle")
        self.assertIsInstance(error, NavigationTimeoutError)
        self.assertNotIsInstance(error, SelectorTimeoutError)

    def test_other_driver_errors(self):
        error = classify_driver_error(PlaywrightError("Target closed"), "click", "a.add")
        self.assertIsInstance(error, NavigationError)
        self.assertNotIsInstance(error, SelectorTimeoutError)

    def test_translate_keeps_cause(self):
        with self.assertRaises(SelectorTimeoutError) as ctx:
            with translate_driver_errors("wait_for_selector", "a.add"):
                raise PlaywrightTimeout("Timeout 1000ms exceeded")
        self.assertIsInstance(ctx.exception.__cause__, PlaywrightTimeout)

    def test_translate_passes_typed_errors_through(self):
        with self.assertRaises(RecordNotFoundError):
            with translate_driver_errors("click"):
                raise RecordNotFoundError(3)


class TestPlaywrightPageDriver(unittest.TestCase):
    """Test the Playwright driver against a mocked page."""

    def setUp(self):
        self.driver = PlaywrightPageDriver()
        self.page = MagicMock()
        self.driver._page = self.page

    def test_click_uses_dom_click(self):
        self.driver.click("a.add")
        self.page.eval_on_selector.assert_called_once_with("a.add", "el => el.click()")
        self.page.expect_navigation.assert_not_called()

    def test_click_with_navigation(self):
        self.driver.click("li#dom_dns a", navigate=True)
        self.page.expect_navigation.assert_called_once()
        self.page.eval_on_selector.assert_called_once_with("li#dom_dns a", "el => el.click()")

    def test_wait_for_selector_timeout_is_classified(self):
        self.page.wait_for_selector.side_effect = PlaywrightTimeout("Timeout 1000ms exceeded")
        with self.assertRaises(SelectorTimeoutError):
            self.driver.wait_for_selector("tr[name=recordDNS_4] input.recordName", timeout=1000)
        self.page.wait_for_selector.assert_called_once_with(
            "tr[name=recordDNS_4] input.recordName", state="attached", timeout=1000
        )

    def test_values_reads_all_matches(self):
        self.page.eval_on_selector_all.return_value = ["www", "mail"]
        self.assertEqual(self.driver.values("input.recordName"), ["www", "mail"])

    def test_close_releases_everything(self):
        context, browser, playwright = MagicMock(), MagicMock(), MagicMock()
        self.driver._context, self.driver._browser, self.driver._playwright = context, browser, playwright

        self.driver.close()

        self.page.close.assert_called_once()
        context.close.assert_called_once()
        browser.close.assert_called_once()
        playwright.stop.assert_called_once()
        self.assertIsNone(self.driver._page)

    def test_close_without_launch(self):
        PlaywrightPageDriver().close()

    @patch("registerit_dns.providers.page_driver.sync_playwright")
    def test_launch_configures_browser_and_handlers(self, mock_sync_playwright):
        playwright = mock_sync_playwright.return_value.start.return_value
        browser = playwright.chromium.launch.return_value
        context = browser.new_context.return_value
        page = context.new_page.return_value
        driver = PlaywrightPageDriver(default_timeout_ms=5000)
        viewport = {"width": 800, "height": 600}

        driver.launch(headless=False, user_agent="Mozilla/5.0 (X11; Linux x86_64)", viewport=viewport)

        playwright.chromium.launch.assert_called_once_with(
            headless=False, args=["--no-sandbox", "--start-maximized"]
        )
        browser.new_context.assert_called_once_with(
            viewport=viewport, user_agent="Mozilla/5.0 (X11; Linux x86_64)"
        )
        page.set_default_timeout.assert_called_once_with(5000)

        handlers = {call.args[0]: call.args[1] for call in page.on.call_args_list}
        self.assertEqual(set(handlers), {"load", "dialog"})

        dialog = MagicMock()
        handlers["dialog"](dialog)
        dialog.accept.assert_called_once()

        loaded = MagicMock(url="https://controlpanel.register.it/")
        with self.assertLogs("registerit_dns.providers.page_driver", level="DEBUG") as logs:
            handlers["load"](loaded)
        self.assertTrue(any("https://controlpanel.register.it/" in line for line in logs.output))

    @patch("registerit_dns.providers.page_driver.sync_playwright")
    def test_launch_defaults_viewport(self, mock_sync_playwright):
        browser = mock_sync_playwright.return_value.start.return_value.chromium.launch.return_value

        PlaywrightPageDriver().launch()

        browser.new_context.assert_called_once_with(viewport={"width": 900, "height": 1366})


class TestUserAgents(unittest.TestCase):
    """Test browser identity generation."""

    def test_random_user_agent(self):
        agent = random_user_agent(random.Random(7))
        self.assertTrue(agent.startswith("Mozilla/5.0 ("))

    def test_build_user_agent(self):
        agent = build_user_agent("chrome", "linux", "126.0.0.0")
        self.assertIn("X11; Linux x86_64", agent)
        self.assertIn("Chrome/126.0.0.0", agent)
        with self.assertRaises(KeyError):
            build_user_agent("netscape", "linux", "4.0")


class TestPanelSession(unittest.TestCase):
    """Test launching and logging into the control panel."""

    def make_session(self, max_login_attempts=3, **page_options):
        page = SimulatedPanelPage(**page_options)
        session = PanelSession(
            page, "mock", "mock", max_login_attempts=max_login_attempts, keystroke_delay_ms=0
        )
        return session, page

    def test_login_first_attempt(self):
        session, page = self.make_session()

        session.ensure_ready()

        self.assertEqual(session.state, SessionState.READY)
        self.assertEqual(page.login_attempts, 1)
        self.assertEqual(page.url, PanelUrls().dashboard)
        self.assertTrue(page.launch_options["user_agent"].startswith("Mozilla/5.0"))
        self.assertEqual(page.launch_options["viewport"], {"width": 900, "height": 1366})
        self.assertEqual(len(page.screenshots), 1)

    def test_ensure_ready_is_idempotent(self):
        session, page = self.make_session()
        session.ensure_ready()
        visited = list(page.visited)

        session.ensure_ready()

        self.assertEqual(page.visited, visited)
        self.assertEqual(page.login_attempts, 1)

    def test_login_exhausted(self):
        session, page = self.make_session(max_login_attempts=3, failed_logins=None)

        with self.assertRaises(LoginExhaustedError) as ctx:
            session.ensure_ready()

        self.assertEqual(ctx.exception.attempts, 3)
        self.assertEqual(page.login_attempts, 3)
        self.assertEqual(page.submitted_credentials, [("mock", "mock")] * 3)
        self.assertEqual(session.state, SessionState.UNINITIALIZED)
        self.assertTrue(page.closed)

    def test_login_retries_until_dashboard(self):
        session, page = self.make_session(max_login_attempts=5, failed_logins=2)
        session.ensure_ready()
        self.assertEqual(page.login_attempts, 3)

    def test_login_on_last_allowed_attempt(self):
        session, page = self.make_session(max_login_attempts=3, failed_logins=2)
        session.ensure_ready()
        self.assertTrue(session.is_ready)

    def test_zero_attempts_tries_once(self):
        page = SimulatedPanelPage(password="right")
        session = PanelSession(page, "mock", "wrong", max_login_attempts=0, keystroke_delay_ms=0)

        with self.assertRaises(LoginExhaustedError) as ctx:
            session.ensure_ready()

        self.assertEqual(ctx.exception.attempts, 1)
        self.assertEqual(page.login_attempts, 1)
        self.assertEqual(page.submitted_credentials, [("mock", "wrong")])

    def test_zero_attempts_accepts_first_login(self):
        session, page = self.make_session(max_login_attempts=0)
        session.ensure_ready()
        self.assertTrue(session.is_ready)
        self.assertEqual(page.login_attempts, 1)

    def test_wrong_password_exhausts(self):
        page = SimulatedPanelPage(password="right")
        session = PanelSession(page, "mock", "wrong", max_login_attempts=2, keystroke_delay_ms=0)
        with self.assertRaises(LoginExhaustedError):
            session.ensure_ready()

    def test_cookie_banner_dismissed(self):
        session, page = self.make_session()
        session.ensure_ready()
        self.assertFalse(page.cookie_banner)
        self.assertIn(PanelSelectors().cookies_reject_button, page.clicks)

    def test_missing_cookie_banner_does_not_block(self):
        session, page = self.make_session(show_cookie_banner=False)
        session.ensure_ready()
        self.assertTrue(session.is_ready)

    def test_close_before_initialize(self):
        session, page = self.make_session()
        session.close()
        session.close()
        self.assertFalse(page.closed)
        self.assertEqual(session.state, SessionState.CLOSED)

    def test_closed_session_refuses_work(self):
        session, page = self.make_session()
        session.ensure_ready()
        session.close()
        self.assertTrue(page.closed)
        with self.assertRaises(SessionClosedError):
            session.ensure_ready()

    def test_negative_attempts_rejected(self):
        with self.assertRaises(ValueError):
            PanelSession(SimulatedPanelPage(), "mock", "mock", max_login_attempts=-1)


class TestNavigator(unittest.TestCase):
    """Test the click path to the Advanced DNS editor."""

    def test_reaches_advanced_dns(self):
        page = SimulatedPanelPage()
        PanelSession(page, "mock", "mock", keystroke_delay_ms=0).ensure_ready()

        Navigator("example.com").open_advanced_dns(page)

        self.assertIn(PanelUrls().overview_for("example.com"), page.visited)
        self.assertEqual(page.url, "https://controlpanel.register.it/advanced.html?domain=example.com")
        self.assertEqual(
            page.clicks[-4:],
            [selector for _, selector in Navigator("example.com").steps()],
        )

    def test_unknown_domain_fails_to_navigate(self):
        page = SimulatedPanelPage()
        PanelSession(page, "mock", "mock", keystroke_delay_ms=0).ensure_ready()

        with self.assertRaises(SelectorTimeoutError) as ctx:
            Navigator("other.org").open_advanced_dns(page)
        self.assertEqual(ctx.exception.selector, PanelSelectors().domain_link)


class TestRegisterItProvider(unittest.TestCase):
    """Test record operations against the simulated control panel."""

    def test_list_records(self):
        provider, page = make_provider(SAMPLE_RECORDS)

        records = provider.list_records()

        self.assertEqual([r.id for r in records], [1, 2, 3])
        self.assertEqual([r.type for r in records], ["A", "CNAME", "MX"])
        self.assertEqual(records[1].to_record(), DnsRecord("www", "CNAME", 600, "example.com"))
        self.assertEqual(records[0].snapshot, provider.snapshot)

    def test_list_empty_table(self):
        provider, page = make_provider()
        self.assertEqual(provider.list_records(), [])

    def test_create_on_empty_table(self):
        provider, page = make_provider()
        record = DnsRecord(name="www", ttl=600, type="CNAME", value="example.com")

        created = provider.create_record(record)

        self.assertEqual(
            created.as_dict(),
            {"id": 1, "name": "www", "ttl": 600, "type": "CNAME", "value": "example.com"},
        )
        listed = provider.list_records()
        self.assertEqual(len(listed), 1)
        self.assertEqual(listed[0], created)

    def test_create_appends_after_existing_rows(self):
        provider, page = make_provider(SAMPLE_RECORDS)
        record = DnsRecord("api", "A", 300, "192.0.2.20")

        created = provider.create_record(record)

        self.assertEqual(created.id, 4)
        listed = provider.list_records()
        self.assertEqual(listed[3].to_record(), record)
        self.assertEqual(page.commits, 1)

    def test_commit_sequence(self):
        provider, page = make_provider()
        provider.create_record(DnsRecord("www", "CNAME", 600, "example.com"))

        s = PanelSelectors()
        self.assertEqual(provider.commit_stage, CommitStage.COMMITTED)
        self.assertEqual(page.clicks[-3:], [s.modal_apply_link, s.submit_button, s.modal_apply_link])
        # two settle delays plus the login settle
        self.assertEqual(page.waited_ms, 3000)

    def test_update_changes_only_target_row(self):
        provider, page = make_provider(SAMPLE_RECORDS)
        record = DnsRecord("blog", "A", 120, "192.0.2.99")

        updated = provider.update_record(2, record)

        self.assertEqual(updated.id, 2)
        listed = provider.list_records()
        self.assertEqual(listed[1].to_record(), record)
        self.assertEqual(listed[0].to_record(), DnsRecord("", "A", 3600, "192.0.2.10"))
        self.assertEqual(listed[2].to_record(), DnsRecord("", "MX", 3600, "10 mail.example.com"))

    def test_update_beyond_last_row(self):
        provider, page = make_provider(SAMPLE_RECORDS)

        with self.assertRaises(RecordNotFoundError) as ctx:
            provider.update_record(4, DnsRecord("www", "A", 60, "192.0.2.1"))

        self.assertEqual(ctx.exception.record_id, 4)
        self.assertEqual(
            page.selector_timeouts[-1], (PanelSelectors().row_name(4), 1000)
        )
        self.assertEqual(page.commits, 0)

    def test_update_on_empty_table(self):
        provider, page = make_provider()
        with self.assertRaises(RecordNotFoundError):
            provider.update_record(1, DnsRecord("www", "A", 60, "192.0.2.1"))

    def test_invalid_ids(self):
        provider, page = make_provider(SAMPLE_RECORDS)
        for record_id in [0, -2, "abc", None]:
            with self.subTest(record_id=record_id):
                with self.assertRaises(RecordNotFoundError):
                    provider.delete_record(record_id)

    def test_delete_record(self):
        provider, page = make_provider(SAMPLE_RECORDS)

        provider.delete_record(1)

        listed = provider.list_records()
        self.assertEqual([r.id for r in listed], [1, 2])
        self.assertEqual(listed[0].name, "www")

    def test_delete_missing_record(self):
        provider, page = make_provider(SAMPLE_RECORDS)
        with self.assertRaises(RecordNotFoundError):
            provider.delete_record(9)
        self.assertEqual(
            page.selector_timeouts[-1][0], PanelSelectors().row_remove_link(9)
        )

    def test_unavailable_type_is_a_navigation_error(self):
        provider, page = make_provider(SAMPLE_RECORDS)
        with self.assertRaises(NavigationError) as ctx:
            provider.update_record(1, DnsRecord("www", "DS", 60, "12345 8 2 ABCDEF"))
        self.assertNotIsInstance(ctx.exception, RecordNotFoundError)

    def test_login_once_navigate_per_operation(self):
        provider, page = make_provider(SAMPLE_RECORDS)

        provider.list_records()
        provider.create_record(DnsRecord("api", "A", 300, "192.0.2.20"))
        provider.list_records()

        overview = PanelUrls().overview_for("example.com")
        self.assertEqual(page.login_attempts, 1)
        self.assertEqual(page.visited.count(overview), 3)

    def test_stale_record_warning(self):
        provider, page = make_provider(SAMPLE_RECORDS)
        listed = provider.list_records()
        provider.create_record(DnsRecord("api", "A", 300, "192.0.2.20"))

        with self.assertLogs(PROVIDER_LOGGER, level="WARNING") as logs:
            provider.update_record(listed[0], DnsRecord("", "A", 3600, "192.0.2.11"))

        self.assertTrue(any("stale" in line for line in logs.output))
        self.assertEqual(provider.list_records()[0].value, "192.0.2.11")

    def test_context_manager_closes_browser(self):
        provider, page = make_provider(SAMPLE_RECORDS)
        with provider:
            provider.list_records()
        self.assertTrue(page.closed)

    def test_uneven_columns_raise(self):
        provider, page = make_provider(SAMPLE_RECORDS)
        names = PanelSelectors().record_names
        read_values = page.values
        page.values = lambda selector: read_values(selector)[:-1] if selector == names else read_values(selector)

        with self.assertRaises(NavigationError) as ctx:
            provider.list_records()
        self.assertIn("uneven lengths", str(ctx.exception))

    def test_unreadable_ttl_raises(self):
        records = SAMPLE_RECORDS + [{"name": "txt", "ttl": "soon", "type": "TXT", "value": "hello"}]
        provider, page = make_provider(records)

        with self.assertRaises(NavigationError) as ctx:
            provider.list_records()
        self.assertIn("position 4", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    def test_login_exhausted_propagates(self):
        provider, page = make_provider(SAMPLE_RECORDS, max_login_attempts=2, failed_logins=None)
        with self.assertRaises(LoginExhaustedError):
            provider.list_records()
        self.assertEqual(page.login_attempts, 2)


class TestRecordManager(unittest.TestCase):
    """Test record lookups and update merging."""

    def setUp(self):
        self.records = [
            ExistingDnsRecord(name="", type="A", ttl=3600, value="192.0.2.10", id=1),
            ExistingDnsRecord(name="www", type="CNAME", ttl=600, value="example.com", id=2),
        ]
        self.client = Mock()
        self.client.list_records.return_value = self.records
        self.manager = RecordManager(self.client)

    def test_find_record(self):
        self.assertIs(self.manager.find_record(self.records, "2"), self.records[1])
        with self.assertRaises(RecordNotFoundError):
            self.manager.find_record(self.records, 3)

    def test_merge_update_keeps_unset_fields(self):
        merged = self.manager.merge_update(self.records[1], value="example.org")
        self.assertEqual(merged, DnsRecord("www", "CNAME", 600, "example.org"))

        merged = self.manager.merge_update(self.records[1], name="", ttl="0", record_type="A", value="")
        self.assertEqual(merged, DnsRecord("www", "A", 600, "example.com"))

        merged = self.manager.merge_update(self.records[1], ttl="60")
        self.assertEqual(merged.ttl, 60)

    def test_resolve_update_missing_record(self):
        with self.assertRaises(RecordNotFoundError):
            self.manager.resolve_update(5, name="www")
        self.client.update_record.assert_not_called()

    def test_summarize(self):
        summary = self.manager.summarize(self.records)
        self.assertEqual(summary, {"total_records": 2, "by_type": {"A": 1, "CNAME": 1}})


class TestDNSClient(unittest.TestCase):
    """Test provider selection."""

    def test_mock_provider(self):
        client = DNSClient({"default_provider": "mock", "dns_providers": {"mock": {"records": SAMPLE_RECORDS}}})
        self.assertIsInstance(client.provider, MockDNSProvider)
        self.assertEqual(len(client.list_records()), 3)
        client.close()

    def test_unknown_provider_falls_back_to_mock(self):
        client = DNSClient({"default_provider": "route53"})
        self.assertIsInstance(client.provider, MockDNSProvider)

    def test_registerit_provider_from_config(self):
        client = DNSClient(
            {
                "default_provider": "registerit",
                "dns_providers": {
                    "registerit": {
                        "username": "user",
                        "password": "secret",
                        "domain": "example.com",
                        "max_login_attempts": 4,
                        "default_timeout_ms": 5000,
                        "record_probe_timeout_ms": 1500,
                    }
                },
            }
        )
        provider = client.provider
        self.assertIsInstance(provider, RegisterItProvider)
        self.assertIsInstance(provider.session.driver, PlaywrightPageDriver)
        self.assertEqual(provider.session.driver.default_timeout_ms, 5000)
        self.assertEqual(provider.session.max_login_attempts, 4)
        self.assertEqual(provider.record_probe_timeout_ms, 1500)
        self.assertEqual(provider.domain, "example.com")
        client.close()


class TestDNSManager(unittest.TestCase):
    """Test the console layer over the mock provider."""

    def setUp(self):
        self.output = io.StringIO()
        patcher = patch(
            "registerit_dns.core.dns_manager.console",
            Console(file=self.output, width=120, force_terminal=False),
        )
        patcher.start()
        self.addCleanup(patcher.stop)

        self.provider = MockDNSProvider({"records": SAMPLE_RECORDS})
        self.manager = DNSManager({}, dns_client=DNSClient({}, provider=self.provider))

    def test_list_records(self):
        self.assertTrue(self.manager.list_records())
        output = self.output.getvalue()
        self.assertIn("192.0.2.10", output)
        self.assertIn("Total records: 3", output)
        self.assertTrue(self.provider.page.closed)

    def test_list_unreadable_table(self):
        provider = MockDNSProvider({"records": [{"name": "www", "ttl": "n/a", "type": "A", "value": "192.0.2.1"}]})
        manager = DNSManager({}, dns_client=DNSClient({}, provider=provider))

        self.assertFalse(manager.list_records())
        self.assertIn("Failed to list records", self.output.getvalue())
        self.assertTrue(provider.page.closed)

    def test_create_record_warns_but_proceeds(self):
        self.assertTrue(self.manager.create_record(DnsRecord("api", "A", 300, "not-an-ip")))
        self.assertIn("Warning", self.output.getvalue())
        self.assertEqual(self.provider.page.records[-1]["value"], "not-an-ip")

    def test_update_record_defaults_fields(self):
        self.assertTrue(self.manager.update_record(2, value="example.org"))
        self.assertEqual(
            self.provider.page.records[1],
            {"name": "www", "ttl": "600", "type": "CNAME", "value": "example.org"},
        )

    def test_update_missing_record(self):
        self.assertFalse(self.manager.update_record(7, name="www"))
        self.assertIn("DNS record not found", self.output.getvalue())
        self.assertEqual(self.provider.page.commits, 0)
        self.assertTrue(self.provider.page.closed)

    @patch("registerit_dns.core.dns_manager.Confirm.ask", return_value=False)
    def test_delete_cancelled(self, mock_ask):
        self.assertFalse(self.manager.delete_record(1))
        self.assertEqual(len(self.provider.page.records), 3)
        self.assertFalse(self.provider.page.launched)

    @patch("registerit_dns.core.dns_manager.Confirm.ask", return_value=True)
    def test_delete_confirmed(self, mock_ask):
        self.assertTrue(self.manager.delete_record(1))
        self.assertEqual(len(self.provider.page.records), 2)

    def test_delete_without_confirmation(self):
        self.assertTrue(self.manager.delete_record(3, confirm=False))
        self.assertEqual(len(self.provider.page.records), 2)


class TestCLI(unittest.TestCase):
    """Test the command line entry point."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.config_path = os.path.join(self.temp_dir.name, "config.yaml")
        with open(self.config_path, "w") as f:
            yaml.dump(
                {
                    "default_provider": "mock",
                    "dns_providers": {"mock": {"records": SAMPLE_RECORDS}},
                },
                f,
            )

    def run_cli(self, *argv):
        with patch("sys.stdout", new_callable=io.StringIO):
            with self.assertRaises(SystemExit) as ctx:
                main(["--config", self.config_path, *argv])
        return ctx.exception.code

    def test_list_is_default(self):
        self.assertEqual(self.run_cli(), 0)

    def test_commands_and_aliases(self):
        self.assertEqual(self.run_cli("list-dns"), 0)
        self.assertEqual(self.run_cli("create", "www2", "600", "CNAME", "example.com"), 0)
        self.assertEqual(self.run_cli("update-dns", "2", "", "300"), 0)
        self.assertEqual(self.run_cli("delete", "1", "--no-confirm"), 0)

    def test_missing_record_exits_non_zero(self):
        self.assertEqual(self.run_cli("delete", "8", "--no-confirm"), 1)

    def test_invalid_ttl(self):
        self.assertEqual(self.run_cli("create", "www", "soon", "A", "192.0.2.1"), 1)

    def test_missing_config_file(self):
        with patch("sys.stdout", new_callable=io.StringIO):
            with self.assertRaises(SystemExit) as ctx:
                main(["--config", os.path.join(self.temp_dir.name, "missing.yaml"), "list"])
        self.assertEqual(ctx.exception.code, 1)

    def test_parser_options(self):
        args = build_parser().parse_args(["--no-headless", "--max-login-attempts", "0", "delete", "4", "--no-confirm"])
        self.assertFalse(args.headless)
        self.assertEqual(args.max_login_attempts, 0)
        self.assertEqual(args.id, 4)
        self.assertFalse(args.confirm)

    @patch("registerit_dns.cli.main.Prompt.ask", side_effect=["user", "secret"])
    def test_apply_overrides_prompts_for_missing_credentials(self, mock_ask):
        args = argparse.Namespace(
            username=None, password=None, domain="Example.COM", max_login_attempts=None, headless=False
        )
        config = apply_overrides({"default_provider": "registerit"}, args)

        provider_config = config["dns_providers"]["registerit"]
        self.assertEqual(provider_config["username"], "user")
        self.assertEqual(provider_config["password"], "secret")
        self.assertEqual(provider_config["domain"], "example.com")
        self.assertEqual(provider_config["max_login_attempts"], 10)
        self.assertFalse(provider_config["headless"])
        self.assertEqual(mock_ask.call_count, 2)


if __name__ == "__main__":
    unittest.main()
