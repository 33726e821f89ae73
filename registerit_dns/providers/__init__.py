"""
DNS provider implementations.

This package contains the register.it control panel provider, the page
driver it runs on, and a simulated panel for testing.
"""

from .base_provider import DNSProvider
from .dns_client import DNSClient
from .mock_provider import MockDNSProvider, SimulatedPanelPage
from .page_driver import PageDriver, PlaywrightPageDriver
from .register_it_provider import RegisterItProvider

__all__ = [
    "DNSClient",
    "DNSProvider",
    "MockDNSProvider",
    "PageDriver",
    "PlaywrightPageDriver",
    "RegisterItProvider",
    "SimulatedPanelPage",
]
