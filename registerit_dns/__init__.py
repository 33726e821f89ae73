"""
register.it DNS Manager - DNS record management through the register.it control panel

register.it exposes no API for DNS records, so this package drives a
headless browser through the control panel's forms to list, create,
update and delete the records of a domain.
"""

__version__ = "1.0.0"
__author__ = "register.it DNS Manager Team"
__description__ = "Manage register.it DNS records by automating the control panel"

from .core.dns_manager import DNSManager
from .core.models import DnsRecord, ExistingDnsRecord
from .core.record_manager import RecordManager
from .errors import LoginExhaustedError, NavigationError, RecordNotFoundError, RegisterItError
from .providers.dns_client import DNSClient
from .providers.register_it_provider import RegisterItProvider

__all__ = [
    "DNSManager",
    "RecordManager",
    "DNSClient",
    "RegisterItProvider",
    "DnsRecord",
    "ExistingDnsRecord",
    "RegisterItError",
    "LoginExhaustedError",
    "RecordNotFoundError",
    "NavigationError",
]
