"""
DNS Client - Unified interface for DNS provider backends

This module provides a common interface for the register.it control panel
provider and the simulated panel used for testing.
"""

import logging
from typing import Dict, List

from ..core.models import DnsRecord, ExistingDnsRecord
from .base_provider import DNSProvider, RecordRef
from .mock_provider import MockDNSProvider
from .register_it_provider import RegisterItProvider

logger = logging.getLogger(__name__)


class DNSClient:
    """Unified DNS client that supports multiple providers."""

    def __init__(self, config: Dict, provider: DNSProvider = None):
        """Initialize DNS client with configuration."""
        self.config = config
        self.provider = provider or self._get_provider()

    def _get_provider(self) -> DNSProvider:
        """Get DNS provider based on configuration."""
        provider_name = self.config.get("default_provider", "registerit")
        provider_config = self.config.get("dns_providers", {}).get(provider_name, {}) or {}

        if provider_name == "registerit":
            return RegisterItProvider.from_config(provider_config)
        elif provider_name == "mock":
            return MockDNSProvider(provider_config)
        else:
            logger.warning(f"Unknown provider '{provider_name}', using mock provider")
            return MockDNSProvider()

    def list_records(self) -> List[ExistingDnsRecord]:
        """Get all DNS records of the domain."""
        return self.provider.list_records()

    def create_record(self, record: DnsRecord) -> ExistingDnsRecord:
        """Create a new DNS record."""
        return self.provider.create_record(record)

    def update_record(self, record_id: RecordRef, record: DnsRecord) -> ExistingDnsRecord:
        """Update an existing DNS record."""
        return self.provider.update_record(record_id, record)

    def delete_record(self, record_id: RecordRef) -> None:
        """Delete a DNS record."""
        return self.provider.delete_record(record_id)

    def close(self) -> None:
        """Release the provider's browser session."""
        self.provider.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
