"""
Base DNS provider interface.

This module defines the abstract base class that all DNS providers must implement.
"""

from abc import ABC, abstractmethod
from typing import List, Union

from ..core.models import DnsRecord, ExistingDnsRecord

RecordRef = Union[int, str, ExistingDnsRecord]


class DNSProvider(ABC):
    """Abstract base class for DNS providers bound to a single domain."""

    @abstractmethod
    def list_records(self) -> List[ExistingDnsRecord]:
        """Get all DNS records of the domain, in panel order."""
        pass

    @abstractmethod
    def create_record(self, record: DnsRecord) -> ExistingDnsRecord:
        """Create a new DNS record."""
        pass

    @abstractmethod
    def update_record(self, record_id: RecordRef, record: DnsRecord) -> ExistingDnsRecord:
        """Replace the DNS record at a position."""
        pass

    @abstractmethod
    def delete_record(self, record_id: RecordRef) -> None:
        """Delete the DNS record at a position."""
        pass

    def close(self) -> None:
        """Release any resources held by the provider."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
