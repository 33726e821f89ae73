"""
Core DNS management functionality.

This package contains the record data model and the record management logic.
"""

from .models import DnsRecord, ExistingDnsRecord, ListingSnapshot, RecordType
from .record_manager import RecordManager

__all__ = ["DnsRecord", "ExistingDnsRecord", "ListingSnapshot", "RecordType", "RecordManager"]
