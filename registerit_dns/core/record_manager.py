"""
Record Manager - Core logic for DNS record lookups and edits

This module resolves positional record ids against a listing and merges
partial updates with the record currently stored at that position.
"""

import logging
from collections import Counter
from typing import Dict, List, Optional, Union

from ..errors import RecordNotFoundError
from .models import DnsRecord, ExistingDnsRecord

logger = logging.getLogger(__name__)


class RecordManager:
    """Manages record lookups and update merging for a DNS client."""

    def __init__(self, dns_client):
        """Initialize record manager with DNS client."""
        self.dns_client = dns_client

    def find_record(
        self, records: List[ExistingDnsRecord], record_id: Union[int, str]
    ) -> ExistingDnsRecord:
        """
        Find the record listed at a position.

        Raises:
            RecordNotFoundError: if no record of the listing has that id
        """
        try:
            wanted = int(record_id)
        except (TypeError, ValueError):
            raise RecordNotFoundError(record_id)

        for record in records:
            if int(record.id) == wanted:
                return record

        logger.error(f"DNS record {record_id} not found among {len(records)} records")
        raise RecordNotFoundError(record_id)

    def merge_update(
        self,
        existing: ExistingDnsRecord,
        name: Optional[str] = None,
        ttl=None,
        record_type: Optional[str] = None,
        value: Optional[str] = None,
    ) -> DnsRecord:
        """
        Build the replacement record, keeping existing fields that were not given.

        Blank strings count as not given, as do zero or empty TTLs.
        """
        merged_ttl = existing.ttl
        if ttl not in (None, "") and int(ttl) != 0:
            merged_ttl = int(ttl)

        return DnsRecord(
            name=name or existing.name,
            ttl=merged_ttl,
            type=record_type or existing.type,
            value=value or existing.value,
        )

    def resolve_update(
        self,
        record_id: Union[int, str],
        name: Optional[str] = None,
        ttl=None,
        record_type: Optional[str] = None,
        value: Optional[str] = None,
    ) -> DnsRecord:
        """List the current records and merge a partial update into the one at `record_id`."""
        records = self.dns_client.list_records()
        existing = self.find_record(records, record_id)
        return self.merge_update(existing, name, ttl, record_type, value)

    def summarize(self, records: List[ExistingDnsRecord]) -> Dict:
        """Count records per type."""
        by_type = Counter(record.type for record in records)
        return {
            "total_records": len(records),
            "by_type": dict(sorted(by_type.items())),
        }
