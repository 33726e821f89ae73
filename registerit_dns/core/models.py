"""
DNS record data model.

Records read from the panel carry a positional id: the row index (1-based)
at the time the record table was listed. The id is tied to the listing
snapshot it came from and must not be reused once the table is rebuilt.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Union

logger = logging.getLogger(__name__)


class RecordType(str, Enum):
    """Record types offered by the panel's type selector."""

    NS = "NS"
    A = "A"
    CNAME = "CNAME"
    MX = "MX"
    TXT = "TXT"
    SRV = "SRV"
    AAAA = "AAAA"
    CAA = "CAA"
    ALIAS = "ALIAS"
    SPF = "SPF"

    @classmethod
    def is_known(cls, value: str) -> bool:
        return value in {member.value for member in cls}


@dataclass(frozen=True)
class ListingSnapshot:
    """Identifies one traversal of a domain's record table."""

    domain: str
    generation: int

    def is_older_than(self, other: "ListingSnapshot") -> bool:
        return self.domain == other.domain and self.generation < other.generation


@dataclass
class DnsRecord:
    """A desired or observed DNS record, without identity."""

    name: str
    type: str
    ttl: int
    value: str

    def __post_init__(self):
        if isinstance(self.ttl, bool):
            raise ValueError(f"Invalid TTL {self.ttl!r}")
        try:
            self.ttl = int(self.ttl) if str(self.ttl).strip() != "" else 0
        except (TypeError, ValueError):
            raise ValueError(f"Invalid TTL {self.ttl!r}, must be an integer")
        if self.ttl < 0:
            raise ValueError(f"Invalid TTL {self.ttl}, must be non-negative")
        if isinstance(self.type, RecordType):
            self.type = self.type.value
        if not RecordType.is_known(self.type):
            logger.warning(f"Record type '{self.type}' is not a known panel type")

    def as_dict(self) -> Dict:
        return {"name": self.name, "ttl": self.ttl, "type": self.type, "value": self.value}


@dataclass
class ExistingDnsRecord(DnsRecord):
    """A record read from (or written to) the panel at a given row position."""

    id: Union[int, str] = 0
    snapshot: ListingSnapshot = field(default=None, compare=False, repr=False)

    @classmethod
    def from_record(
        cls, record_id: Union[int, str], record: DnsRecord, snapshot: ListingSnapshot = None
    ) -> "ExistingDnsRecord":
        return cls(
            name=record.name,
            type=record.type,
            ttl=record.ttl,
            value=record.value,
            id=record_id,
            snapshot=snapshot,
        )

    def to_record(self) -> DnsRecord:
        return DnsRecord(name=self.name, type=self.type, ttl=self.ttl, value=self.value)

    def as_dict(self) -> Dict:
        return {"id": self.id, **super().as_dict()}
