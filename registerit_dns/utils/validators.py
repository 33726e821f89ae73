"""
Validators - Input validation for DNS records

This module provides validation functions for record names, values, TTLs
and types, so that obviously broken records are reported before a browser
session is spent on them.
"""

import ipaddress
import logging
import re
from typing import List

import dns.rdatatype

from ..core.models import DnsRecord, RecordType

logger = logging.getLogger(__name__)

HOSTNAME_TYPES = {"CNAME", "NS", "ALIAS"}


def validate_fqdn(fqdn: str) -> bool:
    """
    Validate Fully Qualified Domain Name (FQDN).

    Args:
        fqdn: The FQDN to validate

    Returns:
        True if valid, False otherwise
    """
    if not fqdn or not isinstance(fqdn, str):
        return False

    # A single trailing dot marks an absolute name
    fqdn = fqdn[:-1] if fqdn.endswith(".") else fqdn

    if len(fqdn) > 253:
        logger.warning(f"FQDN too long: {fqdn}")
        return False

    labels = fqdn.split(".")

    if len(labels) < 2:
        logger.warning(f"FQDN must have at least 2 labels: {fqdn}")
        return False

    if any(label == "" for label in labels):
        logger.warning(f"FQDN contains empty labels: {fqdn}")
        return False

    for label in labels:
        if not _validate_label(label):
            logger.warning(f"Invalid label '{label}' in FQDN: {fqdn}")
            return False

    return True


def _validate_label(label: str) -> bool:
    """
    Validate a single domain label.

    Labels can contain letters, digits, hyphens and underscores (service
    labels such as `_dmarc`), and cannot start or end with a hyphen.
    """
    if len(label) == 0 or len(label) > 63:
        return False

    return bool(re.match(r"^[a-zA-Z0-9_]([a-zA-Z0-9_-]*[a-zA-Z0-9_])?$", label))


def validate_record_name(name: str) -> bool:
    """
    Validate the name column of a record.

    The panel accepts names relative to the domain: an empty name or `@`
    for the apex, `*` for wildcards, or one or more labels.
    """
    if name is None or not isinstance(name, str):
        return False

    name = name.strip()
    if name in ("", "@", "*"):
        return True

    if name.startswith("*."):
        name = name[2:]
    name = name[:-1] if name.endswith(".") else name

    if len(name) > 253:
        return False
    return all(_validate_label(label) for label in name.split("."))


def validate_ipv4(ipv4: str) -> bool:
    """
    Validate IPv4 address.

    Args:
        ipv4: The IPv4 address to validate

    Returns:
        True if valid, False otherwise
    """
    if not ipv4 or not isinstance(ipv4, str):
        return False

    try:
        ipaddress.IPv4Address(ipv4.strip())
        return True
    except ipaddress.AddressValueError:
        logger.warning(f"Invalid IPv4 address: {ipv4}")
        return False


def validate_ipv6(ipv6: str) -> bool:
    """Validate IPv6 address."""
    if not ipv6 or not isinstance(ipv6, str):
        return False

    try:
        ipaddress.IPv6Address(ipv6.strip())
        return True
    except ipaddress.AddressValueError:
        logger.warning(f"Invalid IPv6 address: {ipv6}")
        return False


def validate_ttl(ttl) -> bool:
    """TTLs are non-negative whole numbers of seconds."""
    if isinstance(ttl, bool):
        return False
    try:
        return int(str(ttl).strip()) >= 0
    except ValueError:
        return False


def validate_record_type(record_type: str) -> bool:
    """
    Check whether a record type is one the panel or the DNS registry knows.

    Unknown types are still allowed through to the panel; callers use this
    to warn.
    """
    if not record_type or not isinstance(record_type, str):
        return False

    if RecordType.is_known(record_type):
        return True

    try:
        dns.rdatatype.from_text(record_type)
        return True
    except dns.rdatatype.UnknownRdatatype:
        return False


def validate_record(record: DnsRecord) -> List[str]:
    """
    Validate a record before it is sent to the panel.

    Returns:
        List of warning messages, empty when the record looks valid
    """
    warnings = []

    if not validate_record_name(record.name):
        warnings.append(f"Invalid record name '{record.name}'")

    if not validate_ttl(record.ttl):
        warnings.append(f"Invalid TTL '{record.ttl}'")

    if not validate_record_type(record.type):
        warnings.append(f"Unknown record type '{record.type}'")
    elif not RecordType.is_known(record.type):
        warnings.append(f"Record type '{record.type}' is not offered by the panel")

    value = (record.value or "").strip()
    if not value:
        warnings.append("Record value is empty")
    elif record.type == RecordType.A.value and not validate_ipv4(value):
        warnings.append(f"A record value '{value}' is not an IPv4 address")
    elif record.type == RecordType.AAAA.value and not validate_ipv6(value):
        warnings.append(f"AAAA record value '{value}' is not an IPv6 address")
    elif record.type in HOSTNAME_TYPES and not validate_fqdn(value):
        warnings.append(f"{record.type} record value '{value}' is not a hostname")

    return warnings


def sanitize_fqdn(fqdn: str) -> str:
    """
    Sanitize FQDN by removing invalid characters and normalizing.

    Args:
        fqdn: The FQDN to sanitize

    Returns:
        Sanitized FQDN
    """
    if not fqdn:
        return fqdn

    fqdn = fqdn.strip().strip(".").lower()

    # Keep only letters, digits, hyphens, underscores and dots
    fqdn = re.sub(r"[^a-z0-9._-]", "", fqdn)
    fqdn = re.sub(r"\.+", ".", fqdn)

    return fqdn.strip(".")
