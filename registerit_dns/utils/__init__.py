"""
Utility functions and helpers.

This package contains utility functions for validation and browser
identity generation.
"""

from .user_agents import random_user_agent
from .validators import validate_fqdn, validate_ipv4, validate_record

__all__ = ["random_user_agent", "validate_fqdn", "validate_ipv4", "validate_record"]
