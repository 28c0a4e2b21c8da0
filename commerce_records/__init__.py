"""
Commerce Records - generic resource adapter layer for a commerce REST API.

Provides identity-mapped record lookups, paginated listings, sideloading of
embedded records and rate-limit aware request execution for every resource
type of the API.
"""

from commerce_records.adapters import AdapterRegistry, RecordAdapter, RecordPage, default_registry
from commerce_records.client import Client
from commerce_records.core.config import Settings, get_settings
from commerce_records.core.exceptions import (
    AdapterNotFoundError,
    CommerceRecordsError,
    ConfigError,
    RateLimitError,
    RecordNotFound,
    RecordNotInIdentityMap,
    TransportError,
)
from commerce_records.domain.models import Outcome, OutcomeKind, PaginationState, Record

__version__ = "0.1.0"

__all__ = [
    "AdapterRegistry",
    "RecordAdapter",
    "RecordPage",
    "default_registry",
    "Client",
    "Settings",
    "get_settings",
    "AdapterNotFoundError",
    "CommerceRecordsError",
    "ConfigError",
    "RateLimitError",
    "RecordNotFound",
    "RecordNotInIdentityMap",
    "TransportError",
    "Outcome",
    "OutcomeKind",
    "PaginationState",
    "Record",
]
