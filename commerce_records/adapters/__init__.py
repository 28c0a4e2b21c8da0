"""
Adapters package.

- ``RecordAdapter``: identity-mapped lookups, listing, pagination and writes
- ``SideloadParser``: registers records embedded in responses
- ``AdapterRegistry``: resource tag to adapter factory lookup
"""

from .base import RecordAdapter, RecordPage
from .registry import AdapterRegistry, ResourceDefinition, default_registry
from .sideload import SideloadParser

__all__ = [
    'RecordAdapter',
    'RecordPage',
    'AdapterRegistry',
    'ResourceDefinition',
    'default_registry',
    'SideloadParser',
]
