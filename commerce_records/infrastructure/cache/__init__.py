from commerce_records.infrastructure.cache.identity_map import IdentityMap

__all__ = ["IdentityMap"]
