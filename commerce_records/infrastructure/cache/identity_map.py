from typing import Any, Dict, List, Optional

from commerce_records.core.exceptions import RecordNotInIdentityMap
from commerce_records.core.logging import get_logger
from commerce_records.domain.models.record import Record

logger = get_logger(__name__)


class IdentityMap:
    """
    Per-adapter cache from record id to the single in-memory Record instance.

    Not thread-safe: one map belongs to exactly one adapter and is mutated
    in place.
    """

    def __init__(self, resource_type: str):
        """
        Initialize an empty identity map.

        Args:
            resource_type: Model name of the records held, used in errors and logs
        """
        self.resource_type = resource_type
        self._records: Dict[Any, Record] = {}

    def find(self, record_id: Any) -> Record:
        """
        Return the cached record for an id.

        Raises:
            RecordNotInIdentityMap: If no record is cached for the id
        """
        try:
            return self._records[record_id]
        except KeyError:
            raise RecordNotInIdentityMap(self.resource_type, record_id) from None

    def get(self, record_id: Any) -> Optional[Record]:
        return self._records.get(record_id)

    def has(self, record_id: Any) -> bool:
        return record_id in self._records

    def register(self, record: Record) -> Optional[Record]:
        """
        Store or overwrite the entry keyed by the record's id.

        Transient records (no id) are ignored.

        Returns:
            The registered record, or None if it had no id
        """
        if record.id is None or record.id == "":
            logger.debug(f"Not registering transient {self.resource_type} record")
            return None
        self._records[record.id] = record
        return record

    def unregister(self, record: Record) -> Optional[Record]:
        """Remove the entry for the record's id; no-op if absent."""
        removed = self._records.pop(record.id, None)
        if removed is not None:
            logger.debug(f"Unregistered {self.resource_type} id={record.id}")
        return removed

    def all(self) -> List[Record]:
        """Snapshot of cached records in insertion order."""
        return list(self._records.values())

    def clear(self) -> int:
        count = len(self._records)
        self._records.clear()
        return count

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)
