from typing import Any, Dict, Iterable, List, Mapping

from commerce_records.core.logging import get_logger
from commerce_records.domain.models.record import Record

logger = get_logger(__name__)

RESERVED_KEYS = frozenset({"meta"})


class SideloadParser:
    """
    Registers records embedded in a response into their own adapters.

    Every top-level key other than the primary resource's keys and the
    reserved metadata key is looked up in the client's registry by
    collection key; unknown keys are ignored.
    """

    def __init__(self, client: Any, primary_keys: Iterable[str]):
        self.client = client
        self.skip_keys = RESERVED_KEYS | frozenset(primary_keys)

    def parse(self, body: Any) -> Dict[str, List[Record]]:
        """
        Instantiate and register every sideloaded record.

        Args:
            body: Parsed JSON response body

        Returns:
            Dict mapping each recognised key to the records loaded from it
        """
        loaded: Dict[str, List[Record]] = {}
        if not isinstance(body, Mapping):
            return loaded

        for key, embedded in body.items():
            if key in self.skip_keys:
                continue

            adapter = self.client.sideload_adapter(key)
            if adapter is None:
                logger.debug(f"Ignoring unknown sideloaded key '{key}'")
                continue

            if isinstance(embedded, Mapping):
                embedded = [embedded]
            elif not isinstance(embedded, list):
                continue

            loaded[key] = [
                adapter.instantiate_and_register_record(record_json)
                for record_json in embedded
                if isinstance(record_json, Mapping)
            ]
            logger.debug(f"Sideloaded {len(loaded[key])} {adapter.model_name} records")

        return loaded
