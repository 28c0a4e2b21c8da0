from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from commerce_records.adapters.base import RecordAdapter
from commerce_records.core.logging import get_logger
from commerce_records.domain.models.record import Record
from commerce_records.domain.models.resources import ALL_RESOURCES

logger = get_logger(__name__)

AdapterFactory = Callable[[Any], RecordAdapter]


@dataclass(frozen=True)
class ResourceDefinition:
    """A registered resource type and the factory building its adapter."""
    model_name: str
    record_class: Type[Record]
    factory: AdapterFactory

    @property
    def tags(self) -> List[str]:
        """Every name the resource is looked up by."""
        return [self.model_name, self.record_class.json_root, self.record_class.plural_path]


class AdapterRegistry:
    """
    Registry of resource types.

    Maps resource tags (model name ``PriceList``, JSON root ``price_list``
    and collection key ``price_lists``) to adapter factories. The client
    queries it for adapter lookup and sideloading.
    """

    def __init__(self):
        self._definitions: Dict[str, ResourceDefinition] = {}
        logger.debug("Initialized AdapterRegistry")

    def register(
        self,
        record_class: Type[Record],
        adapter_class: Type[RecordAdapter] = RecordAdapter,
        factory: Optional[AdapterFactory] = None,
    ) -> ResourceDefinition:
        """
        Register a resource type.

        Args:
            record_class: Record subclass for the resource
            adapter_class: Adapter class used by the default factory
            factory: Optional callable taking the client and returning an adapter

        Raises:
            ValueError: If the record class is invalid or a tag is already registered
        """
        if not isinstance(record_class, type) or not issubclass(record_class, Record):
            raise ValueError("Record class must be a subclass of Record")

        if factory is None:
            def factory(client: Any) -> RecordAdapter:
                return adapter_class(client, record_class)

        definition = ResourceDefinition(record_class.model_name(), record_class, factory)

        taken = [tag for tag in definition.tags if tag in self._definitions]
        if taken:
            raise ValueError(f"Resource tag(s) {', '.join(taken)} already registered")

        for tag in definition.tags:
            self._definitions[tag] = definition
        logger.debug(f"Registered resource type: {definition.model_name}")
        return definition

    def get(self, tag: str) -> Optional[ResourceDefinition]:
        return self._definitions.get(tag)

    def is_registered(self, tag: str) -> bool:
        return tag in self._definitions

    def list(self) -> List[str]:
        """Registered model names."""
        return sorted({definition.model_name for definition in self._definitions.values()})

    def clear(self) -> None:
        """
        Clear all registered resources.
        Primarily used for testing purposes.
        """
        self._definitions.clear()


def default_registry() -> AdapterRegistry:
    """Registry with every resource shipped in ``domain.models.resources``."""
    registry = AdapterRegistry()
    for record_class in ALL_RESOURCES:
        registry.register(record_class)
    return registry
