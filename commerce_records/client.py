import time
from typing import Any, Callable, Dict, Optional

import httpx

from commerce_records.adapters.base import RecordAdapter
from commerce_records.adapters.registry import AdapterRegistry, default_registry
from commerce_records.core.config import Settings, get_settings
from commerce_records.core.exceptions import AdapterNotFoundError
from commerce_records.core.logging import get_logger
from commerce_records.infrastructure.http.executor import RequestExecutor

logger = get_logger(__name__)


class Client:
    """
    Client context shared by every adapter of a session.

    Owns the HTTP transport, the settings and the resource registry, and
    lazily builds one adapter per resource type:

        client = Client(settings=Settings(ACCESS_TOKEN="..."))
        client.PriceList.find(12)
        client.adapter_for("payments").where(limit=10)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[AdapterRegistry] = None,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the client.

        Args:
            settings: Client settings; defaults to the cached environment settings
            registry: Resource registry; defaults to every shipped resource
            http_client: Preconfigured httpx client; built from settings if omitted
            transport: Optional httpx transport for the built client (e.g. MockTransport)
            sleep: Blocking sleep used by rate-limit backoff
            clock: Epoch-seconds clock used by rate-limit backoff
        """
        self.settings = settings or get_settings()
        self.registry = registry or default_registry()
        self.http_client = http_client or self._build_http_client(transport)
        self._sleep = sleep
        self._clock = clock
        self._adapters: Dict[str, RecordAdapter] = {}

    def _build_http_client(self, transport: Optional[httpx.BaseTransport]) -> httpx.Client:
        base_url = self.settings.BASE_URL
        if self.settings.API_VERSION:
            base_url += f"/{self.settings.API_VERSION.strip('/')}"

        headers = {
            "User-Agent": self.settings.USER_AGENT,
            "Accept": "application/json",
        }
        if self.settings.ACCESS_TOKEN:
            headers["Authorization"] = f"Bearer {self.settings.ACCESS_TOKEN}"

        return httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=httpx.Timeout(self.settings.DEFAULT_TIMEOUT),
            transport=transport,
        )

    @property
    def wait_when_api_limit_exceeded(self) -> bool:
        return self.settings.WAIT_WHEN_API_LIMIT_EXCEEDED

    def build_executor(self, resource_type: str) -> RequestExecutor:
        return RequestExecutor(
            self.http_client,
            self.settings,
            resource_type=resource_type,
            sleep=self._sleep,
            clock=self._clock,
        )

    def adapter_for(self, name: str) -> RecordAdapter:
        """
        Return the adapter for a model name, JSON root or collection key.

        Raises:
            AdapterNotFoundError: If the name is not registered
        """
        definition = self.registry.get(name)
        if definition is None:
            raise AdapterNotFoundError(name)

        adapter = self._adapters.get(definition.model_name)
        if adapter is None:
            adapter = definition.factory(self)
            self._adapters[definition.model_name] = adapter
            logger.debug(f"Created adapter for {definition.model_name}")
        return adapter

    def sideload_adapter(self, key: str) -> Optional[RecordAdapter]:
        """Adapter for a sideloaded collection key, or None if unknown."""
        if not self.registry.is_registered(key):
            return None
        return self.adapter_for(key)

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __getattr__(self, name: str) -> RecordAdapter:
        # Only model names (``client.PriceList``) resolve to adapters
        if name[:1].isupper():
            try:
                return self.adapter_for(name)
            except AdapterNotFoundError:
                pass
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
