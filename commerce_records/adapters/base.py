from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type

from commerce_records.adapters.sideload import SideloadParser
from commerce_records.core.exceptions import RecordNotFound, TransportError
from commerce_records.core.logging import get_logger
from commerce_records.domain.models.outcome import Outcome
from commerce_records.domain.models.pagination import PaginationState
from commerce_records.domain.models.record import Record
from commerce_records.infrastructure.cache.identity_map import IdentityMap
from commerce_records.infrastructure.http.executor import ApiResponse, RequestExecutor

logger = get_logger(__name__)


class RecordPage(list):
    """A list of records carrying the pagination snapshot that produced it."""

    def __init__(self, records: Iterable[Record] = (), pagination: Optional[PaginationState] = None):
        super().__init__(records)
        self.pagination = pagination


class RecordAdapter:
    """
    Generic adapter for one resource type.

    Resolves records through the identity map first, lists and paginates
    collections, and creates, updates and deletes records. One adapter
    instance owns its identity map and pagination state; it is not safe to
    share between threads.

    Example:
        price_list = client.PriceList.find(12)
        client.Payment.where(updated_at_min="2024-03-03T21:09:00")
        client.Order.where(status="active", callback=print)
    """

    def __init__(self, client: Any, record_class: Type[Record], executor: Optional[RequestExecutor] = None):
        """
        Initialize the adapter.

        Args:
            client: Client context providing the transport and adapter lookup
            record_class: Record subclass this adapter instantiates
            executor: Optional request executor; built from the client if omitted
        """
        self.client = client
        self.record_class = record_class
        self.model_name = record_class.model_name()
        self.identity_map = IdentityMap(self.model_name)
        self.executor = executor or client.build_executor(self.model_name)
        self.sideload_parser = SideloadParser(client, (self.plural_path, self.json_root))
        self._pagination: Optional[PaginationState] = None

    @property
    def json_root(self) -> str:
        return self.record_class.json_root

    @property
    def plural_path(self) -> str:
        return self.record_class.plural_path

    @property
    def pagination(self) -> Optional[PaginationState]:
        """Snapshot from the most recent listing response, if any."""
        return self._pagination

    @property
    def last_response(self) -> Optional[ApiResponse]:
        return self.executor.last_response

    # Lookups

    def find(self, record_id: Any) -> Record:
        """
        Find a record via ID, first searching the identity map, then the API.

        Raises:
            RecordNotFound: If the id is empty or the API returns 404
        """
        if self.has_record_for_id(record_id):
            return self.record_for_id(record_id)
        return self.fetch(record_id)

    def fetch(self, record_id: Any) -> Record:
        """
        Fetch a record via the API, regardless of whether it is already cached.

        Raises:
            RecordNotFound: If the id is empty or the API returns 404
        """
        self._verify_id_presence(record_id)
        try:
            response = self.executor.request("get", f"{self.plural_path}/{record_id}")
        except TransportError as e:
            if e.status_code == 404:
                raise RecordNotFound(self.model_name, record_id) from e
            raise

        self.sideload_parser.parse(response.parsed)
        record_json = self.extract_record(response.parsed)
        if not record_json:
            raise RecordNotFound(self.model_name, record_id)
        return self.instantiate_and_register_record(record_json)

    def resolve(self, record_id: Any) -> Outcome:
        """Non-raising ``find``: returns an Outcome instead of raising."""
        try:
            return Outcome.success(self.find(record_id))
        except RecordNotFound as e:
            return Outcome.not_found(e, status_code=getattr(e.__cause__, "status_code", None))
        except TransportError as e:
            return Outcome.transport_error(e, status_code=e.status_code)

    def record_for_id(self, record_id: Any) -> Record:
        """
        Search the identity map for a record via ID.

        Raises:
            RecordNotFound: If the id is empty
            RecordNotInIdentityMap: If no record is cached for the id
        """
        self._verify_id_presence(record_id)
        return self.identity_map.find(record_id)

    def has_record_for_id(self, record_id: Any) -> bool:
        return self.identity_map.has(record_id)

    def find_many(self, ids: Iterable[Any]) -> List[Record]:
        """
        Find multiple records, making a single listing request for the
        full id set if any id is not cached.

        Fetched records come first, followed by the cached ones; the
        result order does not follow ``ids``.
        """
        ids = list(ids)
        existing = [record_id for record_id in ids if self.has_record_for_id(record_id)]
        required = [record_id for record_id in ids if not self.has_record_for_id(record_id)]

        cached = [self.record_for_id(record_id) for record_id in existing]
        if not required:
            return cached

        existing_ids = set(existing)
        fetched = [record for record in self.where(ids=ids) if record.id not in existing_ids]
        return fetched + cached

    def peek_all(self) -> List[Record]:
        """All records currently in the identity map."""
        return self.identity_map.all()

    # Listing

    def where(
        self,
        params: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callable[[Record], Any]] = None,
        **filters: Any
    ) -> RecordPage:
        """
        Fetch a record collection via the API.

        Args:
            params: Filter, sort and pagination params: q, page, limit, ids,
                    updated_at_min, updated_at_max, order, status
            callback: When given, every page is traversed and the callback
                      is invoked once per record, in page order
            **filters: Merged over ``params``

        Returns:
            RecordPage: The page of records, or every record of the
            traversal when a callback is given
        """
        query: Dict[str, Any] = {**(params or {}), **filters}

        if callback is None:
            return self._fetch_page(query)

        query.update(limit=self.client.settings.DEFAULT_PAGE_LIMIT, page=1)
        page = self._fetch_page(query)
        all_the_records = list(page)
        for record in page:
            callback(record)

        while page.pagination is not None and query["page"] < page.pagination.total_pages:
            query["page"] += 1
            page = self._fetch_page(query)
            all_the_records.extend(page)
            for record in page:
                callback(record)

        logger.debug(f"Traversed {query['page']} pages of {self.model_name} ({len(all_the_records)} records)")
        return RecordPage(all_the_records, page.pagination)

    def first(self, params: Optional[Mapping[str, Any]] = None, **filters: Any) -> Optional[Record]:
        """Fetch the first record for the given parameters, or None."""
        records = self.where({**(params or {}), **filters, "limit": 1})
        return records[0] if records else None

    def forty_two(self, params: Optional[Mapping[str, Any]] = None, **filters: Any) -> Optional[Record]:
        """Fetch the forty-second record for the given parameters."""
        records = self.where({**(params or {}), **filters, "limit": 1, "page": 42})
        return records[0] if records else None

    def count(self, params: Optional[Mapping[str, Any]] = None, **filters: Any) -> int:
        """Total number of records via a ``limit=0`` listing."""
        page = self.where({**(params or {}), **filters, "limit": 0})
        if page.pagination is None:
            return len(page)
        return page.pagination.total_records

    def size(self) -> int:
        """Total from the last listing response, or a fresh ``count``."""
        if self._pagination is not None:
            return self._pagination.total_records
        return self.count()

    def _fetch_page(self, query: Mapping[str, Any]) -> RecordPage:
        response = self.executor.request("get", self.plural_path, params=dict(query))
        pagination = PaginationState.from_header(
            response.headers.get(self.client.settings.PAGINATION_HEADER),
            query,
        )
        if pagination is not None:
            self._pagination = pagination
        return RecordPage(self.parse_records(response.parsed), pagination)

    # Parsing

    def parse_records(self, body: Any) -> List[Record]:
        """Register sideloaded records, then instantiate the primary collection."""
        self.sideload_parser.parse(body)
        return [self.instantiate_and_register_record(record_json) for record_json in self.extract_collection(body)]

    def extract_collection(self, body: Any) -> List[Mapping[str, Any]]:
        if not isinstance(body, Mapping):
            return []
        return body.get(self.plural_path) or []

    def extract_record(self, body: Any) -> Optional[Mapping[str, Any]]:
        if not isinstance(body, Mapping):
            return None
        return body.get(self.json_root)

    def instantiate_and_register_record(self, record_json: Mapping[str, Any]) -> Record:
        """
        Return the cached instance for the id, refreshed with ``record_json``,
        or instantiate and register a new one.
        """
        record = self.identity_map.get(record_json.get("id"))
        if record is not None:
            record.assign_attributes(record_json)
            return record
        record = self.record_class(self.client, record_json)
        self.register_record(record)
        return record

    def register_record(self, record: Record) -> Optional[Record]:
        return self.identity_map.register(record)

    def unregister_record(self, record: Record) -> Optional[Record]:
        return self.identity_map.unregister(record)

    # Mutation

    def build(self, attributes: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Record:
        """Build a new, unpersisted record."""
        return self.record_class(self.client, attributes, **kwargs)

    def save(self, record: Record, idempotency_key: Optional[str] = None) -> Outcome:
        """
        Create or update a record.

        Returns:
            Outcome: truthy on success; on a 422 the record's errors are
            populated and the outcome is VALIDATION_FAILED
        """
        if record.persisted:
            return self.update_record(record, idempotency_key)
        return self.create_record(record, idempotency_key)

    def delete(self, record: Record, idempotency_key: Optional[str] = None) -> Outcome:
        """
        Delete a record. Unpersisted records are only unregistered.

        The record leaves the identity map even when the API rejects the
        delete with a 422.
        """
        if record.persisted:
            return self.delete_record(record, idempotency_key)
        self.unregister_record(record)
        return Outcome.success(record)

    def create_record(self, record: Record, idempotency_key: Optional[str] = None) -> Outcome:
        response = self.executor.request(
            "post",
            self.plural_path,
            body=record.as_json(),
            headers=self._headers_for(idempotency_key),
            raise_errors=False,
        )
        return self.handle_response(record, response)

    def update_record(self, record: Record, idempotency_key: Optional[str] = None) -> Outcome:
        response = self.executor.request(
            "put",
            f"{self.plural_path}/{record.id}",
            body=record.as_json(),
            headers=self._headers_for(idempotency_key),
            raise_errors=False,
        )
        return self.handle_response(record, response)

    def delete_record(self, record: Record, idempotency_key: Optional[str] = None) -> Outcome:
        response = self.executor.request(
            "delete",
            f"{self.plural_path}/{record.id}",
            headers=self._headers_for(idempotency_key),
            raise_errors=False,
        )
        outcome = self.handle_response(record, response)
        self.unregister_record(record)
        return outcome

    def handle_response(self, record: Record, response: ApiResponse) -> Outcome:
        """
        Apply a write response to the record.

        Errors from a previous write are cleared first.

        - 2xx: merge returned attributes and (re-)register the record
        - 422: fill ``record.errors`` from the response

        Raises:
            TransportError: For any other status
        """
        record.errors.clear()
        if response.ok:
            record_json = self.extract_record(response.parsed)
            if record_json:
                record.assign_attributes(record_json)
                self.register_record(record)
            return Outcome.success(record, status_code=response.status)

        if response.status == 422:
            errors = response.parsed.get("errors") if isinstance(response.parsed, Mapping) else None
            record.errors.from_response(errors)
            logger.info(f"{self.model_name} failed validation: {record.errors.full_messages()}")
            return Outcome.validation_failed(record, record.errors.to_dict())

        error = TransportError(
            detail=f"Unexpected status {response.status} for {self.model_name}",
            status_code=response.status,
            body=response.parsed if response.parsed is not None else response.text,
            response=response,
        )
        self.executor.error_handler.handle_error(error, source=f"{self.model_name} adapter")
        raise error

    def _headers_for(self, idempotency_key: Optional[str]) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key
        return headers

    def _verify_id_presence(self, record_id: Any) -> None:
        if record_id is None or record_id is False or (hasattr(record_id, "__len__") and len(record_id) == 0):
            raise RecordNotFound(self.model_name)
