import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from commerce_records.core.config import Settings
from commerce_records.core.exceptions import RateLimitError, TransportError
from commerce_records.core.logging import get_logger
from commerce_records.infrastructure.error.handler import ErrorHandler

logger = get_logger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    """Structured response: status, case-insensitive headers and parsed JSON body."""

    status: int
    headers: httpx.Headers
    parsed: Any = None
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "ApiResponse":
        parsed = None
        if response.content:
            try:
                parsed = response.json()
            except ValueError:
                parsed = None
        return cls(
            status=response.status_code,
            headers=response.headers,
            parsed=parsed,
            text=response.text,
        )


def encode_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Encode query params the way the API expects.

    Sequences become ``key[]`` repeats, booleans are lower-cased and None
    values are dropped.
    """
    encoded: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple, set)):
            encoded[f"{key}[]"] = [str(v) for v in value]
        elif isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        else:
            encoded[key] = value
    return encoded


class RequestExecutor:
    """
    Issues requests for one adapter and applies the rate-limit protocol.

    On a 429, if waiting is allowed, the executor sleeps until the
    rate-limit reset time and retries exactly once. A second 429, or a 429
    when waiting is disabled, raises ``RateLimitError``.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        settings: Settings,
        resource_type: str = "",
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the executor.

        Args:
            http_client: Transport shared by the client's adapters
            settings: Client settings (rate-limit policy and header names)
            resource_type: Model name of the owning adapter, for logging
            sleep: Blocking sleep used for rate-limit backoff
            clock: Epoch-seconds clock used to compute the backoff
        """
        self.http_client = http_client
        self.settings = settings
        self.resource_type = resource_type
        self._sleep = sleep
        self._clock = clock
        self._last_response: Optional[ApiResponse] = None
        self.error_handler = ErrorHandler(logger)

    @property
    def last_response(self) -> Optional[ApiResponse]:
        return self._last_response

    def request(
        self,
        verb: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        raise_errors: bool = True,
    ) -> ApiResponse:
        """
        Make a request to the API.

        Args:
            verb: HTTP method
            path: Path relative to the client's base URL
            params: Query params
            body: JSON-serialisable request body
            headers: Extra headers (e.g. Idempotency-Key)
            raise_errors: Raise TransportError for non-2xx statuses; when
                          False the response is returned for inspection.
                          429 handling applies either way.

        Returns:
            ApiResponse: The final response

        Raises:
            RateLimitError: If the API limit is exceeded and cannot be waited out
            TransportError: For network failures, or non-2xx when raise_errors
        """
        method = verb.upper()
        request_headers = {"Content-Type": "application/json"}
        request_headers.update(headers or {})
        content = json.dumps(body) if body is not None else None
        query = encode_params(params)

        response = self._send(method, path, query, content, request_headers)

        if response.status == 429:
            if not self.settings.WAIT_WHEN_API_LIMIT_EXCEEDED:
                self._last_response = response
                raise self._report(self._rate_limit_error(response, method, path), method, path)

            sleep_for = self.rate_limit_wait(response)
            logger.warning(
                f"API limit exceeded for {method} {path}, retrying in {sleep_for:.1f}s",
                extra={"data": {"resource_type": self.resource_type, "sleep_for": sleep_for}}
            )
            self._sleep(sleep_for)
            response = self._send(method, path, query, content, request_headers)

            if response.status == 429:
                self._last_response = response
                raise self._report(self._rate_limit_error(response, method, path), method, path)

        self._last_response = response

        if raise_errors and not response.ok:
            error = TransportError(
                detail=f"{method} {path} failed with status {response.status}",
                status_code=response.status,
                body=response.parsed if response.parsed is not None else response.text,
                response=response,
            )
            raise self._report(error, method, path)

        return response

    def rate_limit_wait(self, limited: ApiResponse) -> float:
        """
        Seconds to wait before retrying a rate-limited request.

        Uses the reset header of the 429 itself, else of the previous
        response, else the configured default. Never negative.
        """
        header = self.settings.RATE_LIMIT_RESET_HEADER
        for candidate in (limited, self._last_response):
            if candidate is None:
                continue
            reset = candidate.headers.get(header)
            if not reset:
                continue
            try:
                return max(0.0, float(reset) - self._clock())
            except ValueError:
                logger.debug(f"Ignoring unreadable {header} header: {reset!r}")
        return self.settings.DEFAULT_RATE_LIMIT_WAIT

    def _send(
        self,
        method: str,
        path: str,
        params: Dict[str, Any],
        content: Optional[str],
        headers: Dict[str, str],
    ) -> ApiResponse:
        started = time.perf_counter()
        try:
            raw = self.http_client.request(method, path, params=params, content=content, headers=headers)
        except httpx.RequestError as e:
            error = TransportError(
                detail=f"{method} {path} failed: {e}",
                original_exception=e,
            )
            raise self._report(error, method, path) from e

        response = ApiResponse.from_httpx(raw)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            f"request.records {method} {path} -> {response.status} ({elapsed_ms:.1f}ms)",
            extra={"data": {
                "verb": method,
                "request_path": path,
                "params": params,
                "resource_type": self.resource_type,
                "status": response.status,
                "elapsed_ms": round(elapsed_ms, 1),
            }}
        )
        return response

    def _rate_limit_error(self, response: ApiResponse, method: str, path: str) -> RateLimitError:
        reset = response.headers.get(self.settings.RATE_LIMIT_RESET_HEADER)
        retry_after = None
        if reset:
            try:
                retry_after = max(0.0, float(reset) - self._clock())
            except ValueError:
                retry_after = None
        return RateLimitError(
            detail=f"API limit exceeded for {method} {path}",
            retry_after=retry_after,
            body=response.parsed if response.parsed is not None else response.text,
            response=response,
        )

    def _report(self, error: TransportError, method: str, path: str) -> TransportError:
        self.error_handler.handle_error(
            error,
            source=f"{self.resource_type or 'record'} adapter",
            context={"verb": method, "request_path": path},
        )
        return error
