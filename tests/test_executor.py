"""
Tests for the request executor: serialisation, headers and the rate-limit protocol.
"""
import json

import httpx
import pytest

from commerce_records.client import Client
from commerce_records.core.config import Settings
from commerce_records.core.exceptions import RateLimitError, TransportError
from commerce_records.infrastructure.http.executor import encode_params
from tests.conftest import NOW


def record(record_id):
    return {"price_list": {"id": record_id, "name": "Retail"}}


class TestRequestShape:

    def test_body_is_json_with_content_type(self, client, api):
        api.add("POST", "/price_lists", status=201, json_body=record(1))

        response = client.PriceList.executor.request(
            "post", "price_lists", body={"price_list": {"name": "Retail"}}, headers={"Idempotency-Key": "abc"}
        )

        request = api.requests[0]
        assert response.status == 201
        assert response.parsed == record(1)
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Idempotency-Key"] == "abc"
        assert request.headers["Authorization"] == "Bearer test-token"
        assert json.loads(request.content) == {"price_list": {"name": "Retail"}}

    def test_api_version_prefixes_paths(self, api):
        settings = Settings(BASE_URL="https://api.test/", API_VERSION="v2", _env_file=None)
        api.add("GET", "/v2/price_lists/1", json_body=record(1))

        with Client(settings=settings, transport=httpx.MockTransport(api.handler)) as versioned:
            assert versioned.PriceList.find(1).id == 1

    def test_encode_params(self):
        assert encode_params({"ids": [1, 2], "q": "x", "page": None, "is_default": True}) == {
            "ids[]": ["1", "2"],
            "q": "x",
            "is_default": "true",
        }

    def test_non_2xx_raises_transport_error(self, client, api):
        api.add("GET", "/price_lists", status=500, json_body={"message": "boom"})

        with pytest.raises(TransportError) as exc_info:
            client.PriceList.executor.request("get", "price_lists")

        assert exc_info.value.status_code == 500
        assert exc_info.value.body == {"message": "boom"}

    def test_non_raising_mode_returns_response(self, client, api):
        api.add("GET", "/price_lists", status=500, json_body={"message": "boom"})

        response = client.PriceList.executor.request("get", "price_lists", raise_errors=False)

        assert response.status == 500
        assert client.PriceList.last_response is response

    def test_network_failure_raises_transport_error(self, settings):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        with Client(settings=settings, transport=httpx.MockTransport(refuse)) as offline:
            with pytest.raises(TransportError) as exc_info:
                offline.PriceList.find(1)

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.original_exception, httpx.ConnectError)


class TestRateLimit:

    def test_waits_until_reset_then_retries_once(self, client, api, sleeps):
        api.add("GET", "/price_lists/1", status=429, headers={"X-Rate-Limit-Reset": str(int(NOW) + 5)})
        api.add("GET", "/price_lists/1", json_body=record(1))

        found = client.PriceList.find(1)

        assert found.id == 1
        assert sleeps == [5.0]
        assert len(api.requests) == 2

    def test_second_429_propagates(self, client, api, sleeps):
        api.add("GET", "/price_lists/1", status=429, headers={"X-Rate-Limit-Reset": str(int(NOW) + 5)})

        with pytest.raises(RateLimitError) as exc_info:
            client.PriceList.find(1)

        assert exc_info.value.status_code == 429
        assert sleeps == [5.0]
        assert len(api.requests) == 2

    def test_defaults_to_thirty_seconds_without_reset_hint(self, client, api, sleeps):
        api.add("GET", "/price_lists/1", status=429)
        api.add("GET", "/price_lists/1", json_body=record(1))

        client.PriceList.find(1)

        assert sleeps == [30.0]

    def test_uses_previous_response_reset_header(self, client, api, sleeps):
        api.add("GET", "/price_lists/1", json_body=record(1), headers={"X-Rate-Limit-Reset": str(int(NOW) + 12)})
        api.add("GET", "/price_lists/2", status=429)
        api.add("GET", "/price_lists/2", json_body=record(2))

        client.PriceList.find(1)
        client.PriceList.find(2)

        assert sleeps == [12.0]

    def test_reset_in_the_past_does_not_sleep_negative(self, client, api, sleeps):
        api.add("GET", "/price_lists/1", status=429, headers={"X-Rate-Limit-Reset": str(int(NOW) - 60)})
        api.add("GET", "/price_lists/1", json_body=record(1))

        client.PriceList.find(1)

        assert sleeps == [0.0]

    def test_no_wait_policy_raises_immediately(self, api, sleeps):
        settings = Settings(BASE_URL="https://api.test", WAIT_WHEN_API_LIMIT_EXCEEDED=False, _env_file=None)
        api.add("GET", "/price_lists/1", status=429, headers={"X-Rate-Limit-Reset": str(int(NOW) + 5)})

        with Client(settings=settings, transport=httpx.MockTransport(api.handler),
                    sleep=sleeps.append, clock=lambda: NOW) as strict:
            with pytest.raises(RateLimitError) as exc_info:
                strict.PriceList.find(1)

        assert exc_info.value.retry_after == 5.0
        assert sleeps == []
        assert len(api.requests) == 1

    def test_applies_to_writes(self, client, api, sleeps):
        api.add("POST", "/price_lists", status=429, headers={"X-Rate-Limit-Reset": str(int(NOW) + 1)})
        api.add("POST", "/price_lists", status=201, json_body=record(9))
        price_list = client.PriceList.build(name="Retail")

        assert client.PriceList.save(price_list)
        assert price_list.id == 9
        assert sleeps == [1.0]
