"""Tests for the Overpass client's retry policy and failure outcomes."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from mapcanvas.collectors.osm.api_client import (
    OverpassAPIClient,
    OverpassTimeoutError,
    OverpassTransportError,
    QueryTooLargeError,
    RateLimitedError,
)
from mapcanvas.models import FetchOutcome


def http_response(status: int, payload=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    if status >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    else:
        response.raise_for_status.return_value = None
    response.json.return_value = payload if payload is not None else {"elements": []}
    return response


@pytest.fixture()
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture()
def client(map_config, session) -> OverpassAPIClient:
    return OverpassAPIClient(map_config.api, session=session)


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("mapcanvas.collectors.osm.api_client.time.sleep") as sleep:
        yield sleep


class TestQuery:
    def test_success(self, client, session) -> None:
        session.post.return_value = http_response(200, {"elements": [{"type": "node"}]})

        assert client.query("[out:json];") == {"elements": [{"type": "node"}]}
        args, kwargs = session.post.call_args
        assert kwargs["data"] == {"data": "[out:json];"}
        assert kwargs["headers"]["User-Agent"] == "mapcanvas/1.0"

    def test_rate_limited_not_retried(self, client, session) -> None:
        session.post.return_value = http_response(429)

        with pytest.raises(RateLimitedError) as exc_info:
            client.query("q")
        assert exc_info.value.outcome == FetchOutcome.RATE_LIMITED
        assert exc_info.value.status_code == 429
        assert session.post.call_count == 1

    def test_bad_request_is_query_too_large(self, client, session) -> None:
        session.post.return_value = http_response(400)

        with pytest.raises(QueryTooLargeError) as exc_info:
            client.query("q")
        assert exc_info.value.outcome == FetchOutcome.QUERY_TOO_LARGE
        assert session.post.call_count == 1

    def test_gateway_timeout_retried_then_timeout(self, client, session, map_config) -> None:
        session.post.return_value = http_response(504)

        with pytest.raises(OverpassTimeoutError) as exc_info:
            client.query("q")
        assert exc_info.value.outcome == FetchOutcome.TIMEOUT
        assert session.post.call_count == map_config.api.max_retries

    def test_client_timeout_recovers(self, client, session) -> None:
        session.post.side_effect = [requests.exceptions.Timeout(), http_response(200)]
        assert client.query("q") == {"elements": []}
        assert session.post.call_count == 2

    def test_client_timeout_exhausted(self, client, session) -> None:
        session.post.side_effect = requests.exceptions.Timeout()
        with pytest.raises(OverpassTimeoutError):
            client.query("q")

    def test_retry_delay_grows(self, client, session, no_sleep) -> None:
        session.post.side_effect = requests.exceptions.Timeout()
        with pytest.raises(OverpassTimeoutError):
            client.query("q", retry_delay=2.0)
        assert [c.args[0] for c in no_sleep.call_args_list] == [2.0, 4.0]

    def test_server_error_is_transport_error(self, client, session) -> None:
        session.post.return_value = http_response(500)
        with pytest.raises(OverpassTransportError) as exc_info:
            client.query("q")
        assert exc_info.value.outcome == FetchOutcome.TRANSPORT_ERROR

    def test_connection_error_retried(self, client, session, map_config) -> None:
        session.post.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(OverpassTransportError):
            client.query("q")
        assert session.post.call_count == map_config.api.max_retries

    def test_invalid_json(self, client, session) -> None:
        response = http_response(200)
        response.json.side_effect = ValueError("not json")
        session.post.return_value = response

        with pytest.raises(OverpassTransportError):
            client.query("q")
        assert session.post.call_count == 1
