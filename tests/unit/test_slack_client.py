"""Tests for SlackClient against an in-process httpx transport."""

import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from pydantic import ValidationError

from slacksift.core.config import SlackConfig
from slacksift.core.errors import (
    GENERIC_ERROR_MESSAGE,
    CrossOriginBlocked,
    DeleteFailure,
    InvalidPermalink,
    SearchFailure,
)
from slacksift.core.schemas import SearchCriteria
from slacksift.platforms.slack.client import SlackClient

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"

PERMALINK = "https://acme.slack.com/archives/C123/p1690000000123456"

Handler = Callable[[httpx.Request], httpx.Response]


def _load_search_response() -> dict[str, object]:
    return json.loads((FIXTURES_DIR / "slack_search_response.json").read_text())


class Recorder:
    """MockTransport handler that records requests and replies with a fixed response."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


def _client(
    handler: Handler,
    *,
    token: str = "xoxp-test",
    proxy_url: str | None = None,
) -> tuple[SlackClient, Recorder]:
    recorder = Recorder(handler)
    config = SlackConfig(token=token, proxy_url=proxy_url)
    return SlackClient(config, transport=httpx.MockTransport(recorder)), recorder


def _json(status: int, body: object) -> Handler:
    return lambda request: httpx.Response(status, json=body)


def _raise(exc: Exception) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    return handler


# ---------------------------------------------------------------------------
# validate_token
# ---------------------------------------------------------------------------
class TestValidateToken:
    async def test_ok_true(self) -> None:
        client, recorder = _client(_json(200, {"ok": True, "user": "alice"}))
        assert await client.validate_token() is True

        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://slack.com/api/auth.test"
        assert request.headers["Authorization"] == "Bearer xoxp-test"

    async def test_ok_false(self) -> None:
        client, _ = _client(_json(200, {"ok": False, "error": "invalid_auth"}))
        assert await client.validate_token() is False

    async def test_non_2xx(self) -> None:
        client, _ = _client(_json(500, {"ok": True}))
        assert await client.validate_token() is False

    async def test_malformed_body(self) -> None:
        client, _ = _client(lambda request: httpx.Response(200, text="<html>nope</html>"))
        assert await client.validate_token() is False

    async def test_non_object_body(self) -> None:
        client, _ = _client(_json(200, ["ok"]))
        assert await client.validate_token() is False

    async def test_transport_error_never_raises(self) -> None:
        client, _ = _client(_raise(httpx.ConnectError("connection refused")))
        assert await client.validate_token() is False


# ---------------------------------------------------------------------------
# search_messages
# ---------------------------------------------------------------------------
class TestSearchMessages:
    async def test_parses_matches(self) -> None:
        client, _ = _client(_json(200, _load_search_response()))

        response = await client.search_messages(SearchCriteria(prompt_text="deploy"))

        assert response.ok is True
        assert response.total == 3
        assert [m.internal_id for m in response.matches] == [
            "a1b2c3d4-0001", "a1b2c3d4-0002", "a1b2c3d4-0003",
        ]
        first = response.matches[0]
        assert first.author_name == "alice"
        assert first.timestamp == "1690000000.123456"
        assert first.channel_name == "ops"
        assert first.permalink_url == PERMALINK
        assert response.matches[2].channel_name is None

    async def test_request_shape(self) -> None:
        client, recorder = _client(_json(200, {"ok": True, "messages": {"matches": []}}))

        await client.search_messages(
            SearchCriteria(prompt_text="deploy", channel_filter="ops", user_filter="alice"),
        )

        request = recorder.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/api/search.messages"
        assert request.url.params["query"] == "deploy"
        assert request.url.params["count"] == "100"
        assert request.url.params["in"] == "ops"
        assert request.url.params["from"] == "alice"
        assert request.headers["Authorization"] == "Bearer xoxp-test"

    async def test_empty_prompt_wildcard_and_no_filters(self) -> None:
        client, recorder = _client(_json(200, {"ok": True, "messages": {"matches": []}}))

        await client.search_messages(SearchCriteria())

        params = recorder.requests[0].url.params
        assert params["query"] == "*"
        assert "in" not in params
        assert "from" not in params

    async def test_missing_messages_key_is_empty(self) -> None:
        client, _ = _client(_json(200, {"ok": True}))
        response = await client.search_messages(SearchCriteria(prompt_text="x"))
        assert response.matches == []

    async def test_ok_false_raises_with_platform_error(self) -> None:
        client, _ = _client(_json(200, {"ok": False, "error": "not_allowed_token_type"}))

        with pytest.raises(SearchFailure, match="not_allowed_token_type") as exc_info:
            await client.search_messages(SearchCriteria(prompt_text="x"))
        assert exc_info.value.error_code == "not_allowed_token_type"

    async def test_http_error_status_raises(self) -> None:
        client, _ = _client(_json(429, {"ok": False, "error": "ratelimited"}))

        with pytest.raises(SearchFailure, match="ratelimited"):
            await client.search_messages(SearchCriteria(prompt_text="x"))

    async def test_http_error_without_body_uses_generic_message(self) -> None:
        client, _ = _client(lambda request: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(SearchFailure) as exc_info:
            await client.search_messages(SearchCriteria(prompt_text="x"))
        assert str(exc_info.value) == GENERIC_ERROR_MESSAGE

    async def test_transport_error_reraised(self) -> None:
        client, _ = _client(_raise(httpx.ConnectError("connection refused")))

        with pytest.raises(httpx.ConnectError):
            await client.search_messages(SearchCriteria(prompt_text="x"))

    async def test_cross_origin_error_surfaced_distinctly(self) -> None:
        client, _ = _client(_raise(httpx.ConnectError("blocked by CORS policy")))

        with pytest.raises(CrossOriginBlocked) as exc_info:
            await client.search_messages(SearchCriteria(prompt_text="x"))
        assert isinstance(exc_info.value, SearchFailure)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_match_without_ts_raises_search_failure(self) -> None:
        body = {"ok": True, "messages": {"matches": [{"iid": "x", "text": "hi"}]}}
        client, _ = _client(_json(200, body))

        with pytest.raises(SearchFailure) as exc_info:
            await client.search_messages(SearchCriteria(prompt_text="x"))
        assert exc_info.value.error_code == "malformed_response"
        assert isinstance(exc_info.value.__cause__, ValidationError)

    async def test_null_total_falls_back_to_match_count(self) -> None:
        body = _load_search_response()
        body["messages"]["total"] = None  # type: ignore[index]
        client, _ = _client(_json(200, body))

        response = await client.search_messages(SearchCriteria(prompt_text="x"))

        assert response.total == 3

    async def test_null_total_with_no_matches(self) -> None:
        client, _ = _client(_json(200, {"ok": True, "messages": {"matches": [], "total": None}}))
        response = await client.search_messages(SearchCriteria(prompt_text="x"))
        assert response.total == 0
        assert response.matches == []

    async def test_non_numeric_total_raises_search_failure(self) -> None:
        body = {"ok": True, "messages": {"matches": [], "total": "lots"}}
        client, _ = _client(_json(200, body))

        with pytest.raises(SearchFailure, match="malformed search response"):
            await client.search_messages(SearchCriteria(prompt_text="x"))


# ---------------------------------------------------------------------------
# delete_message
# ---------------------------------------------------------------------------
class TestDeleteMessage:
    async def test_posts_channel_and_ts(self) -> None:
        client, recorder = _client(
            _json(200, {"ok": True, "channel": "C123", "ts": "1690000000.123456"}),
        )

        response = await client.delete_message(PERMALINK)

        assert response.ok is True
        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://slack.com/api/chat.delete"
        assert json.loads(request.content) == {"channel": "C123", "ts": "1690000000.123456"}

    async def test_invalid_permalink_makes_no_request(self) -> None:
        client, recorder = _client(_json(200, {"ok": True}))

        with pytest.raises(InvalidPermalink):
            await client.delete_message("https://acme.slack.com/archives/C123")
        assert recorder.requests == []

    async def test_ok_false_raises(self) -> None:
        client, _ = _client(_json(200, {"ok": False, "error": "cant_delete_message"}))

        with pytest.raises(DeleteFailure, match="cant_delete_message"):
            await client.delete_message(PERMALINK)

    async def test_http_error_raises(self) -> None:
        client, _ = _client(_json(404, {"ok": False, "error": "message_not_found"}))

        with pytest.raises(DeleteFailure, match="message_not_found"):
            await client.delete_message(PERMALINK)

    async def test_transport_error_wrapped(self) -> None:
        client, _ = _client(_raise(httpx.ReadTimeout("timed out")))

        with pytest.raises(DeleteFailure, match="timed out"):
            await client.delete_message(PERMALINK)


# ---------------------------------------------------------------------------
# Proxy mode
# ---------------------------------------------------------------------------
class TestProxyMode:
    async def test_proxy_prefix_and_token_header(self) -> None:
        client, recorder = _client(
            _json(200, {"ok": True}),
            proxy_url="https://relay.example.com/",
        )

        assert await client.validate_token() is True

        request = recorder.requests[0]
        assert request.url.host == "relay.example.com"
        assert str(request.url).endswith("slack.com/api/auth.test")
        assert request.headers["X-Slack-Token"] == "xoxp-test"
        assert "Authorization" not in request.headers

    async def test_blank_proxy_is_direct(self) -> None:
        client, recorder = _client(_json(200, {"ok": True}), proxy_url="  ")

        await client.validate_token()

        request = recorder.requests[0]
        assert request.url.host == "slack.com"
        assert request.headers["Authorization"] == "Bearer xoxp-test"

    def test_platform_id(self) -> None:
        client, _ = _client(_json(200, {"ok": True}))
        assert client.platform_id == "slack"
