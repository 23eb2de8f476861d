# === NAVMAP v1 ===
# {
#   "module": "tests.network.test_executor",
#   "purpose": "Exercise request execution, validation outcomes, and request logging.",
#   "sections": [
#     {"id": "tests", "name": "Test Cases", "anchor": "TST", "kind": "tests"}
#   ]
# }
# === /NAVMAP ===

"""Request executor: logging, validation, outcomes, and cache extensions."""

from __future__ import annotations

import httpx
import pytest

from NetToolKit.cancellation import CancellationToken
from NetToolKit.errors import (
    ContentTypeError,
    DecodeError,
    HttpStatusError,
    RequestCancelled,
    UnacceptableStatusCode,
)
from NetToolKit.network.correlation import CorrelationCounter
from NetToolKit.network.decoding import decode_json
from NetToolKit.network.executor import RequestExecutor
from NetToolKit.network.outcome import Failure, Success
from NetToolKit.network.request import CachePolicy, RequestDescriptor
from NetToolKit.network.validation import JSON_VALIDATION, ResponseValidation
from tests.fixtures.http_mocking import MockResponseBuilder


class ExplodingSink:
    def debug(self, message):
        raise RuntimeError("sink down")

    def error(self, message):
        raise RuntimeError("sink down")


@pytest.fixture
def executor(mocked_http_client, recording_sink):
    return RequestExecutor(mocked_http_client, sink=recording_sink)


class TestExecute:
    def test_success_returns_raw_body_and_logs_both_directions(self, router, executor, recording_sink):
        router.add("GET", "/items", MockResponseBuilder().with_json({"a": 1}))

        outcome = executor.execute(RequestDescriptor("/items", params={"page": 1}), JSON_VALIDATION)

        assert isinstance(outcome, Success)
        assert outcome.ok
        assert outcome.unwrap() == b'{"a": 1}'
        assert recording_sink.records == [
            ("debug", "API OUT [1]: GET /items {'page': 1}"),
            ("debug", 'API IN [1]: {\n  "a": 1\n}'),
        ]

    def test_correlation_ids_increase_per_request(self, router, executor, recording_sink):
        router.add("GET", "/a", MockResponseBuilder().with_json([]))

        for _ in range(3):
            executor.execute(RequestDescriptor("/a"))

        outbound = recording_sink.messages("debug")[::2]
        assert outbound == [f"API OUT [{i}]: GET /a {{}}" for i in (1, 2, 3)]

    def test_shared_counter_keeps_ids_unique(self, mocked_http_client, router, recording_sink):
        router.add("GET", "/a", MockResponseBuilder().with_json([]))
        counter = CorrelationCounter()
        first = RequestExecutor(mocked_http_client, sink=recording_sink, counter=counter)
        second = RequestExecutor(mocked_http_client, sink=recording_sink, counter=counter)

        first.execute(RequestDescriptor("/a"))
        second.execute(RequestDescriptor("/a"))

        assert recording_sink.messages()[0].startswith("API OUT [1]")
        assert recording_sink.messages()[2].startswith("API OUT [2]")

    def test_binary_body_logged_as_hex(self, router, executor, recording_sink):
        router.add("GET", "/blob", MockResponseBuilder().with_content(b"\x00\xff", "application/octet-stream"))

        outcome = executor.execute(RequestDescriptor("/blob"))

        assert outcome.unwrap() == b"\x00\xff"
        assert recording_sink.messages()[-1] == "API IN [1]: 00ff"

    def test_status_failure_returns_http_status_error(self, router, executor, recording_sink):
        router.add("GET", "/missing", MockResponseBuilder(404).with_json({"error": "nf"}))

        outcome = executor.execute(RequestDescriptor("/missing"), JSON_VALIDATION)

        assert isinstance(outcome, Failure)
        assert not outcome.ok
        assert isinstance(outcome.error, HttpStatusError)
        assert outcome.error.status_code == 404
        assert outcome.error.json == {"error": "nf"}
        assert recording_sink.records[-1] == (
            "error",
            'API IN [1]: [statusCode: 404]\n{\n  "error": "nf"\n}',
        )
        with pytest.raises(HttpStatusError):
            outcome.unwrap()

    def test_content_type_failure_returns_content_type_error(self, router, executor, recording_sink):
        router.add("GET", "/page", MockResponseBuilder().with_content("<html/>", "text/html"))

        outcome = executor.execute(
            RequestDescriptor("/page"), ResponseValidation.accepting(["application/json"])
        )

        assert isinstance(outcome.error, ContentTypeError)
        assert outcome.error.status_code == 200
        assert outcome.error.raw_data == b"<html/>"
        assert recording_sink.records[-1] == ("error", "API IN [1]: [statusCode: 200]\nNo json")

    def test_transport_error_returned_unmodified(self, router, executor, recording_sink):
        boom = httpx.ConnectError("connection refused")
        router.add("GET", "/down", boom)

        outcome = executor.execute(RequestDescriptor("/down"))

        assert outcome.error is boom
        # Outbound line only; nothing inbound was received
        assert recording_sink.messages() == ["API OUT [1]: GET /down {}"]

    def test_sink_failure_does_not_abort_request(self, router, mocked_http_client):
        router.add("GET", "/items", MockResponseBuilder().with_json({"a": 1}))
        router.add("GET", "/bad", MockResponseBuilder(500))
        executor = RequestExecutor(mocked_http_client, sink=ExplodingSink())

        assert executor.execute(RequestDescriptor("/items")).unwrap() == b'{"a": 1}'
        assert isinstance(executor.execute(RequestDescriptor("/bad")).error, HttpStatusError)

    def test_default_sink_discards(self, router, mocked_http_client):
        router.add("GET", "/items", MockResponseBuilder().with_json({"a": 1}))
        executor = RequestExecutor(mocked_http_client)

        assert executor.execute(RequestDescriptor("/items")).ok

    @pytest.mark.parametrize("body", [b"[" * 200000, b"1" * 5000])
    def test_unparseable_error_body_still_yields_http_status_error(
        self, router, executor, recording_sink, body
    ):
        router.add("GET", "/x", MockResponseBuilder(500).with_content(body, "application/json"))

        outcome = executor.execute(RequestDescriptor("/x"))

        assert isinstance(outcome.error, HttpStatusError)
        assert outcome.error.status_code == 500
        assert outcome.error.raw_data == body
        assert recording_sink.records[-1][0] == "error"

    def test_deeply_nested_success_body_logged_as_hex(self, router, executor, recording_sink):
        body = b"[" * 200000
        router.add("GET", "/deep", MockResponseBuilder().with_content(body, "application/json"))

        assert executor.execute(RequestDescriptor("/deep")).unwrap() == body
        assert recording_sink.messages()[-1] == f"API IN [1]: {body.hex()}"


class TestCancellationToken:
    def test_cancelled_before_send_never_reaches_transport(self, router, executor):
        token = CancellationToken()
        token.cancel()

        outcome = executor.execute(RequestDescriptor("/items"), token=token)

        assert isinstance(outcome.error, RequestCancelled)
        assert router.requests == []

    def test_cancelled_after_receipt_discards_response(self, router, executor, recording_sink):
        token = CancellationToken()

        def respond_then_cancel(request):
            token.cancel()
            return MockResponseBuilder().with_json({"late": True}).build()

        router.add("GET", "/slow", respond_then_cancel)

        outcome = executor.execute(RequestDescriptor("/slow"), token=token)

        assert isinstance(outcome.error, RequestCancelled)
        assert len(router.requests) == 1
        assert not any(msg.startswith("API IN") for msg in recording_sink.messages())


class TestCacheExtensions:
    @pytest.mark.parametrize(
        "policy, expected",
        [
            (CachePolicy.CACHE, {"force_cache": True}),
            (CachePolicy.DO_NOT_CACHE, {"cache_disabled": True}),
        ],
    )
    def test_policy_reaches_transport(self, router, executor, policy, expected):
        router.add("GET", "/c", MockResponseBuilder().with_json({}))

        executor.execute(RequestDescriptor("/c", cache_policy=policy))

        sent = router.requests[0]
        for key, value in expected.items():
            assert sent.extensions[key] == value

    def test_default_policy_adds_nothing(self, router, executor):
        router.add("GET", "/c", MockResponseBuilder().with_json({}))

        executor.execute(RequestDescriptor("/c", cache_policy=CachePolicy.DEFAULT))

        assert "force_cache" not in router.requests[0].extensions
        assert "cache_disabled" not in router.requests[0].extensions


class TestExecuteRequest:
    def test_serializer_result_returned(self, router, executor, mocked_http_client, recording_sink):
        router.add("GET", "/items", MockResponseBuilder().with_json({"a": 1}))
        request = mocked_http_client.build_request("GET", "/items")

        outcome = executor.execute_request(request, JSON_VALIDATION, serializer=decode_json)

        assert outcome.unwrap() == {"a": 1}
        assert recording_sink.records == []

    def test_serializer_error_is_unwrapped(self, router, executor, mocked_http_client):
        router.add("GET", "/items", MockResponseBuilder().with_content("nope", "text/plain"))
        request = mocked_http_client.build_request("GET", "/items")

        outcome = executor.execute_request(request, JSON_VALIDATION, serializer=decode_json)

        assert isinstance(outcome.error, DecodeError)

    def test_validation_error_surfaces_raw(self, router, executor, mocked_http_client):
        router.add("GET", "/gone", MockResponseBuilder(410).with_json({}))
        request = mocked_http_client.build_request("GET", "/gone")

        outcome = executor.execute_request(request)

        assert isinstance(outcome.error, UnacceptableStatusCode)
        assert outcome.error.status_code == 410
