"""Tests for the suppression list resource."""

import json

import httpx
import pytest

from sparkmail import (
    APIError,
    FormatError,
    InvalidArgumentError,
    NotFoundError,
    SuppressionEntry,
    TransportError,
)

from conftest import BASE_URL, error_response, json_response


LIST_BODY = {
    "results": [
        {
            "recipient": "rcpt_1@example.com",
            "transactional": True,
            "source": "Manually Added",
            "description": "User requested to not receive any transactional emails.",
            "created": "2016-01-01T12:00:00+00:00",
            "updated": "2016-01-01T12:00:00+00:00",
        },
        {
            "recipient": "rcpt_2@example.com",
            "non_transactional": True,
            "source": "Bounce Rule",
        },
    ]
}


class FakeSuppressionServer:
    """Minimal in-memory suppression list endpoint."""

    def __init__(self):
        self.entries: dict[str, dict] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        prefix = "/api/v1/suppression-list"
        email = request.url.path[len(prefix) + 1:]

        if request.method == "PUT":
            for entry in json.loads(request.content)["recipients"]:
                stored = dict(entry)
                stored["recipient"] = stored.pop("email")
                self.entries[stored["recipient"]] = stored
            return json_response(200, {"results": {"message": "Suppression List successfully updated"}})

        if request.method == "GET":
            if email:
                if email not in self.entries:
                    return error_response(404, "1600", "Recipient could not be found")
                return json_response(200, {"results": [self.entries[email]]})
            return json_response(200, {"results": list(self.entries.values())})

        if request.method == "DELETE":
            if email not in self.entries:
                return error_response(404, "1600", "Recipient could not be found")
            del self.entries[email]
            return httpx.Response(204)

        return httpx.Response(405)


class TestList:
    def test_list_decodes_results(self, make_client):
        client, recorder = make_client(lambda request: json_response(200, LIST_BODY))

        wrapper = client.suppression.list()

        assert str(recorder.last.url) == f"{BASE_URL}/api/v1/suppression-list"
        assert recorder.last.method == "GET"
        assert wrapper.recipients is None
        assert len(wrapper.results) == 2
        assert wrapper.results[0].recipient == "rcpt_1@example.com"
        assert wrapper.results[0].transactional is True
        assert wrapper.results[0].non_transactional is False
        assert wrapper.results[1].non_transactional is True
        assert wrapper.results[1].email == ""

    def test_list_uses_configured_api_version(self, make_client):
        client, recorder = make_client(lambda request: json_response(200, {"results": []}), api_version=2)

        client.suppression.list()

        assert recorder.last.url.path == "/api/v2/suppression-list"

    def test_list_sends_extra_headers(self, make_client):
        client, recorder = make_client(lambda request: json_response(200, {"results": []}))

        client.suppression.list(headers={"X-MSYS-SUBACCOUNT": "123"})

        assert recorder.last.headers["X-MSYS-SUBACCOUNT"] == "123"
        assert recorder.last.headers["Authorization"] == "test-key"

    def test_list_non_json_response(self, make_client):
        client, _ = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(FormatError, match="Expected json"):
            client.suppression.list()

    def test_list_invalid_json_body(self, make_client):
        client, _ = make_client(
            lambda request: httpx.Response(
                200, content=b"{not json", headers={"Content-Type": "application/json"}
            )
        )

        with pytest.raises(FormatError, match="Invalid JSON"):
            client.suppression.list()

    def test_list_wrong_shape(self, make_client):
        client, _ = make_client(lambda request: json_response(200, {"results": "nope"}))

        with pytest.raises(FormatError):
            client.suppression.list()

    def test_list_transport_failure(self, make_client):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = make_client(handler)

        with pytest.raises(TransportError, match="connection refused"):
            client.suppression.list()


class TestRetrieve:
    def test_retrieve_appends_address_to_path(self, make_client):
        client, recorder = make_client(lambda request: json_response(200, {"results": [LIST_BODY["results"][0]]}))

        wrapper = client.suppression.retrieve("rcpt_1@example.com")

        assert recorder.last.url.path == "/api/v1/suppression-list/rcpt_1@example.com"
        assert wrapper.results[0].recipient == "rcpt_1@example.com"


class TestSearch:
    def test_empty_parameters_match_list_url(self, make_client):
        client, recorder = make_client(lambda request: json_response(200, {"results": []}))

        client.suppression.list()
        client.suppression.search({})
        client.suppression.search(None)

        urls = [str(request.url) for request in recorder.requests]
        assert urls[0] == urls[1] == urls[2]

    def test_parameters_become_query_string(self, make_client):
        client, recorder = make_client(lambda request: json_response(200, {"results": []}))

        client.suppression.search({"types": "transactional", "limit": "5"})

        params = recorder.last.url.params
        assert recorder.last.url.path == "/api/v1/suppression-list"
        assert params["types"] == "transactional"
        assert params["limit"] == "5"

    def test_tuple_values_repeat_the_key(self, make_client):
        client, recorder = make_client(lambda request: json_response(200, {"results": []}))

        client.suppression.search({"types": ("transactional", "non_transactional")})

        assert recorder.last.url.params.get_list("types") == ["transactional", "non_transactional"]
        assert recorder.last.url.path == "/api/v1/suppression-list"

    def test_sequence_values_repeat_the_key(self, make_client):
        client, recorder = make_client(lambda request: json_response(200, {"results": []}))

        client.suppression.search({"sources": ["Bounce Rule", "Manually Added"]})

        assert recorder.last.url.params.get_list("sources") == ["Bounce Rule", "Manually Added"]


class TestDelete:
    def test_delete_success(self, make_client):
        client, recorder = make_client(lambda request: httpx.Response(204))

        response = client.suppression.delete("rcpt_1@example.com")

        assert response.status_code == 204
        assert recorder.last.method == "DELETE"
        assert recorder.last.url.path == "/api/v1/suppression-list/rcpt_1@example.com"

    def test_delete_missing_address_is_consistent(self, make_client):
        client, _ = make_client(FakeSuppressionServer())

        with pytest.raises(NotFoundError) as first:
            client.suppression.delete("gone@example.com")
        with pytest.raises(NotFoundError) as second:
            client.suppression.delete("gone@example.com")

        assert type(first.value) is type(second.value)
        assert first.value.message == second.value.message
        assert first.value.message == "SuppressionEntry does not exist, delete failed."

    def test_delete_without_error_envelope_uses_raw_body(self, make_client):
        client, _ = make_client(lambda request: httpx.Response(500, text="upstream exploded"))

        with pytest.raises(APIError) as exc_info:
            client.suppression.delete("rcpt_1@example.com")

        assert str(exc_info.value) == "500: upstream exploded"
        assert exc_info.value.status_code == 500

    def test_delete_unclassified_error_uses_raw_body(self, make_client):
        client, _ = make_client(lambda request: error_response(400, "1300", "invalid data format/type"))

        with pytest.raises(APIError) as exc_info:
            client.suppression.delete("rcpt_1@example.com")

        assert str(exc_info.value).startswith("400: ")
        assert "invalid data format/type" in str(exc_info.value)
        assert exc_info.value.errors[0].code == "1300"


class TestUpsert:
    def test_upsert_wraps_entries_in_recipients(self, make_client):
        client, recorder = make_client(lambda request: json_response(200, {"results": {"message": "ok"}}))

        client.suppression.upsert(
            [
                SuppressionEntry(email="a@example.com", transactional=True, description="opt out"),
                SuppressionEntry(email="b@example.com", non_transactional=True),
            ]
        )

        assert recorder.last.method == "PUT"
        assert recorder.last.url.path == "/api/v1/suppression-list"
        assert recorder.last_json() == {
            "recipients": [
                {"email": "a@example.com", "transactional": True, "description": "opt out"},
                {"email": "b@example.com", "non_transactional": True},
            ]
        }

    def test_upsert_none_is_rejected_before_sending(self, make_client):
        client, recorder = make_client(lambda request: json_response(200, {}))

        with pytest.raises(InvalidArgumentError, match="cannot be None"):
            client.suppression.upsert(None)

        assert recorder.requests == []

    def test_upsert_empty_list_is_sent(self, make_client):
        client, recorder = make_client(lambda request: json_response(200, {"results": {}}))

        client.suppression.upsert([])

        assert recorder.last_json() == {"recipients": []}

    def test_upsert_requires_exactly_200(self, make_client):
        client, _ = make_client(lambda request: json_response(202, {"results": {}}))

        with pytest.raises(APIError, match="^202: "):
            client.suppression.upsert([SuppressionEntry(email="a@example.com", transactional=True)])

    def test_upsert_non_json_response(self, make_client):
        client, _ = make_client(lambda request: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(FormatError):
            client.suppression.upsert([SuppressionEntry(email="a@example.com", transactional=True)])

    def test_upsert_permission_denied(self, make_client):
        client, _ = make_client(lambda request: error_response(401, "1000", "Unauthorized."))

        with pytest.raises(APIError, match="SuppressionEntry upsert failed, permission denied"):
            client.suppression.upsert([SuppressionEntry(email="a@example.com", transactional=True)])


class TestRoundTrip:
    def test_upsert_then_retrieve(self, make_client):
        client, _ = make_client(FakeSuppressionServer())

        client.suppression.upsert([SuppressionEntry(email="a@example.com", transactional=True)])
        wrapper = client.suppression.retrieve("a@example.com")

        assert len(wrapper.results) == 1
        assert wrapper.results[0].recipient == "a@example.com"
        assert wrapper.results[0].transactional is True
