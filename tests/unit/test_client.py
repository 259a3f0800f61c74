"""
Unit tests for the request dispatcher.

Every test runs against the FakeAPI transport from conftest, so no network
access is needed.
"""

import httpx
import pytest

from nylax.sdk.client import APIClient
from nylax.sdk.exceptions import (
    APIError,
    AuthenticationError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from nylax.sdk.models import Account, Event, File, Message, Thread


class TestHeaders:

    def test_basic_auth_uses_token_as_username(self, client):
        headers = client.create_headers()
        # base64("test-token:")
        assert headers["Authorization"] == "Basic dGVzdC10b2tlbjo="
        assert headers["X-Nylas-API-Wrapper"] == "python"

    def test_headers_sent_on_every_request(self, fake_api, client):
        fake_api.add("GET", "/threads", json=[])
        client.threads.all()
        assert fake_api.last.headers["Authorization"] == "Basic dGVzdC10b2tlbjo="
        assert fake_api.last.headers["X-Nylas-API-Wrapper"] == "python"

    def test_missing_token_still_sends_empty_basic_auth(self, fake_api):
        c = fake_api.make_client(access_token=None)
        # base64(":")
        assert c.create_headers()["Authorization"] == "Basic Og=="


class TestUrlConstruction:

    def test_collection_url(self, client):
        assert client.build_url(None, Thread) == "https://api.test/threads"

    def test_id_and_extra_segments(self, client):
        url = client.build_url(None, File, "f1", "download")
        assert url == "https://api.test/files/f1/download"

    def test_namespace_prefix(self, client):
        url = client.build_url("ns1", Event, "e1")
        assert url == "https://api.test/n/ns1/events/e1"

    def test_empty_id_adds_no_segment(self, client):
        assert client.build_url(None, Account, "") == "https://api.test/account"

    def test_action_without_collection(self, client):
        assert client.build_url(None, None, None, "send") == "https://api.test/send"

    def test_trailing_slash_on_server_is_dropped(self):
        c = APIClient(access_token="t", api_server="https://api.test/")
        assert c.build_url(None, Thread) == "https://api.test/threads"
        c.close()

    def test_default_server(self):
        c = APIClient(access_token="t")
        assert c.api_server == "https://api.nylas.com"
        c.close()


class TestFilters:

    def test_none_values_are_dropped(self):
        assert APIClient.encode_filters({"a": None, "b": "x"}) == {"b": "x"}

    def test_booleans_encode_lowercase(self):
        params = APIClient.encode_filters({"unread": True, "starred": False})
        assert params == {"unread": "true", "starred": "false"}

    def test_filters_become_query_string(self, fake_api, client):
        fake_api.add("GET", "/messages", json=[])
        client.messages.where(unread=True, **{"in": "inbox"}).all(limit=5, offset=10)
        params = dict(fake_api.last.url.params)
        assert params == {"unread": "true", "in": "inbox", "limit": "5", "offset": "10"}


class TestGetResources:

    def test_decodes_list_into_typed_objects(self, fake_api, client):
        fake_api.add("GET", "/threads", json=[
            {"id": "t1", "subject": "Hello", "unread": True, "not_an_attr": 1},
            {"id": "t2", "subject": "World", "unread": False},
        ])
        threads = client.threads.all()
        assert [t.id for t in threads] == ["t1", "t2"]
        assert all(isinstance(t, Thread) for t in threads)
        assert threads[0].subject == "Hello"
        assert not hasattr(threads[0], "not_an_attr")
        assert threads[0].api is client

    def test_empty_body_is_empty_list(self, fake_api, client):
        fake_api.add("GET", "/labels")
        assert client.labels.all() == []

    def test_namespace_is_carried_to_objects(self, fake_api, client):
        fake_api.add("GET", "/n/ns1/threads", json=[{"id": "t1"}])
        threads = client.get_resources("ns1", Thread, {})
        assert threads[0].namespace == "ns1"


class TestGetResource:

    def test_single_resource(self, fake_api, client):
        fake_api.add("GET", "/messages/m1", json={"id": "m1", "subject": "Hi",
                                                  "from": [{"email": "a@example.com"}]})
        message = client.messages.find("m1")
        assert isinstance(message, Message)
        assert message.from_ == [{"email": "a@example.com"}]

    def test_extra_filter_becomes_path_segment(self, fake_api, client):
        fake_api.add("GET", "/events/e1/ics", json={"ics": "BEGIN:VCALENDAR"})
        data = client.get_resource_raw(None, Event, "e1", {"extra": "ics", "foo": "bar"})
        assert data == {"ics": "BEGIN:VCALENDAR"}
        assert dict(fake_api.last.url.params) == {"foo": "bar"}

    def test_filters_dict_is_not_mutated(self, fake_api, client):
        fake_api.add("GET", "/events/e1/ics", json={})
        filters = {"extra": "ics"}
        client.get_resource_raw(None, Event, "e1", filters)
        assert filters == {"extra": "ics"}

    def test_account(self, fake_api, client):
        fake_api.add("GET", "/account", json={"id": "a1", "email_address": "me@example.com",
                                              "provider": "gmail", "sync_state": "running"})
        account = client.account()
        assert isinstance(account, Account)
        assert account.email_address == "me@example.com"
        assert fake_api.last.url.path == "/account"


class TestGetResourceData:

    def test_returns_raw_bytes_with_custom_headers(self, fake_api, client):
        fake_api.add("GET", "/messages/m1", content=b"From: a@example.com\r\n\r\nbody")
        data = client.get_resource_data(None, Message, "m1",
                                        {"headers": {"Accept": "message/rfc822"}})
        assert data == b"From: a@example.com\r\n\r\nbody"
        assert fake_api.last.headers["Accept"] == "message/rfc822"
        # default headers are still present
        assert fake_api.last.headers["X-Nylas-API-Wrapper"] == "python"
        assert "headers" not in fake_api.last.url.params


class TestCreateUpdateDelete:

    def test_create_posts_json(self, fake_api, client):
        fake_api.add("POST", "/labels", json={"id": "l1", "display_name": "Receipts"})
        label = client.labels.create(display_name="Receipts", id="ignored", bogus=True)
        assert label.id == "l1"
        assert fake_api.last.method == "POST"
        assert fake_api.last.headers["Content-Type"] == "application/json"
        assert fake_api.last_json() == {"display_name": "Receipts"}

    def test_create_file_is_multipart(self, fake_api, client):
        fake_api.add("POST", "/files", json=[{"id": "f1", "filename": "a.txt", "size": 5}])
        created = client.files.create(file=("a.txt", b"hello", "text/plain"))
        assert isinstance(created, File)
        assert created.id == "f1"
        assert fake_api.last.headers["Content-Type"].startswith("multipart/form-data")
        assert b"hello" in fake_api.last.content
        assert b'filename="a.txt"' in fake_api.last.content

    def test_update_puts_json(self, fake_api, client):
        fake_api.add("PUT", "/threads/t1", json={"id": "t1", "unread": False})
        thread = client.update_resource(None, Thread, "t1", {"unread": False})
        assert thread.unread is False
        assert fake_api.last.method == "PUT"
        assert fake_api.last_json() == {"unread": False}

    def test_update_file_is_rejected(self, fake_api, client):
        with pytest.raises(ValidationError):
            client.update_resource(None, File, "f1", {"filename": "b.txt"})
        assert fake_api.requests == []

    def test_delete_with_empty_body(self, fake_api, client):
        fake_api.add("DELETE", "/contacts/c1")
        assert client.contacts.delete("c1") is None
        assert fake_api.last.method == "DELETE"

    def test_delete_with_json_body(self, fake_api, client):
        fake_api.add("DELETE", "/events/e1", json={"job_status_id": "j1"})
        assert client.events.delete("e1") == {"job_status_id": "j1"}

    def test_call_resource_action(self, fake_api, client):
        fake_api.add("POST", "/send", json={"id": "m1"})
        result = client.call_resource_action(None, None, None, "send", {"draft_id": "d1"})
        assert result == {"id": "m1"}
        assert fake_api.last_json() == {"draft_id": "d1"}

    def test_call_resource_action_on_object(self, fake_api, client):
        fake_api.add("POST", "/events/e1/rsvp", json={"id": "e1", "status": "yes"})
        result = client.call_resource_action(None, Event, "e1", "rsvp", {"status": "yes"})
        assert result == {"id": "e1", "status": "yes"}
        assert fake_api.last.url.path == "/events/e1/rsvp"
        assert fake_api.last_json() == {"status": "yes"}


class TestErrors:

    def test_not_found(self, fake_api, client):
        with pytest.raises(NotFoundError) as exc:
            client.threads.find("missing")
        assert exc.value.status_code == 404
        assert exc.value.message == "Couldn't find resource"
        assert exc.value.error_type == "invalid_request_error"

    def test_unauthorized(self, fake_api, client):
        fake_api.add("GET", "/account", status=401, json={"message": "Unauthorized",
                                                           "type": "api_error"})
        with pytest.raises(AuthenticationError) as exc:
            client.account()
        assert "401" in str(exc.value)

    def test_forbidden(self, fake_api, client):
        fake_api.add("GET", "/calendars/c1", status=403, json={"message": "Forbidden"})
        with pytest.raises(AuthenticationError) as exc:
            client.calendars.find("c1")
        assert exc.value.status_code == 403

    def test_server_error_with_text_body(self, fake_api, client):
        fake_api.add("GET", "/calendars", status=500, content=b"oops")
        with pytest.raises(APIError) as exc:
            client.calendars.all()
        assert exc.value.status_code == 500
        assert exc.value.message == "oops"
        assert not isinstance(exc.value, NotFoundError)

    def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        c = APIClient(access_token="t", api_server="https://api.test",
                      transport=httpx.MockTransport(handler))
        with pytest.raises(TransportError):
            c.threads.all()
        c.close()

    def test_invalid_json(self, fake_api, client):
        fake_api.add("GET", "/threads/t1", content=b"{not json",
                     headers={"Content-Type": "application/json"})
        with pytest.raises(APIError):
            client.threads.find("t1")


class TestLifecycle:

    def test_context_manager_closes_http_client(self, fake_api):
        with fake_api.make_client() as c:
            assert not c._http.is_closed
        assert c._http.is_closed

    def test_repr_does_not_leak_token(self, client):
        assert "test-token" not in repr(client)
