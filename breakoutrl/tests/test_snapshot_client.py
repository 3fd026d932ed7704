"""Tests for the HTTP snapshot service client."""

import httpx
import pytest
from fastapi.testclient import TestClient

from breakoutrl.training.snapshot_client import SnapshotServiceClient


@pytest.fixture
def service_client(snapshot_app):
    with TestClient(snapshot_app) as http:
        yield SnapshotServiceClient(client=http)


def mock_client(handler) -> SnapshotServiceClient:
    http = httpx.Client(base_url="http://snapshots.test", transport=httpx.MockTransport(handler))
    return SnapshotServiceClient(base_url="http://snapshots.test", client=http)


class TestSnapshotServiceClient:
    """Client against the real application"""

    def test_fetch_latest_empty_returns_none(self, service_client):
        assert service_client.fetch_latest() is None

    def test_append_then_fetch(self, service_client):
        created = service_client.append(4, {"score": 2}, {"epsilon": 0.7})

        latest = service_client.fetch_latest()

        assert latest["id"] == created["id"]
        assert latest["episode"] == 4
        assert latest["snapshot"] == {"epsilon": 0.7}

    def test_list_snapshots(self, service_client):
        for episode in range(1, 6):
            service_client.append(episode, {"score": episode}, {"epsilon": 0.5})

        page = service_client.list_snapshots(limit=2)

        assert [record["episode"] for record in page] == [4, 5]

    def test_invalid_append_raises_status_error(self, service_client):
        with pytest.raises(httpx.HTTPStatusError) as excinfo:
            service_client.append("x", {}, {})
        assert excinfo.value.response.status_code == 400


class TestSnapshotServiceClientErrors:
    """Client behaviour on transport and server failures"""

    def test_server_error_raises(self):
        client = mock_client(lambda request: httpx.Response(500, json={"message": "boom"}))
        with pytest.raises(httpx.HTTPStatusError):
            client.fetch_latest()

    def test_connection_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = mock_client(handler)
        with pytest.raises(httpx.ConnectError):
            client.fetch_latest()

    def test_append_sends_wire_body(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = request.read()
            return httpx.Response(201, json={"id": "1-abcdef", "timestamp": "t"})

        client = mock_client(handler)
        created = client.append(3, {"score": 1}, {"epsilon": 0.2})

        assert created["id"] == "1-abcdef"
        assert seen["path"] == "/snapshots"
        assert httpx.Response(200, content=seen["body"]).json() == {
            "episode": 3,
            "stats": {"score": 1},
            "snapshot": {"epsilon": 0.2},
        }

    def test_close_leaves_injected_client_open(self):
        http = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
        SnapshotServiceClient(client=http).close()
        assert not http.is_closed

    def test_close_owned_client(self):
        client = SnapshotServiceClient("http://localhost:1/")
        assert client.base_url == "http://localhost:1"
        client.close()
        assert client._client.is_closed
