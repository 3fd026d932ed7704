"""HTTP client for the snapshot service."""

from typing import Any

import httpx


class SnapshotServiceClient:
    """Thin synchronous wrapper around the snapshot service routes.

    Errors are not handled here: transport failures raise httpx.HTTPError
    and non-2xx answers raise httpx.HTTPStatusError. The checkpoint client
    decides what to do with them.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:4000",
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)
        self._owns_client = client is None

    def fetch_latest(self) -> dict[str, Any] | None:
        """Newest full record, or None when the service holds no snapshots."""
        response = self._client.get("/snapshots/latest")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    def list_snapshots(self, limit: int = 20) -> list[dict[str, Any]]:
        response = self._client.get("/snapshots", params={"limit": limit})
        response.raise_for_status()
        return response.json()

    def append(
        self, episode: int, stats: dict[str, Any], snapshot: dict[str, Any]
    ) -> dict[str, str]:
        """Store a snapshot. Returns the generated {"id", "timestamp"}."""
        response = self._client.post(
            "/snapshots",
            json={"episode": episode, "stats": stats, "snapshot": snapshot},
        )
        response.raise_for_status()
        return response.json()

    def close(self):
        if self._owns_client:
            self._client.close()
