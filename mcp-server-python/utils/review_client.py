"""
HTTP client for the remote CodeLens analysis service.

Wraps the two calls the review job lifecycle needs:
- POST /submit            create a review job, returns its review_id
- GET  /artifacts/{id}    fetch the finished artifact (200 only when ready)

Contract:
- All methods are async (use httpx.AsyncClient)
- All methods raise ReviewServiceError on HTTP or transport errors
- No lifecycle logic; retries and polling belong to the job controller
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx


class ReviewServiceError(Exception):
    """Raised when the analysis service rejects a request or cannot be reached.

    ``status_code`` is 0 for transport-level failures where no response exists.
    """

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        if status_code:
            super().__init__(f"Backend error ({status_code}): {detail}")
        else:
            super().__init__(detail)


class ReviewServiceClient:
    """HTTP client for the analysis service."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").strip().rstrip("/")
        self.api_key = api_key or ""
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Create the httpx client on first use."""
        if not self.base_url:
            raise ReviewServiceError(0, "Backend URL is not configured")
        if self._client is None:
            try:
                self._client = httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=self.timeout,
                    transport=self._transport,
                )
            except httpx.InvalidURL as e:
                raise ReviewServiceError(0, f"Invalid backend URL {self.base_url!r}: {e}") from e
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        client = self._ensure_client()
        try:
            return await client.request(method, path, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ReviewServiceError(0, f"Request failed: {e}") from e

    async def create_review(self, repo_url: str) -> str:
        """POST /submit - returns the review_id of the new job."""
        response = await self._send(
            "POST",
            "/submit",
            json={"repo_url": repo_url},
            headers={"Content-Type": "application/json", "x-api-key": self.api_key},
        )
        if not response.is_success:
            raise ReviewServiceError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise ReviewServiceError(response.status_code, "Response body is not valid JSON") from e

        review_id = data.get("review_id") if isinstance(data, dict) else None
        if isinstance(review_id, (dict, list, bool)) or review_id is None or not str(review_id).strip():
            raise ReviewServiceError(response.status_code, "Response did not include a review_id")
        return str(review_id)

    async def fetch_artifact(self, review_id: str) -> Any:
        """GET /artifacts/{review_id} - returns the artifact once the review is ready."""
        response = await self._send("GET", f"/artifacts/{quote(review_id, safe='')}")
        if response.status_code != 200:
            raise ReviewServiceError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise ReviewServiceError(response.status_code, "Artifact body is not valid JSON") from e
