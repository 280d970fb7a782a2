"""
Async HTTP client for the MCQ extraction backend.

Wraps the six JSON endpoints the client consumes plus the artifact download.
Every failure (network error, non-2xx, undecodable body) surfaces as
BackendRequestError so callers only handle one transport exception type.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from constants import (
    CURRENT_SETUP_ID,
    EXTRACTION_POLL_PATH,
    EXTRACTION_START_PATH,
    SETUP_FORCE_RESET_PATH,
    SETUP_POLL_PATH,
    SETUP_START_PATH,
    SETUP_STATE_PATH,
    JobKind,
)
from services.backend_errors import BackendRequestError
from services.config import ClientConfig

logger = logging.getLogger(__name__)


def _error_detail(response: httpx.Response) -> Optional[str]:
    """Extract the backend's `detail` field from an error response, if any."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("detail"):
        return str(data["detail"])
    return None


class BackendClient:
    """Thin async wrapper around the backend's job API."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or ClientConfig.from_env()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the persistent HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.backend_url,
                # No implicit timeout: only an explicitly configured one applies
                timeout=httpx.Timeout(self.config.request_timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the persistent HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(
        self, method: str, path: str, json: Optional[dict] = None
    ) -> Dict[str, Any]:
        try:
            response = await self._get_client().request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise BackendRequestError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            detail = _error_detail(response)
            logger.warning(
                f"{method} {path} returned HTTP {response.status_code}"
                + (f": {detail}" if detail else "")
            )
            raise BackendRequestError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                detail=detail,
            )

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise BackendRequestError(
                f"{method} {path} returned a non-JSON body",
                status_code=response.status_code,
            ) from e
        return data if isinstance(data, dict) else {}

    # --------------------------
    # Setup job
    # --------------------------

    async def get_setup_state(self) -> Dict[str, Any]:
        return await self._request("GET", SETUP_STATE_PATH)

    async def start_setup(self) -> Dict[str, Any]:
        return await self._request("POST", SETUP_START_PATH)

    async def get_setup_job_status(self, setup_id: str) -> Dict[str, Any]:
        # Attached to a running setup whose id is unknown: read the global state
        if setup_id == CURRENT_SETUP_ID:
            return await self.get_setup_state()
        return await self._request("GET", SETUP_POLL_PATH.format(id=setup_id))

    async def force_reset_setup(self) -> Dict[str, Any]:
        return await self._request("POST", SETUP_FORCE_RESET_PATH)

    # --------------------------
    # Extraction job
    # --------------------------

    async def start_extraction(
        self, topic: str, exam_type: str, pdf_format: str
    ) -> Dict[str, Any]:
        return await self._request(
            "POST",
            EXTRACTION_START_PATH,
            json={"topic": topic, "exam_type": exam_type, "pdf_format": pdf_format},
        )

    async def get_job_status(self, job_id: str) -> Dict[str, Any]:
        return await self._request("GET", EXTRACTION_POLL_PATH.format(id=job_id))

    async def fetch_status(self, handle) -> Dict[str, Any]:
        """Fetch the current status payload for a job handle of either kind."""
        if handle.kind == JobKind.SETUP:
            return await self.get_setup_job_status(handle.id)
        return await self.get_job_status(handle.id)

    # --------------------------
    # Artifacts
    # --------------------------

    def artifact_url(self, artifact_ref: str) -> str:
        """Absolute URL of a backend-provided artifact path (e.g. pdf_url)."""
        if artifact_ref.startswith(("http://", "https://")):
            return artifact_ref
        return f"{self.config.backend_url}{artifact_ref}"

    async def download_artifact(self, artifact_ref: str, dest: Path) -> Path:
        """Stream an artifact to `dest` and return the written path."""
        url = self.artifact_url(artifact_ref)
        try:
            async with self._get_client().stream("GET", url) as response:
                if response.is_error:
                    raise BackendRequestError(
                        f"GET {url} returned HTTP {response.status_code}",
                        status_code=response.status_code,
                    )
                dest.parent.mkdir(parents=True, exist_ok=True)
                with dest.open("wb") as fh:
                    async for chunk in response.aiter_bytes():
                        fh.write(chunk)
        except httpx.HTTPError as e:
            raise BackendRequestError(f"GET {url} failed: {e}") from e
        logger.info(f"Downloaded artifact to {dest}")
        return dest
