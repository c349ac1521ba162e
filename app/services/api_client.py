"""
HTTP client for the landmark ``api.php`` endpoint.

One resource, four verbs:

- ``GET``    list all landmarks (JSON array)
- ``POST``   create, multipart form (``title``, ``lat``, ``lon``, optional ``image``)
- ``PUT``    partial update, multipart form (``id`` plus any of the above)
- ``DELETE`` delete, url-encoded form body (``id``)

Every failure, whether an HTTP status outside 2xx, a timeout or a broken
connection, is raised as ``TransportError``.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from app.config.settings import LandmarkApiSettings, get_settings
from app.core.exceptions import ErrorCode, TransportError
from app.core.metrics import record_latency

logger = logging.getLogger(__name__)

# (filename, content, mime type)
FilePart = Tuple[str, bytes, str]


def format_decimal(value: float) -> str:
    """Decimal string for a coordinate form field."""
    return repr(float(value))


class LandmarkApiClient:
    """Thin async wrapper around one ``httpx.AsyncClient``."""

    def __init__(
        self,
        api_settings: Optional[LandmarkApiSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = api_settings or get_settings().api
        self.base_url = self.settings.base_url
        self.endpoint = self.settings.endpoint
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(
                self.settings.timeout_seconds,
                connect=self.settings.connect_timeout_seconds,
            ),
            headers={
                "Accept": "application/json",
                "User-Agent": self.settings.user_agent,
            },
            transport=transport,
        )

    async def __aenter__(self) -> "LandmarkApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def endpoint_url(self) -> str:
        return str(self._client.base_url.join(self.endpoint))

    async def _send(self, method: str, **kwargs) -> httpx.Response:
        """Perform one request and map every failure onto ``TransportError``."""
        try:
            with record_latency(f"api.{method.lower()}"):
                response = await self._client.request(method, self.endpoint, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {self.endpoint_url} timed out: {e}")
            raise TransportError(
                f"Network error: request timed out ({e.__class__.__name__})",
                error_code=ErrorCode.TIMEOUT,
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"{method} {self.endpoint_url} failed: {e}")
            raise TransportError(f"Network error: {e}" if str(e) else f"Network error: {e.__class__.__name__}") from e

        logger.debug(f"{method} {self.endpoint_url} -> {response.status_code}")

        if not response.is_success:
            logger.error(
                f"{method} {self.endpoint_url} returned {response.status_code}",
                extra={"status_code": response.status_code, "body": response.text[:500]},
            )
            raise TransportError.from_status(response.status_code, response.reason_phrase)

        return response

    @staticmethod
    def _decode_envelope(response: httpx.Response) -> Dict[str, Any]:
        """The PHP server is loose: an empty or non-JSON 2xx body means an empty envelope."""
        if not response.content or not response.content.strip():
            return {}
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning(f"Non-JSON response body ignored: {response.text[:200]!r}")
            return {}
        if not isinstance(body, dict):
            logger.warning(f"Unexpected envelope type {type(body).__name__}, ignoring")
            return {}
        return body

    async def list_landmarks(self) -> List[Any]:
        """
        Fetch all raw landmark records.

        Returns:
            The decoded JSON array. Items are left untouched; validation is
            the repository's job.

        Raises:
            TransportError: On HTTP/network failure or a body that is not a record list
        """
        response = await self._send("GET")

        if not response.content or not response.content.strip():
            return []

        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TransportError(
                "Unexpected response format: body is not JSON",
                error_code=ErrorCode.INVALID_RESPONSE,
            ) from e

        if isinstance(body, list):
            return body
        if isinstance(body, dict) and isinstance(body.get("data"), list):
            return body["data"]

        raise TransportError(
            f"Unexpected response format: expected a JSON array, got {type(body).__name__}",
            error_code=ErrorCode.INVALID_RESPONSE,
        )

    async def create_landmark(
        self,
        title: str,
        lat: float,
        lon: float,
        image: Optional[FilePart] = None,
    ) -> Dict[str, Any]:
        """POST a new landmark as multipart form data."""
        fields = {
            "title": title,
            "lat": format_decimal(lat),
            "lon": format_decimal(lon),
        }
        response = await self._send("POST", **self._multipart(fields, image))
        return self._decode_envelope(response)

    async def update_landmark(
        self,
        landmark_id: int,
        title: Optional[str] = None,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
        image: Optional[FilePart] = None,
    ) -> Dict[str, Any]:
        """PUT a partial update; fields left as None are not transmitted."""
        fields = {"id": str(int(landmark_id))}
        if title is not None:
            fields["title"] = title
        if lat is not None:
            fields["lat"] = format_decimal(lat)
        if lon is not None:
            fields["lon"] = format_decimal(lon)
        response = await self._send("PUT", **self._multipart(fields, image))
        return self._decode_envelope(response)

    async def delete_landmark(self, landmark_id: int) -> Dict[str, Any]:
        """DELETE with a url-encoded ``id`` body."""
        response = await self._send("DELETE", data={"id": str(int(landmark_id))})
        return self._decode_envelope(response)

    async def fetch_raw(self, timeout: Optional[float] = None) -> httpx.Response:
        """GET the endpoint without interpreting the body (diagnostics)."""
        try:
            return await self._client.request(
                "GET",
                self.endpoint,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Network error: request timed out ({e.__class__.__name__})",
                error_code=ErrorCode.TIMEOUT,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Network error: {e}") from e

    @staticmethod
    def _multipart(fields: Dict[str, str], image: Optional[FilePart]) -> Dict[str, Any]:
        # httpx only switches to multipart when files are present; an empty
        # file list is not enough, so text-only forms are sent as (None, value) parts
        if image is not None:
            return {"data": fields, "files": {"image": image}}
        return {"files": {name: (None, value.encode("utf-8")) for name, value in fields.items()}}
