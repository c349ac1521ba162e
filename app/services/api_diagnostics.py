"""
Endpoint probe for troubleshooting the remote API.

Performs one raw GET and describes what came back without converting it.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from app.core.exceptions import TransportError
from app.services.api_client import LandmarkApiClient

logger = logging.getLogger(__name__)

DIAGNOSTIC_TIMEOUT_SECONDS = 15.0


@dataclass
class EndpointProbe:
    url: str
    status_code: Optional[int] = None
    content_type: Optional[str] = None
    content_length: int = 0
    shape: str = "unknown"  # array, object, empty, invalid
    record_count: Optional[int] = None
    sample_keys: List[str] = field(default_factory=list)
    preview: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300


async def probe_endpoint(client: LandmarkApiClient, timeout: float = DIAGNOSTIC_TIMEOUT_SECONDS) -> EndpointProbe:
    probe = EndpointProbe(url=client.endpoint_url)
    logger.info(f"Probing {probe.url}")

    try:
        response = await client.fetch_raw(timeout=timeout)
    except TransportError as e:
        probe.error = e.message
        logger.error(f"Probe failed: {e.message}")
        return probe

    probe.status_code = response.status_code
    probe.content_type = response.headers.get("content-type")
    probe.content_length = len(response.content)
    text = response.text.strip()
    probe.preview = text[:200]

    if not response.is_success:
        probe.error = f"HTTP {response.status_code}: {response.reason_phrase}"

    if not text:
        probe.shape = "empty"
        return probe

    try:
        body = json.loads(text)
    except json.JSONDecodeError as e:
        probe.shape = "invalid"
        probe.error = probe.error or f"Body is not JSON: {e.msg}"
        return probe

    if isinstance(body, list):
        probe.shape = "array"
        probe.record_count = len(body)
        first = next((item for item in body if isinstance(item, dict)), None)
        probe.sample_keys = sorted(first.keys()) if first else []
    elif isinstance(body, dict):
        probe.shape = "object"
        data = body.get("data")
        if isinstance(data, list):
            probe.record_count = len(data)
        probe.sample_keys = sorted(body.keys())
    else:
        probe.shape = "invalid"

    logger.info(f"Probe result: status={probe.status_code} shape={probe.shape} records={probe.record_count}")
    return probe
