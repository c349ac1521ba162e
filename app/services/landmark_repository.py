"""
Landmark repository.

Composes the API client with record conversion and uniform error handling.
Every public operation returns a ``Success`` or ``Failure``; exceptions from
the transport, image staging or conversion never leave this module.
"""

import logging
import math
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Union
from urllib.parse import urljoin, urlparse

from pydantic import ValidationError as PydanticValidationError

from app.config.settings import LandmarkApiSettings, get_settings
from app.core.exceptions import (
    ConversionError,
    ImagePreparationError,
    LandmarkClientError,
)
from app.core.result import Failure, Result, Success
from app.core.validation import ValidationError, validate_landmark_id
from app.models.landmark import Landmark, PreparedImage
from app.schemas.landmark import ApiResponse, LandmarkRecord
from app.services.api_client import LandmarkApiClient
from app.services.image_processor import ImageProcessor

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Unknown Landmark"


def normalize_image_url(image: Optional[str], base_url: str) -> str:
    """
    Absolute URL for a server image path.

    Empty values become ``""``; absolute and protocol-relative URLs pass
    through; relative paths are resolved against ``base_url``.
    """
    if image is None:
        return ""
    image = str(image).strip()
    if not image:
        return ""
    if image.startswith("//") or urlparse(image).scheme:
        return image
    return urljoin(base_url, image)


def _coordinate(value: Optional[float]) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return float(value)


def to_landmark(raw: Any, base_url: str, fallback_title: str = DEFAULT_TITLE) -> Landmark:
    """
    Convert one raw server record into a ``Landmark``.

    Missing fields degrade to defaults. Only a record that cannot be parsed at
    all raises.

    Raises:
        ConversionError: If ``raw`` is not a mapping or has uncoercible field types
    """
    if isinstance(raw, LandmarkRecord):
        record = raw
    elif isinstance(raw, Mapping):
        try:
            record = LandmarkRecord.model_validate(dict(raw))
        except PydanticValidationError as e:
            raise ConversionError(f"Invalid landmark record: {e.error_count()} field error(s)", record=raw) from e
    else:
        raise ConversionError(f"Landmark record must be an object, got {type(raw).__name__}", record=raw)

    lat = _coordinate(record.lat)
    lon = _coordinate(record.lon)
    title = record.title.strip() if record.title and record.title.strip() else fallback_title

    return Landmark(
        id=record.id if record.id is not None else 0,
        title=title,
        location=f"Lat: {lat}, Lon: {lon}",
        description=f"Created: {record.created_at or 'Unknown'}",
        image=normalize_image_url(record.image, base_url),
        latitude=lat,
        longitude=lon,
    )


class LandmarkRepository:
    """
    Single place where landmark business rules live.

    Args:
        client: API client; one is built from settings when omitted
        image_processor: Used to stage images passed by local path
        api_settings: Supplies the base URL and fallback title
    """

    def __init__(
        self,
        client: Optional[LandmarkApiClient] = None,
        image_processor: Optional[ImageProcessor] = None,
        api_settings: Optional[LandmarkApiSettings] = None,
    ):
        self.settings = api_settings or (client.settings if client else get_settings().api)
        self.client = client or LandmarkApiClient(self.settings)
        self.image_processor = image_processor or ImageProcessor()
        self.cleanup_images = self.image_processor.settings.cleanup_after_upload

    async def aclose(self) -> None:
        await self.client.aclose()

    def convert_records(self, records: List[Any]) -> List[Landmark]:
        """Convert a batch, dropping records that fail conversion."""
        landmarks = []
        for index, raw in enumerate(records):
            try:
                landmarks.append(to_landmark(raw, self.settings.base_url, self.settings.fallback_title))
            except ConversionError as e:
                logger.warning(f"Dropping landmark record #{index}: {e.message}")
        return landmarks

    async def get_landmarks(self) -> Result[List[Landmark]]:
        """Fetch and convert every landmark; an empty list is a success."""
        logger.info("Fetching landmarks from API")
        try:
            records = await self.client.list_landmarks()
        except LandmarkClientError as e:
            logger.error(f"Failed to fetch landmarks: {e.message}")
            return Failure(e.message, e)
        except Exception as e:
            logger.exception("Unexpected error fetching landmarks")
            return Failure(f"Unexpected error: {e}", e)

        landmarks = self.convert_records(records)
        logger.info(f"Received {len(records)} records, {len(landmarks)} valid landmarks")
        return Success(landmarks)

    async def create_landmark(
        self,
        title: str,
        lat: float,
        lon: float,
        image_path: Optional[Union[str, Path]] = None,
    ) -> Result[ApiResponse]:
        logger.info(f"Creating landmark {title!r} at ({lat}, {lon})")

        async def call(image: Optional[PreparedImage]):
            return await self.client.create_landmark(
                title, lat, lon, image=image.as_file_part() if image else None
            )

        return await self._mutate("create", call, image_path)

    async def update_landmark(
        self,
        landmark_id: int,
        title: Optional[str] = None,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
        image_path: Optional[Union[str, Path]] = None,
    ) -> Result[ApiResponse]:
        try:
            landmark_id = validate_landmark_id(landmark_id)
        except ValidationError as e:
            return Failure(str(e), e)
        logger.info(f"Updating landmark {landmark_id}")

        async def call(image: Optional[PreparedImage]):
            return await self.client.update_landmark(
                landmark_id, title=title, lat=lat, lon=lon,
                image=image.as_file_part() if image else None,
            )

        return await self._mutate("update", call, image_path)

    async def delete_landmark(self, landmark_id: int) -> Result[ApiResponse]:
        try:
            landmark_id = validate_landmark_id(landmark_id)
        except ValidationError as e:
            return Failure(str(e), e)
        logger.info(f"Deleting landmark {landmark_id}")

        async def call(image: Optional[PreparedImage]):
            return await self.client.delete_landmark(landmark_id)

        return await self._mutate("delete", call, None)

    async def _stage_image(self, image_path: Optional[Union[str, Path]]) -> Optional[PreparedImage]:
        if image_path is None:
            return None
        try:
            return await self.image_processor.prepare_upload(image_path)
        except ImagePreparationError as e:
            logger.warning(f"Image preparation failed, sending without image: {e.message}")
            return None
        except Exception:
            logger.exception(f"Unexpected error preparing {image_path}, sending without image")
            return None

    async def _mutate(
        self,
        verb: str,
        call: Callable[[Optional[PreparedImage]], Awaitable[dict]],
        image_path: Optional[Union[str, Path]],
    ) -> Result[ApiResponse]:
        image = None
        try:
            image = await self._stage_image(image_path)
            body = await call(image)
        except LandmarkClientError as e:
            logger.error(f"Failed to {verb} landmark: {e.message}")
            return Failure(e.message, e)
        except Exception as e:
            logger.exception(f"Unexpected error during {verb}")
            return Failure(f"Unexpected error: {e}", e)
        finally:
            if self.cleanup_images:
                self.image_processor.cleanup(image)

        try:
            envelope = ApiResponse.model_validate(body) if body else ApiResponse(status="success")
        except PydanticValidationError:
            logger.warning(f"Malformed {verb} envelope ignored: {body!r}")
            envelope = ApiResponse(status="success")

        if envelope.is_error:
            message = envelope.message_or(f"Failed to {verb} landmark")
            logger.error(f"Server rejected {verb}: {message}")
            return Failure(message)

        logger.info(f"Landmark {verb} succeeded: {envelope.message or envelope.status}")
        return Success(envelope)
