"""Sandbox implementation of the api.php landmark resource."""
import logging
import math
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from app.core.error_handlers import EndpointError
from app.schemas.base import Envelope
from app.services.landmark_store import LandmarkStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["landmarks"])

ENDPOINT = "/api.php"


def get_store(request: Request) -> LandmarkStore:
    return request.app.state.store


def _parse_float(value: Optional[str], name: str) -> Optional[float]:
    if value is None or not value.strip():
        return None
    try:
        number = float(value)
    except ValueError:
        raise EndpointError(f"Field '{name}' must be a number")
    if not math.isfinite(number):
        raise EndpointError(f"Field '{name}' must be a finite number")
    return number


def _parse_id(value: Optional[str]) -> int:
    if value is None or not value.strip():
        raise EndpointError("Field 'id' is required")
    try:
        return int(value)
    except ValueError:
        raise EndpointError("Field 'id' must be an integer")


async def _store_image(store: LandmarkStore, image: Optional[UploadFile]) -> Optional[str]:
    if image is None or not image.filename:
        return None
    content = await image.read()
    if not content:
        return None
    return store.save_image(image.filename, content)


@router.get(ENDPOINT)
async def list_landmarks(store: LandmarkStore = Depends(get_store)) -> List[Dict[str, Any]]:
    return store.list_records()


@router.post(ENDPOINT, response_model=Envelope[List[Dict[str, Any]]])
async def create_landmark(
    title: Optional[str] = Form(None),
    lat: Optional[str] = Form(None),
    lon: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    store: LandmarkStore = Depends(get_store),
):
    if title is None or not title.strip():
        raise EndpointError("Field 'title' is required")
    latitude = _parse_float(lat, "lat")
    longitude = _parse_float(lon, "lon")
    if latitude is None or longitude is None:
        raise EndpointError("Fields 'lat' and 'lon' are required")

    image_path = await _store_image(store, image)
    landmark = store.create(title.strip(), latitude, longitude, image_path)
    return Envelope(status="success", message="Landmark created successfully", data=[landmark.to_record()])


@router.put(ENDPOINT, response_model=Envelope[List[Dict[str, Any]]])
async def update_landmark(
    id: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    lat: Optional[str] = Form(None),
    lon: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    store: LandmarkStore = Depends(get_store),
):
    landmark_id = _parse_id(id)
    if store.get(landmark_id) is None:
        raise EndpointError(f"Landmark {landmark_id} not found", status_code=404)
    new_title = title.strip() if title and title.strip() else None
    latitude = _parse_float(lat, "lat")
    longitude = _parse_float(lon, "lon")

    # only write the upload once the request is known to be valid
    image_path = await _store_image(store, image)
    landmark = store.update(landmark_id, title=new_title, lat=latitude, lon=longitude, image=image_path)
    return Envelope(status="success", message="Landmark updated successfully", data=[landmark.to_record()])


@router.delete(ENDPOINT, response_model=Envelope[List[Dict[str, Any]]])
async def delete_landmark(
    id: Optional[str] = Form(None),
    store: LandmarkStore = Depends(get_store),
):
    landmark_id = _parse_id(id)
    if not store.delete(landmark_id):
        raise EndpointError(f"Landmark {landmark_id} not found", status_code=404)
    logger.info(f"Deleted landmark {landmark_id}")
    return Envelope(status="success", message="Landmark deleted successfully")
