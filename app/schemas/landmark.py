from pydantic import BaseModel, ConfigDict, field_validator
from typing import Any, Dict, List, Optional


class LandmarkRecord(BaseModel):
    """Raw landmark as served by api.php; every field may be missing."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: Optional[int] = None
    title: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    image: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("id", "lat", "lon", "title", "image", "created_at", "updated_at", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


ERROR_STATUSES = {"error", "fail", "failed", "failure"}


class ApiResponse(BaseModel):
    """Envelope returned by every non-list operation."""

    model_config = ConfigDict(extra="allow")

    status: Optional[str] = None
    message: Optional[str] = None
    data: Optional[List[Dict[str, Any]]] = None

    @field_validator("status", "message", mode="before")
    @classmethod
    def stringify(cls, v):
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("data", mode="before")
    @classmethod
    def only_record_lists(cls, v):
        if isinstance(v, dict):
            return [v]
        if isinstance(v, list):
            return [item for item in v if isinstance(item, dict)]
        return None

    @property
    def is_error(self) -> bool:
        return (self.status or "").strip().lower() in ERROR_STATUSES

    def message_or(self, default: str) -> str:
        return self.message if self.message and self.message.strip() else default
