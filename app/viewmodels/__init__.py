"""View-models exposing observable state to front ends."""

from .landmark_view_model import (
    LandmarkViewModel,
    LandmarkUiState,
    ListLoading,
    ListSuccess,
    ListError,
    CrudOperationState,
    CrudIdle,
    CrudLoading,
    CrudSuccess,
    CrudError,
)

__all__ = [
    "LandmarkViewModel",
    "LandmarkUiState",
    "ListLoading",
    "ListSuccess",
    "ListError",
    "CrudOperationState",
    "CrudIdle",
    "CrudLoading",
    "CrudSuccess",
    "CrudError",
]
