from pydantic import BaseModel
from typing import Optional, Generic, TypeVar

T = TypeVar('T')


class Envelope(BaseModel, Generic[T]):
    """Envelope the sandbox server answers mutations with."""
    status: str
    message: Optional[str] = None
    data: Optional[T] = None
