from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """
    Body shape shared by every /api/v1 response, success or failure, so a
    client can branch on `success` alone.
    """
    success: bool
    data: T | None = None
    error: str = ""

    @classmethod
    def ok(cls, data=None) -> "Envelope":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str) -> "Envelope":
        return cls(success=False, error=message)


class IdResponse(BaseModel):
    """Identifier of a removed row."""
    id: int
