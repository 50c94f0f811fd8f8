"""
Response envelope shared by every backend endpoint.
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

from quickplan.core.exceptions import ApiError

T = TypeVar("T")


class WireModel(BaseModel):
    """Base for models exchanged with the backend (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ApiResponse(WireModel, Generic[T]):
    """`{success, message, data?}` envelope."""

    success: bool = False
    message: str = ""
    data: Optional[T] = None

    def raise_for_failure(self, fallback: str) -> None:
        """Raise ApiError if the payload reports failure."""
        if not self.success:
            raise ApiError(self.message or fallback)

    def require_data(self, fallback: str) -> T:
        """Return data of a successful payload, or raise ApiError."""
        self.raise_for_failure(fallback)
        if self.data is None:
            raise ApiError(self.message or fallback)
        return self.data
