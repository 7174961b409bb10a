"""Read-only invoice models handed to rendering and reporting code."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from config.settings import get_settings
from state_machine.policy import InvoiceState


class InvoiceSnapshot(BaseModel):
    """Immutable view of an invoice at a point in time."""

    id: int = Field(..., gt=0, description="Invoice identifier")
    amount: int = Field(..., ge=0, description="Amount in minor currency units")
    state: InvoiceState
    created_at: datetime

    class Config:
        frozen = True

    def to_dict(self, timestamp_format: Optional[str] = None) -> dict[str, Any]:
        """
        Convert to the serialization shape used by reporting.

        Args:
            timestamp_format: strftime format for created_at.
                              Defaults to Settings.timestamp_format.
        """
        fmt = timestamp_format or get_settings().timestamp_format
        return {
            "id": self.id,
            "amount": self.amount,
            "state": self.state.value,
            "created_at": self.created_at.strftime(fmt),
        }
