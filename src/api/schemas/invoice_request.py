"""Request schemas for Invoice API

Pydantic models for validating incoming HTTP requests.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator


class BulkOperationRequestSchema(BaseModel):
    """
    Request schema for bulk invoice operations

    Used for POST /invoices/bulk endpoint. The shape of `data` depends on the
    operation and is validated by the dispatcher.
    """

    operation: str = Field(
        ...,
        description="updateStatus, archive, delete, markPaid, send, duplicate or export"
    )

    data: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Operation payload, always containing ids"
    )

    @field_validator("operation")
    @classmethod
    def strip_operation(cls, v):
        return v.strip()

    class Config:
        json_schema_extra = {
            "example": {
                "operation": "updateStatus",
                "data": {
                    "ids": ["3f6c0b1e-...", "9a2d4c7f-..."],
                    "status": "SENT",
                    "updatedBy": "jane@example.com",
                },
            }
        }
