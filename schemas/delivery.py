"""
Pydantic schemas for the resend endpoint.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class ResendDeliveryRequest(BaseModel):
    """
    Request body for POST /api/resend-delivery

    Resends a previously generated request email without calling the model.
    """

    delivery_id: Optional[str] = Field(default=None, max_length=200, validate_default=True)
    email: EmailStr = Field(default=None, validate_default=True)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "delivery_id": "b9f6c0de-1c0a-4c5e-9a7b-2f7c1d9e0a11",
                "email": "traveler@example.com"
            }
        }
    )

    @field_validator("delivery_id")
    @classmethod
    def validate_delivery_id(cls, v: Optional[str]) -> str:
        if v is None or not v.strip():
            raise ValueError("Missing delivery_id")
        return v.strip()

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Missing email")
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ResendDeliveryResponse(BaseModel):
    """Response from POST /api/resend-delivery"""

    success: bool = True
    message: str
