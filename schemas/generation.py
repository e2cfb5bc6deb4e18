"""
Pydantic schemas for the request generation endpoint.

Request fields are all optional at the schema level: required-field checks
happen in sanitize_input() so that callers get one 400 listing every
missing field instead of a schema error per field.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ===================================================================
# REQUEST SCHEMAS
# ===================================================================

class BookingPayload(BaseModel):
    """Booking details as entered by the traveler."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    hotel: Optional[str] = None
    city: Optional[str] = None
    checkin: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    checkout: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    room: Optional[str] = None
    channel: Optional[str] = Field(default=None, description="e.g. 'Direct with hotel', 'OTA'")


class ContextPayload(BaseModel):
    """
    Traveler context. Accepts camelCase keys; alternative spellings
    (loyaltyStatus, checkinTime, flexibility, ...) pass through as extras.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    arrival_day: Optional[str] = Field(default=None, alias="arrivalDay")
    ask_preference: Optional[str] = Field(default=None, alias="askPreference")
    length_of_stay: Optional[str] = Field(default=None, alias="lengthOfStay")
    checkin_time_pref: Optional[str] = Field(default=None, alias="checkinTimePref")
    loyalty: Optional[str] = None
    occasion: Optional[str] = None
    flexibility_primary: Optional[str] = Field(default=None, alias="flexibilityPrimary")
    flexibility_detail: Optional[str] = Field(default=None, alias="flexibilityDetail")
    preferred_room: Optional[str] = Field(default=None, alias="preferredRoom")


class GenerateRequestBody(BaseModel):
    """
    Request body for POST /api/generate-request
    """

    booking: Optional[BookingPayload] = None
    context: Optional[ContextPayload] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "booking": {
                    "hotel": "Harbor View Hotel",
                    "city": "Seattle",
                    "checkin": "2025-01-15",
                    "checkout": "2025-01-18",
                    "room": "Standard King",
                    "channel": "Direct with hotel"
                },
                "context": {
                    "arrivalDay": "Wednesday",
                    "askPreference": "both",
                    "lengthOfStay": "3 nights",
                    "loyalty": "None",
                    "occasion": "Anniversary",
                    "flexibilityPrimary": "any"
                }
            }
        }
    )


# ===================================================================
# RESPONSE SCHEMAS
# ===================================================================

class GenerateRequestResponse(BaseModel):
    """
    Response from POST /api/generate-request

    Always a payload that passes the output contract. Provenance and
    correlation id travel in the X-Generation-Source and X-Request-Id headers.
    """

    email_subject: str
    email_body: str
    timing_guidance: List[str]
    fallback_script: str


class ErrorResponse(BaseModel):
    """Error body for 400 and 502 responses."""

    error: str
    details: Optional[List[str]] = None


class RateLimitResponse(BaseModel):
    """Error body for 429 responses."""

    error: str
    retry_after: int
