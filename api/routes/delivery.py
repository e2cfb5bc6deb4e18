"""
Delivery API endpoint.

Resends a previously generated request email through the configured
DeliveryBackend. No model call is made.
"""

from fastapi import APIRouter, Depends, HTTPException, status
import logfire

from api.dependencies import enforce_resend_rate_limit, get_delivery_backend
from schemas.delivery import ResendDeliveryRequest, ResendDeliveryResponse
from services.delivery import DeliveryBackend, DeliveryNotFound


router = APIRouter(prefix="/api", tags=["Delivery"])


@router.post(
    "/resend-delivery",
    response_model=ResendDeliveryResponse,
    dependencies=[Depends(enforce_resend_rate_limit)],
)
async def resend_delivery(
    request: ResendDeliveryRequest,
    backend: DeliveryBackend = Depends(get_delivery_backend),
):
    """
    Resend a stored delivery to the given address.

    Raises:
        HTTPException 404: If the delivery does not exist or was never sent
        HTTPException 502: If the backend fails
        HTTPException 503: If no delivery backend is configured
    """
    with logfire.span("api.resend_delivery", delivery_id=request.delivery_id):
        try:
            await backend.resend(request.delivery_id, request.email)

        except DeliveryNotFound:
            logfire.info("Delivery not found", delivery_id=request.delivery_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Delivery not found"
            )

        except Exception as e:
            logfire.error(
                "Failed to resend delivery",
                delivery_id=request.delivery_id,
                error=str(e),
                error_type=type(e).__name__
            )
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Failed to resend email"
            )

        logfire.info("Delivery resent", delivery_id=request.delivery_id)
        return ResendDeliveryResponse(message="Email resent successfully")
