"""
Delivery backend interface.

Persistence of generated requests and transactional email are external
collaborators. The resend endpoint talks to them only through this
protocol; a concrete backend is attached to app.state.delivery_backend at
startup by the deployment.
"""

from typing import Protocol, runtime_checkable


class DeliveryNotFound(Exception):
    """Raised when no sent delivery exists for the given id."""

    def __init__(self, delivery_id: str):
        self.delivery_id = delivery_id
        super().__init__(f"Delivery not found: {delivery_id}")


@runtime_checkable
class DeliveryBackend(Protocol):
    """Re-sends a previously generated request without calling the model."""

    async def resend(self, delivery_id: str, email: str) -> None:
        """
        Send the stored payload of delivery_id to email.

        Raises:
            DeliveryNotFound: If the delivery does not exist or was never sent
        """
        ...
