"""Delivery service client"""

from typing import Any, Optional
import httpx
import logging

from app.core.config import settings
from app.core.exceptions import (
    ServiceUnavailableException,
    DeliveryAddressOwnershipException
)

logger = logging.getLogger(__name__)

class DeliveryService:
    """Reads delivery addresses owned by the delivery service"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.DELIVERY_SERVICE_URL).rstrip("/")
        self.transport = transport

    async def get_delivery_address(self, address_id: int) -> Optional[Any]:
        """
        Fetch a delivery address document

        Returns:
            The ``data`` member of the delivery service response, None when
            the address does not exist
        """
        try:
            async with httpx.AsyncClient(
                timeout=settings.HTTP_TIMEOUT_SECONDS,
                transport=self.transport
            ) as client:
                response = await client.get(f"{self.base_url}/delivery-addresses/{address_id}")
                if response.status_code >= 500:
                    response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Delivery service request failed: {str(e)}")
            raise ServiceUnavailableException("DeliveryService")

        if not isinstance(body, dict):
            return None
        return body.get("data")

    async def get_owned_delivery_address(self, address_id: int, patient_id: int) -> Any:
        """
        Fetch a delivery address and check it belongs to the patient

        Raises:
            DeliveryAddressOwnershipException: address is missing or owned by someone else
        """
        address = await self.get_delivery_address(address_id)

        if not isinstance(address, dict) or address.get("patient_id") != patient_id:
            logger.info(f"Patient {patient_id} denied delivery address {address_id}")
            raise DeliveryAddressOwnershipException()

        return address

def get_delivery_service() -> DeliveryService:
    return DeliveryService()
