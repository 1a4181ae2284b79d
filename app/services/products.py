"""Product catalogue client"""

from typing import Dict, Iterable, Optional
import httpx
import logging

from app.core.config import settings
from app.core.exceptions import ServiceUnavailableException

logger = logging.getLogger(__name__)

class ProductService:
    """Looks up unit prices from the product service"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.PRODUCT_SERVICE_URL).rstrip("/")
        self.transport = transport

    async def get_unit_prices(self, product_ids: Iterable[int]) -> Dict[int, float]:
        """
        Get unit prices keyed by product id

        Products the catalogue does not return are absent from the result.
        """
        ids = sorted(set(product_ids))
        if not ids:
            return {}

        try:
            async with httpx.AsyncClient(
                timeout=settings.HTTP_TIMEOUT_SECONDS,
                transport=self.transport
            ) as client:
                response = await client.get(
                    f"{self.base_url}/products",
                    params={"ids": ",".join(str(product_id) for product_id in ids)}
                )
                response.raise_for_status()
                products = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Product service request failed: {str(e)}")
            raise ServiceUnavailableException("ProductService")

        return {int(product["id"]): float(product["unit_price"]) for product in products}

def get_product_service() -> ProductService:
    return ProductService()
