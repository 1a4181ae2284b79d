"""Services package"""

from .products import ProductService, get_product_service
from .deliveries import DeliveryService, get_delivery_service

__all__ = [
    "ProductService",
    "get_product_service",
    "DeliveryService",
    "get_delivery_service",
]
