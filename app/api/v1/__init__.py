"""API v1 routes aggregation"""

from fastapi import APIRouter

from .cart.router import router as cart_router
from .orders.router import router as orders_router, internal_router as internal_orders_router
from .payments.router import router as payments_router

# Create v1 router
api_router = APIRouter()

# Include all routers
api_router.include_router(cart_router, prefix="/patients/carts", tags=["Carts"])
api_router.include_router(orders_router, prefix="/patients/orders", tags=["Orders"])
api_router.include_router(internal_orders_router, prefix="/orders", tags=["Orders"])
api_router.include_router(payments_router, prefix="/payments", tags=["Payments"])

# Export router
router = api_router
