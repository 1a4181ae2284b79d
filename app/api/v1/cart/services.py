"""
Cart service layer
Handles shopping cart business logic
"""

from typing import Dict, Iterable, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from app.models import Cart, CartItem
from app.models.base import utcnow
from app.core.exceptions import NotFoundException
from app.services.products import ProductService
from .schemas import (
    CartCreate,
    CartResponse,
    CartItemResponse,
    CartDetailResponse,
    CartUpdateResponse
)

logger = logging.getLogger(__name__)

def calculate_total(items: Iterable[CartItem], unit_prices: Dict[int, float]) -> float:
    """Sum of quantity x unit price; products without a price count as 0"""
    return float(sum(
        item.quantity * unit_prices.get(item.product_id, 0.0)
        for item in items
    ))

class CartService:
    """Shopping cart service"""

    def __init__(self, db: AsyncSession, product_service: ProductService):
        self.db = db
        self.product_service = product_service

    async def list_carts(self) -> List[Cart]:
        """Get every cart in the system"""
        result = await self.db.execute(select(Cart).order_by(Cart.id))
        return list(result.scalars().all())

    async def get_owned_cart(self, cart_id: int, patient_id: int) -> Cart:
        """
        Get a cart belonging to the patient

        Raises:
            NotFoundException: If cart is missing or owned by someone else
        """
        result = await self.db.execute(
            select(Cart)
            .where(Cart.id == cart_id, Cart.patient_id == patient_id)
        )
        cart = result.scalar_one_or_none()

        if not cart:
            raise NotFoundException("Cart not found")

        return cart

    async def get_items(self, cart_ids: Iterable[int]) -> Dict[int, List[CartItem]]:
        """Get cart items grouped by cart id"""
        cart_ids = list(cart_ids)
        grouped: Dict[int, List[CartItem]] = {cart_id: [] for cart_id in cart_ids}
        if not cart_ids:
            return grouped

        result = await self.db.execute(
            select(CartItem)
            .where(CartItem.cart_id.in_(cart_ids))
            .order_by(CartItem.cart_id, CartItem.product_id)
        )
        for item in result.scalars().all():
            grouped[item.cart_id].append(item)

        return grouped

    async def get_unit_prices(self, items: Iterable[CartItem]) -> Dict[int, float]:
        return await self.product_service.get_unit_prices(item.product_id for item in items)

    async def create_cart(self, patient_id: int, data: CartCreate) -> Tuple[Cart, List[CartItem]]:
        """
        Create a cart with its items in one transaction

        Items with a non-positive quantity are dropped.
        """
        cart = Cart(patient_id=patient_id)
        self.db.add(cart)
        await self.db.flush()

        items = [
            CartItem(cart_id=cart.id, product_id=item.product_id, quantity=item.quantity)
            for item in data.cart_items
            if item.quantity > 0
        ]
        self.db.add_all(items)

        await self.db.commit()

        logger.info(f"Patient {patient_id} created cart #{cart.id} with {len(items)} items")
        return cart, items

    async def get_cart(self, cart_id: int, patient_id: int) -> CartDetailResponse:
        """Get one of the patient's carts priced by the product service"""
        cart = await self.get_owned_cart(cart_id, patient_id)
        items = (await self.get_items([cart.id]))[cart.id]
        unit_prices = await self.get_unit_prices(items)

        return CartDetailResponse(
            cart=CartResponse.model_validate(cart),
            cart_items=[CartItemResponse.model_validate(item) for item in items],
            total_price=calculate_total(items, unit_prices)
        )

    async def get_my_carts(self, patient_id: int) -> List[CartDetailResponse]:
        """Get all of the patient's carts with their items and totals"""
        result = await self.db.execute(
            select(Cart)
            .where(Cart.patient_id == patient_id)
            .order_by(Cart.id)
        )
        carts = result.scalars().all()

        grouped = await self.get_items(cart.id for cart in carts)
        unit_prices = await self.get_unit_prices(
            item for items in grouped.values() for item in items
        )

        return [
            CartDetailResponse(
                cart=CartResponse.model_validate(cart),
                cart_items=[CartItemResponse.model_validate(item) for item in grouped[cart.id]],
                total_price=calculate_total(grouped[cart.id], unit_prices)
            )
            for cart in carts
        ]

    async def update_cart(self, cart_id: int, patient_id: int, data: CartCreate) -> CartUpdateResponse:
        """
        Replace the item set of a cart

        Items whose product is not in the request are deleted, the rest are
        inserted or have their quantity set, and the cart is touched.
        """
        cart = await self.get_owned_cart(cart_id, patient_id)
        existing = {item.product_id: item for item in (await self.get_items([cart.id]))[cart.id]}
        requested = {item.product_id: item.quantity for item in data.cart_items}

        deleted_items = [
            CartItemResponse.model_validate(item)
            for product_id, item in existing.items()
            if product_id not in requested
        ]
        for product_id, item in existing.items():
            if product_id not in requested:
                await self.db.delete(item)

        for product_id, quantity in requested.items():
            item = existing.get(product_id)
            if item:
                item.quantity = quantity
            else:
                self.db.add(CartItem(cart_id=cart.id, product_id=product_id, quantity=quantity))

        cart.updated_at = utcnow()

        await self.db.commit()
        await self.db.refresh(cart)

        updated_items = (await self.get_items([cart.id]))[cart.id]

        logger.info(f"Cart #{cart.id} updated: {len(deleted_items)} removed, {len(updated_items)} kept")
        return CartUpdateResponse(
            deleted_items=deleted_items,
            updated_items=[CartItemResponse.model_validate(item) for item in updated_items],
            updated_cart=CartResponse.model_validate(cart)
        )

    async def delete_cart(self, cart_id: int, patient_id: int) -> CartResponse:
        """Hard delete a cart; its items and orders go with it"""
        cart = await self.get_owned_cart(cart_id, patient_id)
        deleted = CartResponse.model_validate(cart)

        await self.db.delete(cart)
        await self.db.commit()

        logger.info(f"Cart #{cart_id} deleted by patient {patient_id}")
        return deleted
