"""Patient and internal order endpoints"""

import json

import pytest

from app.core.exceptions import DeliveryAddressOwnershipException, ServiceUnavailableException
from app.models import Order, OutboxEvent, Payment

def outbox_payloads(events, event_type):
    return [json.loads(event.payload) for event in events if event.event_type == event_type]

class TestCreateOrder:
    async def test_pickup_order(self, client, patient_headers, seed, delivery_service):
        cart = await seed.cart(patient_id=1, items={1: 2, 3: 1})

        response = await client.post(
            "/patients/orders/",
            json={"cart_id": cart.id},
            headers=patient_headers
        )

        assert response.status_code == 201
        order = response.json()["data"]
        assert order["status"] == "PENDING"
        assert order["order_type"] == "PICKUP"
        assert order["delivery_address"] is None
        delivery_service.get_owned_delivery_address.assert_not_called()

        events = await seed.fetch(OutboxEvent)
        assert outbox_payloads(events, "inventory.reserve_order") == [{
            "order_id": order["id"],
            "order_items": [
                {"product_id": 1, "quantity": 2},
                {"product_id": 3, "quantity": 1},
            ],
        }]
        assert events[0].status == "PENDING"

    async def test_delivery_order_snapshots_address(self, client, patient_headers, seed, delivery_service):
        cart = await seed.cart(patient_id=1, items={1: 1})

        response = await client.post(
            "/patients/orders/",
            json={"cart_id": cart.id, "order_type": "DELIVERY", "delivery_address_id": 7},
            headers=patient_headers
        )

        assert response.status_code == 201
        assert response.json()["data"]["delivery_address"]["street"] == "12 Harbour Road"
        delivery_service.get_owned_delivery_address.assert_awaited_once_with(7, 1)

    async def test_delivery_order_requires_address(self, client, patient_headers, seed):
        cart = await seed.cart(patient_id=1)

        response = await client.post(
            "/patients/orders/",
            json={"cart_id": cart.id, "order_type": "DELIVERY"},
            headers=patient_headers
        )

        assert response.status_code == 400
        assert await seed.fetch(Order) == []

    async def test_address_of_another_patient(self, client, patient_headers, seed, delivery_service):
        cart = await seed.cart(patient_id=1)
        delivery_service.get_owned_delivery_address.side_effect = DeliveryAddressOwnershipException()

        response = await client.post(
            "/patients/orders/",
            json={"cart_id": cart.id, "order_type": "DELIVERY", "delivery_address_id": 8},
            headers=patient_headers
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "FORBIDDEN_RESOURCE"
        assert await seed.fetch(OutboxEvent) == []

    async def test_delivery_service_down(self, client, patient_headers, seed, delivery_service):
        cart = await seed.cart(patient_id=1)
        delivery_service.get_owned_delivery_address.side_effect = ServiceUnavailableException("DeliveryService")

        response = await client.post(
            "/patients/orders/",
            json={"cart_id": cart.id, "order_type": "DELIVERY", "delivery_address_id": 7},
            headers=patient_headers
        )

        assert response.status_code == 503

    async def test_cart_of_another_patient(self, client, patient_headers, seed):
        cart = await seed.cart(patient_id=2)

        response = await client.post(
            "/patients/orders/",
            json={"cart_id": cart.id},
            headers=patient_headers
        )

        assert response.status_code == 404
        assert await seed.fetch(Order) == []
        assert await seed.fetch(OutboxEvent) == []

class TestReadOrders:
    async def test_list_all_orders(self, client, patient_headers, seed):
        await seed.order(await seed.cart(patient_id=1))
        await seed.order(await seed.cart(patient_id=2))

        response = await client.get("/patients/orders/", headers=patient_headers)

        assert [order["patient_id"] for order in response.json()["data"]] == [1, 2]

    async def test_my_orders(self, client, patient_headers, seed):
        cart = await seed.cart(patient_id=1, items={2: 2})
        order = await seed.order(cart, status="RESERVED")
        await seed.order(await seed.cart(patient_id=2))

        response = await client.get("/patients/orders/my-orders", headers=patient_headers)

        data = response.json()["data"]
        assert [entry["order"]["id"] for entry in data] == [order.id]
        assert data[0]["total_price"] == pytest.approx(5.0)
        assert data[0]["order_items"][0]["product_id"] == 2

    async def test_get_order(self, client, patient_headers, seed):
        order = await seed.order(await seed.cart(patient_id=1, items={1: 3}))

        response = await client.get(f"/patients/orders/{order.id}", headers=patient_headers)

        assert response.status_code == 200
        assert response.json()["data"]["total_price"] == pytest.approx(30.0)

    async def test_order_of_another_patient(self, client, patient_headers, seed):
        order = await seed.order(await seed.cart(patient_id=2))

        response = await client.get(f"/patients/orders/{order.id}", headers=patient_headers)

        assert response.status_code == 404

    async def test_internal_lookup_needs_no_token(self, client, seed):
        order = await seed.order(await seed.cart(patient_id=2, items={3: 2}))

        response = await client.get(f"/orders/{order.id}")

        assert response.status_code == 200
        assert response.json()["data"]["order"]["patient_id"] == 2
        assert response.json()["data"]["total_price"] == pytest.approx(11.0)

    async def test_internal_lookup_missing_order(self, client):
        response = await client.get("/orders/12345")

        assert response.status_code == 404

class TestCancelOrder:
    async def test_cancel_reserved_order(self, client, patient_headers, seed):
        order = await seed.order(await seed.cart(patient_id=1, items={1: 1}), status="RESERVED")

        response = await client.delete(f"/patients/orders/{order.id}", headers=patient_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "CANCEL_PENDING"
        assert data["deleted_at"] is not None

        events = await seed.fetch(OutboxEvent)
        assert outbox_payloads(events, "inventory.cancel_order") == [{
            "order_id": order.id,
            "order_items": [{"product_id": 1, "quantity": 1}],
        }]

    @pytest.mark.parametrize("status", ["PENDING", "PAYMENT_PENDING", "CANCELLED", "DELIVERED"])
    async def test_not_cancellable(self, client, patient_headers, seed, status):
        order = await seed.order(await seed.cart(patient_id=1), status=status)

        response = await client.delete(f"/patients/orders/{order.id}", headers=patient_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "ORDER_NOT_CANCELLABLE"
        assert await seed.fetch(OutboxEvent) == []

    async def test_cancel_twice(self, client, patient_headers, seed):
        order = await seed.order(await seed.cart(patient_id=1), status="RESERVED")

        first = await client.delete(f"/patients/orders/{order.id}", headers=patient_headers)
        second = await client.delete(f"/patients/orders/{order.id}", headers=patient_headers)

        assert first.status_code == 200
        assert second.status_code == 404
        assert len(await seed.fetch(OutboxEvent)) == 1

    async def test_cancel_order_of_another_patient(self, client, patient_headers, seed):
        order = await seed.order(await seed.cart(patient_id=2), status="RESERVED")

        response = await client.delete(f"/patients/orders/{order.id}", headers=patient_headers)

        assert response.status_code == 404
        [stored] = await seed.fetch(Order, Order.id == order.id)
        assert stored.status == "RESERVED"

class TestCreatePayment:
    async def test_open_payment(self, client, patient_headers, seed):
        order = await seed.order(await seed.cart(patient_id=1, items={1: 2, 3: 1}), status="RESERVED")

        response = await client.post(
            f"/patients/orders/{order.id}/payment",
            json={"provider": "qr_payment"},
            headers=patient_headers
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["payment"]["status"] == "PENDING"
        assert data["payment"]["amount"] == pytest.approx(25.5)
        assert data["payment"]["provider"] == "qr_payment"
        assert data["updated_order"]["status"] == "PAYMENT_PENDING"

        [payment] = await seed.fetch(Payment, Payment.order_id == order.id)
        assert str(payment.id) == data["payment"]["id"]

    async def test_unsupported_provider(self, client, patient_headers, seed):
        order = await seed.order(await seed.cart(patient_id=1), status="RESERVED")

        response = await client.post(
            f"/patients/orders/{order.id}/payment",
            json={"provider": "internal"},
            headers=patient_headers
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_PAYMENT_PROVIDER"

    @pytest.mark.parametrize("status", ["PENDING", "PAYMENT_PENDING", "CANCEL_PENDING"])
    async def test_order_not_payable(self, client, patient_headers, seed, status):
        order = await seed.order(await seed.cart(patient_id=1), status=status)

        response = await client.post(
            f"/patients/orders/{order.id}/payment",
            json={"provider": "qr_payment"},
            headers=patient_headers
        )

        assert response.status_code == 404
        assert await seed.fetch(Payment) == []
