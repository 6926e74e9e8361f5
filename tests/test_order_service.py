from decimal import Decimal

import pytest

from shopledger.common.exceptions import InsufficientStock, InvalidAmount, NotFound, ValidationError
from shopledger.models.order import OrderStatus, PaymentStatus
from shopledger.models.transaction import TransactionType
from shopledger.schemas.order import OrderCreate
from shopledger.services.order_service import OrderService
from shopledger.storage import EntityKind

from .factories import add_customer, add_inventory


def new_order(customer_id, quantity="5", rate="220.00", **kwargs):
    return OrderCreate(
        customer_id=customer_id,
        items=[{"type": "chicken", "quantity": quantity, "rate": rate}],
        **kwargs,
    )


def test_create_confirmed_order(store):
    customer = add_customer(store)
    chicken = add_inventory(store, "chicken", 20)

    order = OrderService(store).create_order(new_order(customer.id))

    assert order.total_amount == Decimal("1100.00")
    assert order.payment_status == PaymentStatus.PENDING
    assert store.get_by_id(EntityKind.INVENTORY, chicken.id).quantity == Decimal("15")
    assert store.get_by_id(EntityKind.CUSTOMER, customer.id).pending_amount == Decimal("1100.00")
    assert [t.type for t in store.get_all(EntityKind.TRANSACTION)] == [TransactionType.STOCK_ADJUSTMENT]


def test_create_with_part_payment(store):
    customer = add_customer(store)
    add_inventory(store, "chicken", 20)

    order = OrderService(store).create_order(new_order(customer.id, paid_amount="100.00"))

    assert order.payment_status == PaymentStatus.PARTIALLY_PAID
    assert store.get_by_id(EntityKind.CUSTOMER, customer.id).pending_amount == Decimal("1000.00")
    [payment] = store.get_transactions_by_entity(customer.id)
    assert payment.type == TransactionType.PAYMENT
    assert payment.amount == Decimal("100.00")


def test_create_with_explicit_total(memory_store):
    customer = add_customer(memory_store)
    add_inventory(memory_store, "chicken", 20)

    order = OrderService(memory_store).create_order(new_order(customer.id, total_amount="1000.00"))

    assert order.total_amount == Decimal("1000.00")


def test_create_shortfall_leaves_no_trace(store):
    customer = add_customer(store)
    chicken = add_inventory(store, "chicken", 3)

    with pytest.raises(InsufficientStock):
        OrderService(store).create_order(new_order(customer.id))

    assert store.get_all(EntityKind.ORDER) == []
    assert store.get_by_id(EntityKind.INVENTORY, chicken.id).quantity == Decimal("3")
    assert store.get_by_id(EntityKind.CUSTOMER, customer.id).pending_amount == Decimal("0.00")


def test_processing_order_does_not_touch_stock(memory_store):
    customer = add_customer(memory_store)
    chicken = add_inventory(memory_store, "chicken", 3)

    order = OrderService(memory_store).create_order(new_order(customer.id, order_status=OrderStatus.PROCESSING))

    assert order.order_status == OrderStatus.PROCESSING
    assert memory_store.get_by_id(EntityKind.INVENTORY, chicken.id).quantity == Decimal("3")


def test_create_rejects_bad_input(memory_store):
    customer = add_customer(memory_store)
    add_inventory(memory_store, "chicken", 20)
    service = OrderService(memory_store)

    with pytest.raises(NotFound):
        service.create_order(new_order("CUS-MISSING0"))
    with pytest.raises(ValidationError):
        service.create_order(new_order(customer.id, paid_amount="5000.00"))
    with pytest.raises(InvalidAmount):
        service.create_order(new_order(customer.id, total_amount="10.005"))


def test_cancel_and_reconfirm(store):
    customer = add_customer(store)
    chicken = add_inventory(store, "chicken", 20)
    service = OrderService(store)
    order = service.create_order(new_order(customer.id))

    cancelled = service.update_order_status(order.id, OrderStatus.CANCELLED)
    assert cancelled.order_status == OrderStatus.CANCELLED
    assert store.get_by_id(EntityKind.INVENTORY, chicken.id).quantity == Decimal("20")

    service.update_order_status(order.id, OrderStatus.CONFIRMED)
    assert store.get_by_id(EntityKind.INVENTORY, chicken.id).quantity == Decimal("15")

    service.update_order_status(order.id, OrderStatus.COMPLETED)
    assert store.get_by_id(EntityKind.INVENTORY, chicken.id).quantity == Decimal("15")


def test_reconfirm_without_stock_fails(memory_store):
    customer = add_customer(memory_store)
    chicken = add_inventory(memory_store, "chicken", 5)
    service = OrderService(memory_store)
    order = service.create_order(new_order(customer.id, order_status=OrderStatus.PROCESSING))
    memory_store.update(EntityKind.INVENTORY, chicken.id, {"quantity": Decimal("1")})

    with pytest.raises(InsufficientStock):
        service.update_order_status(order.id, OrderStatus.CONFIRMED)
    assert service.get_order(order.id).order_status == OrderStatus.PROCESSING


def test_delete_confirmed_order(store):
    customer = add_customer(store)
    chicken = add_inventory(store, "chicken", 20)
    service = OrderService(store)
    order = service.create_order(new_order(customer.id))

    service.delete_order(order.id)

    assert store.get_by_id(EntityKind.ORDER, order.id) is None
    assert store.get_by_id(EntityKind.INVENTORY, chicken.id).quantity == Decimal("20")
    assert store.get_by_id(EntityKind.CUSTOMER, customer.id).pending_amount == Decimal("0.00")
    with pytest.raises(NotFound):
        service.delete_order(order.id)


def test_list_orders_filters(memory_store):
    first = add_customer(memory_store)
    second = add_customer(memory_store, name="Second")
    add_inventory(memory_store, "chicken", 100)
    service = OrderService(memory_store)
    service.create_order(new_order(first.id, quantity="1"))
    service.create_order(new_order(first.id, quantity="1", order_status=OrderStatus.PROCESSING))
    service.create_order(new_order(second.id, quantity="1"))

    assert len(service.list_orders()) == 3
    assert len(service.list_orders(customer_id=first.id)) == 2
    assert len(service.list_orders(status=OrderStatus.PROCESSING)) == 1
    assert len(service.list_orders(limit=2)) == 2
