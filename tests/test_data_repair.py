from decimal import Decimal

import pytest

from shopledger.common.exceptions import NotFound
from shopledger.models.order import PaymentStatus
from shopledger.schemas.order import OrderItem
from shopledger.services.data_repair import DataRepairService
from shopledger.storage import EntityKind

from .factories import add_customer, add_order


def test_zero_total_recomputed_from_items(store):
    customer = add_customer(store)
    order = add_order(
        store, customer.id, "0", status="pending",
        items=[OrderItem(type="chicken", quantity=Decimal("3"), rate=Decimal("150.00"))],
    )

    result = DataRepairService(store).repair_order(order.id)

    assert result.was_corrupted is True
    assert result.order.total_amount == Decimal("450.00")
    assert result.order.payment_status == PaymentStatus.PENDING
    assert any("total_amount" in line for line in result.repairs)
    assert store.get_by_id(EntityKind.ORDER, order.id).total_amount == Decimal("450.00")


def test_negative_paid_and_wrong_status(memory_store):
    customer = add_customer(memory_store)
    order = add_order(memory_store, customer.id, "100.00", paid="-20.00", status="partially_paid")

    result = DataRepairService(memory_store).repair_order(order.id)

    assert result.order.paid_amount == Decimal("0.00")
    assert result.order.payment_status == PaymentStatus.PENDING
    assert len(result.repairs) == 2


def test_rounding_drift(memory_store):
    customer = add_customer(memory_store)
    order = add_order(memory_store, customer.id, "100.005", paid="40.004", status="partially_paid")

    result = DataRepairService(memory_store).repair_order(order.id)

    assert result.order.total_amount == Decimal("100.01")
    assert result.order.paid_amount == Decimal("40.00")
    assert result.was_corrupted is True


def test_status_inconsistent_with_amounts(store):
    customer = add_customer(store)
    order = add_order(store, customer.id, "100.00", paid="100.00", status="pending")

    result = DataRepairService(store).repair_order(order.id)

    assert result.order.payment_status == PaymentStatus.PAID
    assert result.repairs == ["Fixed payment_status: pending → paid"]


def test_clean_order_is_not_written(store):
    customer = add_customer(store)
    order = add_order(store, customer.id, "250.00", paid="50.00")

    result = DataRepairService(store).repair_order(order.id)

    assert result.was_corrupted is False
    assert result.repairs == []
    assert store.get_by_id(EntityKind.ORDER, order.id).version == order.version


def test_repair_missing_order(memory_store):
    with pytest.raises(NotFound):
        DataRepairService(memory_store).repair_order("ORD-MISSING0")


def test_repair_customer_orders(memory_store):
    customer = add_customer(memory_store)
    add_order(memory_store, customer.id, "100.00")
    broken = add_order(memory_store, customer.id, "100.00", paid="100.00", status="pending", minutes=1)

    summary = DataRepairService(memory_store).repair_customer_orders(customer.id)

    assert summary.total_orders == 2
    assert summary.corrupted_orders == 1
    assert summary.repairs[0].order_id == broken.id


def test_integrity_auto_repairs_small_drift(store):
    customer = add_customer(store, pending_amount="0")
    add_order(store, customer.id, "300.00")

    report = DataRepairService(store).validate_financial_integrity(customer.id)

    assert report.is_valid is True
    assert report.issues == []
    assert report.repairs == ["Fixed pending amount: 0.00 → 300.00"]
    assert store.get_by_id(EntityKind.CUSTOMER, customer.id).pending_amount == Decimal("300.00")


def test_integrity_reports_large_drift(store):
    customer = add_customer(store, pending_amount="0")
    add_order(store, customer.id, "5000.00")

    report = DataRepairService(store).validate_financial_integrity(customer.id)

    assert report.is_valid is False
    assert len(report.issues) == 1
    assert report.calculated_pending == Decimal("5000.00")
    assert store.get_by_id(EntityKind.CUSTOMER, customer.id).pending_amount == Decimal("0.00")


def test_integrity_unknown_customer(memory_store):
    report = DataRepairService(memory_store).validate_financial_integrity("CUS-MISSING0")

    assert report.is_valid is False
    assert report.issues == ["Customer CUS-MISSING0 not found"]


def test_integrity_repairs_orders_first(memory_store):
    customer = add_customer(memory_store, pending_amount="450.00")
    add_order(
        memory_store, customer.id, "0", status="pending",
        items=[OrderItem(type="chicken", quantity=Decimal("3"), rate=Decimal("150.00"))],
    )

    report = DataRepairService(memory_store).validate_financial_integrity(customer.id)

    assert report.is_valid is True
    assert report.repairs == ["Repaired 1 corrupted orders"]
    assert report.calculated_pending == Decimal("450.00")
