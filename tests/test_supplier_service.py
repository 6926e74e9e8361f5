from decimal import Decimal

import pytest

from shopledger.common.exceptions import InvalidAmount, NotFound
from shopledger.models.transaction import TransactionType
from shopledger.schemas.supplier import StockPurchase, SupplierCreate
from shopledger.services.supplier_service import SupplierService
from shopledger.storage import EntityKind

from .factories import add_supplier, add_transaction


def ledger_types(store, supplier_id):
    return [t.type for t in store.get_transactions_by_entity(supplier_id)]


def test_create_supplier_writes_opening_entry(store):
    supplier = SupplierService(store).create_supplier(
        SupplierCreate(name="Fresh Farms", opening_balance=Decimal("500.00"))
    )

    assert supplier.pending_amount == Decimal("500.00")
    [opening] = store.get_transactions_by_entity(supplier.id)
    assert opening.type == TransactionType.INITIAL_DEBT
    assert opening.amount == Decimal("500.00")


def test_zero_opening_balance_still_anchors_ledger(memory_store):
    supplier = SupplierService(memory_store).create_supplier(SupplierCreate(name="Nil Balance Traders"))

    assert ledger_types(memory_store, supplier.id) == [TransactionType.INITIAL_DEBT]


def test_receive_stock_creates_item_and_payable(store):
    service = SupplierService(store)
    supplier = service.create_supplier(SupplierCreate(name="Fresh Farms", opening_balance=Decimal("500.00")))

    item = service.receive_stock(StockPurchase(
        supplier_id=supplier.id, type="chicken", quantity=Decimal("50"), price=Decimal("180.00"),
    ))

    assert item.quantity == Decimal("50")
    assert item.unit == "kg"
    assert item.supplier_id == supplier.id
    assert store.get_by_id(EntityKind.SUPPLIER, supplier.id).pending_amount == Decimal("9500.00")
    assert ledger_types(store, supplier.id) == [TransactionType.INITIAL_DEBT, TransactionType.PURCHASE]


def test_receive_stock_tops_up_existing_type(store):
    service = SupplierService(store)
    first = service.create_supplier(SupplierCreate(name="Fresh Farms"))
    second = service.create_supplier(SupplierCreate(name="Hill Poultry"))
    service.receive_stock(StockPurchase(supplier_id=first.id, type="eggs", quantity=Decimal("300"),
                                        price=Decimal("5.00"), unit="pcs"))

    item = service.receive_stock(StockPurchase(supplier_id=second.id, type="eggs", quantity=Decimal("200"),
                                               price=Decimal("6.00")))

    assert item.quantity == Decimal("500")
    assert item.price == Decimal("6.00")
    assert item.unit == "pcs"
    assert item.supplier_id == second.id
    assert len(store.get_all(EntityKind.INVENTORY)) == 1
    assert store.get_by_id(EntityKind.SUPPLIER, first.id).pending_amount == Decimal("1500.00")
    assert store.get_by_id(EntityKind.SUPPLIER, second.id).pending_amount == Decimal("1200.00")


def test_record_payment(store):
    service = SupplierService(store)
    supplier = service.create_supplier(SupplierCreate(name="Fresh Farms", opening_balance=Decimal("800.00")))

    result = service.record_payment(supplier.id, "300.00")
    assert result.pending_amount == Decimal("500.00")
    assert result.transaction.type == TransactionType.PAYMENT

    result = service.record_payment(supplier.id, "500.00", description="Settled in cash")
    assert result.pending_amount == Decimal("0.00")
    assert result.transaction.description == "Settled in cash"


def test_legacy_supplier_is_anchored_before_new_entries(memory_store):
    supplier = add_supplier(memory_store, pending_amount="800.00")
    service = SupplierService(memory_store)

    service.receive_stock(StockPurchase(supplier_id=supplier.id, type="mutton", quantity=Decimal("2"),
                                        price=Decimal("100.00")))

    transactions = memory_store.get_transactions_by_entity(supplier.id)
    assert transactions[0].type == TransactionType.INITIAL_DEBT
    assert transactions[0].amount == Decimal("800.00")
    assert memory_store.get_by_id(EntityKind.SUPPLIER, supplier.id).pending_amount == Decimal("1000.00")


def test_anchor_reproduces_existing_ledger(memory_store):
    supplier = add_supplier(memory_store, pending_amount="600.00")
    add_transaction(memory_store, supplier.id, "purchase", "400.00")
    add_transaction(memory_store, supplier.id, "payment", "100.00")

    result = SupplierService(memory_store).record_payment(supplier.id, "50.00")

    # opening = 600 + 100 - 400 = 300, then 300 + 400 - 100 - 50
    assert result.pending_amount == Decimal("550.00")


def test_payment_validation_and_lookup(memory_store):
    service = SupplierService(memory_store)
    supplier = service.create_supplier(SupplierCreate(name="Fresh Farms"))

    with pytest.raises(InvalidAmount):
        service.record_payment(supplier.id, "0")
    with pytest.raises(NotFound):
        service.record_payment("SUP-MISSING0", "10.00")
    with pytest.raises(NotFound):
        service.list_transactions("SUP-MISSING0")
