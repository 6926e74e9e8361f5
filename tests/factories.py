from datetime import datetime, timedelta, timezone
from decimal import Decimal

from shopledger.schemas.order import OrderItem
from shopledger.storage import EntityKind
from shopledger.utils import money

BASE_TIME = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


def add_customer(store, name="Hotel Annapurna", pending_amount=0):
    return store.create(EntityKind.CUSTOMER, {
        "name": name,
        "contact": "9876543210",
        "category": "wholesale",
        "pending_amount": Decimal(str(pending_amount)),
    })


def add_supplier(store, name="Fresh Farms", pending_amount=0):
    return store.create(EntityKind.SUPPLIER, {
        "name": name,
        "contact": "9123456780",
        "pending_amount": Decimal(str(pending_amount)),
    })


def add_inventory(store, goods_type, quantity, price="100.00", supplier_id=None, unit="kg"):
    return store.create(EntityKind.INVENTORY, {
        "name": goods_type.capitalize(),
        "type": goods_type,
        "quantity": Decimal(str(quantity)),
        "unit": unit,
        "price": Decimal(str(price)),
        "supplier_id": supplier_id,
    })


def add_order(store, customer_id, total, paid=0, items=None, minutes=0, status=None,
              order_status="confirmed"):
    """Store an order directly, bypassing stock and balance side effects."""
    total = Decimal(str(total))
    paid = Decimal(str(paid))
    if items is None:
        items = [OrderItem(type="chicken", quantity=Decimal("1"), rate=total)]
    return store.create(EntityKind.ORDER, {
        "customer_id": customer_id,
        "items": items,
        "total_amount": total,
        "paid_amount": paid,
        "payment_status": status or money.payment_status_for(total, paid),
        "order_status": order_status,
        "created_at": BASE_TIME + timedelta(minutes=minutes),
    })


def add_transaction(store, entity_id, txn_type, amount, entity_type="supplier"):
    return store.create(EntityKind.TRANSACTION, {
        "entity_id": entity_id,
        "entity_type": entity_type,
        "type": txn_type,
        "amount": Decimal(str(amount)),
        "description": f"test {txn_type}",
    })
