"""
Inventory manager: stock validation, deduction and restoration tied to the
order lifecycle, plus low-stock and valuation reports.
"""

from collections import OrderedDict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from shopledger.common.exceptions import InsufficientStock, ItemNotFound, ValidationError
from shopledger.core.config import settings
from shopledger.logger_config import logger
from shopledger.models.common import utcnow
from shopledger.models.order import OrderStatus
from shopledger.models.transaction import EntityType, TransactionType
from shopledger.schemas.inventory import (
    InventoryItemRead,
    InventoryReport,
    InventoryReportSummary,
    InventoryTypeSummary,
    InventoryValue,
    LowStockItem,
)
from shopledger.schemas.order import OrderItem
from shopledger.storage.base import EntityKind, EntityStore
from shopledger.utils import money


def _as_item(item) -> OrderItem:
    return item if isinstance(item, OrderItem) else OrderItem.model_validate(item)


class InventoryManager:
    """Keeps stock quantities in lockstep with order confirmation and cancellation."""

    def __init__(self, store: EntityStore):
        self.store = store

    def _inventory_by_type(self) -> Dict[str, InventoryItemRead]:
        return {row.type: row for row in self.store.get_all(EntityKind.INVENTORY)}

    @staticmethod
    def _require_items(items: Sequence) -> List[OrderItem]:
        if not items:
            raise ValidationError("Order must contain at least one item", field="items")
        return [_as_item(item) for item in items]

    def _record_adjustment(self, row: InventoryItemRead, item: OrderItem, amount: Decimal, description: str):
        self.store.create(EntityKind.TRANSACTION, {
            "entity_id": row.supplier_id or settings.SYSTEM_OWNER_ID,
            "entity_type": EntityType.SUPPLIER,
            "type": TransactionType.STOCK_ADJUSTMENT,
            "amount": amount,
            "description": description,
        })

    # ==================== VALIDATION ====================

    def validate_stock_availability(self, items: Sequence) -> None:
        """Fail with ItemNotFound or InsufficientStock. Never mutates anything."""
        order_items = self._require_items(items)
        inventory = self._inventory_by_type()

        for item in order_items:
            row = inventory.get(item.type)
            if row is None:
                logger.error(f"Item type not found in inventory: {item.type}")
                raise ItemNotFound(f"Item type '{item.type}' not found in inventory",
                                   field="items", item_type=item.type)

            if item.quantity > row.quantity:
                logger.error(f"Insufficient stock for {item.type}: requested {item.quantity}, "
                             f"available {row.quantity}")
                raise InsufficientStock(item.type, item.quantity, row.quantity, row.unit)

    # ==================== DEDUCTION / RESTORATION ====================

    def deduct_stock(self, items: Sequence, order_id: str) -> None:
        """
        Take the order's quantities out of stock.

        If any item would go negative the whole batch is aborted and every
        item already decremented in this call is put back to its pre-call
        quantity before InsufficientStock is raised. Ledger entries are only
        written once every quantity has been persisted.
        """
        order_items = self._require_items(items)

        with self.store.atomic():
            inventory = self._inventory_by_type()
            original = {row.type: row for row in inventory.values()}
            touched: List[str] = []

            try:
                for item in order_items:
                    row = inventory.get(item.type)
                    if row is None:
                        raise ItemNotFound(f"Item type '{item.type}' not found in inventory",
                                           field="items", item_type=item.type)

                    new_quantity = row.quantity - item.quantity
                    if new_quantity < 0:
                        raise InsufficientStock(item.type, item.quantity, row.quantity, row.unit)

                    updated = self.store.update(
                        EntityKind.INVENTORY, row.id, {"quantity": new_quantity},
                        expected_version=row.version,
                    )
                    if item.type not in touched:
                        touched.append(item.type)
                    # Same type twice in one order must see the reduced quantity
                    inventory[item.type] = updated
            except (InsufficientStock, ItemNotFound):
                logger.error(f"Stock deduction failed for order {order_id}, rolling back {len(touched)} item(s)")
                for goods_type in reversed(touched):
                    before = original[goods_type]
                    self.store.update(EntityKind.INVENTORY, before.id, {"quantity": before.quantity},
                                      expected_version=inventory[goods_type].version)
                    logger.debug(f"Rolled back {goods_type} to {before.quantity}{before.unit}")
                raise

            for item in order_items:
                row = inventory[item.type]
                self._record_adjustment(
                    row, item, money.multiply(item.quantity, item.rate),
                    f"Stock deduction for order {order_id}: {item.quantity}{row.unit} {item.type}",
                )
                logger.info(f"Stock deducted: {item.type} - {item.quantity}{row.unit} "
                            f"(remaining: {row.quantity}{row.unit})")

    def restore_stock(self, items: Sequence, order_id: str) -> None:
        """Put a cancelled order's quantities back into stock."""
        order_items = self._require_items(items)

        with self.store.atomic():
            inventory = self._inventory_by_type()
            for item in order_items:
                row = inventory.get(item.type)
                if row is None:
                    logger.warning(f"Cannot restore {item.type} for order {order_id}: not in inventory")
                    continue

                updated = self.store.update(
                    EntityKind.INVENTORY, row.id, {"quantity": row.quantity + item.quantity},
                    expected_version=row.version,
                )
                inventory[item.type] = updated
                self._record_adjustment(
                    updated, item, -money.multiply(item.quantity, item.rate),
                    f"Stock restoration for cancelled order {order_id}: {item.quantity}{row.unit} {item.type}",
                )
                logger.info(f"Stock restored: {item.type} + {item.quantity}{row.unit} "
                            f"(total: {updated.quantity}{row.unit})")

    def apply_status_transition(self, items: Sequence, order_id: str,
                                old_status: Optional[OrderStatus], new_status: OrderStatus) -> None:
        """
        Inventory side of an order status change.
        Into confirmed: validate then deduct. Confirmed to cancelled: restore.
        Every other transition leaves stock alone.
        """
        if old_status == new_status:
            return

        if new_status == OrderStatus.CONFIRMED:
            self.validate_stock_availability(items)
            self.deduct_stock(items, order_id)
        elif old_status == OrderStatus.CONFIRMED and new_status == OrderStatus.CANCELLED:
            self.restore_stock(items, order_id)

    # ==================== REPORTS ====================

    def get_low_stock_items(self, threshold: Optional[Decimal] = None) -> List[LowStockItem]:
        limit = settings.LOW_STOCK_THRESHOLD if threshold is None else Decimal(str(threshold))
        rows = [row for row in self.store.get_all(EntityKind.INVENTORY) if row.quantity <= limit]
        rows.sort(key=lambda row: row.quantity)

        low_stock = []
        for row in rows:
            if row.quantity <= 0:
                alert_level = "critical"
            elif row.quantity <= 2:
                alert_level = "warning"
            else:
                alert_level = "low"
            low_stock.append(LowStockItem(**row.model_dump(), alert_level=alert_level))
        return low_stock

    def calculate_inventory_value(self, rows: Optional[Iterable[InventoryItemRead]] = None) -> InventoryValue:
        rows = list(rows) if rows is not None else self.store.get_all(EntityKind.INVENTORY)
        total = money.ZERO
        for row in rows:
            total = money.add(total, money.multiply(row.quantity, row.price))
        return InventoryValue(total_value=total, item_count=len(rows))

    def generate_inventory_report(self) -> InventoryReport:
        rows = self.store.get_all(EntityKind.INVENTORY)
        low_stock = self.get_low_stock_items()
        value = self.calculate_inventory_value(rows)

        by_type: "OrderedDict[str, InventoryTypeSummary]" = OrderedDict()
        for row in rows:
            group = by_type.setdefault(row.type, InventoryTypeSummary(
                type=row.type, total_quantity=Decimal("0"), total_value=money.ZERO, item_count=0,
            ))
            group.total_quantity += row.quantity
            group.total_value = money.add(group.total_value, money.multiply(row.quantity, row.price))
            group.item_count += 1

        return InventoryReport(
            summary=InventoryReportSummary(
                total_value=value.total_value,
                total_items=value.item_count,
                low_stock_count=len(low_stock),
                critical_stock_count=len([i for i in low_stock if i.quantity <= 0]),
            ),
            by_type=list(by_type.values()),
            low_stock_items=low_stock,
            last_updated=utcnow(),
        )
