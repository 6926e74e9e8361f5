"""
Order lifecycle: placing orders, moving them through statuses and deleting
them, with stock and the customer's pending amount kept in step.

Process for a confirmed order:
    1. Customer must exist
    2. Stock is validated then deducted
    3. Order is stored with a derived payment status
    4. Customer pending amount is resynced
All of it runs in one store transaction.
"""

from datetime import timezone
from typing import List, Optional

from shopledger.common.exceptions import NotFound, ValidationError
from shopledger.core.config import settings
from shopledger.logger_config import logger
from shopledger.models.order import OrderStatus
from shopledger.models.transaction import EntityType, TransactionType
from shopledger.schemas.order import OrderCreate, OrderRead
from shopledger.services.inventory_manager import InventoryManager
from shopledger.services.pending_calculator import PendingAmountCalculator
from shopledger.storage.base import EntityKind, EntityStore
from shopledger.utils import money


class OrderService:

    def __init__(
        self,
        store: EntityStore,
        inventory: Optional[InventoryManager] = None,
        calculator: Optional[PendingAmountCalculator] = None,
    ):
        self.store = store
        self.inventory = inventory or InventoryManager(store)
        self.calculator = calculator or PendingAmountCalculator(store)

    # ==================== QUERIES ====================

    def get_order(self, order_id: str) -> OrderRead:
        order = self.store.get_by_id(EntityKind.ORDER, order_id)
        if order is None:
            logger.warning(f"Order not found: {order_id}")
            raise NotFound(f"Order {order_id} not found", field="order_id", order_id=order_id)
        return order

    def list_orders(
        self,
        customer_id: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        limit: Optional[int] = None,
    ) -> List[OrderRead]:
        if customer_id:
            orders = self.store.get_orders_by_customer(customer_id)
        else:
            orders = self.store.get_all(EntityKind.ORDER)

        if status:
            orders = [o for o in orders if o.order_status == status]
        if limit:
            orders = orders[:limit]
        return orders

    # ==================== LIFECYCLE ====================

    def create_order(self, order_data: OrderCreate) -> OrderRead:
        items = list(order_data.items)
        if not items:
            raise ValidationError("Order must contain at least one item", field="items")

        items_total = money.ZERO
        for item in items:
            items_total = money.add(items_total, money.multiply(item.quantity, item.rate))

        total = money.validate(order_data.total_amount if order_data.total_amount is not None else items_total)
        paid = money.validate(order_data.paid_amount)
        if paid > total + settings.BALANCE_TOLERANCE:
            raise ValidationError(
                f"Paid amount {paid} exceeds order total {total}",
                field="paid_amount", paid_amount=paid, total_amount=total,
            )

        logger.info(f"Creating order - Customer: {order_data.customer_id}, Items: {len(items)}, "
                    f"Total: {total}, Paid: {paid}, Status: {order_data.order_status.value}")

        created_at = order_data.created_at
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        with self.store.atomic():
            customer = self.store.require(EntityKind.CUSTOMER, order_data.customer_id)

            if order_data.order_status == OrderStatus.CONFIRMED:
                self.inventory.validate_stock_availability(items)

            order = self.store.create(EntityKind.ORDER, {
                "customer_id": customer.id,
                "items": items,
                "total_amount": total,
                "paid_amount": paid,
                "payment_status": money.payment_status_for(total, paid),
                "order_status": order_data.order_status,
                "created_at": created_at,
            })

            if order.order_status == OrderStatus.CONFIRMED:
                self.inventory.deduct_stock(items, order.id)

            if paid > 0:
                self.store.create(EntityKind.TRANSACTION, {
                    "entity_id": customer.id,
                    "entity_type": EntityType.CUSTOMER,
                    "type": TransactionType.PAYMENT,
                    "amount": paid,
                    "description": f"Payment received with order {order.id}",
                })

            self.calculator.sync_customer_pending_amount(customer.id)

        logger.info(f"✅ Order created successfully: {order.id} for customer {customer.name}")
        return order

    def update_order_status(self, order_id: str, new_status: OrderStatus) -> OrderRead:
        with self.store.atomic():
            order = self.get_order(order_id)
            if order.order_status == new_status:
                return order

            self.inventory.apply_status_transition(order.items, order.id, order.order_status, new_status)
            updated = self.store.update(EntityKind.ORDER, order_id, {"order_status": new_status},
                                        expected_version=order.version)
            self.calculator.sync_customer_pending_amount(order.customer_id)

        logger.info(f"Order {order_id} status: {order.order_status.value} → {new_status.value}")
        return updated

    def delete_order(self, order_id: str) -> None:
        with self.store.atomic():
            order = self.get_order(order_id)
            if order.order_status == OrderStatus.CONFIRMED:
                self.inventory.restore_stock(order.items, order.id)

            self.store.delete(EntityKind.ORDER, order_id)
            if self.store.get_by_id(EntityKind.CUSTOMER, order.customer_id) is not None:
                self.calculator.sync_customer_pending_amount(order.customer_id)

        logger.info(f"Order deleted: {order_id}")
