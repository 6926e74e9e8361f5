"""
Data Repair Service
Finds orders whose money fields drifted (zero totals, negative payments,
unrounded values, stale payment status) and fixes them, then checks the
customer's cached pending amount against the recomputed one.

Example Scenario:
- Order stored with total ₹0 but items 3kg × ₹150
- repair_order → total ₹450.00, payment_status recomputed from paid amount
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from shopledger.common.exceptions import NotFound
from shopledger.core.config import settings
from shopledger.logger_config import logger
from shopledger.schemas.order import OrderRead
from shopledger.schemas.results import (
    CustomerRepairSummary,
    IntegrityReport,
    OrderRepairLog,
    RepairResult,
)
from shopledger.services.pending_calculator import PendingAmountCalculator
from shopledger.storage.base import EntityKind, EntityStore
from shopledger.utils import money


class DataRepairService:

    def __init__(self, store: EntityStore, calculator: Optional[PendingAmountCalculator] = None):
        self.store = store
        self.calculator = calculator or PendingAmountCalculator(store)

    @staticmethod
    def _items_total(order: OrderRead) -> Decimal:
        total = money.ZERO
        for item in order.items:
            total = money.add(total, money.multiply(item.quantity or 0, item.rate or 0))
        return total

    def _detect(self, order: OrderRead) -> Tuple[Dict[str, Any], List[str]]:
        changes: Dict[str, Any] = {}
        repairs: List[str] = []

        total = order.total_amount
        paid = order.paid_amount

        if total is None or total <= 0:
            calculated = self._items_total(order)
            if calculated > 0:
                changes["total_amount"] = calculated
                repairs.append(f"Fixed total_amount: {total} → {calculated}")
                total = calculated

        if paid is not None and paid < 0:
            changes["paid_amount"] = money.ZERO
            repairs.append(f"Fixed negative paid_amount: {paid} → 0")
            paid = money.ZERO

        if total:
            rounded = money.round_money(total)
            if rounded != total:
                changes["total_amount"] = rounded
                repairs.append(f"Fixed total_amount precision: {total} → {rounded}")
                total = rounded

        if paid:
            rounded = money.round_money(paid)
            if rounded != paid:
                changes["paid_amount"] = rounded
                repairs.append(f"Fixed paid_amount precision: {paid} → {rounded}")
                paid = rounded

        correct_status = money.payment_status_for(total or 0, paid or 0)
        if order.payment_status != correct_status:
            changes["payment_status"] = correct_status
            repairs.append(f"Fixed payment_status: {order.payment_status.value} → {correct_status}")

        return changes, repairs

    # ==================== ORDERS ====================

    def repair_order(self, order_id: str) -> RepairResult:
        """
        Detect and fix, in order:
            1. Non-positive total, recomputed from items when they sum above 0
            2. Negative paid amount, clamped to 0
            3. Total or paid carrying more than 2 decimals
            4. payment_status disagreeing with total and paid
        Changes are only written when at least one repair applied.
        """
        with self.store.atomic():
            order = self.store.get_by_id(EntityKind.ORDER, order_id)
            if order is None:
                raise NotFound(f"Order {order_id} not found", field="order_id", order_id=order_id)

            changes, repairs = self._detect(order)
            if changes:
                order = self.store.update(EntityKind.ORDER, order_id, changes,
                                          expected_version=order.version)
                logger.info(f"Repaired order {order_id}: {repairs}")

        return RepairResult(was_corrupted=bool(repairs), repairs=repairs, order=order)

    def repair_customer_orders(self, customer_id: str) -> CustomerRepairSummary:
        orders = self.store.get_orders_by_customer(customer_id)
        logs: List[OrderRepairLog] = []

        for order in orders:
            result = self.repair_order(order.id)
            if result.was_corrupted:
                logs.append(OrderRepairLog(order_id=order.id, repairs=result.repairs))

        logger.info(f"Customer {customer_id} repair summary: total={len(orders)}, corrupted={len(logs)}")
        return CustomerRepairSummary(total_orders=len(orders), corrupted_orders=len(logs), repairs=logs)

    # ==================== CUSTOMER BALANCE ====================

    def validate_financial_integrity(self, customer_id: str) -> IntegrityReport:
        """
        Repair the customer's orders, then compare the stored pending amount
        with the recalculated one. Gaps under AUTO_REPAIR_CEILING are fixed and
        listed under repairs. Larger gaps stay untouched and are listed under
        issues for manual review.
        """
        issues: List[str] = []
        repairs: List[str] = []

        summary = self.repair_customer_orders(customer_id)
        if summary.corrupted_orders:
            repairs.append(f"Repaired {summary.corrupted_orders} corrupted orders")

        with self.store.atomic():
            customer = self.store.get_by_id(EntityKind.CUSTOMER, customer_id)
            if customer is None:
                issues.append(f"Customer {customer_id} not found")
                return IntegrityReport(is_valid=False, issues=issues, repairs=repairs)

            calculated = self.calculator.calculate_customer_pending(customer_id)
            stored = money.round_money(customer.pending_amount or 0)

            if calculated != stored:
                difference = abs(money.subtract(calculated, stored))
                if difference < settings.AUTO_REPAIR_CEILING:
                    self.store.update(EntityKind.CUSTOMER, customer_id, {"pending_amount": calculated},
                                      expected_version=customer.version)
                    repairs.append(f"Fixed pending amount: {stored} → {calculated}")
                    logger.info(f"Customer {customer_id} pending amount auto-repaired: {stored} → {calculated}")
                else:
                    issues.append(
                        f"Pending amount mismatch: stored={stored}, calculated={calculated} "
                        f"(difference {difference} needs manual review)"
                    )
                    logger.warning(f"Customer {customer_id} pending mismatch of {difference} left for manual review")

        return IntegrityReport(
            is_valid=not issues,
            issues=issues,
            repairs=repairs,
            stored_pending=stored,
            calculated_pending=calculated,
        )
