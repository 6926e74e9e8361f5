"""
Pending Amount Calculator
Derives what a customer owes (from orders) and what the shop owes a supplier
(from the transaction ledger), keeps the cached pending_amount in sync, and
spreads customer payments over outstanding orders.

Example Scenario:
- Order O1 ₹600 (older, unpaid), Order O2 ₹400 (unpaid)
- Customer pays ₹700 → oldest order first
- Result: O1 PAID (₹600), O2 PARTIALLY_PAID (₹100 of ₹400)
- Remaining pending: ₹300
"""

from decimal import Decimal
from typing import List, Optional

from shopledger.common.exceptions import IntegrityIssue, NotFound, ValidationError
from shopledger.logger_config import logger
from shopledger.models.order import PaymentStatus
from shopledger.models.transaction import EntityType, TransactionType
from shopledger.schemas.order import OrderRead
from shopledger.schemas.results import CustomerSnapshot, PaymentResult
from shopledger.storage.base import EntityKind, EntityStore
from shopledger.utils import money

DEBT_INCREASING_TYPES = {
    TransactionType.PURCHASE,
    TransactionType.EXPENSE,
    TransactionType.INITIAL_DEBT,
}


def outstanding_balance(order: OrderRead) -> Decimal:
    """Unpaid part of an order, never negative."""
    balance = money.subtract(order.total_amount or 0, order.paid_amount or 0)
    return max(money.ZERO, balance)


def pending_from_orders(orders: List[OrderRead]) -> Decimal:
    pending = money.ZERO
    for order in orders:
        if order.payment_status == PaymentStatus.PAID:
            continue
        pending = money.add(pending, outstanding_balance(order))
    return max(money.ZERO, money.round_money(pending))


class PendingAmountCalculator:
    """Keeps cached balances consistent with orders and the ledger."""

    def __init__(self, store: EntityStore):
        self.store = store

    # ==================== CUSTOMER BALANCES ====================

    def calculate_customer_pending(self, customer_id: str) -> Decimal:
        """
        Sum of max(0, total - paid) over the customer's orders that are not paid.
        Store failures propagate, a failed read never turns into a zero balance.
        """
        orders = self.store.get_orders_by_customer(customer_id)
        pending = pending_from_orders(orders)
        logger.debug(f"Customer {customer_id} pending calculated from {len(orders)} orders: {pending}")
        return pending

    def sync_customer_pending_amount(self, customer_id: str) -> Decimal:
        """Recompute the customer's pending amount and persist it on the customer."""
        with self.store.atomic():
            customer = self.store.require(EntityKind.CUSTOMER, customer_id)
            orders = self.store.get_orders_by_customer(customer_id)
            calculated = pending_from_orders(orders)
            stored = money.round_money(customer.pending_amount or 0)

            if calculated == 0 and stored != 0:
                open_orders = [o.id for o in orders
                               if o.payment_status != PaymentStatus.PAID and outstanding_balance(o) > 0]
                if open_orders:
                    logger.warning(
                        f"Refusing to zero pending amount for customer {customer_id}: "
                        f"stored={stored}, open orders={open_orders}"
                    )
                    raise IntegrityIssue(
                        f"Calculated pending amount for customer {customer_id} is 0 "
                        f"but {len(open_orders)} order(s) still carry a balance",
                        field="pending_amount",
                        stored=stored,
                        open_orders=open_orders,
                    )

            if calculated != stored:
                self.store.update(
                    EntityKind.CUSTOMER,
                    customer_id,
                    {"pending_amount": calculated},
                    expected_version=customer.version,
                )
                logger.info(f"Customer {customer_id} pending amount synced: {stored} → {calculated}")

            return calculated

    # ==================== SUPPLIER BALANCES ====================

    def calculate_supplier_pending(self, supplier_id: str) -> Decimal:
        """
        Rebuild the payable from the ledger:
        purchases + expenses + initial_debt - payments, clamped at 0.

        Without an initial_debt entry the opening debt is back-solved from the
        stored cache (stored + payments - purchases). That reconstruction is a
        best effort for suppliers created before opening balances were
        ledgered; new suppliers always get an explicit initial_debt entry.
        """
        supplier = self.store.require(EntityKind.SUPPLIER, supplier_id)
        transactions = self.store.get_transactions_by_entity(supplier_id)
        stored = money.round_money(supplier.pending_amount or 0)

        if not transactions:
            logger.debug(f"Supplier {supplier_id} has no transactions, using stored pending {stored}")
            return max(money.ZERO, stored)

        debt_increases = money.ZERO
        payments = money.ZERO
        has_initial_debt = False
        for txn in transactions:
            if txn.type in DEBT_INCREASING_TYPES:
                debt_increases = money.add(debt_increases, txn.amount)
                if txn.type == TransactionType.INITIAL_DEBT:
                    has_initial_debt = True
            elif txn.type == TransactionType.PAYMENT:
                payments = money.add(payments, txn.amount)

        original_debt = money.ZERO
        if not has_initial_debt:
            original_debt = money.subtract(money.add(stored, payments), debt_increases)
            logger.warning(
                f"Supplier {supplier_id} has no initial_debt entry, "
                f"implied original debt back-solved as {original_debt}"
            )

        final_amount = money.subtract(money.add(debt_increases, original_debt), payments)
        logger.debug(
            f"Supplier {supplier_id} debt calculation: increases={debt_increases}, "
            f"payments={payments}, transactions={len(transactions)}, final={final_amount}"
        )
        return max(money.ZERO, final_amount)

    def sync_supplier_pending_amount(self, supplier_id: str) -> Decimal:
        with self.store.atomic():
            supplier = self.store.require(EntityKind.SUPPLIER, supplier_id)
            calculated = self.calculate_supplier_pending(supplier_id)
            stored = money.round_money(supplier.pending_amount or 0)

            if calculated == 0 and stored != 0:
                transactions = self.store.get_transactions_by_entity(supplier_id)
                if not any(t.type == TransactionType.PAYMENT for t in transactions):
                    # A payable can only reach zero through payments
                    logger.warning(
                        f"Refusing to zero pending amount for supplier {supplier_id}: stored={stored}"
                    )
                    raise IntegrityIssue(
                        f"Calculated pending amount for supplier {supplier_id} is 0 "
                        f"but no payment explains the drop from {stored}",
                        field="pending_amount",
                        stored=stored,
                    )

            if calculated != stored:
                self.store.update(
                    EntityKind.SUPPLIER,
                    supplier_id,
                    {"pending_amount": calculated},
                    expected_version=supplier.version,
                )
                logger.info(f"Supplier {supplier_id} pending amount synced: {stored} → {calculated}")

            return calculated

    # ==================== PAYMENT ALLOCATION ====================

    def _payment_candidates(self, customer_id: str, target_order_id: Optional[str]) -> List[OrderRead]:
        if target_order_id:
            order = self.store.get_by_id(EntityKind.ORDER, target_order_id)
            if order is None:
                raise NotFound(f"Order {target_order_id} not found",
                               field="target_order_id", order_id=target_order_id)
            if order.customer_id != customer_id:
                raise ValidationError(
                    f"Order {target_order_id} does not belong to customer {customer_id}",
                    field="target_order_id",
                )
            return [order] if order.payment_status != PaymentStatus.PAID else []

        orders = self.store.get_orders_by_customer(customer_id)
        unpaid = [o for o in orders if o.payment_status != PaymentStatus.PAID]
        # Oldest debt first
        return sorted(unpaid, key=lambda o: o.created_at)

    def process_payment(
        self,
        customer_id: str,
        amount,
        description: Optional[str] = None,
        target_order_id: Optional[str] = None,
    ) -> PaymentResult:
        """
        Apply a customer payment to outstanding orders.

        Process:
            1. Validate the amount
            2. Pick the target order, or every unpaid order oldest first
            3. Fill each order's balance until the payment runs out
            4. Record one payment transaction for the full amount
            5. Resync the customer's pending amount
        """
        payment_amount = money.validate_payment(amount)
        logger.info(f"Processing payment - Customer: {customer_id}, Amount: {payment_amount}, "
                    f"Target order: {target_order_id}")

        with self.store.atomic():
            customer = self.store.require(EntityKind.CUSTOMER, customer_id)
            candidates = self._payment_candidates(customer_id, target_order_id)

            remaining = payment_amount
            applied = money.ZERO
            updated_order_ids: List[str] = []

            for order in candidates:
                if remaining <= 0:
                    break

                balance = outstanding_balance(order)
                if remaining >= balance:
                    changes = {
                        "paid_amount": money.round_money(order.total_amount),
                        "payment_status": PaymentStatus.PAID,
                    }
                    remaining = money.subtract(remaining, balance)
                    applied = money.add(applied, balance)
                else:
                    new_paid = money.add(order.paid_amount or 0, remaining)
                    changes = {
                        "paid_amount": new_paid,
                        "payment_status": money.payment_status_for(order.total_amount, new_paid),
                    }
                    applied = money.add(applied, remaining)
                    remaining = money.ZERO

                self.store.update(EntityKind.ORDER, order.id, changes, expected_version=order.version)
                updated_order_ids.append(order.id)
                logger.debug(f"Order {order.id}: paid {order.paid_amount} → {changes['paid_amount']}, "
                             f"status {changes['payment_status']}")

            transaction = self.store.create(EntityKind.TRANSACTION, {
                "entity_id": customer_id,
                "entity_type": EntityType.CUSTOMER,
                "type": TransactionType.PAYMENT,
                "amount": payment_amount,
                "description": description or f"Payment from customer: {customer.name}",
            })

            pending = self.sync_customer_pending_amount(customer_id)

        if remaining > 0:
            logger.warning(f"Customer {customer_id} overpaid by {remaining}, returned as unapplied credit")

        logger.info(
            f"✅ Payment complete - Customer: {customer_id}, Applied: {applied}, "
            f"Credit: {remaining}, Orders: {len(updated_order_ids)}, Pending: {pending}"
        )

        return PaymentResult(
            applied_amount=applied,
            remaining_credit=remaining,
            updated_order_ids=updated_order_ids,
            pending_amount=pending,
            transaction_id=transaction.id,
        )

    # ==================== READ MODELS ====================

    def customer_balance_snapshot(self, customer_id: str, recent: int = 5) -> CustomerSnapshot:
        """Customer with a live pending amount and their most recent orders."""
        customer = self.store.require(EntityKind.CUSTOMER, customer_id)
        orders = self.store.get_orders_by_customer(customer_id)
        recent_orders = sorted(orders, key=lambda o: o.created_at, reverse=True)[:recent]
        return CustomerSnapshot(
            customer=customer,
            pending_amount=pending_from_orders(orders),
            recent_orders=recent_orders,
        )
