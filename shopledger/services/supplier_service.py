"""
Supplier ledger: onboarding, payments made to suppliers and stock received
from them. Every money movement is a ledger entry and the supplier's pending
amount is always resynced from the ledger afterwards.
"""

from decimal import Decimal
from typing import List, Optional

from shopledger.core.config import settings
from shopledger.logger_config import logger
from shopledger.models.transaction import EntityType, TransactionType
from shopledger.schemas.inventory import InventoryItemRead
from shopledger.schemas.results import SupplierPaymentResult
from shopledger.schemas.supplier import StockPurchase, SupplierCreate, SupplierRead
from shopledger.schemas.transaction import TransactionRead
from shopledger.services.pending_calculator import DEBT_INCREASING_TYPES, PendingAmountCalculator
from shopledger.storage.base import EntityKind, EntityStore
from shopledger.utils import money


class SupplierService:

    def __init__(self, store: EntityStore, calculator: Optional[PendingAmountCalculator] = None):
        self.store = store
        self.calculator = calculator or PendingAmountCalculator(store)

    # ==================== HELPER FUNCTIONS ====================

    def _record(self, supplier_id: str, txn_type: TransactionType, amount: Decimal, description: str) -> TransactionRead:
        return self.store.create(EntityKind.TRANSACTION, {
            "entity_id": supplier_id,
            "entity_type": EntityType.SUPPLIER,
            "type": txn_type,
            "amount": amount,
            "description": description,
        })

    def _ensure_opening_entry(self, supplier: SupplierRead) -> None:
        """
        Give a supplier without an initial_debt entry one, valued so the ledger
        reproduces the currently stored pending amount. Once it exists the
        balance no longer depends on the cached value.
        """
        transactions = self.store.get_transactions_by_entity(supplier.id)
        if any(t.type == TransactionType.INITIAL_DEBT for t in transactions):
            return

        increases = money.ZERO
        payments = money.ZERO
        for txn in transactions:
            if txn.type in DEBT_INCREASING_TYPES:
                increases = money.add(increases, txn.amount)
            elif txn.type == TransactionType.PAYMENT:
                payments = money.add(payments, txn.amount)

        opening = money.subtract(money.add(supplier.pending_amount or 0, payments), increases)
        if opening < 0:
            logger.warning(f"Supplier {supplier.id} implied opening debt {opening} is negative, using 0")
            opening = money.ZERO

        self._record(supplier.id, TransactionType.INITIAL_DEBT, opening,
                     f"Opening balance carried forward for {supplier.name}")
        logger.info(f"Supplier {supplier.id} ledger anchored with opening debt {opening}")

    # ==================== QUERIES ====================

    def get_supplier(self, supplier_id: str) -> SupplierRead:
        return self.store.require(EntityKind.SUPPLIER, supplier_id)

    def list_suppliers(self) -> List[SupplierRead]:
        return self.store.get_all(EntityKind.SUPPLIER)

    def list_transactions(self, supplier_id: str) -> List[TransactionRead]:
        self.store.require(EntityKind.SUPPLIER, supplier_id)
        return self.store.get_transactions_by_entity(supplier_id)

    # ==================== MUTATIONS ====================

    def create_supplier(self, supplier_data: SupplierCreate) -> SupplierRead:
        opening = money.validate(supplier_data.opening_balance)

        with self.store.atomic():
            supplier = self.store.create(EntityKind.SUPPLIER, {
                "name": supplier_data.name,
                "contact": supplier_data.contact,
                "pending_amount": opening,
            })
            self._record(supplier.id, TransactionType.INITIAL_DEBT, opening,
                         f"Opening balance for {supplier.name}")

        logger.info(f"✅ Supplier created: {supplier.id} ({supplier.name}), opening balance {opening}")
        return supplier

    def record_payment(self, supplier_id: str, amount, description: Optional[str] = None) -> SupplierPaymentResult:
        payment_amount = money.validate_payment(amount)
        logger.info(f"Processing supplier payment - Supplier: {supplier_id}, Amount: {payment_amount}")

        with self.store.atomic():
            supplier = self.store.require(EntityKind.SUPPLIER, supplier_id)
            self._ensure_opening_entry(supplier)

            transaction = self._record(supplier_id, TransactionType.PAYMENT, payment_amount,
                                       description or f"Payment to supplier: {supplier.name}")
            pending = self.calculator.sync_supplier_pending_amount(supplier_id)

        logger.info(f"✅ Supplier payment recorded: {transaction.id}, pending now {pending}")
        return SupplierPaymentResult(transaction=transaction, pending_amount=pending)

    def receive_stock(self, purchase: StockPurchase) -> InventoryItemRead:
        """
        Add purchased stock to inventory and owe the supplier for it.

        Process:
            1. Add quantity to the row of the same type, or create the row
            2. Latest price and supplier win on an existing row
            3. Record a purchase entry of quantity × price
            4. Resync the supplier's pending amount
        """
        cost = money.validate(money.multiply(purchase.quantity, purchase.price))
        price = money.validate(purchase.price)

        with self.store.atomic():
            supplier = self.store.require(EntityKind.SUPPLIER, purchase.supplier_id)
            self._ensure_opening_entry(supplier)

            existing = next(
                (row for row in self.store.get_all(EntityKind.INVENTORY) if row.type == purchase.type),
                None,
            )
            if existing is not None:
                item = self.store.update(EntityKind.INVENTORY, existing.id, {
                    "quantity": existing.quantity + purchase.quantity,
                    "price": price,
                    "supplier_id": supplier.id,
                    "unit": purchase.unit or existing.unit,
                }, expected_version=existing.version)
                logger.info(f"Stock added: {purchase.type} + {purchase.quantity}{item.unit} "
                            f"(total: {item.quantity}{item.unit})")
            else:
                item = self.store.create(EntityKind.INVENTORY, {
                    "name": purchase.type.capitalize(),
                    "type": purchase.type,
                    "quantity": purchase.quantity,
                    "unit": purchase.unit or settings.DEFAULT_UNIT,
                    "price": price,
                    "supplier_id": supplier.id,
                })
                logger.info(f"New inventory item {item.id}: {purchase.type} {purchase.quantity}{item.unit}")

            self._record(supplier.id, TransactionType.PURCHASE, cost,
                         f"Purchase of {purchase.quantity}{item.unit} {purchase.type} @ {price}")
            self.calculator.sync_supplier_pending_amount(supplier.id)

        return item
