from typing import List, Optional

from shopledger.logger_config import logger
from shopledger.models.customer import CustomerCategory
from shopledger.schemas.customer import CustomerCreate, CustomerRead
from shopledger.schemas.transaction import TransactionRead
from shopledger.storage.base import EntityKind, EntityStore


class CustomerService:
    """Customer records. Balances are owned by PendingAmountCalculator."""

    def __init__(self, store: EntityStore):
        self.store = store

    def get_customer(self, customer_id: str) -> CustomerRead:
        return self.store.require(EntityKind.CUSTOMER, customer_id)

    def list_customers(self, category: Optional[CustomerCategory] = None) -> List[CustomerRead]:
        customers = self.store.get_all(EntityKind.CUSTOMER)
        if category:
            customers = [c for c in customers if c.category == category]
        return customers

    def create_customer(self, customer_data: CustomerCreate) -> CustomerRead:
        customer = self.store.create(EntityKind.CUSTOMER, {
            **customer_data.model_dump(),
            "pending_amount": 0,
        })
        logger.info(f"✅ Customer created: {customer.id} ({customer.name}, {customer.category.value})")
        return customer

    def list_transactions(self, customer_id: str) -> List[TransactionRead]:
        self.store.require(EntityKind.CUSTOMER, customer_id)
        return self.store.get_transactions_by_entity(customer_id)
