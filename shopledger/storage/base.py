"""
Entity store contract consumed by the engine.

Every backend exposes the same CRUD surface per entity kind, two filtered
reads, and an atomic() block. Writes bump a per-entity version; callers that
pass expected_version get VersionConflict when someone else wrote first.
"""

import enum
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from shopledger.common.exceptions import NotFound
from shopledger.models import Customer, InventoryItem, Order, Supplier, Transaction
from shopledger.schemas.customer import CustomerRead
from shopledger.schemas.inventory import InventoryItemRead
from shopledger.schemas.order import OrderRead
from shopledger.schemas.supplier import SupplierRead
from shopledger.schemas.transaction import TransactionRead


class EntityKind(str, enum.Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"
    INVENTORY = "inventory"
    ORDER = "order"
    TRANSACTION = "transaction"


# kind -> (ORM model, read schema, id prefix)
ENTITY_REGISTRY: Dict[EntityKind, tuple] = {
    EntityKind.CUSTOMER: (Customer, CustomerRead, "CUS"),
    EntityKind.SUPPLIER: (Supplier, SupplierRead, "SUP"),
    EntityKind.INVENTORY: (InventoryItem, InventoryItemRead, "INV"),
    EntityKind.ORDER: (Order, OrderRead, "ORD"),
    EntityKind.TRANSACTION: (Transaction, TransactionRead, "TXN"),
}

# Ledger entries are append-only and carry no version
VERSIONED_KINDS = {
    EntityKind.CUSTOMER,
    EntityKind.SUPPLIER,
    EntityKind.INVENTORY,
    EntityKind.ORDER,
}


class EntityStore(ABC):
    """Persistence collaborator injected into every engine service."""

    @abstractmethod
    def get_all(self, kind: EntityKind) -> List[Any]:
        ...

    @abstractmethod
    def get_by_id(self, kind: EntityKind, entity_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    def create(self, kind: EntityKind, data: Dict[str, Any]) -> Any:
        ...

    @abstractmethod
    def update(
        self,
        kind: EntityKind,
        entity_id: str,
        changes: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> Any:
        """Apply a partial update. Raises NotFound or VersionConflict."""

    @abstractmethod
    def delete(self, kind: EntityKind, entity_id: str) -> bool:
        ...

    @abstractmethod
    def get_orders_by_customer(self, customer_id: str) -> List[OrderRead]:
        ...

    @abstractmethod
    def get_transactions_by_entity(self, entity_id: str) -> List[TransactionRead]:
        ...

    @abstractmethod
    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run the enclosed reads and writes as one unit."""
        yield

    def require(self, kind: EntityKind, entity_id: str) -> Any:
        entity = self.get_by_id(kind, entity_id)
        if entity is None:
            raise NotFound(f"{kind.value.capitalize()} {entity_id} not found",
                           field=f"{kind.value}_id", entity_id=entity_id)
        return entity
