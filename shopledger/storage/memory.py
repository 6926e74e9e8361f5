import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel

from shopledger.common.exceptions import NotFound, StorageError, VersionConflict
from shopledger.logger_config import logger
from shopledger.models.common import generate_custom_id, utcnow
from shopledger.schemas.order import OrderRead
from shopledger.schemas.transaction import TransactionRead
from shopledger.storage.base import ENTITY_REGISTRY, VERSIONED_KINDS, EntityKind, EntityStore


class MemoryStore(EntityStore):
    """
    Process-local store, used for development and tests.

    Stored entities are never mutated in place: every write replaces the
    record, so a shallow copy of the tables is a complete snapshot for
    rolling back an atomic() block. A re-entrant lock serializes atomic()
    blocks so concurrent read-modify-write cycles cannot interleave.
    """

    def __init__(self):
        self._tables: Dict[EntityKind, Dict[str, BaseModel]] = {kind: {} for kind in EntityKind}
        self._lock = threading.RLock()
        self._depth = 0

    # ==================== READS ====================

    def get_all(self, kind: EntityKind) -> List[Any]:
        with self._lock:
            rows = sorted(self._tables[kind].values(), key=lambda e: e.created_at)
            return [row.model_copy(deep=True) for row in rows]

    def get_by_id(self, kind: EntityKind, entity_id: str) -> Optional[Any]:
        with self._lock:
            row = self._tables[kind].get(entity_id)
            return row.model_copy(deep=True) if row is not None else None

    def get_orders_by_customer(self, customer_id: str) -> List[OrderRead]:
        return [o for o in self.get_all(EntityKind.ORDER) if o.customer_id == customer_id]

    def get_transactions_by_entity(self, entity_id: str) -> List[TransactionRead]:
        return [t for t in self.get_all(EntityKind.TRANSACTION) if t.entity_id == entity_id]

    # ==================== WRITES ====================

    def create(self, kind: EntityKind, data: Dict[str, Any]) -> Any:
        _, schema, prefix = ENTITY_REGISTRY[kind]
        with self._lock:
            table = self._tables[kind]
            entity_id = data.get("id") or generate_custom_id(prefix)
            while entity_id in table and not data.get("id"):
                entity_id = generate_custom_id(prefix)
            if entity_id in table:
                raise StorageError(f"{kind.value} {entity_id} already exists", field="id", entity_id=entity_id)

            now = utcnow()
            payload = {**data, "id": entity_id, "created_at": data.get("created_at") or now}
            if kind in VERSIONED_KINDS:
                payload["version"] = 1
                payload["updated_at"] = now

            entity = schema.model_validate(payload)
            table[entity_id] = entity
            logger.debug(f"Created {kind.value} {entity_id}")
            return entity.model_copy(deep=True)

    def update(
        self,
        kind: EntityKind,
        entity_id: str,
        changes: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> Any:
        _, schema, _ = ENTITY_REGISTRY[kind]
        with self._lock:
            table = self._tables[kind]
            current = table.get(entity_id)
            if current is None:
                raise NotFound(f"{kind.value.capitalize()} {entity_id} not found", entity_id=entity_id)

            versioned = kind in VERSIONED_KINDS
            if versioned and expected_version is not None and current.version != expected_version:
                raise VersionConflict(
                    f"{kind.value.capitalize()} {entity_id} was modified concurrently",
                    entity_id=entity_id,
                    expected_version=expected_version,
                    actual_version=current.version,
                )

            payload = {field: getattr(current, field) for field in type(current).model_fields}
            payload.update(changes)
            if versioned:
                payload["version"] = current.version + 1
                payload["updated_at"] = utcnow()

            entity = schema.model_validate(payload)
            table[entity_id] = entity
            return entity.model_copy(deep=True)

    def delete(self, kind: EntityKind, entity_id: str) -> bool:
        with self._lock:
            return self._tables[kind].pop(entity_id, None) is not None

    # ==================== TRANSACTIONS ====================

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            if self._depth:
                # Nested blocks join the outer one
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            snapshot = {kind: dict(table) for kind, table in self._tables.items()}
            self._depth = 1
            try:
                yield
            except BaseException:
                self._tables = snapshot
                logger.warning("Memory store block failed, changes rolled back")
                raise
            finally:
                self._depth = 0
