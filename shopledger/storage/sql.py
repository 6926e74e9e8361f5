from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel
from sqlalchemy import Enum as SAEnum
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from shopledger.common.exceptions import NotFound, StorageError, VersionConflict
from shopledger.logger_config import logger
from shopledger.models import Order, Transaction
from shopledger.models.common import generate_custom_id
from shopledger.schemas.order import OrderRead
from shopledger.schemas.transaction import TransactionRead
from shopledger.storage.base import ENTITY_REGISTRY, VERSIONED_KINDS, EntityKind, EntityStore


class SqlAlchemyStore(EntityStore):
    """
    Entity store backed by a SQLAlchemy session.

    Outside atomic() every write commits on its own. Inside atomic() writes
    are only flushed and the outermost block commits or rolls back.
    Optimistic locking comes from the mapper's version_id_col: a flush that
    races another writer raises StaleDataError, surfaced as VersionConflict.
    """

    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    # ==================== HELPERS ====================

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except StaleDataError as e:
            if not self._depth:
                self.db.rollback()
            logger.error(f"Version conflict while trying to {action}: {str(e)}")
            raise VersionConflict(f"Concurrent modification while trying to {action}") from e
        except SQLAlchemyError as e:
            if not self._depth:
                self.db.rollback()
            logger.error(f"Database error while trying to {action}: {str(e)}")
            raise StorageError(f"Failed to {action}") from e

    def _write(self) -> None:
        if self._depth:
            self.db.flush()
        else:
            self.db.commit()

    @staticmethod
    def _to_columns(model_cls, values: Dict[str, Any]) -> Dict[str, Any]:
        columns = model_cls.__table__.c
        converted = {}
        for key, value in values.items():
            if isinstance(value, BaseModel):
                value = value.model_dump()
            elif isinstance(value, list):
                value = [v.model_dump() if isinstance(v, BaseModel) else v for v in value]

            column = columns.get(key)
            if column is not None and isinstance(column.type, SAEnum) and value is not None:
                value = column.type.enum_class(value)
            converted[key] = value
        return converted

    def _new_id(self, model_cls, prefix: str) -> str:
        for _ in range(15):
            new_id = generate_custom_id(prefix)
            if self.db.get(model_cls, new_id) is None:
                return new_id
        raise StorageError(f"Failed to generate unique {prefix} ID")

    # ==================== READS ====================

    def get_all(self, kind: EntityKind) -> List[Any]:
        model_cls, schema, _ = ENTITY_REGISTRY[kind]
        with self._guard(f"list {kind.value}"):
            rows = self.db.query(model_cls).order_by(model_cls.created_at.asc()).all()
            return [schema.model_validate(row) for row in rows]

    def get_by_id(self, kind: EntityKind, entity_id: str) -> Optional[Any]:
        model_cls, schema, _ = ENTITY_REGISTRY[kind]
        with self._guard(f"get {kind.value} {entity_id}"):
            row = self.db.get(model_cls, entity_id)
            return schema.model_validate(row) if row is not None else None

    def get_orders_by_customer(self, customer_id: str) -> List[OrderRead]:
        with self._guard(f"get orders for customer {customer_id}"):
            rows = (self.db.query(Order)
                    .filter(Order.customer_id == customer_id)
                    .order_by(Order.created_at.asc())
                    .all())
            return [OrderRead.model_validate(row) for row in rows]

    def get_transactions_by_entity(self, entity_id: str) -> List[TransactionRead]:
        with self._guard(f"get transactions for {entity_id}"):
            rows = (self.db.query(Transaction)
                    .filter(Transaction.entity_id == entity_id)
                    .order_by(Transaction.created_at.asc())
                    .all())
            return [TransactionRead.model_validate(row) for row in rows]

    # ==================== WRITES ====================

    def create(self, kind: EntityKind, data: Dict[str, Any]) -> Any:
        model_cls, schema, prefix = ENTITY_REGISTRY[kind]
        with self._guard(f"create {kind.value}"):
            values = dict(data)
            if not values.get("id"):
                values["id"] = self._new_id(model_cls, prefix)
            if values.get("created_at") is None:
                values.pop("created_at", None)

            row = model_cls(**self._to_columns(model_cls, values))
            self.db.add(row)
            self._write()
            logger.debug(f"Created {kind.value} {row.id}")
            return schema.model_validate(row)

    def update(
        self,
        kind: EntityKind,
        entity_id: str,
        changes: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> Any:
        model_cls, schema, _ = ENTITY_REGISTRY[kind]
        with self._guard(f"update {kind.value} {entity_id}"):
            row = self.db.get(model_cls, entity_id)
            if row is None:
                raise NotFound(f"{kind.value.capitalize()} {entity_id} not found", entity_id=entity_id)

            if kind in VERSIONED_KINDS and expected_version is not None and row.version != expected_version:
                raise VersionConflict(
                    f"{kind.value.capitalize()} {entity_id} was modified concurrently",
                    entity_id=entity_id,
                    expected_version=expected_version,
                    actual_version=row.version,
                )

            for key, value in self._to_columns(model_cls, changes).items():
                setattr(row, key, value)
            self._write()
            return schema.model_validate(row)

    def delete(self, kind: EntityKind, entity_id: str) -> bool:
        model_cls, _, _ = ENTITY_REGISTRY[kind]
        with self._guard(f"delete {kind.value} {entity_id}"):
            row = self.db.get(model_cls, entity_id)
            if row is None:
                return False
            self.db.delete(row)
            self._write()
            return True

    # ==================== TRANSACTIONS ====================

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            yield
            self.db.commit()
        except StaleDataError as e:
            self.db.rollback()
            raise VersionConflict("Concurrent modification, transaction rolled back") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Transaction failed: {str(e)}")
            raise StorageError("Transaction failed and was rolled back") from e
        except BaseException:
            self.db.rollback()
            raise
        finally:
            self._depth = 0
