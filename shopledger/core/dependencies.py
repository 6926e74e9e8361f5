from typing import Iterator, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from shopledger.core.config import Settings, settings
from shopledger.core.database import SessionLocal
from shopledger.logger_config import logger
from shopledger.services import (
    CustomerService,
    DataRepairService,
    InventoryManager,
    OrderService,
    PendingAmountCalculator,
    SupplierService,
)
from shopledger.storage import EntityStore, MemoryStore, SqlAlchemyStore
from shopledger.utils.sample_data import populate


def build_store(config: Settings = settings, session: Optional[Session] = None) -> EntityStore:
    """Pick the entity store backend from configuration."""
    if config.STORAGE_BACKEND == "sql":
        return SqlAlchemyStore(session or SessionLocal())

    store = MemoryStore()
    if config.SEED_SAMPLE_DATA:
        populate(store)
    logger.info(f"Using in-memory store (sample data: {config.SEED_SAMPLE_DATA})")
    return store


def get_db() -> Iterator[Session]:
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(request: Request, db: Session = Depends(get_db)) -> EntityStore:
    """
    The app-wide store when one was attached at startup (memory backend),
    otherwise a SQL store over this request's session.
    """
    store = getattr(request.app.state, "store", None)
    if store is not None:
        return store
    return SqlAlchemyStore(db)


def get_calculator(store: EntityStore = Depends(get_store)) -> PendingAmountCalculator:
    return PendingAmountCalculator(store)


def get_inventory_manager(store: EntityStore = Depends(get_store)) -> InventoryManager:
    return InventoryManager(store)


def get_repair_service(store: EntityStore = Depends(get_store)) -> DataRepairService:
    return DataRepairService(store)


def get_order_service(store: EntityStore = Depends(get_store)) -> OrderService:
    return OrderService(store)


def get_supplier_service(store: EntityStore = Depends(get_store)) -> SupplierService:
    return SupplierService(store)


def get_customer_service(store: EntityStore = Depends(get_store)) -> CustomerService:
    return CustomerService(store)
