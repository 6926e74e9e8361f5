from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shopledger import __version__
from shopledger.api.v1 import admin, customers, inventory, orders, suppliers
from shopledger.common.error_handlers import register_error_handlers
from shopledger.core.config import settings
from shopledger.core.dependencies import build_store
from shopledger.logger_config import logger
from shopledger.storage import EntityStore

origins = [
    "http://localhost:5173",
    "http://localhost:3000",
]


def create_app(store: Optional[EntityStore] = None) -> FastAPI:
    """
    Build the API. With the memory backend one store lives on app.state for
    the whole process; with the SQL backend each request gets its own session.
    """
    app = FastAPI(title="Shop Ledger", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    if store is None and settings.STORAGE_BACKEND == "memory":
        store = build_store(settings)
    app.state.store = store

    # Register API routers
    app.include_router(customers.router, prefix="/api/v1/customers", tags=["customers"])
    app.include_router(suppliers.router, prefix="/api/v1/suppliers", tags=["suppliers"])
    app.include_router(inventory.router, prefix="/api/v1/inventory", tags=["inventory"])
    app.include_router(orders.router, prefix="/api/v1/orders", tags=["orders"])
    app.include_router(admin.router, prefix="/api/v1/admin", tags=["admin"])

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Shop Ledger APIs!", "storage": settings.STORAGE_BACKEND}

    logger.info(f"✅ Shop Ledger API ready ({settings.APP_ENV}, storage={settings.STORAGE_BACKEND})")
    return app


app = create_app()
