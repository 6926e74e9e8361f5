from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from shopledger.common.response import APIResponse, SuccessResponse
from shopledger.core.dependencies import get_inventory_manager, get_supplier_service
from shopledger.schemas.inventory import InventoryItemRead, InventoryReport, LowStockItem
from shopledger.schemas.order import OrderItemCreate
from shopledger.schemas.supplier import StockPurchase
from shopledger.services import InventoryManager, SupplierService
from shopledger.storage.base import EntityKind

router = APIRouter()


@router.get("", response_model=APIResponse[List[InventoryItemRead]])
def list_inventory(manager: InventoryManager = Depends(get_inventory_manager)):
    return SuccessResponse.send(manager.store.get_all(EntityKind.INVENTORY))


@router.post("/stock", response_model=APIResponse[InventoryItemRead], status_code=status.HTTP_201_CREATED)
def add_stock(
    purchase: StockPurchase,
    service: SupplierService = Depends(get_supplier_service),
):
    """Receive stock from a supplier. Creates a purchase entry on the supplier's ledger."""
    item = service.receive_stock(purchase)
    return SuccessResponse.send(item, message="Stock added")


@router.post("/validate", response_model=APIResponse[bool])
def validate_stock(
    items: List[OrderItemCreate],
    manager: InventoryManager = Depends(get_inventory_manager),
):
    manager.validate_stock_availability(items)
    return SuccessResponse.send(True, message="Stock available")


@router.get("/low-stock", response_model=APIResponse[List[LowStockItem]])
def low_stock(
    threshold: Optional[Decimal] = Query(None, ge=0),
    manager: InventoryManager = Depends(get_inventory_manager),
):
    return SuccessResponse.send(manager.get_low_stock_items(threshold))


@router.get("/report", response_model=APIResponse[InventoryReport])
def inventory_report(manager: InventoryManager = Depends(get_inventory_manager)):
    return SuccessResponse.send(manager.generate_inventory_report())
