from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class InventoryItemRead(BaseModel):
    id: str
    name: str
    type: str
    quantity: Decimal
    unit: str = "kg"
    price: Decimal
    supplier_id: Optional[str] = None
    version: int = 1
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LowStockItem(InventoryItemRead):
    alert_level: str


class InventoryValue(BaseModel):
    total_value: Decimal
    item_count: int


class InventoryTypeSummary(BaseModel):
    type: str
    total_quantity: Decimal
    total_value: Decimal
    item_count: int


class InventoryReportSummary(BaseModel):
    total_value: Decimal
    total_items: int
    low_stock_count: int
    critical_stock_count: int


class InventoryReport(BaseModel):
    summary: InventoryReportSummary
    by_type: List[InventoryTypeSummary]
    low_stock_items: List[LowStockItem]
    last_updated: datetime
