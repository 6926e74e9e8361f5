from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SupplierBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    contact: Optional[str] = Field(None, max_length=50)


class SupplierCreate(SupplierBase):
    """Opening balance is written to the ledger as an initial_debt entry."""
    opening_balance: Decimal = Field(default=Decimal("0.00"), ge=0)

    @field_validator('opening_balance')
    @classmethod
    def validate_opening_balance(cls, v):
        if v.as_tuple().exponent < -2:
            raise ValueError('Max 2 decimal places')
        return v


class SupplierRead(SupplierBase):
    id: str
    pending_amount: Decimal = Decimal("0.00")
    version: int = 1
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SupplierListResponse(BaseModel):
    total: int
    suppliers: List[SupplierRead]


class StockPurchase(BaseModel):
    """Stock bought from a supplier, creates a payable."""
    supplier_id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1, max_length=50)
    quantity: Decimal = Field(..., gt=0, le=10000)
    price: Decimal = Field(..., gt=0)
    unit: Optional[str] = Field(default=None, max_length=10)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "supplier_id": "SUP-4K2D9QXA",
            "type": "chicken",
            "quantity": 50,
            "price": 180.00
        }
    })
