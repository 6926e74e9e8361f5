from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shopledger.models.transaction import EntityType, TransactionType


class TransactionCreate(BaseModel):
    entity_id: str
    entity_type: EntityType
    type: TransactionType
    amount: Decimal
    description: str = ""


class TransactionRead(TransactionCreate):
    id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionListResponse(BaseModel):
    total: int
    transactions: List[TransactionRead]


class PaymentCreate(BaseModel):
    """Payment request from a customer or to a supplier"""
    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = Field(default=None, max_length=500)
    target_order_id: Optional[str] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "amount": 700.00,
            "description": "Cash payment at counter"
        }
    })
