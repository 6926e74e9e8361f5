from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shopledger.models.customer import CustomerCategory


class CustomerBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    contact: Optional[str] = Field(None, max_length=50)
    category: CustomerCategory = CustomerCategory.WALK_IN


class CustomerCreate(CustomerBase):
    pass


class CustomerRead(CustomerBase):
    id: str
    pending_amount: Decimal = Decimal("0.00")
    version: int = 1
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CustomerListResponse(BaseModel):
    total: int
    customers: List[CustomerRead]
