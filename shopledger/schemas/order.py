from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from shopledger.models.order import OrderStatus, PaymentStatus


class OrderItem(BaseModel):
    type: str
    quantity: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")
    details: Optional[str] = None

    @field_serializer('quantity', 'rate')
    def serialize_decimal(self, v: Decimal) -> str:
        # Kept as strings inside the JSON items column
        return str(v)


class OrderItemCreate(OrderItem):
    type: str = Field(..., min_length=1, max_length=50)
    quantity: Decimal = Field(..., gt=0, le=10000)
    rate: Decimal = Field(..., ge=0, le=100000)
    details: Optional[str] = Field(None, max_length=200)


class OrderCreate(BaseModel):
    customer_id: str = Field(..., min_length=1)
    items: List[OrderItemCreate] = Field(..., min_length=1, max_length=50)
    total_amount: Optional[Decimal] = Field(default=None, gt=0)
    paid_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    order_status: OrderStatus = OrderStatus.CONFIRMED
    created_at: Optional[datetime] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "customer_id": "CUS-8H2KQ1ZP",
            "items": [
                {"type": "chicken", "quantity": 5, "rate": 220.00},
                {"type": "boneless", "quantity": 2, "rate": 320.00, "details": "curry cut"}
            ],
            "order_status": "confirmed"
        }
    })


class OrderStatusUpdate(BaseModel):
    order_status: OrderStatus


class OrderRead(BaseModel):
    id: str
    customer_id: str
    items: List[OrderItem]
    total_amount: Decimal
    paid_amount: Decimal = Decimal("0.00")
    payment_status: PaymentStatus = PaymentStatus.PENDING
    order_status: OrderStatus = OrderStatus.CONFIRMED
    version: int = 1
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def balance(self) -> Decimal:
        return self.total_amount - self.paid_amount
