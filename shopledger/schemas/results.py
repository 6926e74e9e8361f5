"""Result payloads returned by the reconciliation engine."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from shopledger.schemas.customer import CustomerRead
from shopledger.schemas.order import OrderRead
from shopledger.schemas.transaction import TransactionRead


class PaymentResult(BaseModel):
    """How a customer payment was spread over outstanding orders"""
    applied_amount: Decimal
    remaining_credit: Decimal
    updated_order_ids: List[str] = Field(default_factory=list)
    pending_amount: Decimal
    transaction_id: str


class SupplierPaymentResult(BaseModel):
    transaction: TransactionRead
    pending_amount: Decimal


class PendingAmount(BaseModel):
    entity_id: str
    pending_amount: Decimal


class RepairResult(BaseModel):
    was_corrupted: bool
    repairs: List[str] = Field(default_factory=list)
    order: OrderRead


class OrderRepairLog(BaseModel):
    order_id: str
    repairs: List[str]


class CustomerRepairSummary(BaseModel):
    total_orders: int
    corrupted_orders: int
    repairs: List[OrderRepairLog] = Field(default_factory=list)


class IntegrityReport(BaseModel):
    """Unresolved problems go to issues, automatic fixes to repairs"""
    is_valid: bool
    issues: List[str] = Field(default_factory=list)
    repairs: List[str] = Field(default_factory=list)
    stored_pending: Optional[Decimal] = None
    calculated_pending: Optional[Decimal] = None


class CustomerSnapshot(BaseModel):
    customer: CustomerRead
    pending_amount: Decimal
    recent_orders: List[OrderRead]
