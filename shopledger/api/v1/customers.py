from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from shopledger.common.response import APIResponse, SuccessResponse
from shopledger.core.dependencies import get_calculator, get_customer_service
from shopledger.models.customer import CustomerCategory
from shopledger.schemas.customer import CustomerCreate, CustomerListResponse, CustomerRead
from shopledger.schemas.results import CustomerSnapshot, PaymentResult, PendingAmount
from shopledger.schemas.transaction import PaymentCreate, TransactionListResponse
from shopledger.services import CustomerService, PendingAmountCalculator

router = APIRouter()


@router.get("", response_model=APIResponse[CustomerListResponse])
def list_customers(
    category: Optional[CustomerCategory] = Query(None),
    service: CustomerService = Depends(get_customer_service),
):
    customers = service.list_customers(category=category)
    return SuccessResponse.send(CustomerListResponse(total=len(customers), customers=customers))


@router.post("", response_model=APIResponse[CustomerRead], status_code=status.HTTP_201_CREATED)
def create_customer(
    customer_data: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
):
    customer = service.create_customer(customer_data)
    return SuccessResponse.send(customer, message="Customer created")


@router.get("/{customer_id}", response_model=APIResponse[CustomerSnapshot])
def get_customer(
    customer_id: str,
    recent: int = Query(5, ge=0, le=50),
    calculator: PendingAmountCalculator = Depends(get_calculator),
):
    """Customer with a live pending amount and their latest orders."""
    return SuccessResponse.send(calculator.customer_balance_snapshot(customer_id, recent=recent))


@router.get("/{customer_id}/pending", response_model=APIResponse[PendingAmount])
def get_pending_amount(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
    calculator: PendingAmountCalculator = Depends(get_calculator),
):
    service.get_customer(customer_id)
    pending = calculator.calculate_customer_pending(customer_id)
    return SuccessResponse.send(PendingAmount(entity_id=customer_id, pending_amount=pending))


@router.post("/{customer_id}/sync", response_model=APIResponse[PendingAmount])
def sync_pending_amount(
    customer_id: str,
    calculator: PendingAmountCalculator = Depends(get_calculator),
):
    pending = calculator.sync_customer_pending_amount(customer_id)
    return SuccessResponse.send(PendingAmount(entity_id=customer_id, pending_amount=pending),
                                message="Pending amount synced")


@router.post("/{customer_id}/payments", response_model=APIResponse[PaymentResult])
def record_payment(
    customer_id: str,
    payment: PaymentCreate,
    calculator: PendingAmountCalculator = Depends(get_calculator),
):
    """
    Apply a payment to the customer's outstanding orders, oldest first,
    or only to target_order_id when given.
    """
    result = calculator.process_payment(
        customer_id,
        payment.amount,
        description=payment.description,
        target_order_id=payment.target_order_id,
    )
    return SuccessResponse.send(result, message="Payment processed")


@router.get("/{customer_id}/transactions", response_model=APIResponse[TransactionListResponse])
def list_transactions(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
):
    transactions = service.list_transactions(customer_id)
    return SuccessResponse.send(TransactionListResponse(total=len(transactions), transactions=transactions))
