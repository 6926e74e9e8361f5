from fastapi import APIRouter, Depends, status

from shopledger.common.response import APIResponse, SuccessResponse
from shopledger.core.dependencies import get_calculator, get_supplier_service
from shopledger.schemas.results import PendingAmount, SupplierPaymentResult
from shopledger.schemas.supplier import SupplierCreate, SupplierListResponse, SupplierRead
from shopledger.schemas.transaction import PaymentCreate, TransactionListResponse
from shopledger.services import PendingAmountCalculator, SupplierService

router = APIRouter()


@router.get("", response_model=APIResponse[SupplierListResponse])
def list_suppliers(service: SupplierService = Depends(get_supplier_service)):
    suppliers = service.list_suppliers()
    return SuccessResponse.send(SupplierListResponse(total=len(suppliers), suppliers=suppliers))


@router.post("", response_model=APIResponse[SupplierRead], status_code=status.HTTP_201_CREATED)
def create_supplier(
    supplier_data: SupplierCreate,
    service: SupplierService = Depends(get_supplier_service),
):
    """Create a supplier. A non-zero opening balance becomes an initial_debt entry."""
    supplier = service.create_supplier(supplier_data)
    return SuccessResponse.send(supplier, message="Supplier created")


@router.get("/{supplier_id}", response_model=APIResponse[SupplierRead])
def get_supplier(supplier_id: str, service: SupplierService = Depends(get_supplier_service)):
    return SuccessResponse.send(service.get_supplier(supplier_id))


@router.get("/{supplier_id}/pending", response_model=APIResponse[PendingAmount])
def get_pending_amount(
    supplier_id: str,
    calculator: PendingAmountCalculator = Depends(get_calculator),
):
    pending = calculator.calculate_supplier_pending(supplier_id)
    return SuccessResponse.send(PendingAmount(entity_id=supplier_id, pending_amount=pending))


@router.post("/{supplier_id}/sync", response_model=APIResponse[PendingAmount])
def sync_pending_amount(
    supplier_id: str,
    calculator: PendingAmountCalculator = Depends(get_calculator),
):
    pending = calculator.sync_supplier_pending_amount(supplier_id)
    return SuccessResponse.send(PendingAmount(entity_id=supplier_id, pending_amount=pending),
                                message="Pending amount synced")


@router.post("/{supplier_id}/payments", response_model=APIResponse[SupplierPaymentResult])
def record_payment(
    supplier_id: str,
    payment: PaymentCreate,
    service: SupplierService = Depends(get_supplier_service),
):
    result = service.record_payment(supplier_id, payment.amount, description=payment.description)
    return SuccessResponse.send(result, message="Payment recorded")


@router.get("/{supplier_id}/transactions", response_model=APIResponse[TransactionListResponse])
def list_transactions(supplier_id: str, service: SupplierService = Depends(get_supplier_service)):
    transactions = service.list_transactions(supplier_id)
    return SuccessResponse.send(TransactionListResponse(total=len(transactions), transactions=transactions))
