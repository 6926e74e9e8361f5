from fastapi import APIRouter, Depends

from shopledger.common.response import APIResponse, SuccessResponse
from shopledger.core.dependencies import get_repair_service
from shopledger.schemas.results import CustomerRepairSummary, IntegrityReport, RepairResult
from shopledger.services import DataRepairService

router = APIRouter()


@router.post("/repair/orders/{order_id}", response_model=APIResponse[RepairResult])
def repair_order(order_id: str, service: DataRepairService = Depends(get_repair_service)):
    result = service.repair_order(order_id)
    message = "Order repaired" if result.was_corrupted else "No corruption found"
    return SuccessResponse.send(result, message=message)


@router.post("/repair/customers/{customer_id}", response_model=APIResponse[CustomerRepairSummary])
def repair_customer_orders(customer_id: str, service: DataRepairService = Depends(get_repair_service)):
    return SuccessResponse.send(service.repair_customer_orders(customer_id))


@router.post("/integrity/customers/{customer_id}", response_model=APIResponse[IntegrityReport])
def validate_financial_integrity(customer_id: str, service: DataRepairService = Depends(get_repair_service)):
    """Repairs orders and small balance drift. Larger drift is listed under issues."""
    report = service.validate_financial_integrity(customer_id)
    message = "Financial data is consistent" if report.is_valid else "Issues need manual review"
    return SuccessResponse.send(report, message=message)
