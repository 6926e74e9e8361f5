from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from shopledger.common.response import APIResponse, SuccessResponse
from shopledger.core.dependencies import get_order_service
from shopledger.models.order import OrderStatus
from shopledger.schemas.order import OrderCreate, OrderRead, OrderStatusUpdate
from shopledger.services import OrderService

router = APIRouter()


@router.get("", response_model=APIResponse[List[OrderRead]])
def list_orders(
    customer_id: Optional[str] = Query(None),
    status: Optional[OrderStatus] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    service: OrderService = Depends(get_order_service),
):
    return SuccessResponse.send(service.list_orders(customer_id=customer_id, status=status, limit=limit))


@router.post("", response_model=APIResponse[OrderRead], status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: OrderCreate,
    service: OrderService = Depends(get_order_service),
):
    """
    Place an order. Confirmed orders deduct stock immediately and the
    customer's pending amount is resynced.
    """
    order = service.create_order(order_data)
    return SuccessResponse.send(order, message="Order created")


@router.get("/{order_id}", response_model=APIResponse[OrderRead])
def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return SuccessResponse.send(service.get_order(order_id))


@router.patch("/{order_id}/status", response_model=APIResponse[OrderRead])
def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
):
    order = service.update_order_status(order_id, update.order_status)
    return SuccessResponse.send(order, message="Order status updated")


@router.delete("/{order_id}", response_model=APIResponse[None])
def delete_order(order_id: str, service: OrderService = Depends(get_order_service)):
    service.delete_order(order_id)
    return SuccessResponse.send(message="Order deleted successfully")
