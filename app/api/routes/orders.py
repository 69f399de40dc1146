"""Order routes: session reconciliation and the caller's order history"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...application.use_cases.reconcile_order import ReconcileOrderUseCase
from ...application.dtos.order_dtos import OrderResponseDTO
from ...api.dependencies import get_current_user, get_unit_of_work, get_payment_service
from ...domain.entities.user import User


router = APIRouter(tags=["orders"])


@router.get("/", response_model=List[OrderResponseDTO])
async def get_user_orders(
    current_user: User = Depends(get_current_user),
    unit_of_work = Depends(get_unit_of_work)
):
    """Get all orders for current user"""
    async with unit_of_work:
        orders = await unit_of_work.orders.get_by_customer_email(str(current_user.email))

    return [OrderResponseDTO.from_entity(order) for order in orders]


@router.get("/lookup", response_model=OrderResponseDTO)
async def lookup_order(
    session_id: Optional[str] = Query(default=None),
    unit_of_work = Depends(get_unit_of_work),
    payment_service = Depends(get_payment_service)
):
    """Get (or create) the order for a Stripe checkout session"""
    use_case = ReconcileOrderUseCase(unit_of_work, payment_service)
    return await use_case.execute(session_id)


@router.get("/session/{session_id}", response_model=OrderResponseDTO)
async def get_order_by_session(
    session_id: str,
    unit_of_work = Depends(get_unit_of_work),
    payment_service = Depends(get_payment_service)
):
    """Guest-friendly order lookup used by the checkout success page"""
    use_case = ReconcileOrderUseCase(unit_of_work, payment_service)
    return await use_case.execute(session_id)


@router.get("/health")
async def orders_health():
    """Orders health check"""
    return {"status": "ok", "service": "orders"}
