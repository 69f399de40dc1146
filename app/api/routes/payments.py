"""Payment routes for Stripe checkout and webhooks"""

from fastapi import APIRouter, Depends, Request, Header
from typing import Optional

from ...application.use_cases.create_checkout_session import CreateCheckoutSessionUseCase
from ...application.use_cases.process_payment_webhook import ProcessPaymentWebhookUseCase
from ...application.dtos.payment_dtos import CreateCheckoutSessionDTO, CheckoutSessionResponseDTO
from ...api.dependencies import get_unit_of_work, get_payment_service


router = APIRouter(tags=["payments"])


@router.post("/create-checkout-session", response_model=CheckoutSessionResponseDTO)
async def create_checkout_session(
    request: CreateCheckoutSessionDTO,
    unit_of_work = Depends(get_unit_of_work),
    payment_service = Depends(get_payment_service)
):
    """Create a Stripe checkout session for a catalog model"""
    use_case = CreateCheckoutSessionUseCase(unit_of_work, payment_service)
    return await use_case.execute(request)


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(default=None, alias="Stripe-Signature"),
    unit_of_work = Depends(get_unit_of_work),
    payment_service = Depends(get_payment_service)
):
    """Process Stripe webhook"""
    payload = await request.body()
    use_case = ProcessPaymentWebhookUseCase(unit_of_work, payment_service)
    return await use_case.execute(payload, stripe_signature)
