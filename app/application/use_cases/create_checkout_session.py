"""Start a Stripe checkout for a catalog model"""

from ...core.exceptions import InvalidInputError, NotFoundError, InternalError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...infrastructure.external_services.payment_service import PaymentService, PaymentGatewayError
from ..dtos.payment_dtos import CreateCheckoutSessionDTO, CheckoutSessionResponseDTO


class CreateCheckoutSessionUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, payment_service: PaymentService):
        self.unit_of_work = unit_of_work
        self.payment_service = payment_service

    async def execute(self, request: CreateCheckoutSessionDTO) -> CheckoutSessionResponseDTO:
        async with self.unit_of_work:
            model = await self.unit_of_work.models.get_by_slug(request.model_slug)

        if model is None:
            raise NotFoundError("Model not found")
        if not model.is_purchasable:
            raise InvalidInputError("Model is not available for purchase")

        try:
            session = await self.payment_service.create_checkout_session(
                model,
                customer_email=request.customer_email,
                customer_name=request.customer_name,
            )
        except PaymentGatewayError as e:
            raise InternalError("Error creating checkout session", detail=str(e)) from e

        return CheckoutSessionResponseDTO(url=session["url"], session_id=session["session_id"])
