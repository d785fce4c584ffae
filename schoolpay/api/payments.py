"""
Payment creation endpoint.
"""

import logging

from fastapi import APIRouter, Depends

from schoolpay.api.deps import get_payment_service, verify_api_key
from schoolpay.schemas import CreatePaymentRequest, CreatePaymentResponse
from schoolpay.services.payment_service import PaymentService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/create-payment",
    response_model=CreatePaymentResponse,
    dependencies=[Depends(verify_api_key)],
)
async def create_payment(
    request: CreatePaymentRequest,
    service: PaymentService = Depends(get_payment_service),
):
    """
    Create an order and return the gateway's hosted payment page URL.
    
    Errors are PaymentError subclasses rendered by the app-level handler.
    """
    return await service.create_payment(request)
