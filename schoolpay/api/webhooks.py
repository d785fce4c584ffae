"""
Gateway Webhook Handler.
Logs every delivery and reconciles the order status.
"""

import logging

from fastapi import APIRouter, Depends, Request

from schoolpay.api.deps import get_payment_service
from schoolpay.schemas import WebhookAck
from schoolpay.services.payment_service import PaymentService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhook", response_model=WebhookAck)
async def payment_webhook(
    request: Request,
    service: PaymentService = Depends(get_payment_service),
):
    """
    Handle gateway settlement webhooks.
    
    The body is read raw rather than bound to a model so that malformed
    deliveries still reach the audit log before being rejected.
    """
    body = await request.body()
    
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        payload = body.decode("utf-8", errors="replace")
    
    order_info = payload.get("order_info") if isinstance(payload, dict) else None
    order_id = order_info.get("order_id") if isinstance(order_info, dict) else None
    logger.info(f"Gateway webhook received for order {order_id}")
    
    return await service.handle_webhook(payload)
