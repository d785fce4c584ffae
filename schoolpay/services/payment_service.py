"""
Payment Service - order creation and gateway webhook reconciliation.

Creation: Order -> sign -> collect request -> initial OrderStatus.
Webhook: audit log -> validate -> locate OrderStatus -> overwrite.
"""

import logging
import secrets
import string
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from schoolpay.config import Settings, get_settings
from schoolpay.exceptions import (
    ConflictError,
    NotFoundError,
    PaymentError,
    ValidationError,
)
from schoolpay.lifecycle.states import PaymentStatus, TransitionKind, classify_transition
from schoolpay.models.order import Order
from schoolpay.models.order_status import OrderStatus
from schoolpay.models.webhook_log import WebhookLog, WebhookEventType
from schoolpay.schemas import CreatePaymentRequest, WebhookPayload
from schoolpay.services.gateway_client import GatewayClient
from schoolpay.services.signer import Signer, format_amount

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

ORDER_ID_PREFIX = "ORD"
ORDER_ID_SUFFIX_LENGTH = 9
ORDER_ID_ALPHABET = string.ascii_lowercase + string.digits

WEBHOOK_ACK_MESSAGE = "Webhook processed successfully"
DEFAULT_CALLBACK_URL = "http://localhost:3001/payment-success"


def generate_custom_order_id() -> str:
    """ORD_<epoch millis>_<9 random [a-z0-9]>."""
    timestamp = int(time.time() * 1000)
    suffix = "".join(
        secrets.choice(ORDER_ID_ALPHABET) for _ in range(ORDER_ID_SUFFIX_LENGTH)
    )
    return f"{ORDER_ID_PREFIX}_{timestamp}_{suffix}"


def field_errors(exc: PydanticValidationError) -> list[dict]:
    """Flatten pydantic errors to [{field, message}]."""
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "body",
            "message": err["msg"],
        }
        for err in exc.errors()
    ]


def validate_model(model: Type[ModelT], data: Any, what: str) -> ModelT:
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid {what}", detail=field_errors(e)) from e


def _declared_status(payload: Any) -> Optional[int]:
    """Numeric top-level ``status`` of a raw webhook body, if any."""
    if not isinstance(payload, dict):
        return None
    value = payload.get("status")
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


class PaymentService:
    """Owns the payment order lifecycle and its invariants."""
    
    def __init__(
        self,
        db: AsyncSession,
        settings: Optional[Settings] = None,
        gateway_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.db = db
        self.settings = settings or get_settings()
        self._gateway_transport = gateway_transport
    
    async def create_payment(
        self,
        request: Union[CreatePaymentRequest, dict],
    ) -> dict:
        """
        Create an order and a collect request for it.
        
        1. Validate input (nothing is persisted on failure)
        2. Persist the Order under a fresh custom_order_id
        3. Sign and send the collect request
        4. Persist the initial OrderStatus
        
        A failure in step 3 leaves the Order persisted without a status
        record; ``TransactionService.list_orphaned_orders`` finds those.
        """
        data = validate_model(CreatePaymentRequest, request, "payment request")
        
        order = await self._persist_order(data)
        
        try:
            payment_url = await self._dispatch_collect_request(data)
        except PaymentError as e:
            logger.error(
                f"Collect request failed for order {order.custom_order_id}, "
                f"order left without status: {e.message}",
                extra={"order_id": str(order.id), "custom_order_id": order.custom_order_id},
            )
            raise
        
        order_status = OrderStatus(
            collect_id=order.id,
            order_amount=data.amount,
            transaction_amount=data.amount,
            payment_mode="pending",
            status=PaymentStatus.INITIATED.value,
            payment_time=datetime.now(timezone.utc),
        )
        self.db.add(order_status)
        await self.db.commit()
        
        logger.info(
            f"Payment initiated: order {order.custom_order_id} "
            f"school {data.school_id} amount {format_amount(data.amount)}",
            extra={
                "order_id": str(order.id),
                "custom_order_id": order.custom_order_id,
                "school_id": data.school_id,
            },
        )
        
        return {
            "order_id": str(order.id),
            "custom_order_id": order.custom_order_id,
            "payment_url": payment_url,
            "status": PaymentStatus.INITIATED.value,
        }
    
    async def _persist_order(self, data: CreatePaymentRequest) -> Order:
        order = Order(
            school_id=data.school_id,
            trustee_id=data.trustee_id,
            student_info=data.student_info.model_dump(mode="json"),
            gateway_name=data.gateway_name,
            custom_order_id=generate_custom_order_id(),
        )
        self.db.add(order)
        
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(
                f"custom_order_id collision: {order.custom_order_id}",
                extra={"custom_order_id": order.custom_order_id, "school_id": data.school_id},
            )
            raise ConflictError(
                f"Order id {order.custom_order_id} already exists"
            ) from e
        
        return order
    
    async def _dispatch_collect_request(self, data: CreatePaymentRequest) -> str:
        # Both constructors raise ConfigurationError before any network call
        signer = Signer(self.settings.gateway_pg_secret)
        gateway = GatewayClient(
            base_url=self.settings.gateway_base_url,
            api_key=self.settings.gateway_api_key,
            timeout=self.settings.gateway_timeout_seconds,
            transport=self._gateway_transport,
        )
        
        callback_url = (
            data.redirect_url or self.settings.public_app_url or DEFAULT_CALLBACK_URL
        )
        sign = signer.sign(data.school_id, data.amount, callback_url)
        
        return await gateway.create_collect_request(
            school_id=data.school_id,
            amount=format_amount(data.amount),
            callback_url=callback_url,
            sign=sign,
        )
    
    async def handle_webhook(self, payload: Any) -> dict:
        """
        Apply a gateway webhook to the matching OrderStatus.
        
        Every call appends a ``payment_webhook`` log row before anything
        else. Any failure appends a ``payment_webhook_error`` row and is
        re-raised. A reported payment failure is still a processed webhook.
        """
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(mode="json", by_alias=True)
        
        await self._log_webhook(
            WebhookEventType.PAYMENT_WEBHOOK,
            payload,
            status=_declared_status(payload),
        )
        
        try:
            await self._apply_webhook(payload)
        except PaymentError as e:
            logger.warning(
                f"Webhook rejected ({type(e).__name__}): {e.message}",
                extra={"event_type": WebhookEventType.PAYMENT_WEBHOOK_ERROR.value},
            )
            await self._log_webhook_failure(payload, e.status_code, e.message)
            raise
        except Exception as e:
            logger.error(
                f"Webhook processing failed: {e}",
                exc_info=True,
                extra={"event_type": WebhookEventType.PAYMENT_WEBHOOK_ERROR.value},
            )
            await self._log_webhook_failure(payload, 500, str(e))
            raise

        return {"message": WEBHOOK_ACK_MESSAGE}

    async def _log_webhook_failure(
        self,
        payload: Any,
        status: int,
        error_message: str,
    ) -> None:
        """
        Append the error audit row for a failed webhook.

        Called from an except block that re-raises; if the database itself
        is down this write fails too, and that second failure is only
        logged so the caller still sees the original error.
        """
        try:
            await self.db.rollback()
            await self._log_webhook(
                WebhookEventType.PAYMENT_WEBHOOK_ERROR,
                payload,
                status=status,
                error_message=error_message,
            )
        except Exception as log_error:
            logger.error(
                f"Could not write webhook error log ({error_message}): {log_error}",
                exc_info=True,
            )
    
    async def _apply_webhook(self, payload: Any) -> OrderStatus:
        webhook = validate_model(WebhookPayload, payload, "webhook payload")
        info = webhook.order_info
        
        try:
            collect_id = uuid.UUID(info.order_id)
        except ValueError as e:
            raise ValidationError(
                f"Invalid order_id format: {info.order_id}",
                detail=[{"field": "order_info.order_id", "message": "not a valid order identity"}],
            ) from e
        
        result = await self.db.execute(
            select(OrderStatus).where(OrderStatus.collect_id == collect_id)
        )
        order_status = result.scalar_one_or_none()
        
        if not order_status:
            raise NotFoundError("Order not found")
        
        transition = classify_transition(order_status.status, info.status)
        if transition == TransitionKind.REGRESSION:
            if self.settings.reject_status_regressions:
                raise ConflictError(
                    f"Status regression {order_status.status} -> {info.status} "
                    f"for order {collect_id}"
                )
            logger.warning(
                f"Status regression {order_status.status} -> {info.status} "
                f"for order {collect_id}, applying latest webhook",
                extra={"order_id": str(collect_id)},
            )
        
        order_status.order_amount = info.order_amount
        order_status.transaction_amount = info.transaction_amount
        order_status.payment_mode = info.payment_mode
        order_status.payment_details = info.payment_details
        order_status.bank_reference = info.bank_reference
        order_status.payment_message = info.payment_message
        order_status.status = info.status
        order_status.error_message = info.error_message
        order_status.payment_time = info.payment_time
        
        await self.db.commit()
        
        logger.info(
            f"Webhook applied: order {collect_id} status {info.status} "
            f"({transition.value})",
            extra={"order_id": str(collect_id), "event_type": WebhookEventType.PAYMENT_WEBHOOK.value},
        )
        return order_status
    
    async def _log_webhook(
        self,
        event_type: WebhookEventType,
        payload: Any,
        status: Optional[int],
        error_message: Optional[str] = None,
    ) -> WebhookLog:
        entry = WebhookLog(
            event_type=event_type.value,
            payload=payload,
            status=status,
            error_message=error_message,
            received_at=datetime.now(timezone.utc),
        )
        self.db.add(entry)
        await self.db.commit()
        return entry
