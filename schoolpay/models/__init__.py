"""Models package for database models."""

from schoolpay.models.order import Order
from schoolpay.models.order_status import OrderStatus
from schoolpay.models.webhook_log import WebhookLog, WebhookEventType

__all__ = [
    "Order",
    "OrderStatus",
    "WebhookLog",
    "WebhookEventType",
]
