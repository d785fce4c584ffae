"""WebhookLog model - append-only audit trail of inbound webhooks."""

import enum
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import String, Integer, Text, DateTime, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from schoolpay.database import Base, utcnow


class WebhookEventType(str, enum.Enum):
    PAYMENT_WEBHOOK = "payment_webhook"
    PAYMENT_WEBHOOK_ERROR = "payment_webhook_error"


class WebhookLog(Base):
    """
    One row per webhook delivery attempt, plus one error row per failed
    attempt. Rows are never updated or deleted.
    """
    
    __tablename__ = "webhook_logs"
    
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    
    event_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
    )
    
    # Raw inbound body, stored as received
    payload: Mapped[Any] = mapped_column(JSON, nullable=True)
    
    status: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    
    received_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    
    def __repr__(self) -> str:
        return f"<WebhookLog {self.event_type} {self.status}>"
