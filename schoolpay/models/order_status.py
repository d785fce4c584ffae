"""OrderStatus model - mutable settlement record for an Order."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Text, DateTime, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from schoolpay.database import Base, utcnow


class OrderStatus(Base):
    """
    Settlement state of an order, one row per Order.
    
    ``collect_id`` is the Order's identity and the key the gateway echoes
    back as ``order_info.order_id`` in webhooks. ``status`` is the
    gateway's free-form string (initiated, pending, success, failed).
    """
    
    __tablename__ = "order_statuses"
    
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    
    collect_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("orders.id"),
        unique=True,
        nullable=False,
        index=True,
    )
    
    order_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    
    transaction_amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
    )
    
    payment_mode: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    payment_details: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    bank_reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    payment_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
    )
    
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    
    payment_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )
    
    order: Mapped["Order"] = relationship(back_populates="status_record")
    
    def __repr__(self) -> str:
        return f"<OrderStatus {self.collect_id} {self.status}>"
