"""Order model - immutable record of a payment intent."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from schoolpay.database import Base, utcnow


class Order(Base):
    """
    Payment intent created by ``PaymentService.create_payment``.
    
    Core fields are written once and never mutated. ``custom_order_id`` is
    the externally shareable identifier and is unique across all orders.
    """
    
    __tablename__ = "orders"
    
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    
    school_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )
    
    trustee_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    
    # {name, id, email}
    student_info: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
    )
    
    gateway_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    
    custom_order_id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
    )
    
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    
    # 1:1, stored independently; no cascade
    status_record: Mapped[Optional["OrderStatus"]] = relationship(
        back_populates="order",
        uselist=False,
    )
    
    def __repr__(self) -> str:
        return f"<Order {self.custom_order_id}>"
