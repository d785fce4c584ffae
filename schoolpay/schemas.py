"""
Request and webhook payload models.

Webhook field names mirror the gateway's contract exactly, including its
spelling of ``payemnt_details`` and ``Payment_message``.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field

# Fits the Numeric(12, 2) amount columns exactly
AMOUNT_MAX_DIGITS = 12
AMOUNT_DECIMAL_PLACES = 2


def _require_number(value: Any) -> Any:
    """Amounts must arrive as JSON numbers, not strings or booleans."""
    if isinstance(value, (str, bool)):
        raise ValueError("must be a number")
    return value


Amount = Annotated[Decimal, BeforeValidator(_require_number)]


class StudentInfo(BaseModel):
    """Student the fee is paid for."""
    name: str = Field(min_length=1)
    id: str = Field(min_length=1)
    email: EmailStr


class CreatePaymentRequest(BaseModel):
    """Body of ``POST /create-payment``."""
    school_id: str = Field(min_length=1)
    trustee_id: str = Field(min_length=1)
    student_info: StudentInfo
    gateway_name: str = Field(min_length=1)
    amount: Amount = Field(
        gt=0,
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
    )
    redirect_url: Optional[str] = None


class CreatePaymentResponse(BaseModel):
    order_id: str
    custom_order_id: str
    payment_url: str
    status: str


class WebhookOrderInfo(BaseModel):
    """``order_info`` block of a gateway webhook."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    # Gateway echoes our Order id back as its collect id
    order_id: str = Field(min_length=1)
    order_amount: Amount = Field(
        ge=0,
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
    )
    transaction_amount: Amount = Field(
        ge=0,
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
    )
    gateway: Optional[str] = None
    bank_reference: Optional[str] = None
    status: str
    payment_mode: Optional[str] = None
    payment_details: Optional[str] = Field(default=None, alias="payemnt_details")
    payment_message: Optional[str] = Field(default=None, alias="Payment_message")
    payment_time: datetime
    error_message: Optional[str] = None


class WebhookPayload(BaseModel):
    """Body of ``POST /webhook``."""
    status: int
    order_info: WebhookOrderInfo


class WebhookAck(BaseModel):
    message: str
