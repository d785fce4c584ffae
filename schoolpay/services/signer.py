"""
Request signer for the collect-request gateway.

The gateway recomputes an HS256 JWT over ``{school_id, amount, callback_url}``
and compares it with the ``sign`` field, so the claims must be exactly those
three keys with the amount rendered as a decimal string.
"""

import logging
from decimal import Decimal
from typing import Union

import jwt

from schoolpay.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SIGN_ALGORITHM = "HS256"

Amount = Union[Decimal, int, float, str]


def format_amount(amount: Amount) -> str:
    """
    Render an amount as a plain decimal string.
    
    2500 -> "2500", Decimal("2500.50") -> "2500.5". Floats go through
    ``str`` first so binary representation noise never reaches the claim.
    """
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return format(value.normalize(), "f")


class Signer:
    """Signs and verifies collect-request claims with the PG secret."""
    
    def __init__(self, secret: str):
        if not secret:
            raise ConfigurationError("Payment gateway signing secret not configured")
        self._secret = secret
    
    def claims(self, school_id: str, amount: Amount, callback_url: str) -> dict:
        return {
            "school_id": school_id,
            "amount": format_amount(amount),
            "callback_url": callback_url,
        }
    
    def sign(self, school_id: str, amount: Amount, callback_url: str) -> str:
        """Return the compact JWT for a collect request."""
        return jwt.encode(
            self.claims(school_id, amount, callback_url),
            self._secret,
            algorithm=SIGN_ALGORITHM,
        )
    
    def verify(self, token: str) -> dict:
        """Decode a token signed with the same secret. Raises jwt.InvalidTokenError."""
        return jwt.decode(token, self._secret, algorithms=[SIGN_ALGORITHM])
