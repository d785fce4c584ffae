"""
Payment status definitions.

The gateway reports status as a free-form string. Known values map onto
``PaymentStatus``; anything else is treated as opaque and never blocks an
update.
"""

from enum import Enum
from typing import Optional


class PaymentStatus(str, Enum):
    """Settlement states observed from the gateway."""
    
    INITIATED = "initiated"
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    
    @property
    def is_terminal(self) -> bool:
        return self in (PaymentStatus.SUCCESS, PaymentStatus.FAILED)
    
    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PaymentStatus"]:
        """Map a gateway status string to a known state, or None."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class TransitionKind(str, Enum):
    """How an incoming status relates to the stored one."""
    
    FORWARD = "forward"
    REPEAT = "repeat"
    REGRESSION = "regression"
    UNKNOWN = "unknown"


# Allowed forward moves. Same-state updates are REPEAT.
ALLOWED_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.INITIATED: frozenset({
        PaymentStatus.PENDING,
        PaymentStatus.SUCCESS,
        PaymentStatus.FAILED,
    }),
    PaymentStatus.PENDING: frozenset({
        PaymentStatus.SUCCESS,
        PaymentStatus.FAILED,
    }),
    # A failed attempt can be retried on the same hosted page
    PaymentStatus.FAILED: frozenset({
        PaymentStatus.SUCCESS,
    }),
    PaymentStatus.SUCCESS: frozenset(),
}


def classify_transition(current: Optional[str], incoming: Optional[str]) -> TransitionKind:
    """Classify a status change from ``current`` to ``incoming``."""
    current_state = PaymentStatus.parse(current)
    incoming_state = PaymentStatus.parse(incoming)
    
    if current_state is None or incoming_state is None:
        return TransitionKind.UNKNOWN
    
    if current_state == incoming_state:
        return TransitionKind.REPEAT
    
    if incoming_state in ALLOWED_TRANSITIONS[current_state]:
        return TransitionKind.FORWARD
    
    return TransitionKind.REGRESSION
