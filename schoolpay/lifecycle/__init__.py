"""Payment status variants and transition rules."""

from schoolpay.lifecycle.states import PaymentStatus, TransitionKind, classify_transition

__all__ = ["PaymentStatus", "TransitionKind", "classify_transition"]
