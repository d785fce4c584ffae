"""
Tests for payment status transitions.
"""

from schoolpay.lifecycle.states import (
    PaymentStatus,
    TransitionKind,
    classify_transition,
)


class TestPaymentStatus:
    """Tests for PaymentStatus enum."""
    
    def test_all_states_defined(self):
        assert {s.value for s in PaymentStatus} == {"initiated", "pending", "success", "failed"}
    
    def test_parse_is_case_insensitive(self):
        assert PaymentStatus.parse("SUCCESS") == PaymentStatus.SUCCESS
        assert PaymentStatus.parse(" pending ") == PaymentStatus.PENDING
    
    def test_parse_unknown(self):
        assert PaymentStatus.parse("user_dropped") is None
        assert PaymentStatus.parse("") is None
        assert PaymentStatus.parse(None) is None
    
    def test_terminal_states(self):
        assert PaymentStatus.SUCCESS.is_terminal
        assert PaymentStatus.FAILED.is_terminal
        assert not PaymentStatus.PENDING.is_terminal


class TestClassifyTransition:
    """Forward, repeat, regression and unknown classification."""
    
    def test_forward(self):
        assert classify_transition("initiated", "pending") == TransitionKind.FORWARD
        assert classify_transition("initiated", "success") == TransitionKind.FORWARD
        assert classify_transition("pending", "failed") == TransitionKind.FORWARD
        assert classify_transition("failed", "success") == TransitionKind.FORWARD
    
    def test_repeat(self):
        assert classify_transition("success", "success") == TransitionKind.REPEAT
        assert classify_transition("initiated", "INITIATED") == TransitionKind.REPEAT
    
    def test_regression(self):
        assert classify_transition("success", "pending") == TransitionKind.REGRESSION
        assert classify_transition("success", "failed") == TransitionKind.REGRESSION
        assert classify_transition("pending", "initiated") == TransitionKind.REGRESSION
    
    def test_unknown_values(self):
        assert classify_transition("success", "refunded") == TransitionKind.UNKNOWN
        assert classify_transition(None, "success") == TransitionKind.UNKNOWN
