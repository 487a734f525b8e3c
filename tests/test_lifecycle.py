import pytest

from storefront.services.lifecycle import (
    check_order_transition,
    check_quote_transition,
    is_terminal_order_status,
    InvalidTransition,
)


@pytest.mark.parametrize("current,target", [
    ("pending", "processing"),
    ("pending", "cancelled"),
    ("processing", "shipped"),
    ("shipped", "delivered"),
    ("shipped", "cancelled"),
])
def test_allowed_order_transitions(current, target):
    assert check_order_transition(current, target) is True


@pytest.mark.parametrize("current,target", [
    ("pending", "shipped"),
    ("pending", "delivered"),
    ("delivered", "cancelled"),
    ("cancelled", "pending"),
    ("processing", "pending"),
])
def test_rejected_order_transitions(current, target):
    with pytest.raises(InvalidTransition):
        check_order_transition(current, target)


def test_same_status_is_noop():
    assert check_order_transition("processing", "processing") is False
    assert check_quote_transition("sent", "sent") is False


def test_unknown_status_rejected():
    with pytest.raises(InvalidTransition):
        check_order_transition("pending", "lost")


def test_terminal_statuses():
    assert is_terminal_order_status("delivered")
    assert is_terminal_order_status("cancelled")
    assert not is_terminal_order_status("shipped")


def test_quote_transitions():
    assert check_quote_transition("draft", "sent")
    assert check_quote_transition("sent", "accepted")
    assert check_quote_transition("draft", "expired")
    with pytest.raises(InvalidTransition):
        check_quote_transition("draft", "accepted")
    with pytest.raises(InvalidTransition):
        check_quote_transition("expired", "sent")
