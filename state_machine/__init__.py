"""State machine module for invoice lifecycle management."""

from state_machine.invoice import Invoice, new_invoice
from state_machine.models import InvoiceSnapshot
from state_machine.policy import (
    InvalidTransition,
    InvoiceAction,
    InvoiceState,
    StatePolicy,
    TransitionDecision,
    get_default_policy,
)

__all__ = [
    "Invoice",
    "new_invoice",
    "InvoiceSnapshot",
    "InvalidTransition",
    "InvoiceAction",
    "InvoiceState",
    "StatePolicy",
    "TransitionDecision",
    "get_default_policy",
]
