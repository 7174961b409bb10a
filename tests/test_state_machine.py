"""Tests for the invoice record and its lifecycle."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from state_machine import (
    InvalidTransition,
    Invoice,
    InvoiceAction,
    InvoiceSnapshot,
    InvoiceState,
    get_default_policy,
    new_invoice,
)

ILLEGAL_PAIRS = [
    (action, state)
    for state in InvoiceState
    for action in InvoiceAction
    if not get_default_policy().can(action, state)
]


def invoice_in(state: InvoiceState) -> Invoice:
    """Drive a fresh invoice to the given state through legal actions."""
    paths = {
        InvoiceState.DRAFT: [],
        InvoiceState.OPEN: ["finalize"],
        InvoiceState.PAID: ["finalize", "pay"],
        InvoiceState.VOID: ["finalize", "void"],
        InvoiceState.UNCOLLECTABLE: ["finalize", "cancel"],
    }
    invoice = new_invoice(42, 1000)
    for action in paths[state]:
        invoice.apply(action)
    assert invoice.state == state
    return invoice


class TestInvoiceCreation:
    """Test invoice construction."""

    def test_initial_state(self) -> None:
        """Invoices start in draft."""
        invoice = new_invoice(1001, 1500)

        assert invoice.id == 1001
        assert invoice.amount == 1500
        assert invoice.state == InvoiceState.DRAFT
        assert not invoice.is_terminal

    def test_created_at_is_captured(self) -> None:
        invoice = new_invoice(1001, 1500)

        assert isinstance(invoice.created_at, datetime)
        assert invoice.created_at.tzinfo is not None

    def test_zero_amount_allowed(self) -> None:
        assert new_invoice(1, 0).amount == 0

    @pytest.mark.parametrize("invoice_id", [0, -5, "1001", 1.5, True])
    def test_invalid_id(self, invoice_id) -> None:
        with pytest.raises(ValueError, match="Invoice id"):
            new_invoice(invoice_id, 100)

    @pytest.mark.parametrize("amount", [-1, "100", 10.0, False])
    def test_invalid_amount(self, amount) -> None:
        with pytest.raises(ValueError, match="Amount"):
            new_invoice(1001, amount)

    def test_fields_are_read_only(self) -> None:
        invoice = new_invoice(1001, 1500)

        for attr, value in [
            ("id", 2),
            ("amount", 1),
            ("state", InvoiceState.PAID),
            ("created_at", datetime.now()),
        ]:
            with pytest.raises(AttributeError):
                setattr(invoice, attr, value)


class TestScenarios:
    """Literal lifecycle scenarios."""

    def test_pay_twice(self) -> None:
        invoice = new_invoice(1001, 1500)
        assert invoice.state == InvoiceState.DRAFT

        assert invoice.finalize() == "finalize - changing from Draft to Open"
        assert invoice.state == InvoiceState.OPEN

        assert invoice.pay() == "pay - changing from Open to Paid"
        assert invoice.state == InvoiceState.PAID

        with pytest.raises(InvalidTransition) as exc_info:
            invoice.pay()
        assert str(exc_info.value) == "Cannot pay invoice in paid state"
        assert invoice.state == InvoiceState.PAID

    def test_void_open(self) -> None:
        invoice = new_invoice(1002, 750)
        invoice.finalize()
        assert invoice.state == InvoiceState.OPEN

        invoice.void()
        assert invoice.state == InvoiceState.VOID
        assert invoice.is_terminal

    def test_pay_uncollectable(self) -> None:
        invoice = new_invoice(1003, 2000)
        invoice.finalize()
        invoice.cancel()
        assert invoice.state == InvoiceState.UNCOLLECTABLE

        assert invoice.pay() == "pay - changing from Uncollectable to Paid"
        assert invoice.state == InvoiceState.PAID

    def test_void_uncollectable(self) -> None:
        invoice = new_invoice(1004, 500)
        invoice.finalize()
        invoice.cancel()

        invoice.void()
        assert invoice.state == InvoiceState.VOID

    def test_pay_draft(self) -> None:
        invoice = new_invoice(1005, 300)

        with pytest.raises(InvalidTransition, match="^Cannot pay invoice in draft state$"):
            invoice.pay()
        assert invoice.state == InvoiceState.DRAFT


class TestForbiddenTransitions:
    """Rejected actions leave the invoice untouched."""

    @pytest.mark.parametrize("action,state", ILLEGAL_PAIRS)
    def test_failed_action_keeps_snapshot(self, action, state) -> None:
        invoice = invoice_in(state)

        before = invoice.snapshot()

        with pytest.raises(InvalidTransition):
            getattr(invoice, action.value)()

        assert invoice.snapshot() == before

    @pytest.mark.parametrize("state", [InvoiceState.PAID, InvoiceState.VOID])
    def test_terminal_states_absorb(self, state) -> None:
        invoice = invoice_in(state)

        for action in InvoiceAction:
            with pytest.raises(InvalidTransition):
                invoice.apply(action)
        assert invoice.state == state
        assert invoice.is_terminal
        assert invoice.available_actions == []

    def test_draft_cannot_be_voided_or_cancelled(self) -> None:
        invoice = new_invoice(1, 10)

        with pytest.raises(InvalidTransition, match="Cannot void invoice in draft state"):
            invoice.void()
        with pytest.raises(InvalidTransition, match="Cannot cancel invoice in draft state"):
            invoice.cancel()

    def test_unknown_action_name(self) -> None:
        invoice = new_invoice(1, 10)

        with pytest.raises(ValueError):
            invoice.apply("refund")
        assert invoice.state == InvoiceState.DRAFT


class TestIdentityFields:
    """id, amount and created_at survive any sequence of calls."""

    def test_identity_unchanged(self) -> None:
        invoice = new_invoice(1003, 2000)
        created_at = invoice.created_at

        for action in ["pay", "finalize", "finalize", "cancel", "cancel", "pay", "void"]:
            try:
                invoice.apply(action)
            except InvalidTransition:
                pass

        assert invoice.id == 1003
        assert invoice.amount == 2000
        assert invoice.created_at == created_at
        assert invoice.state == InvoiceState.PAID


class TestSnapshot:
    """Test the immutable snapshot view."""

    def test_snapshot_fields(self) -> None:
        invoice = new_invoice(1001, 1500)
        invoice.finalize()

        snapshot = invoice.snapshot()
        assert isinstance(snapshot, InvoiceSnapshot)
        assert snapshot.id == 1001
        assert snapshot.amount == 1500
        assert snapshot.state == InvoiceState.OPEN
        assert snapshot.created_at == invoice.created_at

    def test_snapshot_is_frozen(self) -> None:
        snapshot = new_invoice(1001, 1500).snapshot()

        with pytest.raises(ValidationError):
            snapshot.state = InvoiceState.PAID

    def test_snapshot_is_detached(self) -> None:
        invoice = new_invoice(1001, 1500)
        snapshot = invoice.snapshot()

        invoice.finalize()

        assert snapshot.state == InvoiceState.DRAFT
        assert invoice.snapshot().state == InvoiceState.OPEN

    def test_to_dict_shape(self) -> None:
        invoice = new_invoice(1003, 2000)
        invoice.finalize()
        invoice.cancel()

        data = invoice.snapshot().to_dict()

        assert data == {
            "id": 1003,
            "amount": 2000,
            "state": "uncollectable",
            "created_at": invoice.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        }

    def test_to_dict_custom_format(self) -> None:
        invoice = new_invoice(1, 10)

        data = invoice.snapshot().to_dict(timestamp_format="%Y")
        assert data["created_at"] == str(invoice.created_at.year)

    def test_to_dict_uses_settings_format(self, monkeypatch) -> None:
        monkeypatch.setenv("INVOICE_TIMESTAMP_FORMAT", "%d/%m/%Y")
        invoice = new_invoice(1, 10)

        data = invoice.snapshot().to_dict()
        assert data["created_at"] == invoice.created_at.strftime("%d/%m/%Y")

    def test_invoice_to_dict(self) -> None:
        invoice = new_invoice(1001, 1500)

        data = invoice.to_dict()
        assert data["state"] == "draft"
        assert data["is_terminal"] is False
        assert data["available_actions"] == ["finalize"]


class TestSideEffects:
    """A transition writes the state field and nothing else."""

    def test_successful_transition_only_changes_state(self) -> None:
        invoice = new_invoice(1001, 1500)
        before = dict(vars(invoice))

        assert invoice.finalize() == "finalize - changing from Draft to Open"

        after = dict(vars(invoice))
        assert after.pop("_state") == InvoiceState.OPEN
        before.pop("_state")
        assert after == before

    def test_no_listener_hooks(self) -> None:
        """Invoices accept no transition callback."""
        with pytest.raises(TypeError):
            new_invoice(1001, 1500, on_transition=lambda *args: None)

    def test_repr(self) -> None:
        assert repr(new_invoice(7, 70)) == "Invoice(id=7, amount=70, state='draft')"
