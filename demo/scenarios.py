"""Scripted invoice lifecycle scenarios."""

from dataclasses import dataclass, field
from typing import Optional

from state_machine.invoice import Invoice
from state_machine.models import InvoiceSnapshot
from state_machine.policy import InvalidTransition, InvoiceAction
from tools.base import InMemoryInvoiceStore


@dataclass(frozen=True)
class Scenario:
    """A named sequence of actions applied to one fresh invoice."""

    title: str
    invoice_id: int
    amount: int
    actions: tuple[InvoiceAction, ...]


@dataclass
class ScenarioResult:
    """Printable outcome of a scenario run."""

    scenario: Scenario
    snapshot: InvoiceSnapshot
    lines: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


SCENARIOS: tuple[Scenario, ...] = (
    Scenario(
        title="Pay an open invoice, then try to pay it again",
        invoice_id=1001,
        amount=1500,
        actions=(InvoiceAction.FINALIZE, InvoiceAction.PAY, InvoiceAction.PAY),
    ),
    Scenario(
        title="Void an open invoice",
        invoice_id=1002,
        amount=750,
        actions=(InvoiceAction.FINALIZE, InvoiceAction.VOID),
    ),
    Scenario(
        title="Collect an uncollectable invoice",
        invoice_id=1003,
        amount=2000,
        actions=(InvoiceAction.FINALIZE, InvoiceAction.CANCEL, InvoiceAction.PAY),
    ),
    Scenario(
        title="Void an uncollectable invoice",
        invoice_id=1004,
        amount=500,
        actions=(InvoiceAction.FINALIZE, InvoiceAction.CANCEL, InvoiceAction.VOID),
    ),
    Scenario(
        title="Pay a draft invoice",
        invoice_id=1005,
        amount=300,
        actions=(InvoiceAction.PAY,),
    ),
)


def _state_line(invoice: Invoice) -> str:
    return f"  state: {invoice.state.value}"


def run_scenario(
    scenario: Scenario,
    store: Optional[InMemoryInvoiceStore] = None,
) -> ScenarioResult:
    """
    Create the scenario's invoice and apply each action in turn.

    Rejected actions are recorded as error lines and do not stop the run.
    An invoice already stored under the scenario's id is replaced, so a
    store can be reused across runs.
    """
    if store is None:
        store = InMemoryInvoiceStore()

    store.remove_invoice(scenario.invoice_id)
    invoice = store.create_invoice(scenario.invoice_id, scenario.amount)
    lines = [
        f"Invoice {invoice.id} created for {invoice.amount}",
        _state_line(invoice),
    ]
    errors = []

    for action in scenario.actions:
        source = invoice.state
        try:
            lines.append(f"  {invoice.apply(action)}")
        except InvalidTransition as e:
            errors.append(str(e))
            lines.append(f"  Error: {e}")
        else:
            store.record_transition(
                invoice.id, action.value, source.value, invoice.state.value
            )
        lines.append(_state_line(invoice))

    return ScenarioResult(
        scenario=scenario,
        snapshot=invoice.snapshot(),
        lines=lines,
        errors=errors,
    )


def run_all(store: Optional[InMemoryInvoiceStore] = None) -> list[ScenarioResult]:
    """Run every scenario against one store."""
    if store is None:
        store = InMemoryInvoiceStore()
    return [run_scenario(scenario, store) for scenario in SCENARIOS]
