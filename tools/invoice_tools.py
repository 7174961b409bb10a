"""Invoice operation tools returning structured results."""

import logging
from typing import Any, Optional

from state_machine.policy import ActionLike, InvoiceAction, InvoiceState
from tools.base import BaseInvoiceTool, InvoiceStore, ToolResult

logger = logging.getLogger(__name__)


class ListInvoicesTool(BaseInvoiceTool):
    """Tool to list all invoices or filter by state."""

    name = "list_invoices"
    description = "List all invoices, optionally filtered by state."

    def _execute(
        self,
        invoice_id: int = 0,  # Not used but required by base class
        state_filter: Optional[str] = None,
        **kwargs: Any,
    ) -> ToolResult:
        if state_filter is not None:
            try:
                state_filter = InvoiceState(state_filter).value
            except ValueError:
                logger.warning(f"Tool '{self.name}' got unknown state filter '{state_filter}'")
                return ToolResult(
                    success=False,
                    message=f"Unknown state '{state_filter}'",
                    error={
                        "code": "INVALID_STATE",
                        "state": state_filter,
                        "valid_states": [state.value for state in InvoiceState],
                    },
                )

        invoices = []
        for inv_id in self.store.list_invoices():
            invoice = self._get_invoice(inv_id)
            if invoice is None:
                continue
            if state_filter and invoice.state.value != state_filter:
                continue
            invoices.append(
                {
                    "invoice_id": inv_id,
                    "amount": invoice.amount,
                    "state": invoice.state.value,
                    "is_terminal": invoice.is_terminal,
                }
            )

        if not invoices:
            if state_filter:
                message = f"No invoices found with state '{state_filter}'."
            else:
                message = "No invoices found."
            return ToolResult(
                success=True,
                message=message,
                data={"invoices": [], "total": 0, "filter": state_filter},
            )

        invoice_list = "\n".join(
            f"  - {inv['invoice_id']}: {inv['state']}" for inv in invoices
        )
        return ToolResult(
            success=True,
            message=f"Found {len(invoices)} invoice(s):\n{invoice_list}",
            data={
                "invoices": invoices,
                "total": len(invoices),
                "filter": state_filter,
            },
        )


class GetInvoiceStatusTool(BaseInvoiceTool):
    """Tool to get the current status of an invoice."""

    name = "get_invoice_status"
    description = "Get the current state and available actions for an invoice."

    def _execute(self, invoice_id: int, **kwargs: Any) -> ToolResult:
        invoice = self._get_invoice(invoice_id)
        if invoice is None:
            return self._not_found_result(invoice_id)

        return ToolResult(
            success=True,
            message=f"Invoice {invoice_id} is in state '{invoice.state.value}'",
            data={
                "invoice": invoice.snapshot().to_dict(),
                "is_terminal": invoice.is_terminal,
                "available_actions": invoice.available_actions,
                "history": self.store.get_history(invoice_id),
            },
        )


class InvoiceActionTool(BaseInvoiceTool):
    """
    Base class for tools that apply one lifecycle action.

    Subclasses only set `action`. Rejected transitions propagate out of
    _execute and are turned into an INVALID_TRANSITION result by run().
    Applied transitions are reported to the store afterwards.
    """

    action: InvoiceAction

    def _execute(self, invoice_id: int, **kwargs: Any) -> ToolResult:
        invoice = self._get_invoice(invoice_id)
        if invoice is None:
            return self._not_found_result(invoice_id)

        previous_state = invoice.state
        description = invoice.apply(self.action)
        self._save_invoice(invoice)
        self.store.record_transition(
            invoice_id, self.action.value, previous_state.value, invoice.state.value
        )

        return ToolResult(
            success=True,
            message=f"Invoice {invoice_id}: {description}",
            data={
                "invoice_id": invoice_id,
                "action": self.action.value,
                "previous_state": previous_state.value,
                "current_state": invoice.state.value,
                "description": description,
            },
        )


class FinalizeInvoiceTool(InvoiceActionTool):
    """Tool to finalize a draft invoice."""

    name = "finalize_invoice"
    description = "Finalize a draft invoice so it becomes open."
    action = InvoiceAction.FINALIZE


class PayInvoiceTool(InvoiceActionTool):
    """Tool to record payment of an invoice."""

    name = "pay_invoice"
    description = "Mark an open or uncollectable invoice as paid."
    action = InvoiceAction.PAY


class VoidInvoiceTool(InvoiceActionTool):
    """Tool to void an invoice."""

    name = "void_invoice"
    description = "Void an open or uncollectable invoice."
    action = InvoiceAction.VOID


class CancelInvoiceTool(InvoiceActionTool):
    """Tool to write off an open invoice as uncollectable."""

    name = "cancel_invoice"
    description = "Mark an open invoice as uncollectable."
    action = InvoiceAction.CANCEL


ACTION_TOOLS: dict[InvoiceAction, type[InvoiceActionTool]] = {
    InvoiceAction.FINALIZE: FinalizeInvoiceTool,
    InvoiceAction.PAY: PayInvoiceTool,
    InvoiceAction.VOID: VoidInvoiceTool,
    InvoiceAction.CANCEL: CancelInvoiceTool,
}


def get_action_tool(
    action: ActionLike, store: Optional[InvoiceStore] = None
) -> InvoiceActionTool:
    """
    Get the tool for a lifecycle action.

    Raises:
        ValueError: If the action name is unknown
    """
    return ACTION_TOOLS[InvoiceAction(action)](store)
