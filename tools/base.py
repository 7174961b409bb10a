"""Invoice collection and the base class for invoice tools."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol

from pydantic import BaseModel

from state_machine.invoice import Invoice, new_invoice
from state_machine.policy import InvalidTransition

logger = logging.getLogger(__name__)

TransitionListener = Callable[[int, str, str], None]


class ToolResult(BaseModel):
    """Outcome of a tool call, ready for rendering."""

    success: bool
    message: str
    data: Optional[dict[str, Any]] = None
    error: Optional[dict[str, Any]] = None

    def to_json(self) -> dict[str, Any]:
        """Drop the data and error sections when they are empty."""
        payload: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data:
            payload["data"] = self.data
        if self.error:
            payload["error"] = self.error
        return payload


class InvoiceStore(Protocol):
    """What the tools need from an invoice collection."""

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        ...

    def save_invoice(self, invoice: Invoice) -> None:
        ...

    def list_invoices(self) -> list[int]:
        ...

    def record_transition(
        self, invoice_id: int, action: str, source: str, dest: str
    ) -> None:
        ...

    def get_history(self, invoice_id: int) -> list[dict[str, Any]]:
        ...


class InMemoryInvoiceStore:
    """
    Owns invoices for the lifetime of a process.

    Besides holding the invoices, the store keeps each invoice's transition
    log and notifies an optional listener with (invoice_id, source, dest).
    Invoices themselves never call out; the tool layer reports successful
    transitions here after they have been applied.
    """

    def __init__(self, on_transition: Optional[TransitionListener] = None) -> None:
        self._invoices: dict[int, Invoice] = {}
        self._history: dict[int, list[dict[str, Any]]] = {}
        self._on_transition = on_transition

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        return self._invoices.get(invoice_id)

    def save_invoice(self, invoice: Invoice) -> None:
        self._invoices[invoice.id] = invoice
        self._history.setdefault(invoice.id, [])

    def create_invoice(self, invoice_id: int, amount: int) -> Invoice:
        """
        Create a draft invoice and add it to the collection.

        Raises:
            ValueError: If the id is taken or id/amount are invalid
        """
        if invoice_id in self._invoices:
            raise ValueError(f"Invoice {invoice_id} already exists")
        invoice = new_invoice(invoice_id, amount)
        self.save_invoice(invoice)
        logger.info(f"Created invoice {invoice_id} for amount {amount}")
        return invoice

    def remove_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Drop an invoice and its transition log."""
        self._history.pop(invoice_id, None)
        return self._invoices.pop(invoice_id, None)

    def list_invoices(self) -> list[int]:
        return list(self._invoices.keys())

    def record_transition(
        self, invoice_id: int, action: str, source: str, dest: str
    ) -> None:
        """
        Log an applied transition and notify the listener.

        The transition has already happened, so a failing listener is
        logged and does not propagate.
        """
        self._history.setdefault(invoice_id, []).append(
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "action": action,
                "source": source,
                "dest": dest,
            }
        )

        if self._on_transition is None:
            return
        try:
            self._on_transition(invoice_id, source, dest)
        except Exception:
            logger.exception(
                f"Transition listener failed for invoice {invoice_id} ({source} -> {dest})"
            )

    def get_history(self, invoice_id: int) -> list[dict[str, Any]]:
        """Copy of the transition log for an invoice."""
        return [entry.copy() for entry in self._history.get(invoice_id, [])]

    def __len__(self) -> int:
        return len(self._invoices)


_default_store: Optional[InMemoryInvoiceStore] = None


def get_default_store() -> InMemoryInvoiceStore:
    """Process-wide store used by tools built without one."""
    global _default_store
    if _default_store is None:
        _default_store = InMemoryInvoiceStore()
    return _default_store


def set_default_store(store: Optional[InMemoryInvoiceStore]) -> None:
    """Replace the process-wide store; None resets it."""
    global _default_store
    _default_store = store


class BaseInvoiceTool(ABC):
    """
    An operation on one invoice in a store.

    run() never raises. Missing invoices, rejected lifecycle actions and
    unexpected failures come back as a failed result with an error code.
    """

    name: str
    description: str

    def __init__(self, store: Optional[InvoiceStore] = None):
        self.store = store if store is not None else get_default_store()

    def _get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        return self.store.get_invoice(invoice_id)

    def _save_invoice(self, invoice: Invoice) -> None:
        self.store.save_invoice(invoice)

    def _not_found_result(self, invoice_id: int) -> ToolResult:
        return ToolResult(
            success=False,
            message=f"Invoice {invoice_id} not found",
            error={"code": "INVOICE_NOT_FOUND", "invoice_id": invoice_id},
        )

    def _transition_error_result(
        self, invoice_id: int, e: InvalidTransition
    ) -> ToolResult:
        return ToolResult(
            success=False,
            message=str(e),
            error={"code": "INVALID_TRANSITION", "invoice_id": invoice_id, **e.to_dict()},
        )

    @abstractmethod
    def _execute(self, invoice_id: int, **kwargs: Any) -> ToolResult:
        """Do the work; may raise InvalidTransition."""
        ...

    def run(self, invoice_id: int, **kwargs: Any) -> dict[str, Any]:
        """
        Execute against an invoice and return a JSON-ready dict.

        Args:
            invoice_id: Target invoice (ignored by collection-wide tools)
            **kwargs: Tool-specific options
        """
        logger.info(f"{self.name}: invoice {invoice_id}")

        try:
            result = self._execute(invoice_id, **kwargs)
        except InvalidTransition as e:
            logger.warning(f"{self.name}: invoice {invoice_id} rejected: {e}")
            result = self._transition_error_result(invoice_id, e)
        except Exception as e:
            logger.exception(f"{self.name}: invoice {invoice_id} failed")
            result = ToolResult(
                success=False,
                message=f"Unexpected error: {e}",
                error={"code": "INTERNAL_ERROR", "message": str(e)},
            )

        return result.to_json()
