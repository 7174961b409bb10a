"""Mutable invoice record driven by the state policy."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from state_machine.models import InvoiceSnapshot
from state_machine.policy import (
    ActionLike,
    InvoiceAction,
    InvoiceState,
    StatePolicy,
    get_default_policy,
)

logger = logging.getLogger(__name__)


class Invoice:
    """
    Billing document whose lifecycle is governed by a StatePolicy.

    Every invoice starts in 'draft'. The state changes only through
    finalize(), pay(), void() and cancel(), each of which asks the policy
    for a decision and then writes the resulting state. A rejected action
    raises InvalidTransition and leaves the invoice untouched. A successful
    action writes the state field and nothing else; history and
    notifications belong to the owning collection.

    id, amount and created_at are read-only.
    """

    def __init__(
        self,
        invoice_id: int,
        amount: int,
        policy: Optional[StatePolicy] = None,
    ):
        """
        Initialize the invoice.

        Args:
            invoice_id: Unique positive identifier
            amount: Non-negative amount in minor currency units
            policy: Transition policy (default: shared policy)
        """
        if isinstance(invoice_id, bool) or not isinstance(invoice_id, int):
            raise ValueError(f"Invoice id must be an integer: {invoice_id!r}")
        if invoice_id <= 0:
            raise ValueError(f"Invoice id must be positive: {invoice_id}")
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError(f"Amount must be an integer: {amount!r}")
        if amount < 0:
            raise ValueError(f"Amount must be non-negative: {amount}")

        self._id = invoice_id
        self._amount = amount
        self._created_at = datetime.now(timezone.utc)
        self._state = InvoiceState.DRAFT
        self._policy = policy or get_default_policy()

    @property
    def id(self) -> int:
        return self._id

    @property
    def amount(self) -> int:
        return self._amount

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def state(self) -> InvoiceState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._policy.is_terminal(self._state)

    @property
    def available_actions(self) -> list[str]:
        """Get list of actions available from current state."""
        return [action.value for action in self._policy.available_actions(self._state)]

    def can(self, action: ActionLike) -> bool:
        """Check if an action can be executed from current state."""
        return self._policy.can(action, self._state)

    def _apply(self, action: InvoiceAction) -> str:
        """Ask the policy for a decision and write the resulting state."""
        logger.debug(
            f"Invoice {self._id}: Attempting '{action.value}' from '{self._state.value}'"
        )

        # Raises InvalidTransition before anything is written
        decision = self._policy.decide(action, self._state)

        self._state = decision.dest
        logger.info(f"Invoice {self._id}: {decision.description}")

        return decision.description

    def finalize(self) -> str:
        """Move a draft invoice to open."""
        return self._apply(InvoiceAction.FINALIZE)

    def pay(self) -> str:
        """Mark an open or uncollectable invoice as paid."""
        return self._apply(InvoiceAction.PAY)

    def void(self) -> str:
        """Void an open or uncollectable invoice."""
        return self._apply(InvoiceAction.VOID)

    def cancel(self) -> str:
        """Mark an open invoice as uncollectable."""
        return self._apply(InvoiceAction.CANCEL)

    def apply(self, action: ActionLike) -> str:
        """
        Execute an action by name.

        Args:
            action: One of finalize, pay, void, cancel

        Returns:
            Transition description

        Raises:
            InvalidTransition: If the action is not valid from current state
            ValueError: If the action name is unknown
        """
        return self._apply(InvoiceAction(action))

    def snapshot(self) -> InvoiceSnapshot:
        """Return an immutable view of the invoice fields."""
        return InvoiceSnapshot(
            id=self._id,
            amount=self._amount,
            state=self._state,
            created_at=self._created_at,
        )

    def to_dict(self, timestamp_format: Optional[str] = None) -> dict[str, Any]:
        """Serialize invoice with introspection fields."""
        return {
            **self.snapshot().to_dict(timestamp_format),
            "is_terminal": self.is_terminal,
            "available_actions": self.available_actions,
        }

    def __repr__(self) -> str:
        return (
            f"Invoice(id={self._id!r}, amount={self._amount!r}, "
            f"state={self._state.value!r})"
        )


def new_invoice(
    invoice_id: int,
    amount: int,
    policy: Optional[StatePolicy] = None,
) -> Invoice:
    """Create an invoice in the draft state."""
    return Invoice(
        invoice_id=invoice_id,
        amount=amount,
        policy=policy,
    )
