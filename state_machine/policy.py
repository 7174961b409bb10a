"""Invoice transition policy built on the transitions library."""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Optional, Union

from transitions import Machine

logger = logging.getLogger(__name__)


class InvoiceState(str, Enum):
    """Possible invoice states. Values are the lowercase wire names."""

    DRAFT = "draft"
    OPEN = "open"
    PAID = "paid"
    VOID = "void"
    UNCOLLECTABLE = "uncollectable"

    @property
    def label(self) -> str:
        """Capitalized display name, e.g. 'Uncollectable'."""
        return self.value.capitalize()


class InvoiceAction(str, Enum):
    """Lifecycle actions that can be requested on an invoice."""

    FINALIZE = "finalize"
    PAY = "pay"
    VOID = "void"
    CANCEL = "cancel"


class InvalidTransition(Exception):
    """Raised when an action is not permitted from the current state."""

    def __init__(self, action: InvoiceAction, current_state: InvoiceState):
        self.action = action
        self.current_state = current_state
        super().__init__(
            f"Cannot {action.value} invoice in {current_state.value} state"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        return {
            "error": "InvalidTransition",
            "message": str(self),
            "current_state": self.current_state.value,
            "attempted_action": self.action.value,
        }


@dataclass(frozen=True)
class TransitionDecision:
    """Outcome of a permitted action."""

    action: InvoiceAction
    source: InvoiceState
    dest: InvoiceState

    @property
    def description(self) -> str:
        return (
            f"{self.action.value} - changing from "
            f"{self.source.label} to {self.dest.label}"
        )


StateLike = Union[InvoiceState, str]
ActionLike = Union[InvoiceAction, str]


class StatePolicy:
    """
    Decides the outcome of invoice actions.

    Transitions:
        - finalize: draft -> open
        - pay: open -> paid, uncollectable -> paid
        - void: open -> void, uncollectable -> void
        - cancel: open -> uncollectable

    Any other (action, state) pair is rejected with InvalidTransition.
    States without outgoing transitions (paid, void) are terminal.

    The policy never holds an invoice's state. The table is loaded into a
    model-less Machine which is only used for lookups.
    """

    TRANSITIONS = [
        {
            "trigger": InvoiceAction.FINALIZE.value,
            "source": InvoiceState.DRAFT.value,
            "dest": InvoiceState.OPEN.value,
        },
        # Payment
        {
            "trigger": InvoiceAction.PAY.value,
            "source": InvoiceState.OPEN.value,
            "dest": InvoiceState.PAID.value,
        },
        {
            "trigger": InvoiceAction.PAY.value,
            "source": InvoiceState.UNCOLLECTABLE.value,
            "dest": InvoiceState.PAID.value,
        },
        # Voiding
        {
            "trigger": InvoiceAction.VOID.value,
            "source": InvoiceState.OPEN.value,
            "dest": InvoiceState.VOID.value,
        },
        {
            "trigger": InvoiceAction.VOID.value,
            "source": InvoiceState.UNCOLLECTABLE.value,
            "dest": InvoiceState.VOID.value,
        },
        # Write-off
        {
            "trigger": InvoiceAction.CANCEL.value,
            "source": InvoiceState.OPEN.value,
            "dest": InvoiceState.UNCOLLECTABLE.value,
        },
    ]

    def __init__(self, transitions: Optional[list[dict[str, str]]] = None):
        """
        Initialize the policy.

        Args:
            transitions: Transition table in transitions' dict format.
                         Defaults to TRANSITIONS.
        """
        self._machine = Machine(
            model=None,
            states=[state.value for state in InvoiceState],
            transitions=transitions if transitions is not None else self.TRANSITIONS,
            initial=InvoiceState.DRAFT.value,
            auto_transitions=False,
        )

    def _lookup(self, action: InvoiceAction, state: InvoiceState) -> list[Any]:
        # Plain strings: get_transitions would read `.name` off an Enum member.
        return self._machine.get_transitions(
            trigger=action.value, source=state.value
        )

    def decide(self, action: ActionLike, state: StateLike) -> TransitionDecision:
        """
        Decide the result of applying an action in a given state.

        Args:
            action: Requested action
            state: Current invoice state

        Returns:
            TransitionDecision with the resulting state

        Raises:
            InvalidTransition: If the table has no entry for (action, state)
            ValueError: If action or state is not a known name
        """
        action = InvoiceAction(action)
        state = InvoiceState(state)

        candidates = self._lookup(action, state)
        if not candidates:
            logger.debug(f"Rejected '{action.value}' from '{state.value}'")
            raise InvalidTransition(action, state)

        decision = TransitionDecision(
            action=action,
            source=state,
            dest=InvoiceState(candidates[0].dest),
        )
        logger.debug(f"Decided: {decision.description}")
        return decision

    def finalize(self, state: StateLike) -> TransitionDecision:
        return self.decide(InvoiceAction.FINALIZE, state)

    def pay(self, state: StateLike) -> TransitionDecision:
        return self.decide(InvoiceAction.PAY, state)

    def void(self, state: StateLike) -> TransitionDecision:
        return self.decide(InvoiceAction.VOID, state)

    def cancel(self, state: StateLike) -> TransitionDecision:
        return self.decide(InvoiceAction.CANCEL, state)

    def can(self, action: ActionLike, state: StateLike) -> bool:
        """Check if an action is permitted from a state."""
        return bool(self._lookup(InvoiceAction(action), InvoiceState(state)))

    def available_actions(self, state: StateLike) -> list[InvoiceAction]:
        """Get actions permitted from a state, in declaration order."""
        state = InvoiceState(state)
        return [action for action in InvoiceAction if self._lookup(action, state)]

    def is_terminal(self, state: StateLike) -> bool:
        """Check if no action is permitted from a state."""
        return not self.available_actions(state)

    def terminal_states(self) -> frozenset[InvoiceState]:
        """Return states with no outgoing transitions."""
        return frozenset(state for state in InvoiceState if self.is_terminal(state))

    def __repr__(self) -> str:
        return f"StatePolicy(transitions={len(self._machine.get_transitions())})"


@lru_cache()
def get_default_policy() -> StatePolicy:
    """Get cached policy instance."""
    return StatePolicy()
