#!/usr/bin/env python3
"""
Invoice Simulator - CLI interface for driving invoices by hand.

Usage:
    invoice-simulator

Commands:
    /create ID AMOUNT    - Create a new draft invoice
    /state ID            - Check invoice state
    /advance ID ACTION   - Apply finalize, pay, void or cancel
    /list [STATE]        - List invoices, optionally by state
    /help                - Show help
    exit                 - Exit simulator
"""

from typing import Any

from config.settings import configure_logging
from state_machine.policy import InvoiceAction
from tools.base import InMemoryInvoiceStore
from tools.invoice_tools import GetInvoiceStatusTool, ListInvoicesTool, get_action_tool

ACTIONS = ", ".join(action.value for action in InvoiceAction)


def print_header() -> None:
    """Print simulator header."""
    print("\n" + "=" * 60)
    print("Invoice Lifecycle Simulator")
    print("=" * 60)
    print(f"""
Commands:
  /create ID AMOUNT    - Create a new draft invoice
  /state ID            - Check invoice state
  /advance ID ACTION   - Apply an action ({ACTIONS})
  /list [STATE]        - List invoices
  /help                - Show this help
  exit                 - Exit simulator

Example flow:
  /create 1001 1500
  /advance 1001 finalize
  /advance 1001 pay
""")
    print("=" * 60 + "\n")


def print_state_table(data: dict[str, Any]) -> None:
    """Print state table for an invoice status result."""
    invoice = data["invoice"]
    actions = ", ".join(data["available_actions"]) or "none"
    print(f"\n+{'-' * 50}+")
    print(f"| Invoice: {invoice['id']:<40}|")
    print(f"+{'-' * 50}+")
    print(f"| Amount: {invoice['amount']:<41}|")
    print(f"| Current State: {invoice['state']:<34}|")
    print(f"| Is Terminal: {str(data['is_terminal']):<36}|")
    print(f"| Available: {actions:<38}|")
    print(f"| Created: {invoice['created_at']:<40}|")
    print(f"+{'-' * 50}+\n")


def _show_state(store: InMemoryInvoiceStore, invoice_id: int) -> None:
    result = GetInvoiceStatusTool(store).run(invoice_id)
    if result["success"]:
        print_state_table(result["data"])
    else:
        print(f"Error: {result['message']}")


def handle_command(cmd: str, store: InMemoryInvoiceStore) -> bool:
    """
    Handle simulator commands.

    Args:
        cmd: The command string.
        store: Invoice store the simulator operates on.

    Returns:
        True if should continue, False if should exit.
    """
    parts = cmd.strip().split()
    if not parts:
        return True
    command = parts[0].lower()

    if command == "exit":
        print("\nSimulator closed. Goodbye!")
        return False

    elif command == "/help":
        print_header()

    elif command == "/create":
        if len(parts) < 3:
            print("Usage: /create ID AMOUNT")
            return True
        try:
            invoice = store.create_invoice(int(parts[1]), int(parts[2]))
        except ValueError as e:
            print(f"Error: {e}")
            return True
        print(f"Created invoice: {invoice.id}")
        _show_state(store, invoice.id)

    elif command == "/state":
        if len(parts) < 2:
            print("Usage: /state ID")
            return True
        try:
            invoice_id = int(parts[1])
        except ValueError:
            print(f"Error: invalid invoice id '{parts[1]}'")
            return True
        _show_state(store, invoice_id)

    elif command == "/advance":
        if len(parts) < 3:
            print("Usage: /advance ID ACTION")
            print(f"   Actions: {ACTIONS}")
            return True
        try:
            invoice_id = int(parts[1])
            tool = get_action_tool(parts[2].lower(), store)
        except ValueError:
            print(f"Error: expected /advance ID ACTION with ACTION one of {ACTIONS}")
            return True
        result = tool.run(invoice_id)
        if result["success"]:
            print(result["data"]["description"])
            _show_state(store, invoice_id)
        else:
            print(f"Error: {result['message']}")

    elif command == "/list":
        state_filter = parts[1].lower() if len(parts) > 1 else None
        result = ListInvoicesTool(store).run(0, state_filter=state_filter)
        if result["success"]:
            print(f"\n{result['message']}\n")
        else:
            print(f"Error: {result['message']}")

    else:
        print(f"Unknown command: {command}")
        print("   Type /help for available commands")

    return True


def main() -> None:
    """Run the invoice simulator."""
    configure_logging()
    print_header()

    store = InMemoryInvoiceStore()

    while True:
        try:
            cmd = input("> ")
        except (EOFError, KeyboardInterrupt):
            print("\nSimulator closed. Goodbye!")
            break

        if not handle_command(cmd, store):
            break


if __name__ == "__main__":
    main()
