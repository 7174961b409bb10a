"""Structured tools for invoice operations."""

from tools.base import InMemoryInvoiceStore, ToolResult, get_default_store, set_default_store
from tools.invoice_tools import (
    CancelInvoiceTool,
    FinalizeInvoiceTool,
    GetInvoiceStatusTool,
    ListInvoicesTool,
    PayInvoiceTool,
    VoidInvoiceTool,
    get_action_tool,
)

__all__ = [
    "InMemoryInvoiceStore",
    "ToolResult",
    "get_default_store",
    "set_default_store",
    "CancelInvoiceTool",
    "FinalizeInvoiceTool",
    "GetInvoiceStatusTool",
    "ListInvoicesTool",
    "PayInvoiceTool",
    "VoidInvoiceTool",
    "get_action_tool",
]
