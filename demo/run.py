#!/usr/bin/env python3
"""
Run the scripted invoice lifecycle scenarios.

Usage:
    invoice-demo

Environment variables:
    INVOICE_LOG_LEVEL - Logging level (default: INFO)
    INVOICE_TIMESTAMP_FORMAT - strftime format for created_at
"""

import json

from config.settings import configure_logging, get_settings
from demo.scenarios import run_all


def main() -> None:
    """Run all scenarios and print their output."""
    settings = get_settings()
    configure_logging(settings)

    print("=" * 60)
    print("Invoice Lifecycle Scenarios")
    print("=" * 60)

    for number, result in enumerate(run_all(), start=1):
        print(f"\n{number}. {result.scenario.title}")
        print("-" * 60)
        for line in result.lines:
            print(line)
        print(json.dumps(result.snapshot.to_dict(settings.timestamp_format)))

    print()


if __name__ == "__main__":
    main()
