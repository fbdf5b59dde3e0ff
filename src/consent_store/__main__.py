# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""CLI entry point for consent-store (consent-store command).

Usage:
    consent-store --help
    consent-store --db ./consent.db init
    consent-store --db ./consent.db stats
    consent-store --db ./consent.db entities consent --limit 20
"""

from .cli import cli


def main() -> None:
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
