"""Billing Core CLI.

This module provides a command-line interface for the billing core.
It includes commands for rounding timer entries and reconciling invoices.
"""

import click

from src.cli.commands.reconcile import reconcile
from src.cli.commands.round_timer import round_timer
from src.cli.error_handlers import with_error_handling
from src.cli.utils.options import load_settings
from src.config.logging_config import configure_logging

__version__ = "1.0.0"


@click.group(
    help="Billing Core CLI - Round timer entries and reconcile invoice payments"
)
@click.version_option(version=__version__)
def cli():
    """Billing Core CLI main entry point."""
    pass


# Register commands
cli.add_command(round_timer)
cli.add_command(reconcile)


def main():
    """Main entry point for the CLI."""
    with with_error_handling():
        settings = load_settings()
    configure_logging(settings)
    cli()


if __name__ == "__main__":
    main()
