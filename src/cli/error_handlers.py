"""Enhanced error handling for CLI commands."""

import sys
import traceback
from typing import Optional

import click
from pydantic import ValidationError

from src.cli.utils.formatters import format_error, format_warning
from src.exceptions import PreconditionError


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Error related to configuration issues."""

    pass


class DataValidationError(CLIError):
    """Error related to malformed command input."""

    pass


class PaymentRejectedError(CLIError):
    """A proposed payment was rejected in strict mode."""

    pass


def _echo_cli_error(label: str, error: CLIError) -> None:
    click.echo(format_error(f"{label}: {error.message}"))
    if error.recovery_hint:
        click.echo(format_warning(f"Hint: {error.recovery_hint}"))


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Handle CLI errors with user-friendly messages.

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code (1 configuration, 3 invalid input, 4 rejected payment,
        130 cancelled, 255 unexpected)
    """
    if isinstance(error, ConfigurationError):
        _echo_cli_error("Configuration Error", error)
        return 1

    elif isinstance(error, DataValidationError):
        _echo_cli_error("Data Validation Error", error)
        return 3

    elif isinstance(error, PaymentRejectedError):
        _echo_cli_error("Payment Rejected", error)
        return 4

    # Engine precondition violations
    elif isinstance(error, PreconditionError):
        click.echo(format_error(f"Data Validation Error: {error.message}"))
        if error.field:
            click.echo(format_warning(f"Hint: Check the value of '{error.field}'"))
        return 3

    # Model validation failures (negative amounts, bad currency codes, ...)
    elif isinstance(error, ValidationError):
        click.echo(format_error("Data Validation Error: invalid input"))
        for detail in error.errors():
            location = ".".join(str(part) for part in detail["loc"]) or "input"
            click.echo(format_warning(f"  {location}: {detail['msg']}"))
        return 3

    # Handle click.Abort (user cancellation)
    elif isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return 130  # Standard exit code for SIGINT

    else:
        click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
        click.echo(str(error))

        if debug:
            click.echo("\nFull stack trace:")
            click.echo(
                "".join(
                    traceback.format_exception(
                        type(error), error, error.__traceback__
                    )
                )
            )
        else:
            click.echo(format_warning("\nRun with --debug flag for full stack trace"))

        return 255


def with_error_handling(debug: bool = False):
    """
    Context manager adding standardized error handling to CLI commands.

    Args:
        debug: Whether to show full stack traces

    Returns:
        Context manager that converts exceptions into exit codes

    Example:
        @click.command()
        @click.option('--debug', is_flag=True)
        def my_command(debug):
            with with_error_handling(debug):
                # Command implementation
                pass
    """

    class ErrorHandler:
        """Context manager for error handling."""

        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None and not isinstance(exc_val, click.exceptions.Exit):
                exit_code = handle_cli_error(exc_val, self.show_debug)
                sys.exit(exit_code)
            return False  # Don't suppress exceptions

    return ErrorHandler(debug)
