"""CLI commands."""

from src.cli.commands.reconcile import reconcile
from src.cli.commands.round_timer import round_timer

__all__ = ["reconcile", "round_timer"]
