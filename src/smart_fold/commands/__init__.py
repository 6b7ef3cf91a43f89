"""Fold/unfold commands and the controller behind them."""

from .controller import NO_FOLDABLE_RANGE, NOTHING_TO_UNFOLD, FoldController
from .defaults import (
    DEFAULT_COMMANDS,
    FOLD_COMMAND_ID,
    UNFOLD_COMMAND_ID,
    command_table,
)
from .models import CommandRef, CommandResult

__all__ = [
    "CommandRef",
    "CommandResult",
    "DEFAULT_COMMANDS",
    "FOLD_COMMAND_ID",
    "FoldController",
    "NOTHING_TO_UNFOLD",
    "NO_FOLDABLE_RANGE",
    "UNFOLD_COMMAND_ID",
    "command_table",
]
