"""Built-in commands exposed to editor hosts."""

from __future__ import annotations

from typing import Awaitable, Dict, Iterable, Optional

from .controller import FoldController
from .models import CommandRef, CommandResult

FOLD_COMMAND_ID = "smart_fold.fold"
UNFOLD_COMMAND_ID = "smart_fold.unfold"


def fold_command(
    controller: FoldController, cursor_line: Optional[int] = None
) -> Awaitable[CommandResult]:
    return controller.fold(cursor_line)


def unfold_command(
    controller: FoldController, cursor_line: Optional[int] = None
) -> Awaitable[CommandResult]:
    return controller.unfold(cursor_line)


DEFAULT_COMMANDS: tuple[CommandRef, ...] = (
    CommandRef(
        id=FOLD_COMMAND_ID,
        handler=fold_command,
        telemetry_name="fold",
        description="Fold the indented block at the cursor",
    ),
    CommandRef(
        id=UNFOLD_COMMAND_ID,
        handler=unfold_command,
        telemetry_name="unfold",
        description="Unfold the folded block at the cursor",
    ),
)


def command_table(commands: Iterable[CommandRef] = DEFAULT_COMMANDS) -> Dict[str, CommandRef]:
    table: Dict[str, CommandRef] = {}
    for command in commands:
        if command.id in table:
            raise ValueError(f"Command '{command.id}' already registered")
        table[command.id] = command
    return table


__all__ = [
    "DEFAULT_COMMANDS",
    "FOLD_COMMAND_ID",
    "UNFOLD_COMMAND_ID",
    "command_table",
    "fold_command",
    "unfold_command",
]
