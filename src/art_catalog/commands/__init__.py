"""Command algebra: leaf field/record commands and arena container commands."""

from art_catalog.commands.arena import Added, ArenaCommand, Changed, Removed
from art_catalog.commands.base import UNSET, Command, Merge
from art_catalog.commands.field import FieldCommand, RecordCommand
from art_catalog.commands.record import CommandRecord

__all__ = [
    "UNSET",
    "Added",
    "ArenaCommand",
    "Changed",
    "Command",
    "CommandRecord",
    "FieldCommand",
    "Merge",
    "RecordCommand",
    "Removed",
]
