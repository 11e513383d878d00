"""Command registry for osc-repl."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from ..errors import UnknownCommand
from .base import Command
from .buffers import BuffersCommand
from .connect import ConnectCommand, DisconnectCommand
from .effects import FadeCommand, SineCommand, TriangleCommand
from .exit import QuitCommand
from .get import GetCommand
from .help import HelpCommand
from .status import StatusCommand
from .timers import EveryCommand, StopCommand

if TYPE_CHECKING:  # pragma: no cover
    from ..context import ConsoleSession


class CommandRegistry:
    """Stores the known commands and resolves aliases."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}
        self._ordered: List[Command] = []

    def register(self, command: Command) -> None:
        self._ordered.append(command)
        self._commands[command.name] = command
        for alias in command.aliases:
            self._commands[alias] = command

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def list_commands(self) -> Iterable[Command]:
        return self._ordered

    def names(self) -> List[str]:
        return sorted(self._commands)

    async def dispatch(self, name: str, session: "ConsoleSession", argv: List[str]) -> None:
        command = self.get(name)
        if command is None:
            raise UnknownCommand(name)
        await command.run(session, argv)


def build_registry() -> CommandRegistry:
    registry = CommandRegistry()
    commands = [
        HelpCommand(),
        ConnectCommand(),
        DisconnectCommand(),
        StatusCommand(),
        EveryCommand(),
        StopCommand(),
        FadeCommand(),
        SineCommand(),
        TriangleCommand(),
        GetCommand(),
        BuffersCommand(),
        QuitCommand(),
    ]
    for command in commands:
        registry.register(command)
    return registry


__all__ = ["Command", "CommandRegistry", "build_registry"]
