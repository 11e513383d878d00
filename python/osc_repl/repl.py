"""Interactive REPL for osc-repl."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, History, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from .commands.base import SIGIL
from .completion import ConsoleCompleter
from .context import ConsoleSession
from .errors import ConsoleError
from .output import emit_error
from .parser import tokenize

LOGGER = logging.getLogger("osc_repl.repl")


class ConsoleREPL:
    """prompt_toolkit REPL driving one :class:`ConsoleSession`."""

    def __init__(
        self,
        session: ConsoleSession,
        *,
        history_path: Optional[Union[str, Path]] = None,
    ) -> None:
        self.session = session
        self.history_path = Path(history_path).expanduser() if history_path else None

    def _build_history(self) -> History:
        if self.history_path is None:
            return InMemoryHistory()
        try:
            self.history_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            LOGGER.warning("history disabled, cannot create %s: %s", self.history_path.parent, exc)
            return InMemoryHistory()
        return FileHistory(str(self.history_path))

    async def run(self) -> int:
        prompt = PromptSession(
            self.session.config.prompt,
            history=self._build_history(),
            completer=ConsoleCompleter(self.session),
            complete_while_typing=False,
        )
        await self.session.open()
        buffer: List[str] = []
        try:
            with patch_stdout():
                while self.session.running:
                    try:
                        line = await prompt.prompt_async()
                    except (EOFError, KeyboardInterrupt):
                        print()
                        break
                    if self._handle_multiline(buffer, line):
                        continue
                    payload = " ".join(buffer) if buffer else line
                    buffer.clear()
                    await self.dispatch(payload)
        finally:
            await self.session.terminate()
        return 0

    async def run_single(self, line: str) -> int:
        """Execute one line non-interactively and shut down."""
        await self.session.open()
        try:
            ok = await self.dispatch(line)
        finally:
            await self.session.terminate()
        return 0 if ok else 1

    async def dispatch(self, line: str) -> bool:
        """Handle one input line; every error stops here and is rendered."""
        if not self.session.running:
            return False
        argv = tokenize(line)
        if not argv:
            return True
        head, *rest = argv
        try:
            if head.startswith(SIGIL):
                await self.session.commands.dispatch(head[len(SIGIL) :], self.session, rest)
            else:
                args = self.session.parse_args(rest[0], rest[1:]) if rest else None
                await self.session.send(head, args)
        except ConsoleError as exc:
            emit_error(self.session, message=str(exc))
            return False
        except Exception as exc:
            LOGGER.exception("command failed")
            emit_error(self.session, message=f"Command '{head}' failed: {exc}")
            return False
        return True

    @staticmethod
    def _handle_multiline(buffer: List[str], line: str) -> bool:
        stripped = line.rstrip()
        if stripped.endswith("\\"):
            buffer.append(stripped[:-1])
            return True
        if buffer:
            buffer.append(stripped)
        return False


__all__ = ["ConsoleREPL"]
