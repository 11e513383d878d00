"""prompt_toolkit completer for osc-repl."""

from __future__ import annotations

from typing import Iterable, List

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .commands.base import SIGIL
from .commands.effects import FADE_KEYWORDS
from .context import ConsoleSession
from .parser import tokenize

# Token index holding the OSC address for commands that take one.
ADDRESS_POSITIONS = {
    "every": 2,
    "repeat": 2,
    "fade": 2,
    "sin": 2,
    "tri": 2,
    "stop": 1,
    "get": 1,
    "query": 1,
}
FADE_KEYWORD_POSITION = 3


def _normalise_tokens(text: str) -> List[str]:
    tokens = tokenize(text)
    if not text or text[-1].isspace():
        tokens.append("")
    return tokens


class ConsoleCompleter(Completer):
    """Completes command names, addresses seen so far and fade keywords."""

    def __init__(self, session: ConsoleSession) -> None:
        self.session = session

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        tokens = _normalise_tokens(document.text_before_cursor)
        prefix = tokens[-1]
        if len(tokens) == 1:
            if prefix.startswith(SIGIL):
                candidates = [SIGIL + name for name in self._command_names()]
            else:
                candidates = self._addresses()
            yield from self._completions(candidates, prefix)
            return
        head = tokens[0]
        if not head.startswith(SIGIL):
            return
        name = head[len(SIGIL) :]
        position = len(tokens) - 1
        if ADDRESS_POSITIONS.get(name) == position:
            yield from self._completions(self._addresses(), prefix)
        elif name == "fade" and position == FADE_KEYWORD_POSITION:
            yield from self._completions(FADE_KEYWORDS, prefix)

    def _command_names(self) -> List[str]:
        return self.session.commands.names()

    def _addresses(self) -> List[str]:
        return sorted(self.session.known_addresses)

    @staticmethod
    def _completions(candidates: Iterable[str], prefix: str) -> Iterable[Completion]:
        needle = prefix.lower()
        for entry in sorted(dict.fromkeys(candidates)):
            if entry.lower().startswith(needle):
                yield Completion(entry, start_position=-len(prefix))


__all__ = ["ConsoleCompleter"]
