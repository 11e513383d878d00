"""Completion tests for osc-repl."""

from __future__ import annotations

from prompt_toolkit.document import Document

from osc_repl.completion import ConsoleCompleter


def _complete(session, text):
    completer = ConsoleCompleter(session)
    doc = Document(text, cursor_position=len(text))
    return {c.text for c in completer.get_completions(doc, None)}


def test_command_completion_offers_fade(session):
    results = _complete(session, "@fa")
    assert "@fade" in results
    assert "@quit" not in results


def test_address_completion_uses_known_addresses(session):
    session.known_addresses.update({"/ch/01/mix/fader", "/ch/02/mix/fader", "/main/st/mix/fader"})
    assert _complete(session, "/ch") == {"/ch/01/mix/fader", "/ch/02/mix/fader"}
    assert _complete(session, "@fade 2 /m") == {"/main/st/mix/fader"}
    assert _complete(session, "@stop ") == {"/ch/01/mix/fader", "/ch/02/mix/fader", "/main/st/mix/fader"}


def test_fade_keyword_completion(session):
    assert _complete(session, "@fade 2 /x o") == {"out"}
    assert _complete(session, "@fade 2 /x ") == {"in", "out", "to"}


def test_no_completion_for_message_arguments(session):
    session.known_addresses.add("/x")
    assert _complete(session, "/x f ") == set()
