"""Fixtures for terminal front-end tests."""

import pytest

from terminal.prompts import Prompter
from terminal.render import Renderer


class FakeConsole:
    """
    Scripted stdin and captured stdout.

    Entries are answered in order; a prompt that arrives after the script runs
    out fails the test instead of blocking.
    """

    def __init__(self, *entries: str) -> None:
        self.entries = list(entries)
        self.prompts: list[str] = []
        self.output: list[str] = []

    def feed(self, *entries: str) -> None:
        self.entries.extend(entries)

    def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.entries:
            raise EOFError(f"No input left for prompt {prompt!r}")
        return self.entries.pop(0)

    def write(self, text: str) -> None:
        self.output.append(text)

    @property
    def text(self) -> str:
        return "\n".join(self.output)


class TableConsole(FakeConsole):
    """
    Console that answers pauses and action menus on its own.

    Action menus take the next scripted action, standing once those run out.
    Every other prompt consumes the next menu entry.
    """

    def __init__(self, *entries: str, actions=()) -> None:
        super().__init__(*entries)
        self.actions = list(actions)

    def read_line(self, prompt: str) -> str:
        if "Enter to continue" in prompt:
            self.prompts.append(prompt)
            return ""
        if "[S]tand" in prompt:
            self.prompts.append(prompt)
            return self.actions.pop(0) if self.actions else "s"
        return super().read_line(prompt)


@pytest.fixture
def table_console():
    return TableConsole()


@pytest.fixture
def console():
    return FakeConsole()


@pytest.fixture
def prompter(console):
    return Prompter(read_line=console.read_line, write=console.write)


@pytest.fixture
def renderer(console):
    """A plain-text renderer: no colour, no screen clearing."""
    return Renderer(write=console.write, color=False, clear_screen=False)
