"""Validated input collection."""

from typing import Callable, Mapping, TypeVar

T = TypeVar("T")

ReadLine = Callable[[str], str]
Write = Callable[[str], None]


class Prompter:
    """
    Input collaborator for the terminal.

    Every prompt loops until an entry passes both a per-character check and a
    check on the parsed value. Rejected entries get a short explanation.
    """

    def __init__(
        self,
        read_line: ReadLine = input,
        write: Write = print,
    ) -> None:
        self._read_line = read_line
        self._write = write
        self._last_choice: dict[str, str] = {}

    def read_value(
        self,
        prompt: str,
        parse: Callable[[str], T],
        accept_char: Callable[[str], bool] = lambda c: True,
        accept_value: Callable[[T], bool] = lambda v: True,
        error: str = "Invalid entry.",
    ) -> T:
        """
        Read entries until one is acceptable.

        Args:
            prompt: Text shown before reading
            parse: Converts the entry; ValueError marks it invalid
            accept_char: Check applied to every character of the entry
            accept_value: Check applied to the parsed value
            error: Message shown when an entry is rejected

        Returns:
            The first parsed value that satisfies both checks
        """
        while True:
            raw = self._read_line(prompt).strip()
            bad = [c for c in raw if not accept_char(c)]
            if not raw or bad:
                self._write(error)
                continue

            try:
                value = parse(raw)
            except ValueError:
                self._write(error)
                continue

            if accept_value(value):
                return value
            self._write(error)

    def read_int(self, prompt: str, low: int, high: int | None = None) -> int:
        """Read a whole number in ``[low, high]`` (no upper bound if high is None)."""
        if high is None:
            error = f"Enter a number of at least {low}."
        else:
            error = f"Enter a number from {low} to {high}."
        return self.read_value(
            prompt,
            parse=int,
            accept_char=str.isdigit,
            accept_value=lambda v: v >= low and (high is None or v <= high),
            error=error,
        )

    def choose(
        self,
        prompt: str,
        options: Mapping[str, T],
        remember: str | None = None,
    ) -> T:
        """
        Pick one option by its key (case-insensitive).

        With ``remember``, an empty entry repeats the previous choice stored
        under that name, if it is still on offer.
        """
        keys = {key.lower(): value for key, value in options.items()}
        while True:
            raw = self._read_line(prompt).strip().lower()
            if not raw and remember is not None:
                raw = self._last_choice.get(remember, "")
            if raw in keys:
                if remember is not None:
                    self._last_choice[remember] = raw
                return keys[raw]
            self._write(f"Choose one of: {', '.join(options)}.")

    def confirm(self, prompt: str) -> bool:
        return self.choose(prompt, {"1": True, "2": False})

    def pause(self, message: str = "Enter to continue...") -> None:
        self._read_line(message)
