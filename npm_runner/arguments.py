# npm_runner/arguments.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List


@dataclass(frozen=True)
class Argument:
    value: str
    quoted: bool = False

    def needs_quoting(self) -> bool:
        return self.quoted or any(ch.isspace() for ch in self.value)

    def render(self) -> str:
        if not self.needs_quoting():
            return self.value
        return '"' + self.value.replace('"', '\\"') + '"'


class ArgumentBuilder:
    """
    Ordered, append-only sequence of command-line tokens.

    render() is the display form (tokens joined by single spaces, quoted when
    flagged or when they contain whitespace). to_list() is the argv form
    handed to the process executor; no quoting is applied there because the
    executor never goes through a shell.
    """

    def __init__(self) -> None:
        self._tokens: List[Argument] = []

    def append(self, token: str, quoted: bool = False) -> "ArgumentBuilder":
        self._tokens.append(Argument(str(token), quoted=quoted))
        return self

    def append_quoted(self, token: str) -> "ArgumentBuilder":
        return self.append(token, quoted=True)

    def extend(self, tokens: Iterable[str]) -> "ArgumentBuilder":
        for t in tokens:
            self.append(t)
        return self

    def render(self) -> str:
        return " ".join(t.render() for t in self._tokens)

    def to_list(self) -> List[str]:
        return [t.value for t in self._tokens]

    def __iter__(self) -> Iterator[Argument]:
        return iter(list(self._tokens))

    def __len__(self) -> int:
        return len(self._tokens)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"ArgumentBuilder({self.render()!r})"


__all__ = ["Argument", "ArgumentBuilder"]
