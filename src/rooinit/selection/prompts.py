"""
Console prompts for interactive mode selection.

Plain `input()` based. Every way of backing out (empty answer where one is
allowed, `q`, Ctrl+C, Ctrl+D) raises PromptCancelled so the caller has a
single exception to handle.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")

QUIT_ANSWERS = {"q", "quit"}


class PromptCancelled(Exception):
    """The user backed out of a prompt."""


@dataclass(frozen=True)
class Choice(Generic[T]):
    label: str
    value: T


class ConsolePrompter:
    """
    Numbered-choice prompts on stdin/stdout.

    Args:
        input_fn: Replacement for builtins.input
        output_fn: Replacement for builtins.print
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[..., None] = print,
    ):
        self._input = input_fn
        self._print = output_fn

    def _ask(self, prompt: str) -> str:
        try:
            answer = self._input(prompt)
        except (EOFError, KeyboardInterrupt) as e:
            raise PromptCancelled() from e
        answer = answer.strip()
        if answer.lower() in QUIT_ANSWERS:
            raise PromptCancelled()
        return answer

    def _show(self, message: str, choices: Sequence[Choice[T]]) -> None:
        self._print(message)
        for i, choice in enumerate(choices, 1):
            self._print(f"  {i}) {choice.label}")

    def _parse_index(self, token: str, count: int) -> Optional[int]:
        if not token.isdigit():
            return None
        index = int(token)
        if 1 <= index <= count:
            return index - 1
        return None

    def select_one(self, message: str, choices: Sequence[Choice[T]]) -> T:
        if not choices:
            raise PromptCancelled()
        self._show(message, choices)
        while True:
            answer = self._ask(f"Choose 1-{len(choices)} (q to cancel): ")
            if not answer:
                raise PromptCancelled()
            index = self._parse_index(answer, len(choices))
            if index is not None:
                return choices[index].value
            self._print(f"Invalid choice: {answer}")

    def select_many(self, message: str, choices: Sequence[Choice[T]]) -> List[T]:
        if not choices:
            return []
        self._show(message, choices)
        while True:
            answer = self._ask("Enter numbers separated by commas (q to cancel): ")
            tokens = [t.strip() for t in answer.split(",") if t.strip()]
            if not tokens:
                self._print("Please select at least one mode, or cancel with q.")
                continue

            indexes = [self._parse_index(t, len(choices)) for t in tokens]
            if any(i is None for i in indexes):
                self._print(f"Invalid selection: {answer}")
                continue

            selected: List[T] = []
            for i in indexes:
                value = choices[i].value
                if value not in selected:
                    selected.append(value)
            return selected

    def confirm(self, message: str, default: bool = False) -> bool:
        hint = "[Y/n]" if default else "[y/N]"
        while True:
            answer = self._ask(f"{message} {hint} ").lower()
            if not answer:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            self._print("Please answer y or n.")
