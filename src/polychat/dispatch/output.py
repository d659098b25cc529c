"""Where streamed tokens go."""

from typing import Protocol

from rich.console import Console


class TokenSink(Protocol):
    def write(self, delta: str) -> None:
        ...

    def end(self) -> None:
        ...


class ConsoleSink:
    """Print deltas as they arrive, in green on a terminal."""

    def __init__(self, console: Console, style: str = "green"):
        self._console = console
        self._style = style

    def write(self, delta: str) -> None:
        self._console.print(delta, end="", style=self._style, markup=False, highlight=False)

    def end(self) -> None:
        self._console.print()


class BufferSink:
    """Collect deltas in memory."""

    def __init__(self) -> None:
        self.deltas: list[str] = []
        self.ended = False

    @property
    def text(self) -> str:
        return "".join(self.deltas)

    def write(self, delta: str) -> None:
        self.deltas.append(delta)

    def end(self) -> None:
        self.ended = True
