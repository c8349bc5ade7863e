"""Console capability used for operator prompts."""

from __future__ import annotations

import sys
from typing import Optional, Protocol, TextIO


class Console(Protocol):
    """
    Minimal interactive console.

    read_line() returns None when no input is available (end of input).
    """

    def write(self, text: str) -> None: ...

    def read_line(self) -> Optional[str]: ...


class StdConsole:
    """Console over stdin, prompting on stderr so stdout stays machine-readable."""

    def __init__(
        self,
        *,
        stdin: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ) -> None:
        self._stdin = stdin
        self._stderr = stderr

    def write(self, text: str) -> None:
        out = self._stderr or sys.stderr
        out.write(text)
        out.flush()

    def read_line(self) -> Optional[str]:
        line = (self._stdin or sys.stdin).readline()
        if not line:
            return None
        return line.rstrip("\r\n")


class NullConsole:
    """Console for headless runs: discards output and never has input."""

    def write(self, text: str) -> None:
        pass

    def read_line(self) -> Optional[str]:
        return None
