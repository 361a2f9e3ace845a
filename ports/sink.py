from __future__ import annotations

from typing import Protocol


class OutputSinkPort(Protocol):
    def write_line(self, line: str) -> None:
        ...

    def close(self) -> None:
        ...
