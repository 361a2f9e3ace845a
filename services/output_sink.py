from __future__ import annotations

import os
from pathlib import Path


class OutputSink:
    """Append-only line sink shared by every worker.

    Each line goes out as one `os.write` on an O_APPEND descriptor, so lines
    from concurrent writers (threads or processes) never interleave.
    Lines are unordered relative to the input.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._fd: int | None = os.open(path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)

    def write_line(self, line: str) -> None:
        if self._fd is None:
            raise ValueError(f"OutputSink for {self.path} is closed")
        data = (line.rstrip("\n") + "\n").encode("utf-8")
        os.write(self._fd, data)

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def __enter__(self) -> "OutputSink":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
