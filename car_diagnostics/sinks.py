from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Protocol


class LineSink(Protocol):
    def emit(self, line: str) -> None: ...

    def close(self) -> None: ...


class StdoutSink:
    """Write report lines to whatever ``sys.stdout`` is at emit time."""

    def emit(self, line: str) -> None:
        sys.stdout.write(line + "\n")

    def close(self) -> None:
        sys.stdout.flush()


@dataclass
class ListSink:
    lines: List[str] = field(default_factory=list)

    def emit(self, line: str) -> None:
        self.lines.append(line)

    def close(self) -> None:
        pass


@dataclass
class FileSink:
    path: Path

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("w", encoding="utf-8", newline="\n")

    def emit(self, line: str) -> None:
        self._fh.write(line + "\n")
        self._fh.flush()

    def close(self) -> None:
        try:
            self._fh.flush()
        finally:
            self._fh.close()
