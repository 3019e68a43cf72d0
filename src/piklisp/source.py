"""Source text and span tracking for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Span:
    """A range within a source file."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


class SourceFile:
    """A source unit with line access for diagnostics.

    Lines are split on ``\\n`` only, matching how the parser counts lines.
    """

    def __init__(self, name: str, content: str) -> None:
        self.name = name
        self.content = normalize_newlines(content)
        self.lines = self.content.split("\n")

    @classmethod
    def load(cls, path: Path) -> SourceFile:
        return cls(str(path), path.read_text())

    def line_at(self, n: int) -> str | None:
        """Return the 1-indexed line, or None if out of range."""
        if 1 <= n <= len(self.lines):
            return self.lines[n - 1]
        return None
