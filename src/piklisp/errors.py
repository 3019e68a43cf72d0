"""Parse errors and Rust-style colored diagnostic rendering.

Error codes:

    E001  unterminated string literal
    E002  malformed character literal
    E010  unbalanced closing parenthesis
    W001  no source files found
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from piklisp.source import SourceFile, Span


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str


@dataclass(frozen=True)
class Suggestion:
    """A suggested fix."""

    message: str
    replacement: str


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and suggestions."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors.

    Source lines come from ``sources`` (filename -> text) when given, so
    input that never touched the disk (``<stdin>``, tests) still gets a
    source excerpt; otherwise the file is read from disk.
    """

    def __init__(
        self, *, color: bool = True, sources: dict[str, str] | None = None,
    ) -> None:
        self.color = color
        self._file_cache: dict[str, SourceFile | None] = {
            name: SourceFile(name, text) for name, text in (sources or {}).items()
        }

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def _get_source_line(self, filename: str, line_num: int) -> str | None:
        """Load and cache source file, return the 1-indexed line."""
        if filename not in self._file_cache:
            path = Path(filename)
            try:
                self._file_cache[filename] = SourceFile.load(path) if path.is_file() else None
            except OSError:
                self._file_cache[filename] = None
        source = self._file_cache[filename]
        if source is None:
            return None
        return source.line_at(line_num)

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        sev = diag.severity
        color = _COLORS[sev]

        # Header: error[E001]: message
        lines.append(
            f"{self._c(color)}{sev.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            gutter = f"{span.start_line:>4}"
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")

            source_line = self._get_source_line(span.file, span.start_line)
            if source_line is not None:
                lines.append(
                    f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}"
                )

            if span.start_line == span.end_line:
                caret_len = max(1, span.end_col - span.start_col + 1)
                padding = " " * (span.start_col - 1)
                carets = "^" * caret_len
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)} "
                    f"{padding}{self._c(color)}{carets}{self._c(_RESET)}"
                )
            elif source_line is None:
                lines.append(f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)}")

            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(color)}{label.message}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        for suggestion in diag.suggestions:
            lines.append(
                f"  {self._c(_BLUE)}help:{self._c(_RESET)} {suggestion.message}"
            )
            lines.append(
                f"  {self._c(_BLUE)}try:{self._c(_RESET)} {suggestion.replacement}"
            )

        return "\n".join(lines)


class ParseError(Exception):
    """A source unit could not be parsed.

    Parsing is fail-fast: the first problem aborts the whole unit, so a
    ParseError carries exactly one diagnostic. ``remainder`` is the input
    left unconsumed at the point of failure.
    """

    def __init__(self, diagnostic: Diagnostic, remainder: str = "") -> None:
        self.diagnostic = diagnostic
        self.remainder = remainder
        super().__init__(f"{diagnostic.code}: {diagnostic.message}")

    @property
    def code(self) -> str:
        return self.diagnostic.code

    @property
    def span(self) -> Span | None:
        if self.diagnostic.labels:
            return self.diagnostic.labels[0].span
        return None


class StructureError(RuntimeError):
    """A tree invariant was violated by the code driving the tree.

    Raised for programming errors (walking above the root, adding a child to
    a leaf, an unclassifiable depth change). Unlike ParseError it is never
    the result of malformed input and is not meant to be caught.
    """
