"""Batch parsing of fixture directories.

Each file is an independent unit: a ParseError in one file is recorded as a
failed result and the run moves on to the next file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from piklisp.config import PiklispConfig
from piklisp.errors import ParseError
from piklisp.parser import parse
from piklisp.source import SourceFile
from piklisp.tree import Tree


@dataclass
class FileResult:
    path: Path
    tree: Tree | None = None
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchReport:
    """Outcome of parsing every matching file in one directory."""

    directory: Path
    results: list[FileResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> list[FileResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[FileResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


def parse_file(path: Path) -> Tree:
    """Read and parse one source file. Raises ParseError."""
    source = SourceFile.load(path)
    return parse(source.content, source.name)


def collect_sources(directory: Path, extensions: Iterable[str]) -> list[Path]:
    """All files under ``directory`` whose suffix is in ``extensions``, sorted."""
    suffixes = set(extensions)
    return sorted(p for p in directory.rglob("*") if p.is_file() and p.suffix in suffixes)


def check_directory(directory: Path, extensions: Iterable[str] = (".plisp",)) -> BatchReport:
    """Parse every matching file in ``directory``."""
    report = BatchReport(directory)
    for path in collect_sources(directory, extensions):
        try:
            tree = parse_file(path)
        except ParseError as e:
            report.results.append(FileResult(path, error=e))
            continue
        report.results.append(FileResult(path, tree=tree))
    return report


def check_project(project_dir: Path, config: PiklispConfig) -> list[BatchReport]:
    """One report per configured fixture directory."""
    dirs = [project_dir / d for d in config.check.fixture_dirs] or [project_dir]
    reports = []
    for directory in dirs:
        if not directory.is_dir():
            raise FileNotFoundError(f"fixture directory not found: {directory}")
        reports.append(check_directory(directory, config.check.extensions))
    return reports
