"""Piklisp command line."""

from __future__ import annotations

from pathlib import Path

import click

from piklisp import __version__
from piklisp.batch import check_project, parse_file
from piklisp.config import PiklispConfig, find_config, load_config
from piklisp.errors import Diagnostic, DiagnosticRenderer, ParseError, Severity
from piklisp.render import dump, to_classic
from piklisp.tree import Tree


def _load_project(path: Path) -> tuple[Path, PiklispConfig]:
    """Config for the project containing ``path``, or defaults rooted at it."""
    try:
        config_path = find_config(path)
    except FileNotFoundError:
        return path, PiklispConfig()
    return config_path.parent, load_config(config_path)


def _parse_or_exit(file: str, *, no_color: bool = False) -> Tree:
    _, config = _load_project(Path(file))
    try:
        return parse_file(Path(file))
    except ParseError as e:
        renderer = DiagnosticRenderer(color=config.style.color and not no_color)
        click.echo(renderer.render(e.diagnostic), err=True)
        raise SystemExit(1)


@click.group()
@click.version_option(__version__, prog_name="piklisp")
def main() -> None:
    """Reader for Piklisp classic and indentation-sensitive syntax."""


@main.command()
@click.argument("path", default=".", type=click.Path(exists=True))
@click.option("--no-color", is_flag=True, help="Disable colored diagnostics.")
def check(path: str, no_color: bool) -> None:
    """Parse Piklisp sources and report the ones that fail."""
    target = Path(path)
    if target.is_file():
        _parse_or_exit(path, no_color=no_color)
        click.echo(f"parsed {path}")
        return

    project_dir, config = _load_project(target)
    renderer = DiagnosticRenderer(color=config.style.color and not no_color)
    try:
        reports = check_project(project_dir, config)
    except FileNotFoundError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    had_errors = False
    for report in reports:
        for result in report.failed:
            click.echo(renderer.render(result.error.diagnostic), err=True)
        if report.total == 0:
            warning = Diagnostic(
                Severity.WARNING, "W001", f"no source files found in {report.directory}",
            )
            click.echo(renderer.render(warning), err=True)
        click.echo(
            f"parsed {len(report.passed)}/{report.total} files in {report.directory}"
        )
        if report.failed:
            had_errors = True
            names = ", ".join(str(r.path) for r in report.failed)
            click.echo(f"failed: {names}", err=True)

    if had_errors:
        raise SystemExit(1)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def view(file: str) -> None:
    """Print the syntax tree of a Piklisp source file."""
    tree = _parse_or_exit(file)
    for line in dump(tree):
        click.echo(line)


@main.command(name="format")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def format_cmd(file: str) -> None:
    """Print each top-level form of a Piklisp source file in classic syntax."""
    tree = _parse_or_exit(file)
    for form in tree.forms():
        click.echo(to_classic(tree, form))


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def highlight(file: str) -> None:
    """Print a Piklisp source file with syntax highlighting."""
    from pygments import highlight as pygmentize
    from pygments.formatters import TerminalFormatter

    from piklisp.highlight import PiklispLexer

    source = Path(file).read_text()
    click.echo(pygmentize(source, PiklispLexer(), TerminalFormatter()), nl=False)
