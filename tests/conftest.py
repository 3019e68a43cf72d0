"""Shared pytest fixtures for the piklisp test suite."""

from __future__ import annotations

import pytest

GOOD_SOURCES = {
    "hello.plisp": 'package main\n\nfunc main ()\n\tfmt.Println "hello"\n',
    "classic.plisp": '(package main)\n\n(func main ()\n    (fmt.Println "hi"))\n',
    "mixed.plisp": "; both syntaxes\n(var x 1)\nvar y\n\t2\n",
}

BAD_SOURCES = {
    "open_string.plisp": 'fmt.Println "never closed\n',
    "extra_paren.plisp": "(a b))\n",
}


@pytest.fixture
def fixture_dir(tmp_path):
    """A directory holding three parsable and two malformed sources."""
    root = tmp_path / "fixtures"
    root.mkdir()
    for name, text in {**GOOD_SOURCES, **BAD_SOURCES}.items():
        (root / name).write_text(text)
    return root
