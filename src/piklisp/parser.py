"""Block scanner and tree builder for Piklisp source.

Source is split into top-level blocks. A block that starts with ``(`` uses
classic syntax: nesting is explicit and newlines are insignificant inside
the outer parentheses. Any other block is indentation-sensitive (SRFI-49
style): the number of leading tabs on each continuation line sets the
nesting depth, and parentheses still nest within a line.
"""

from __future__ import annotations

from piklisp.errors import (
    Diagnostic,
    DiagnosticLabel,
    ParseError,
    Severity,
    StructureError,
    Suggestion,
)
from piklisp.lexer import TokenKind, classify, find_token_end
from piklisp.source import Span, normalize_newlines
from piklisp.tree import NodeId, Tree

# The bare-symbol rule always matches at least the character under the cursor,
# so only quoted tokens can fail.
_TOKEN_ERRORS = {
    TokenKind.STRING: ("E001", "unterminated string literal"),
    TokenKind.CHAR: ("E002", "malformed character literal"),
}


def indent(tree: Tree, node: NodeId, depth_change: int) -> NodeId:
    """Move the cursor according to a change in indentation depth.

    Shallower: ascend one level per step, then open a sibling there. Same
    depth: open a sibling. Deeper: open one nested child per step. Returns
    the new cursor.

    The cursor must be deep enough for the ascents; walking above the root
    raises StructureError.
    """
    if depth_change < 0:
        for _ in range(-depth_change):
            node = tree.parent(node)
        node = tree.make_child(tree.parent(node))
    elif depth_change == 0:
        node = tree.make_child(tree.parent(node))
    elif depth_change > 0:
        for _ in range(depth_change):
            node = tree.make_child(node)
    else:
        raise StructureError(
            f"depth change {depth_change!r} is not less than, equal to, or greater than zero"
        )
    return node


class Parser:
    """Builds a Tree from one source unit."""

    def __init__(self, source: str, filename: str = "<stdin>") -> None:
        self.source = normalize_newlines(source)
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1
        self.tree = Tree()

    def parse(self) -> Tree:
        """Parse the whole source and return the collapsed tree."""
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch in (' ', '\t', '\n'):
                self._advance()
            elif ch == ';':
                self._skip_comment()
            else:
                self._parse_block()
        self.tree.collapse()
        return self.tree

    # ── Helpers ───────────────────────────────────────────────────

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _skip_comment(self) -> None:
        """Skip to the end of the line, leaving the newline in place."""
        while self.pos < len(self.source) and self.source[self.pos] != '\n':
            self._advance()

    def _rest_of_line(self) -> str:
        return self.source[self.pos:].split('\n', 1)[0]

    def _line_without_cursor(self) -> str:
        start = self.source.rfind('\n', 0, self.pos) + 1
        return self.source[start:self.pos] + self._rest_of_line()[1:]

    def _error(
        self, code: str, message: str, suggestion: Suggestion | None = None,
    ) -> ParseError:
        remainder = self.source[self.pos:]
        span = Span(self.filename, self.line, self.col, self.line, self.col)
        diag = Diagnostic(
            severity=Severity.ERROR,
            code=code,
            message=message,
            labels=[DiagnosticLabel(span=span, message="")],
            notes=[f"remaining input: {self._rest_of_line()}"],
            suggestions=[suggestion] if suggestion else [],
        )
        return ParseError(diag, remainder)

    # ── Blocks ───────────────────────────────────────────────────

    def _parse_block(self) -> None:
        """Parse one top-level block, starting at its first character."""
        indent_sensitive = True
        if self._peek() == '(':
            indent_sensitive = False
            self._advance()  # the block node below stands for this paren
        depth = 0
        open_parens = 0  # explicit parens open in an indentation-sensitive block
        node = self.tree.make_child(self.tree.root)

        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch == '(':
                node = self.tree.make_child(node)
                open_parens += 1
                self._advance()
            elif ch == ')':
                if self.tree.is_root(node) or (indent_sensitive and open_parens == 0):
                    raise self._error(
                        "E010",
                        "unexpected ')' with no open parenthesis",
                        Suggestion("remove the extra ')'", self._line_without_cursor()),
                    )
                open_parens -= 1
                node = self.tree.parent(node)
                self._advance()
            elif ch in (' ', '\t'):
                self._advance()
            elif ch == '\n':
                while self._peek() == '\n':
                    self._advance()
                if not indent_sensitive:
                    if self.tree.is_root(node):
                        return
                    continue
                if self._peek() != '\t':
                    return
                new_depth = 0
                while self._peek() == '\t':
                    new_depth += 1
                    self._advance()
                node = indent(self.tree, node, new_depth - depth)
                depth = new_depth
            elif ch == ';':
                self._skip_comment()
                if self.pos < len(self.source):
                    self._advance()
            else:
                self._read_token(node)

    def _read_token(self, node: NodeId) -> None:
        end = find_token_end(self.source, self.pos)
        if end is None:
            kind = classify(self.source[self.pos])
            code, message = _TOKEN_ERRORS[kind]
            suggestion = None
            if kind == TokenKind.STRING:
                suggestion = Suggestion("close the string", self._rest_of_line() + '"')
            raise self._error(code, message, suggestion)
        self.tree.add_token(node, self.source[self.pos:end])
        while self.pos < end:
            self._advance()


def parse(text: str, filename: str = "<stdin>") -> Tree:
    """Parse Piklisp source into a syntax tree.

    Raises ParseError on the first malformed token; no partial tree is
    returned.
    """
    return Parser(text, filename).parse()
