"""Pygments lexer for Piklisp source, in either syntax."""

from pygments.lexer import RegexLexer, words
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    Punctuation,
    String,
    Text,
)

# Mirrors the bare-token rule of piklisp.lexer.
_SYMBOL = r'[^ \t\n"()]+'


class PiklispLexer(RegexLexer):
    """Pygments lexer for Piklisp (classic and indentation-sensitive)."""

    name = "Piklisp"
    aliases = ["piklisp", "plisp"]
    filenames = ["*.plisp"]
    mimetypes = ["text/x-piklisp"]

    tokens = {
        "root": [
            # Indentation tabs are significant, but still whitespace
            (r"\s+", Text),
            (r";.*$", Comment.Single),
            (r'"', String, "string"),
            (r"'\\?.'", String.Char),
            (r"[()]", Punctuation),
            (r"-?[0-9]+\.[0-9]+(?=[\s()\"]|$)", Number.Float),
            (r"-?[0-9]+(?=[\s()\"]|$)", Number.Integer),
            (
                words(
                    (
                        "package",
                        "import",
                        "func",
                        "var",
                        "const",
                        "type",
                        "struct",
                        "if",
                        "else",
                        "for",
                        "switch",
                        "case",
                        "default",
                        "return",
                        "go",
                        "defer",
                    ),
                    prefix=r"(?<![^(\s])",
                    suffix=r"(?=[\s()\"]|$)",
                ),
                Keyword,
            ),
            (r"(true|false|nil)(?=[\s()\"]|$)", Keyword.Constant),
            (_SYMBOL, Name),
        ],
        "string": [
            (r"\\.", String.Escape),
            (r'[^"\\]+', String),
            (r'"', String, "#pop"),
        ],
    }
