"""Reader for Piklisp, a Lisp notation with classic and indentation-sensitive syntax."""

from piklisp.errors import ParseError, StructureError
from piklisp.parser import parse
from piklisp.tree import NodeId, Tree

__version__ = "0.1.0"

__all__ = ["NodeId", "ParseError", "StructureError", "Tree", "parse", "__version__"]
