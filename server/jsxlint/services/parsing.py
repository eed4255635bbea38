from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Tuple

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from jsxlint.config import TYPESCRIPT_SUFFIXES

# Load TypeScript and TSX grammars
TYPESCRIPT_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())

logger = logging.getLogger(__name__)


@dataclass
class ParsedSource:
    filename: str
    content: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def char_offset(self, byte_offset: int) -> int:
        """Convert a tree-sitter byte offset into a character offset."""
        return len(self.content[:byte_offset].decode("utf-8", errors="replace"))

    def node_text(self, node: Node) -> str:
        return node.text.decode("utf-8", errors="replace")

    def position(self, node: Node) -> Tuple[int, int, int, int]:
        """
        Return (line, column, end_line, end_column) for a node.

        Lines are 1-based and columns are 0-based character columns (tree-sitter
        reports byte columns, which differ as soon as a line has non-ASCII text).
        """
        start_row, start_col = node.start_point
        end_row, end_col = node.end_point
        return (
            start_row + 1,
            self._char_column(node.start_byte, start_col),
            end_row + 1,
            self._char_column(node.end_byte, end_col),
        )

    def _char_column(self, byte_offset: int, byte_column: int) -> int:
        line_start = byte_offset - byte_column
        return len(self.content[line_start:byte_offset].decode("utf-8", errors="replace"))


def is_tsx_filename(filename: str) -> bool:
    # Plain `.ts` sources treat `<T>x` as a type assertion, so they need the
    # non-JSX grammar; everything else is parsed with JSX enabled.
    return PurePath(filename).suffix.lower() not in TYPESCRIPT_SUFFIXES


def parse_source(source: str | bytes, filename: str = "input.tsx") -> ParsedSource:
    content = source.encode("utf-8") if isinstance(source, str) else source
    parser = Parser(TSX_LANGUAGE if is_tsx_filename(filename) else TYPESCRIPT_LANGUAGE)
    tree = parser.parse(content)
    if tree.root_node.has_error:
        logger.warning(f"Syntax errors in {filename}; results may be incomplete")
    return ParsedSource(filename=filename, content=content, tree=tree)
