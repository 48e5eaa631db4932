"""
Frontend — tree-sitter parse trees to SyntaxNode trees.

Supports Java (tree_sitter_java) and C (tree_sitter_c).  The conversion
reshapes the concrete tree so statement boundaries look the same in both
languages:

  • ``foo();``  →  Statement(foo()) , StatementTerminator     (siblings)
  • ``;``       →  EmptyStatement
  • ``for (a; b; c) body``
                →  Statement[for ( ForInitializer ; ForCondition ; ForIterator ) body]
  • ``do body while (c);``
                →  Statement[do body DoWhileTrailer (c) ;]
  • ``f(x -> {...}, y)``
                →  ArgumentList[Lambda, y]   (no parentheses or commas)

Comments and tree-sitter MISSING tokens are dropped.
"""

import os
import logging
from typing import Dict, List, Optional, Tuple, Union

import tree_sitter_c as tsc
import tree_sitter_java as tsj
from tree_sitter import Language, Parser, Node

from .syntax_tree import NodeKind, SyntaxNode

logger = logging.getLogger(__name__)

JAVA_LANGUAGE = Language(tsj.language())
C_LANGUAGE = Language(tsc.language())

_PARSERS: Dict[str, Parser] = {
    "java": Parser(JAVA_LANGUAGE),
    "c": Parser(C_LANGUAGE),
}

DEFAULT_EXTENSIONS: Dict[str, str] = {
    ".java": "java",
    ".c": "c",
    ".h": "c",
}

_COMMENT_TYPES = {"comment", "line_comment", "block_comment"}

# Statements whose trailing ';' is hoisted next to them
_SPLIT_STATEMENTS = {
    "expression_statement",         # Java + C
    "local_variable_declaration",   # Java
    "declaration",                  # C
}

_BLOCK_TYPES = {"block", "constructor_body", "compound_statement"}

# Parents under which a bare ';' is an empty statement
_EMPTY_STATEMENT_PARENTS = {
    "program", "translation_unit",
    "block", "constructor_body", "compound_statement",
    "switch_block_statement_group", "case_statement",
    "if_statement", "else_clause", "while_statement",
    "enhanced_for_statement", "labeled_statement",
}


class UnsupportedLanguageError(ValueError):
    """Raised when no tree-sitter grammar is registered for a language."""


def supported_languages() -> List[str]:
    return sorted(_PARSERS)


def language_for_path(file_path: str, extensions: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Map a file name to a language name by extension (case-insensitive)."""
    mapping = extensions if extensions is not None else DEFAULT_EXTENSIONS
    ext = os.path.splitext(file_path)[1].lower()
    return mapping.get(ext)


def parse_source(source: Union[str, bytes], language: str) -> Tuple[SyntaxNode, bool]:
    """Parse *source* and return ``(root, has_error)``."""
    parser = _PARSERS.get(language)
    if parser is None:
        raise UnsupportedLanguageError(
            f"Unsupported language '{language}'. Supported: {', '.join(supported_languages())}"
        )
    if isinstance(source, str):
        source = source.encode("utf-8")
    tree = parser.parse(source)
    root = _Converter(source).convert(tree.root_node)
    return root, tree.root_node.has_error


# ═══════════════════════════════════════════════════════════════════════
#  Conversion
# ═══════════════════════════════════════════════════════════════════════

def _children(ts_node: Node) -> List[Node]:
    return [c for c in ts_node.children
            if c.type not in _COMMENT_TYPES and not c.is_missing]


_CLAUSE_KINDS = (NodeKind.FOR_INITIALIZER, NodeKind.FOR_CONDITION, NodeKind.FOR_ITERATOR)


class _Converter:

    def __init__(self, source: bytes):
        self.source = source

    def _make(self, kind: NodeKind, ts_node: Node, label: Optional[str] = None) -> SyntaxNode:
        row, col = ts_node.start_point
        # start_point counts bytes; report the column in characters
        prefix = self.source[ts_node.start_byte - col:ts_node.start_byte]
        return SyntaxNode(
            kind=kind,
            line=row + 1,
            column=len(prefix.decode("utf-8", errors="replace")) + 1,
            label=label if label is not None else ts_node.type,
        )

    def convert(self, ts_root: Node) -> SyntaxNode:
        root = self._make(NodeKind.OTHER, ts_root)
        for child in _children(ts_root):
            self._append(root, child)
        return root

    def _append(self, parent: SyntaxNode, ts_node: Node):
        """Convert *ts_node* and attach the result(s) to *parent*."""
        t = ts_node.type

        if not ts_node.is_named:
            if t == ";":
                kind = (NodeKind.EMPTY_STATEMENT if parent.label in _EMPTY_STATEMENT_PARENTS
                        else NodeKind.STATEMENT_TERMINATOR)
                parent.add_child(self._make(kind, ts_node))
            else:
                parent.add_child(self._make(NodeKind.TOKEN, ts_node))
            return

        if t in _SPLIT_STATEMENTS:
            self._append_split(parent, ts_node)
        elif t == "for_statement":
            self._append_for(parent, ts_node)
        elif t == "do_statement":
            self._append_do(parent, ts_node)
        elif t == "argument_list":
            args = parent.add_child(self._make(NodeKind.ARGUMENT_LIST, ts_node))
            for child in _children(ts_node):
                if child.is_named:
                    self._append(args, child)
        elif t == "lambda_expression":
            parts = _children(ts_node)
            arrow = next((c for c in parts if c.type == "->"), ts_node)
            lam = parent.add_child(self._make(NodeKind.LAMBDA, arrow, label=t))
            for child in parts:
                self._append(lam, child)
        else:
            if t in _BLOCK_TYPES:
                kind = NodeKind.STATEMENT_BLOCK
            elif t.endswith("_statement"):
                kind = NodeKind.STATEMENT
            else:
                kind = NodeKind.OTHER
            node = parent.add_child(self._make(kind, ts_node))
            for child in _children(ts_node):
                self._append(node, child)

    def _append_body(self, parent: SyntaxNode, ts_node: Node):
        """Loop bodies: a bare ';' is an empty statement."""
        if ts_node.type == ";" and not ts_node.is_named:
            parent.add_child(self._make(NodeKind.EMPTY_STATEMENT, ts_node))
        else:
            self._append(parent, ts_node)

    def _append_split(self, parent: SyntaxNode, ts_node: Node):
        parts = _children(ts_node)
        if not parts or parts[-1].type != ";":
            # unterminated (error recovery): keep as plain content
            content = parent.add_child(self._make(NodeKind.STATEMENT, ts_node))
            for child in parts:
                self._append(content, child)
            return
        if len(parts) == 1:
            parent.add_child(self._make(NodeKind.EMPTY_STATEMENT, parts[0]))
            return
        content = parent.add_child(self._make(NodeKind.STATEMENT, parts[0], label=ts_node.type))
        for child in parts[:-1]:
            self._append(content, child)
        parent.add_child(self._make(NodeKind.STATEMENT_TERMINATOR, parts[-1]))

    def _append_for(self, parent: SyntaxNode, ts_node: Node):
        loop = parent.add_child(self._make(NodeKind.STATEMENT, ts_node))
        phase = -1          # -1: before '(' ; 0..2: header clause ; 3: body
        pending: List[Node] = []
        init_added = False

        for child in _children(ts_node):
            t = child.type
            if phase == -1:
                self._append(loop, child)
                if t == "(":
                    phase = 0
            elif phase < 3:
                if t == ";" and phase < 2:
                    if not (phase == 0 and init_added):
                        self._add_clause(loop, _CLAUSE_KINDS[phase], pending, child)
                    loop.add_child(self._make(NodeKind.STATEMENT_TERMINATOR, child))
                    pending = []
                    phase += 1
                elif t == ")":
                    first = phase + 1 if (phase == 0 and init_added) else phase
                    for kind in _CLAUSE_KINDS[first:]:
                        self._add_clause(loop, kind, pending, child)
                        pending = []
                    loop.add_child(self._make(NodeKind.TOKEN, child))
                    phase = 3
                elif phase == 0 and t in _SPLIT_STATEMENTS and not pending:
                    # for (int i = 0; ...) — the declaration owns the first ';'
                    parts = _children(child)
                    semi = parts[-1] if parts and parts[-1].type == ";" else None
                    init = self._add_clause(loop, NodeKind.FOR_INITIALIZER, [], child)
                    init_added = True
                    content = init.add_child(self._make(NodeKind.STATEMENT, child))
                    for part in (parts[:-1] if semi is not None else parts):
                        self._append(content, part)
                    if semi is not None:
                        loop.add_child(self._make(NodeKind.STATEMENT_TERMINATOR, semi))
                        phase = 1
                else:
                    pending.append(child)
            else:
                self._append_body(loop, child)

        # header never closed (error recovery)
        for child in pending:
            self._append(loop, child)

    def _add_clause(self, loop: SyntaxNode, kind: NodeKind,
                    pending: List[Node], delimiter: Node) -> SyntaxNode:
        anchor = pending[0] if pending else delimiter
        clause = loop.add_child(self._make(kind, anchor, label=kind.value))
        for child in pending:
            self._append(clause, child)
        return clause

    def _append_do(self, parent: SyntaxNode, ts_node: Node):
        loop = parent.add_child(self._make(NodeKind.STATEMENT, ts_node))
        seen_while = False
        for child in _children(ts_node):
            if not child.is_named and child.type == "while" and not seen_while:
                loop.add_child(self._make(NodeKind.DO_WHILE_TRAILER, child))
                seen_while = True
            elif not child.is_named and child.type == ";":
                kind = NodeKind.STATEMENT_TERMINATOR if seen_while else NodeKind.EMPTY_STATEMENT
                loop.add_child(self._make(kind, child))
            elif seen_while:
                self._append(loop, child)
            else:
                self._append_body(loop, child)
