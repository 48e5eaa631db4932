"""
Syntax Tree — the node model consumed by the statement analyzer.

A deliberately small tree: every node carries a kind tag, a 1-based source
line and links to its parent, previous sibling and children.  The frontend
builds it from a tree-sitter parse; tests build it by hand.
"""

import enum
from typing import Iterator, List, Optional
from dataclasses import dataclass, field


class NodeKind(enum.Enum):
    STATEMENT_TERMINATOR = "StatementTerminator"
    EMPTY_STATEMENT = "EmptyStatement"
    ARGUMENT_LIST = "ArgumentList"
    FOR_INITIALIZER = "ForInitializer"
    FOR_CONDITION = "ForCondition"
    FOR_ITERATOR = "ForIterator"
    DO_WHILE_TRAILER = "DoWhileTrailer"
    STATEMENT_BLOCK = "StatementBlock"
    LAMBDA = "Lambda"
    # Structural kinds the analyzer never inspects directly
    STATEMENT = "Statement"
    TOKEN = "Token"
    OTHER = "Other"


# Kinds that close a statement
TERMINATOR_KINDS = frozenset({NodeKind.STATEMENT_TERMINATOR, NodeKind.EMPTY_STATEMENT})


@dataclass(eq=False)
class SyntaxNode:
    """A node in the syntax tree.  Compared by identity."""
    kind: NodeKind
    line: int                   # 1-indexed
    column: int = 0             # 1-indexed, 0 if unknown
    label: str = ""             # grammar type or token text
    parent: Optional["SyntaxNode"] = field(default=None, repr=False)
    previous_sibling: Optional["SyntaxNode"] = field(default=None, repr=False)
    children: List["SyntaxNode"] = field(default_factory=list, repr=False)

    def add_child(self, child: "SyntaxNode") -> "SyntaxNode":
        """Append *child*, wiring its parent and previous-sibling links."""
        child.parent = self
        child.previous_sibling = self.children[-1] if self.children else None
        self.children.append(child)
        return child

    @property
    def first_child(self) -> Optional["SyntaxNode"]:
        return self.children[0] if self.children else None
        siblings = self.parent.children
        for i, node in enumerate(siblings):
            if node is self:
                return siblings[i + 1] if i + 1 < len(siblings) else None
        return None

    def is_terminator(self) -> bool:
        return self.kind in TERMINATOR_KINDS

    def iter_previous_siblings(self) -> Iterator["SyntaxNode"]:
        """Yield previous siblings, nearest first."""
        sibling = self.previous_sibling
        while sibling is not None:
            yield sibling
            sibling = sibling.previous_sibling

    def iter_preorder(self) -> Iterator["SyntaxNode"]:
        """Yield this node and all descendants in depth-first order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

