"""
Statement Line Analyzer — flags lines holding more than one statement.

Consumes depth-first enter/leave events over a SyntaxNode tree (see
tree_walker.TreeWalker) and reports every statement terminator that closes
a statement starting on the line where the previous statement ended.

Not reported:
  • the separators of a ``for (init; cond; iter)`` header
  • the ``while (cond);`` trailer of a ``do ... while`` loop
  • the first statement of a ``for`` body block
  • a one-line lambda body passed as the first argument of a call
"""

from typing import Callable, FrozenSet, List, Optional

from .report import StatementViolation
from .rule_catalog import format_message
from .syntax_tree import NodeKind, SyntaxNode

RULE_ID = "OneStatementPerLine"
MSG_KEY = "multiple.statements.line"

# Line sentinel meaning "no statement closed yet in this tree"
NO_LINE = -1

_FOR_OR_DO_CLAUSES = frozenset({
    NodeKind.FOR_CONDITION, NodeKind.FOR_ITERATOR, NodeKind.DO_WHILE_TRAILER,
})


class StatementLineAnalyzer:
    """Single-pass same-line statement detector.

    One instance holds the state of one traversal at a time; the walker
    calls ``on_tree_start`` before each tree.  Give each concurrent
    traversal its own instance.
    """

    interest_kinds: FrozenSet[NodeKind] = frozenset({
        NodeKind.STATEMENT_TERMINATOR,
        NodeKind.EMPTY_STATEMENT,
        NodeKind.ARGUMENT_LIST,
    })

    def __init__(self, sink: Optional[Callable[[StatementViolation], None]] = None):
        self._collected: List[StatementViolation] = []
        self._sink = sink if sink is not None else self._collected.append
        self.file_path: Optional[str] = None
        self.last_statement_end_line = NO_LINE
        self.active_lambda: Optional[SyntaxNode] = None

    @property
    def violations(self) -> List[StatementViolation]:
        """Violations collected by the default sink."""
        return self._collected

    # ────────────────────────────────────────────────────────────────
    #  Events
    # ────────────────────────────────────────────────────────────────

    def on_tree_start(self, root: Optional[SyntaxNode] = None, file_path: Optional[str] = None):
        self.file_path = file_path
        self.last_statement_end_line = NO_LINE
        self.active_lambda = None

    def on_enter(self, node: SyntaxNode):
        if not node.is_terminator():
            return
        statement = self._multiline_statement(node)
        if not self._is_exempt(node) and self._is_on_the_same_line(statement):
            self._report(node)

    def on_leave(self, node: SyntaxNode):
        if node.is_terminator():
            previous = node.previous_sibling
            # the first separator of a for-header does not close a statement
            if previous is not None and previous.kind is not NodeKind.FOR_INITIALIZER:
                self.last_statement_end_line = node.line
            self.active_lambda = None
        elif node.kind is NodeKind.ARGUMENT_LIST:
            first = node.first_child
            if first is not None and first.kind is NodeKind.LAMBDA:
                self.active_lambda = first

    # ────────────────────────────────────────────────────────────────
    #  Internal helpers
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def _multiline_statement(node: SyntaxNode) -> SyntaxNode:
        """Node whose line stands for the statement closed by *node*.

        A terminator pushed onto a later line than the content before it
        is judged by where that content sits.
        """
        previous = node.previous_sibling
        if previous is not None and previous.line != node.line and node.parent is not None:
            return previous
        return node

    @staticmethod
    def _is_exempt(node: SyntaxNode) -> bool:
        # for (;;) EXPR;  do EXPR; while ();  and the header separators
        skip = False
        for sibling in node.iter_previous_siblings():
            if sibling.is_terminator():
                break
            if sibling.kind in _FOR_OR_DO_CLAUSES:
                skip = True
                break

        parent = node.parent
        if parent is None or parent.kind is not NodeKind.STATEMENT_BLOCK:
            return skip

        # for (;;) { EXPR; }
        if not skip:
            for sibling in parent.iter_previous_siblings():
                if sibling.is_terminator():
                    break
                if sibling.kind is NodeKind.FOR_ITERATOR:
                    skip = True
                    break

            # for (;;) { EXPR1; EXPR2; } still checks EXPR2
            if skip and any(s.is_terminator() for s in node.iter_previous_siblings()):
                skip = False

        return skip

    def _is_on_the_same_line(self, statement: SyntaxNode) -> bool:
        return (
            self.last_statement_end_line == statement.line
            and (self.active_lambda is None or statement.line != self.active_lambda.line)
        )

    def _report(self, node: SyntaxNode):
        self._sink(StatementViolation(
            rule_id=RULE_ID,
            message_key=MSG_KEY,
            message=format_message(MSG_KEY),
            line_number=node.line,
            column=node.column,
            file_path=self.file_path,
        ))
