"""
Tree Walker — drives analyzers over a SyntaxNode tree.

Each analyzer declares the node kinds it wants through ``interest_kinds``
and receives ``on_enter`` / ``on_leave`` for every node of those kinds, in
depth-first order: enter before any descendant event, leave after all of
them.  ``on_tree_start`` is called on every analyzer before each tree.
"""

import logging
from typing import Dict, List, Optional

from .syntax_tree import NodeKind, SyntaxNode

logger = logging.getLogger(__name__)


class TreeWalker:
    """Dispatches enter/leave events to registered analyzers."""

    def __init__(self, analyzers: Optional[list] = None):
        self.analyzers: list = []
        self._by_kind: Dict[NodeKind, list] = {}
        for analyzer in analyzers or []:
            self.register(analyzer)

    def register(self, analyzer):
        self.analyzers.append(analyzer)
        for kind in analyzer.interest_kinds:
            self._by_kind.setdefault(kind, []).append(analyzer)

    def walk(self, root: SyntaxNode, file_path: Optional[str] = None):
        for analyzer in self.analyzers:
            analyzer.on_tree_start(root, file_path)

        if not self._by_kind:
            return

        # (node, leaving) pairs; explicit stack so deep trees are safe
        stack: List[tuple] = [(root, False)]
        visited = 0
        while stack:
            node, leaving = stack.pop()
            interested = self._by_kind.get(node.kind)
            if leaving:
                for analyzer in interested:
                    analyzer.on_leave(node)
                continue

            visited += 1
            if interested:
                for analyzer in interested:
                    analyzer.on_enter(node)
                stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))

        logger.debug("Walked %d nodes of %s", visited, file_path or "<source>")
