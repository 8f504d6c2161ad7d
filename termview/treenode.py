"""Nodes of a tree displayed by a tree view."""

from __future__ import annotations

from typing import Any, Callable, Optional

from .text import PRIMARY_TEXT_COLOR


class TreeNode:
    """One node in a tree, with its display attributes and child nodes."""

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.reference: Any = None
        self.children: list[TreeNode] = []
        self.color: Optional[str] = PRIMARY_TEXT_COLOR
        self.selectable = True
        self.expanded = True
        self.indent = 2
        self.selected_func: Optional[Callable[[], None]] = None
        self.level = 0
        self.parent: Optional[TreeNode] = None
        self.graphics_x = 0
        self.text_x = 0

    def __repr__(self) -> str:
        return f"TreeNode({self.text!r})"

    def walk(self, callback: Callable[["TreeNode", Optional["TreeNode"]], bool]) -> "TreeNode":
        """Visit the subtree depth-first, pre-order.

        The callback gets each node and its parent; returning False stops the
        descent below that node.
        """
        self.parent = None
        stack = [self]
        while stack:
            node = stack.pop()
            if not callback(node, node.parent):
                continue
            for child in reversed(node.children):
                child.parent = node
                stack.append(child)
        return self

    def add_child(self, node: "TreeNode") -> "TreeNode":
        self.children.append(node)
        return self

    def remove_child(self, node: "TreeNode") -> "TreeNode":
        """Remove the given child (by identity); do nothing if absent."""
        for index, child in enumerate(self.children):
            if child is node:
                del self.children[index]
                break
        return self

    def clear_children(self) -> "TreeNode":
        self.children = []
        return self

    def expand(self) -> "TreeNode":
        self.expanded = True
        return self

    def collapse(self) -> "TreeNode":
        self.expanded = False
        return self

    def expand_all(self) -> "TreeNode":
        def visit(node: TreeNode, parent: Optional[TreeNode]) -> bool:
            node.expanded = True
            return True

        return self.walk(visit)

    def collapse_all(self) -> "TreeNode":
        def visit(node: TreeNode, parent: Optional[TreeNode]) -> bool:
            node.expanded = False
            return True

        return self.walk(visit)