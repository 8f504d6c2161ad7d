"""A primitive that displays a tree of nodes with optional line graphics."""

from __future__ import annotations

from enum import Enum, auto
from typing import Callable, Optional

from .screen import (
    BORDER_BOTTOM_LEFT,
    BORDER_HORIZONTAL,
    BORDER_TOP_LEFT,
    BORDER_VERTICAL,
    Box,
    Key,
    KeyEvent,
    MouseAction,
    MouseEvent,
    Screen,
    print_text,
    print_with_style,
)
from .text import GRAPHICS_COLOR, Align, Style
from .treenode import TreeNode

_SEMIGRAPHICS = {
    "\u2500": frozenset("lr"),
    "\u2502": frozenset("ud"),
    "\u250c": frozenset("dr"),
    "\u2510": frozenset("dl"),
    "\u2514": frozenset("ur"),
    "\u2518": frozenset("ul"),
    "\u251c": frozenset("udr"),
    "\u2524": frozenset("udl"),
    "\u252c": frozenset("dlr"),
    "\u2534": frozenset("ulr"),
    "\u253c": frozenset("udlr"),
}
_SEMIGRAPHICS_BY_DIRECTIONS = {directions: ch for ch, directions in _SEMIGRAPHICS.items()}


def _print_joined(screen: Screen, x: int, y: int, ch: str, style: Style) -> None:
    """Draw a line-drawing character, merging it with the one already there."""
    existing = screen.get_content(x, y)[0]
    if existing in _SEMIGRAPHICS and ch in _SEMIGRAPHICS:
        joined = _SEMIGRAPHICS_BY_DIRECTIONS.get(_SEMIGRAPHICS[existing] | _SEMIGRAPHICS[ch])
        if joined is not None:
            ch = joined
    screen.set_content(x, y, ch, None, style)


class _Movement(Enum):
    NONE = auto()
    HOME = auto()
    END = auto()
    MOVE = auto()
    PARENT = auto()
    CHILD = auto()
    SCROLL = auto()  # Move without changing the selection.


class TreeView(Box):
    """Displays a tree of TreeNode objects, with keyboard and mouse navigation."""

    def __init__(self) -> None:
        super().__init__()
        self.root: Optional[TreeNode] = None
        self.current_node: Optional[TreeNode] = None
        self.top_level = 0
        self.prefixes: list[str] = []
        self.offset_y = 0
        self.align = False
        self.graphics = True
        self.graphics_color: Optional[str] = GRAPHICS_COLOR
        self.changed_func: Optional[Callable[[TreeNode], None]] = None
        self.selected_func: Optional[Callable[[TreeNode], None]] = None
        self.done_func: Optional[Callable[[Key], None]] = None
        self.nodes: list[TreeNode] = []
        self._last_node: Optional[TreeNode] = None
        self._movement = _Movement.NONE
        self._step = 0
        self._stable_nodes = False

    def get_path(self, node: TreeNode) -> Optional[list[TreeNode]]:
        """Return the nodes from the root down to node, or None if unreachable."""
        if self.root is None:
            return None

        def search(current: TreeNode, path: list[TreeNode]) -> Optional[list[TreeNode]]:
            if current is node:
                return path
            for child in current.children:
                found = search(child, path + [child])
                if found is not None:
                    return found
            return None

        return search(self.root, [self.root])

    def row_count(self) -> int:
        """Number of visible nodes as of the last processing."""
        return len(self.nodes)

    def move(self, offset: int) -> "TreeView":
        """Move the selection (or scroll, without a selection) by offset rows."""
        if offset == 0:
            return self
        self._movement = _Movement.MOVE
        self._step = offset
        self.process(False)
        return self

    def process(self, drawing_after: bool) -> None:
        """Flatten the visible tree and apply any pending selection movement."""
        self._stable_nodes = drawing_after
        height = self.get_inner_rect()[3]

        self.nodes = []
        if self.root is None:
            return
        parent_selected_index = selected_index = top_level_graphics_x = -1
        graphics_offset = 1 if self.graphics else 0
        max_text_x = 0

        def visit(node: TreeNode, parent: Optional[TreeNode]) -> bool:
            nonlocal parent_selected_index, selected_index, top_level_graphics_x, max_text_x
            node.parent = parent
            if parent is None:
                node.level = 0
                node.graphics_x = 0
                node.text_x = 0
            else:
                node.level = parent.level + 1
                node.graphics_x = parent.text_x
                node.text_x = node.graphics_x + graphics_offset + node.indent
            if not self.graphics and self.align:
                node.text_x = 0
            if node.level == self.top_level:
                node.graphics_x = 0
                node.text_x = 0

            if node.level >= self.top_level:
                max_text_x = max(max_text_x, node.text_x)
                if node is self.current_node and node.selectable:
                    selected_index = len(self.nodes)
                    for index in range(len(self.nodes) - 1, -1, -1):
                        candidate = self.nodes[index]
                        if candidate is parent and candidate.selectable:
                            parent_selected_index = index
                            break
                if self.top_level == node.level and (
                    top_level_graphics_x < 0 or node.graphics_x < top_level_graphics_x
                ):
                    top_level_graphics_x = node.graphics_x
                self.nodes.append(node)
            return node.expanded

        self.root.walk(visit)

        for node in self.nodes:
            if self.align and node.level > self.top_level:
                node.text_x = max_text_x
            if top_level_graphics_x > 0:
                node.graphics_x -= top_level_graphics_x
                node.text_x -= top_level_graphics_x

        if selected_index >= 0:
            selected_index = self._apply_movement(selected_index, parent_selected_index)
            self.current_node = self.nodes[selected_index]

            if self._movement is not _Movement.SCROLL:
                if selected_index - self.offset_y >= height:
                    self.offset_y = selected_index - height + 1
                if selected_index < self.offset_y:
                    self.offset_y = selected_index
                if self._movement not in (_Movement.HOME, _Movement.END):
                    self._movement = _Movement.NONE
                    self._step = 0
        else:
            if self.current_node is not None:
                for index, node in enumerate(self.nodes):
                    if node.selectable:
                        selected_index = index
                        self.current_node = node
                        break
            if selected_index < 0:
                self.current_node = None

        if (
            self.changed_func is not None
            and self.current_node is not None
            and self.current_node is not self._last_node
        ):
            self.changed_func(self.current_node)
        self._last_node = self.current_node

    def _apply_movement(self, selected: int, parent_selected: int) -> int:
        nodes = self.nodes
        if self._movement is _Movement.MOVE:
            while self._step < 0:
                for index in range(selected - 1, -1, -1):
                    if nodes[index].selectable:
                        selected = index
                        break
                self._step += 1
            while self._step > 0:
                for index in range(selected + 1, len(nodes)):
                    if nodes[index].selectable:
                        selected = index
                        break
                self._step -= 1
        elif self._movement is _Movement.PARENT:
            if parent_selected >= 0:
                selected = parent_selected
        elif self._movement is _Movement.CHILD:
            for index in range(selected + 1, len(nodes)):
                if nodes[index].selectable and nodes[index].parent is nodes[selected]:
                    selected = index
        return selected

    def draw(self, screen: Screen) -> None:
        super().draw(screen)
        if self.root is None:
            return
        total_height = screen.size()[1]

        if not self._stable_nodes:
            self.process(False)
        else:
            self._stable_nodes = False

        x, y, width, height = self.get_inner_rect()
        if self._movement in (_Movement.MOVE, _Movement.SCROLL):
            self.offset_y += self._step
        elif self._movement is _Movement.HOME:
            self.offset_y = 0
        elif self._movement is _Movement.END:
            self.offset_y = len(self.nodes)
        self._movement = _Movement.NONE

        if self.offset_y >= len(self.nodes) - height:
            self.offset_y = len(self.nodes) - height
        if self.offset_y < 0:
            self.offset_y = 0

        pos_y = y
        line_style = Style(fg=self.graphics_color, bg=self.background_color)
        for index, node in enumerate(self.nodes):
            if pos_y >= y + height + 1 or pos_y >= total_height:
                break
            if index < self.offset_y:
                continue

            if self.graphics:
                self._draw_graphics(screen, index, node, x, y, width, height, pos_y, line_style)

            if node.text_x < width and pos_y < y + height:
                prefix_width = 0
                if self.prefixes:
                    prefix = self.prefixes[(node.level - self.top_level) % len(self.prefixes)]
                    _, prefix_width = print_text(
                        screen, prefix, x + node.text_x, pos_y, width - node.text_x,
                        Align.LEFT, node.color,
                    )
                if node.text_x + prefix_width < width:
                    if node is self.current_node:
                        style = Style(fg=self.background_color, bg=node.color)
                    else:
                        style = Style(fg=node.color, bg=self.background_color)
                    print_with_style(
                        screen, node.text, x + node.text_x + prefix_width, pos_y, 0,
                        width - node.text_x - prefix_width, Align.LEFT, style, False,
                    )
            pos_y += 1

    def _draw_graphics(
        self, screen: Screen, index: int, node: TreeNode,
        x: int, y: int, width: int, height: int, pos_y: int, line_style: Style,
    ) -> None:
        ancestor = node.parent
        while (
            ancestor is not None
            and ancestor.parent is not None
            and ancestor.parent.level >= self.top_level
        ):
            if ancestor.graphics_x < width and ancestor.parent.children[-1] is not ancestor:
                if pos_y - 1 >= y and ancestor.text_x > ancestor.graphics_x:
                    _print_joined(screen, x + ancestor.graphics_x, pos_y - 1, BORDER_VERTICAL, line_style)
                if pos_y < y + height:
                    screen.set_content(x + ancestor.graphics_x, pos_y, BORDER_VERTICAL, None, line_style)
            ancestor = ancestor.parent

        if node.text_x > node.graphics_x and node.graphics_x < width:
            if pos_y - 1 >= y and index > 0:
                above = self.nodes[index - 1]
                if above.graphics_x <= node.graphics_x and above.text_x > node.graphics_x:
                    _print_joined(screen, x + node.graphics_x, pos_y - 1, BORDER_TOP_LEFT, line_style)
            if pos_y < y + height:
                screen.set_content(x + node.graphics_x, pos_y, BORDER_BOTTOM_LEFT, None, line_style)
                for pos in range(node.graphics_x + 1, min(node.text_x, width)):
                    screen.set_content(x + pos, pos_y, BORDER_HORIZONTAL, None, line_style)

    def _select_current(self) -> None:
        node = self.current_node
        if node is None:
            return
        if self.selected_func is not None:
            self.selected_func(node)
        if node.selected_func is not None:
            node.selected_func()

    def handle_key(self, event: KeyEvent) -> None:
        """Handle a key press; movement is applied to the flattened tree."""
        key = event.key
        if key in (Key.TAB, Key.BACKTAB, Key.ESCAPE):
            if self.done_func is not None:
                self.done_func(key)
        elif key in (Key.DOWN, Key.RIGHT):
            self._movement, self._step = _Movement.MOVE, 1
        elif key in (Key.UP, Key.LEFT):
            self._movement, self._step = _Movement.MOVE, -1
        elif key is Key.HOME:
            self._movement = _Movement.HOME
        elif key is Key.END:
            self._movement = _Movement.END
        elif key in (Key.PGDN, Key.CTRL_F):
            self._movement, self._step = _Movement.MOVE, self.get_inner_rect()[3]
        elif key in (Key.PGUP, Key.CTRL_B):
            self._movement, self._step = _Movement.MOVE, -self.get_inner_rect()[3]
        elif key is Key.RUNE:
            rune = event.rune
            if rune == "g":
                self._movement = _Movement.HOME
            elif rune == "G":
                self._movement = _Movement.END
            elif rune == "j":
                self._movement, self._step = _Movement.MOVE, 1
            elif rune == "J":
                self._movement = _Movement.CHILD
            elif rune == "k":
                self._movement, self._step = _Movement.MOVE, -1
            elif rune == "K":
                self._movement = _Movement.PARENT
            elif rune == " ":
                self._select_current()
        elif key is Key.ENTER:
            self._select_current()
        self.process(True)

    def handle_mouse(
        self, action: MouseAction, event: MouseEvent, set_focus: Callable
    ) -> tuple[bool, None]:
        """Handle a mouse event; return (consumed, capture)."""
        if not self.in_rect(event.x, event.y):
            return False, None
        consumed = False
        if action is MouseAction.LEFT_DOWN:
            set_focus(self)
            consumed = True
        elif action is MouseAction.LEFT_CLICK:
            row = event.y + self.offset_y - self.get_inner_rect()[1]
            if 0 <= row < len(self.nodes):
                node = self.nodes[row]
                if node.selectable:
                    previous = self.current_node
                    self.current_node = node
                    if previous is not node and self.changed_func is not None:
                        self.changed_func(node)
                    if self.selected_func is not None:
                        self.selected_func(node)
                    if node.selected_func is not None:
                        node.selected_func()
            consumed = True
        elif action is MouseAction.SCROLL_UP:
            self._movement, self._step = _Movement.SCROLL, -1
            consumed = True
        elif action is MouseAction.SCROLL_DOWN:
            self._movement, self._step = _Movement.SCROLL, 1
            consumed = True
        return consumed, None