"""An in-memory screen, input events, the base Box primitive and text printing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

from .text import (
    BACKGROUND_COLOR,
    PRIMARY_TEXT_COLOR,
    Align,
    StepOptions,
    StepState,
    Style,
    step,
)

BORDER_HORIZONTAL = "\u2500"
BORDER_VERTICAL = "\u2502"
BORDER_TOP_LEFT = "\u250c"
BORDER_TOP_RIGHT = "\u2510"
BORDER_BOTTOM_LEFT = "\u2514"
BORDER_BOTTOM_RIGHT = "\u2518"


class Key(Enum):
    RUNE = auto()
    ESCAPE = auto()
    ENTER = auto()
    TAB = auto()
    BACKTAB = auto()
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    HOME = auto()
    END = auto()
    PGUP = auto()
    PGDN = auto()
    CTRL_F = auto()
    CTRL_B = auto()


class MouseAction(Enum):
    MOVE = auto()
    LEFT_DOWN = auto()
    LEFT_UP = auto()
    LEFT_CLICK = auto()
    LEFT_DOUBLE_CLICK = auto()
    SCROLL_UP = auto()
    SCROLL_DOWN = auto()


@dataclass(frozen=True)
class KeyEvent:
    key: Key
    rune: str = ""


@dataclass(frozen=True)
class MouseEvent:
    x: int
    y: int


class Screen:
    """A grid of cells, each holding a character, combining marks and a style."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        blank = (" ", (), Style())
        self._cells = [[blank] * width for _ in range(height)]

    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def set_content(self, x: int, y: int, main: str, combining, style: Style) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self._cells[y][x] = (main, tuple(combining or ()), style)

    def get_content(self, x: int, y: int) -> tuple[str, tuple, Style]:
        if 0 <= x < self.width and 0 <= y < self.height:
            return self._cells[y][x]
        return " ", (), Style()

    def row_text(self, y: int) -> str:
        return "".join(main + "".join(comb) for main, comb, _ in self._cells[y])


class Box:
    """The base primitive: a rectangle with an optional border and focus state."""

    def __init__(self) -> None:
        self.x = 0
        self.y = 0
        self.width = 15
        self.height = 10
        self.border = False
        self.background_color: Optional[str] = BACKGROUND_COLOR
        self.border_color: Optional[str] = PRIMARY_TEXT_COLOR
        self._focused = False

    def set_rect(self, x: int, y: int, width: int, height: int) -> None:
        self.x, self.y, self.width, self.height = x, y, width, height

    def get_rect(self) -> tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height

    def get_inner_rect(self) -> tuple[int, int, int, int]:
        if self.border:
            return self.x + 1, self.y + 1, max(self.width - 2, 0), max(self.height - 2, 0)
        return self.get_rect()

    def in_rect(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def in_inner_rect(self, x: int, y: int) -> bool:
        ix, iy, w, h = self.get_inner_rect()
        return ix <= x < ix + w and iy <= y < iy + h

    def focus(self, delegate: Optional[Callable] = None) -> None:
        self._focused = True

    def blur(self) -> None:
        self._focused = False

    def has_focus(self) -> bool:
        return self._focused

    def draw(self, screen: Screen) -> None:
        if self.width <= 0 or self.height <= 0:
            return
        background = Style(bg=self.background_color)
        for row in range(self.y, self.y + self.height):
            for column in range(self.x, self.x + self.width):
                screen.set_content(column, row, " ", None, background)
        if not self.border or self.width < 2 or self.height < 2:
            return
        line = background.foreground(self.border_color)
        right, bottom = self.x + self.width - 1, self.y + self.height - 1
        for column in range(self.x + 1, right):
            screen.set_content(column, self.y, BORDER_HORIZONTAL, None, line)
            screen.set_content(column, bottom, BORDER_HORIZONTAL, None, line)
        for row in range(self.y + 1, bottom):
            screen.set_content(self.x, row, BORDER_VERTICAL, None, line)
            screen.set_content(right, row, BORDER_VERTICAL, None, line)
        screen.set_content(self.x, self.y, BORDER_TOP_LEFT, None, line)
        screen.set_content(right, self.y, BORDER_TOP_RIGHT, None, line)
        screen.set_content(self.x, bottom, BORDER_BOTTOM_LEFT, None, line)
        screen.set_content(right, bottom, BORDER_BOTTOM_RIGHT, None, line)


def print_with_style(
    screen: Screen,
    text: str,
    x: int,
    y: int,
    skip_width: int,
    max_width: int,
    align: int,
    style: Style,
    maintain_background: bool,
) -> tuple[int, int, int]:
    """Print one line of tagged text; return (start, end, printed width)."""
    total_width, total_height = screen.size()
    if max_width <= 0 or not text or y < 0 or y >= total_height:
        return 0, 0, 0
    if maintain_background:
        style = style.background(None)

    start = 0
    text_width = 0
    state: Optional[StepState] = StepState(style=style)
    rest = text
    while rest:
        _, rest, state = step(rest, state, StepOptions.STYLE)
        if skip_width > 0:
            skip_width -= state.width()
            text = rest
            style = state.style
            start += state.gross_length()
        else:
            text_width += state.width()

    if align == Align.RIGHT:
        state = None
        while text and text_width > max_width:
            _, text, state = step(text, state, StepOptions.STYLE)
            text_width -= state.width()
            start += state.gross_length()
            style = state.style
        x, max_width = x + max_width - text_width, text_width
    elif align == Align.CENTER:
        state = None
        subtracted = (text_width - max_width) // 2 if text_width > max_width else 0
        while text and subtracted > 0:
            _, text, state = step(text, state, StepOptions.STYLE)
            subtracted -= state.width()
            text_width -= state.width()
            start += state.gross_length()
            style = state.style
        if text_width < max_width:
            x, max_width = x + max_width // 2 - text_width // 2, text_width

    end = start
    printed = 0
    right_border = x + max_width
    state = StepState(style=style)
    while text and x < right_border and x < total_width:
        ch, text, state = step(text, state, StepOptions.STYLE)
        if not ch:
            break
        width = state.width()
        if width > 0:
            final = state.style
            if maintain_background and final.bg is None:
                final = final.background(screen.get_content(x, y)[2].bg)
            for offset in range(width - 1, -1, -1):
                if offset == 0:
                    screen.set_content(x, y, ch[0], tuple(ch[1:]), final)
                else:
                    screen.set_content(x + offset, y, " ", None, final)
        x += width
        end += state.gross_length()
        printed += width
    return start, end, printed


def print_text(
    screen: Screen, text: str, x: int, y: int, max_width: int, align: int, color: Optional[str]
) -> tuple[int, int]:
    """Print text with a foreground colour; return (characters consumed, width)."""
    start, end, width = print_with_style(
        screen, text, x, y, 0, max_width, align, Style().foreground(color), True
    )
    return end - start, width


def print_simple(screen: Screen, text: str, x: int, y: int) -> None:
    """Print text in the primary text colour, left-aligned."""
    print_text(screen, text, x, y, 2**31 - 1, Align.LEFT, PRIMARY_TEXT_COLOR)