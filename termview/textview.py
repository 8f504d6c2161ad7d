"""A read-only, scrollable text primitive with style tags and highlightable regions."""

from __future__ import annotations

import codecs
import copy
import threading
from typing import Callable, Optional, Union

from .lineindex import LineIndex, TextLine
from .screen import (
    Box,
    Key,
    KeyEvent,
    MouseAction,
    MouseEvent,
    Screen,
    print_with_style,
)
from .text import (
    BACKGROUND_COLOR,
    PRIMARY_TEXT_COLOR,
    SECONDARY_TEXT_COLOR,
    Align,
    StepOptions,
    Style,
    step,
)

_NAMED_RGB = {
    "black": (0, 0, 0),
    "maroon": (128, 0, 0),
    "green": (0, 128, 0),
    "olive": (128, 128, 0),
    "navy": (0, 0, 128),
    "purple": (128, 0, 128),
    "teal": (0, 128, 128),
    "silver": (192, 192, 192),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "red": (255, 0, 0),
    "lime": (0, 255, 0),
    "yellow": (255, 255, 0),
    "blue": (0, 0, 255),
    "fuchsia": (255, 0, 255),
    "aqua": (0, 255, 255),
    "white": (255, 255, 255),
    "orange": (255, 165, 0),
    "pink": (255, 192, 203),
    "brown": (165, 42, 42),
    "cyan": (0, 255, 255),
    "magenta": (255, 0, 255),
    "darkgray": (169, 169, 169),
    "lightgray": (211, 211, 211),
    "darkblue": (0, 0, 139),
    "darkgreen": (0, 100, 0),
    "darkred": (139, 0, 0),
    "lightblue": (173, 216, 230),
    "lightgreen": (144, 238, 144),
    "lightyellow": (255, 255, 224),
    "gold": (255, 215, 0),
    "violet": (238, 130, 238),
    "indigo": (75, 0, 130),
}


def _color_rgb(color: Optional[str]) -> Optional[tuple[int, int, int]]:
    if color is None:
        return None
    if color.startswith("#"):
        digits = color[1:]
        if len(digits) == 3:
            digits = "".join(d * 2 for d in digits)
        return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)
    return _NAMED_RGB.get(color.lower())


def _linearize(value: float) -> float:
    if value <= 0.04045:
        return value / 12.92
    return ((value + 0.055) / 1.055) ** 2.4


def _lightness(color: Optional[str]) -> float:
    """Perceptual lightness (CIE L*, scaled to 0..1) of a colour."""
    rgb = _color_rgb(color)
    if rgb is None:
        return 0.0
    r, g, b = (_linearize(c / 255) for c in rgb)
    luminance = 0.2126729 * r + 0.7151522 * g + 0.0721750 * b
    if luminance > (6 / 29) ** 3:
        f = luminance ** (1 / 3)
    else:
        f = luminance / 3 * (29 / 6) ** 2 + 4 / 29
    return 1.16 * f - 0.16


def _div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


class TextViewWriter:
    """Writes to a text view while holding its lock; release with close()."""

    def __init__(self, view: "TextView") -> None:
        self._view = view
        self._closed = False

    def write(self, data: Union[str, bytes]) -> int:
        return self._view._write(data)

    def clear(self) -> None:
        self._view._clear()

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._view._lock.release()

    def has_focus(self) -> bool:
        return self._view._focused

    def __enter__(self) -> "TextViewWriter":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class TextView(Box):
    """Displays read-only text, optionally with style tags and regions.

    Text can be replaced with set_text() or streamed in with write().
    """

    def __init__(self, text: str = "") -> None:
        super().__init__()
        self._lock = threading.Lock()
        self._text = text
        self._decoder = codecs.getincrementaldecoder("utf-8")("replace")
        self._index = LineIndex(
            text_style=Style(fg=PRIMARY_TEXT_COLOR, bg=BACKGROUND_COLOR),
        )
        self.label = ""
        self.label_width = 0
        self.label_style = Style(fg=SECONDARY_TEXT_COLOR)
        self.field_width = 0
        self.field_height = 0
        self.max_lines = 0
        self.toggle_highlights = False
        self.changed_func: Optional[Callable[[], None]] = None
        self.done_func: Optional[Callable[[Key], None]] = None
        self.highlighted_func: Optional[Callable[[list, list, list], None]] = None
        self.finished_func: Optional[Callable[[Optional[Key]], None]] = None
        self._scrollable = True
        self._highlights: dict[str, None] = {}
        self._last_width = 0
        self._page_size = 0
        self._line_offset = -1
        self._column_offset = 0
        self._track_end = False
        self._scroll_to_highlights = False

    # Settings -----------------------------------------------------------

    @property
    def scrollable(self) -> bool:
        return self._scrollable

    @scrollable.setter
    def scrollable(self, value: bool) -> None:
        self._scrollable = value
        if not value:
            self._track_end = True

    @property
    def wrap(self) -> bool:
        return self._index.wrap

    @wrap.setter
    def wrap(self, value: bool) -> None:
        if self._index.wrap != value:
            self._index.reset()
        self._index.wrap = value

    @property
    def word_wrap(self) -> bool:
        return self._index.word_wrap

    @word_wrap.setter
    def word_wrap(self, value: bool) -> None:
        if self._index.wrap and self._index.word_wrap != value:
            self._index.reset()
        self._index.word_wrap = value

    @property
    def dynamic_colors(self) -> bool:
        return self._index.style_tags

    @dynamic_colors.setter
    def dynamic_colors(self, value: bool) -> None:
        if self._index.style_tags != value:
            self._index.reset()
        self._index.style_tags = value

    @property
    def regions(self) -> bool:
        return self._index.region_tags

    @regions.setter
    def regions(self, value: bool) -> None:
        if self._index.region_tags != value:
            self._index.reset()
        self._index.region_tags = value

    @property
    def text_style(self) -> Style:
        return self._index.text_style

    @text_style.setter
    def text_style(self, style: Style) -> None:
        self._index.text_style = style
        self._index.reset()

    @property
    def text_align(self) -> int:
        return self._index.align

    @text_align.setter
    def text_align(self, align: int) -> None:
        self._index.align = align

    # Content ------------------------------------------------------------

    def _notify(self) -> None:
        changed = self.changed_func
        if changed is not None:
            threading.Thread(target=changed, daemon=True).start()

    def set_text(self, text: str) -> "TextView":
        """Replace the whole text; triggers the changed callback."""
        with self._lock:
            self._text = text
            self._decoder.reset()
            self._index.reset()
        self._notify()
        return self

    def get_text(self, strip_all_tags: bool = False) -> str:
        """Return the text, with style and region tags removed if requested."""
        if not strip_all_tags or (not self.dynamic_colors and not self.regions):
            return self._text
        options = self._index.options
        parts = []
        state = None
        rest = self._text
        while rest:
            ch, rest, state = step(rest, state, options)
            parts.append(ch)
        return "".join(parts)

    def original_line_count(self) -> int:
        """Number of lines in the text before any wrapping."""
        if not self._text:
            return 0
        lines = 1
        state = None
        rest = self._text
        while rest:
            _, rest, state = step(rest, state, StepOptions.NONE)
            can_break, optional = state.line_break()
            if can_break and not optional:
                lines += 1
        return lines

    def write(self, data: Union[str, bytes]) -> int:
        """Append data to the text; return the number of bytes or characters taken."""
        with self._lock:
            return self._write(data)

    def _write(self, data: Union[str, bytes]) -> int:
        if isinstance(data, (bytes, bytearray)):
            self._text += self._decoder.decode(bytes(data))
        else:
            self._text += data
        self._notify()
        return len(data)

    def clear(self) -> "TextView":
        """Remove all text; triggers the changed callback."""
        with self._lock:
            self._clear()
        self._notify()
        return self

    def _clear(self) -> None:
        self._text = ""
        self._decoder.reset()
        self._index.reset()

    def batch_writer(self) -> TextViewWriter:
        """Acquire the lock once and return a writer that releases it on close."""
        self._lock.acquire()
        return TextViewWriter(self)

    # Highlights ---------------------------------------------------------

    def highlight(self, *args: str) -> "TextView":
        """Highlight the given regions (or toggle them, if toggling is on)."""
        known = self._index.regions

        def all_known(number: int, line: TextLine) -> bool:
            return all(region in known for region in args)

        self._index.parse_ahead(self._text, self._last_width, all_known)
        known = self._index.regions
        region_ids = [region for region in args if region in known]

        if self.toggle_highlights:
            region_ids = [r for r in self._highlights if r not in region_ids] + [
                r for r in region_ids if r not in self._highlights
            ]

        added: list[str] = []
        removed: list[str] = []
        remaining: list[str] = []
        if self.highlighted_func is not None:
            current = dict(self._highlights)
            for region in region_ids:
                if region in current:
                    remaining.append(region)
                    del current[region]
                else:
                    added.append(region)
            removed = list(current)

        self._highlights = {region: None for region in region_ids if region}

        if self.highlighted_func is not None and (added or removed):
            self.highlighted_func(added, removed, remaining)
        return self

    def highlights(self) -> list[str]:
        """IDs of all currently highlighted regions."""
        return list(self._highlights)

    def get_region_text(self, region_id: str) -> str:
        """Text of the first region with the given ID, without style tags."""
        if not self.regions or not region_id:
            return ""
        line_number = self._index.regions.get(region_id)
        if line_number is None:
            self._index.parse_ahead(
                self._text,
                self._last_width,
                lambda number, line: region_id in self._index.regions,
            )
            line_number = self._index.regions.get(region_id)
            if line_number is None:
                return ""

        line = self._index[line_number]
        rest = self._text[line.offset:]
        state = copy.copy(line.state)
        options = StepOptions.REGION
        if self.dynamic_colors:
            options |= StepOptions.STYLE
        parts: list[str] = []
        collected = 0
        while rest:
            ch, rest, state = step(rest, state, options)
            if state.region == region_id:
                parts.append(ch)
                collected += len(ch)
            elif collected > 0:
                break
        return "".join(parts)

    # Scrolling ----------------------------------------------------------

    def scroll_to(self, row: int, column: int) -> "TextView":
        if not self._scrollable:
            return self
        self._line_offset = row
        self._column_offset = column
        self._track_end = False
        return self

    def scroll_to_beginning(self) -> "TextView":
        if not self._scrollable:
            return self
        self._track_end = False
        self._line_offset = 0
        self._column_offset = 0
        return self

    def scroll_to_end(self) -> "TextView":
        """Scroll to the bottom and keep following new text."""
        if not self._scrollable:
            return self
        self._track_end = True
        self._column_offset = 0
        return self

    def scroll_to_highlight(self) -> "TextView":
        """Bring the highlighted regions into view on the next draw."""
        if not self._highlights or not self._scrollable or not self.regions:
            return self
        self._scroll_to_highlights = True
        self._track_end = False
        return self

    def scroll_offset(self) -> tuple[int, int]:
        """The (row, column) scrolled past at the top left."""
        return self._line_offset, self._column_offset

    # Focus --------------------------------------------------------------

    def focus(self, delegate: Optional[Callable] = None) -> None:
        with self._lock:
            if self.finished_func is not None and not self._scrollable:
                self.finished_func(None)
                return
            super().focus(delegate)

    def has_focus(self) -> bool:
        with self._lock:
            return super().has_focus()

    # Drawing ------------------------------------------------------------

    def draw(self, screen: Screen) -> None:
        super().draw(screen)
        with self._lock:
            self._draw(screen)

    def _draw(self, screen: Screen) -> None:
        x, y, width, height = self.get_inner_rect()
        self._page_size = height

        keep_bg = self.label_style.bg is None
        if self.label_width > 0:
            label_width = min(self.label_width, width)
            print_with_style(screen, self.label, x, y, 0, label_width, Align.LEFT, self.label_style, keep_bg)
            x += label_width
            width -= label_width
        else:
            _, _, drawn = print_with_style(
                screen, self.label, x, y, 0, width, Align.LEFT, self.label_style, keep_bg
            )
            x += drawn
            width -= drawn

        if 0 < self.field_width < width:
            width = self.field_width
        if 0 < self.field_height < height:
            height = self.field_height
        if width <= 0:
            return

        text_style = self.text_style
        if text_style.bg != self.background_color:
            for row in range(height):
                for column in range(width):
                    screen.set_content(x + column, y + row, " ", None, text_style)

        if width != self._last_width and self.wrap:
            self._index.reset()
        self._last_width = width

        if self.regions and self._scroll_to_highlights:
            self._bring_highlights_into_view(width, height)
        self._scroll_to_highlights = False

        text = self._text
        index = self._index
        index.parse_ahead(text, width, lambda number, line: number >= self._line_offset + height)
        if self._track_end:
            index.parse_ahead(text, width)
            self._line_offset = len(index) - height
        if self._line_offset > len(index) - height:
            self._line_offset = len(index) - height
        if self._line_offset < 0:
            self._line_offset = 0
        self._adjust_column_offset(width)

        for number in range(self._line_offset, min(len(index), self._line_offset + height)):
            self._draw_line(screen, index[number], x, y + number - self._line_offset, width)

        self._purge()

    def _bring_highlights_into_view(self, width: int, height: int) -> None:
        index = self._index
        index.parse_ahead(
            self._text,
            width,
            lambda number, line: all(r in index.regions for r in self._highlights),
        )
        first_region = ""
        from_highlight = to_highlight = 0
        for region in self._highlights:
            line = index.regions.get(region, 0)
            if not first_region or line > to_highlight:
                to_highlight = line
            if not first_region or line < from_highlight:
                from_highlight = line
                first_region = region
        if not first_region:
            return

        if to_highlight - from_highlight + 1 < height:
            self._line_offset = _div(from_highlight + to_highlight - height, 2)
        else:
            self._line_offset = from_highlight

        if self.wrap and from_highlight < len(index):
            line = index[from_highlight]
            state = copy.copy(line.state)
            rest = self._text[line.offset:]
            position = 0
            while rest and position < line.width and state.region != first_region:
                _, rest, state = step(rest, state, index.options)
                position += state.width()
            if position - self._column_offset > 3 * width // 4:
                self._column_offset = position - width // 2
            if position - self._column_offset < 0:
                self._column_offset = position - width // 4

    def _adjust_column_offset(self, width: int) -> None:
        longest = self._index.longest_line
        if self.text_align in (Align.LEFT, Align.RIGHT):
            if self._column_offset + width > longest:
                self._column_offset = longest - width
            if self._column_offset < 0:
                self._column_offset = 0
        else:
            half = _div(longest - width, 2)
            if half > 0:
                self._column_offset = max(-half, min(self._column_offset, half))
            else:
                self._column_offset = 0

    def _draw_line(self, screen: Screen, info: TextLine, x: int, row: int, width: int) -> None:
        info.regions = None
        align = self.text_align
        column_offset = self._column_offset
        skip_width = x_pos = 0
        if align == Align.LEFT:
            skip_width = column_offset
        elif align == Align.CENTER:
            skip_width = column_offset + _div(info.width - width, 2)
            if skip_width < 0:
                skip_width = 0
                x_pos = _div(width - info.width, 2) - column_offset
        elif align == Align.RIGHT:
            max_width = max(width, self._index.longest_line)
            skip_width = column_offset - (max_width - info.width)
            if skip_width < 0:
                skip_width = 0
                x_pos = max_width - info.width - column_offset

        tab_size = self._index.tab_size
        options = self._index.options
        rest = self._text[info.offset:]
        state = copy.copy(info.state)
        processed = 0
        while rest and x_pos < width and processed < info.length:
            ch, rest, state = step(rest, state, options)
            if ch == "\t":
                w = tab_size - x_pos % tab_size if align == Align.LEFT else tab_size
            else:
                w = state.width()
            processed += state.gross_length()

            if skip_width > 0:
                skip_width -= w
                continue

            if w > 0:
                style = state.style
                if state.region and state.region in self._highlights:
                    fg, bg = style.fg, style.bg
                    if bg == self.background_color:
                        bg = "white" if _lightness(fg) < 0.5 else "black"
                    style = style.background(fg).foreground(bg)
                for offset in range(w - 1, -1, -1):
                    if offset == 0:
                        screen.set_content(x + x_pos, row, ch[0], tuple(ch[1:]), style)
                    else:
                        screen.set_content(x + x_pos + offset, row, " ", None, style)

                if state.region:
                    if info.regions is None:
                        info.regions = {}
                    span = info.regions.get(state.region)
                    if span is None:
                        span = (x_pos, x_pos + w)
                    else:
                        span = (min(span[0], x_pos), max(span[1], x_pos + w))
                    info.regions[state.region] = span
            x_pos += w

    def _purge(self) -> None:
        index = self._index
        purge_start = 0
        if not self._scrollable and self._line_offset > 0:
            purge_start = self._line_offset
        if self.max_lines > 0 and len(index) > self.max_lines:
            purge_start = len(index) - self.max_lines
        if 0 < purge_start < len(index):
            self._text = self._text[index[purge_start].offset:]
            index.reset()
            self._line_offset = 0

    # Input --------------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> None:
        """Handle a key press: leave keys and Vim-like scrolling."""
        key = event.key
        if key in (Key.ESCAPE, Key.ENTER, Key.TAB, Key.BACKTAB):
            if self.done_func is not None:
                self.done_func(key)
            if self.finished_func is not None:
                self.finished_func(key)
            return
        if not self._scrollable:
            return

        if key is Key.RUNE:
            rune = event.rune
            if rune == "g":
                self._go_home()
            elif rune == "G":
                self._go_end()
            elif rune == "j":
                self._line_offset += 1
            elif rune == "k":
                self._track_end = False
                self._line_offset -= 1
            elif rune == "h":
                self._column_offset -= 1
            elif rune == "l":
                self._column_offset += 1
        elif key is Key.HOME:
            self._go_home()
        elif key is Key.END:
            self._go_end()
        elif key is Key.UP:
            self._track_end = False
            self._line_offset -= 1
        elif key is Key.DOWN:
            self._line_offset += 1
        elif key is Key.LEFT:
            self._column_offset -= 1
        elif key is Key.RIGHT:
            self._column_offset += 1
        elif key in (Key.PGDN, Key.CTRL_F):
            self._line_offset += self._page_size
        elif key in (Key.PGUP, Key.CTRL_B):
            self._track_end = False
            self._line_offset -= self._page_size

    def _go_home(self) -> None:
        self._track_end = False
        self._line_offset = 0
        self._column_offset = 0

    def _go_end(self) -> None:
        self._track_end = True
        self._column_offset = 0

    def handle_mouse(
        self, action: MouseAction, event: MouseEvent, set_focus: Callable
    ) -> tuple[bool, None]:
        """Handle a mouse event; return (consumed, capture)."""
        x, y = event.x, event.y
        if not self.in_rect(x, y):
            return False, None

        rect_x, rect_y, width, height = self.get_inner_rect()
        consumed = False
        if action is MouseAction.LEFT_DOWN:
            set_focus(self)
            consumed = True
        elif action is MouseAction.LEFT_CLICK:
            if self.regions and self.in_inner_rect(x, y):
                column, row = x - rect_x, y - rect_y + self._line_offset
                highlighted = ""
                if 0 <= row < len(self._index):
                    for region, (start, end) in (self._index[row].regions or {}).items():
                        if start <= column < end:
                            highlighted = region
                            break
                if highlighted:
                    self.highlight(highlighted)
                elif not self.toggle_highlights:
                    self.highlight()
            consumed = True
        elif action is MouseAction.SCROLL_UP:
            if self._scrollable:
                self._track_end = False
                self._line_offset -= 1
                consumed = True
        elif action is MouseAction.SCROLL_DOWN:
            if self._scrollable:
                self._line_offset += 1
                index = self._index
                if len(index) - self._line_offset < height:
                    index.parse_ahead(
                        self._text,
                        width,
                        lambda number, line: len(index) - self._line_offset < height,
                    )
                    if len(index) - self._line_offset < height:
                        self._track_end = True
                consumed = True
        return consumed, None