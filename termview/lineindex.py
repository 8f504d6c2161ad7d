"""An incremental index of the screen lines that a tagged text breaks into."""

from __future__ import annotations

import copy
import sys
from dataclasses import dataclass, field
from typing import Callable, Optional

from .text import Align, StepOptions, StepState, Style, step

TAB_SIZE = 4


@dataclass
class TextLine:
    """One screen line of the text buffer."""

    offset: int = 0
    """Position in the buffer where this line starts."""
    width: int = 0
    """Screen width of the line."""
    length: int = 0
    """Length of the line in the buffer, tags included."""
    state: StepState = field(default_factory=StepState)
    """Parser state before the first character of the line."""
    regions: Optional[dict[str, tuple[int, int]]] = None
    """Start and end columns of the regions drawn on this line, if any."""


StopFunc = Callable[[int, TextLine], bool]


@dataclass
class LineIndex:
    """Splits a text buffer into screen lines, parsing only as far as needed.

    The index may be extended repeatedly with parse_ahead(); it resumes at the
    last line it holds. Changing any of the settings requires reset().
    """

    style_tags: bool = False
    region_tags: bool = False
    wrap: bool = True
    word_wrap: bool = True
    align: int = Align.LEFT
    text_style: Style = field(default_factory=Style)
    tab_size: int = TAB_SIZE
    lines: list[TextLine] = field(default_factory=list, init=False)
    longest_line: int = field(default=0, init=False)
    regions: dict[str, int] = field(default_factory=dict, init=False)

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> TextLine:
        return self.lines[index]

    @property
    def options(self) -> StepOptions:
        """The kinds of tags the parser interprets."""
        options = StepOptions.NONE
        if self.style_tags:
            options |= StepOptions.STYLE
        if self.region_tags:
            options |= StepOptions.REGION
        return options

    def reset(self) -> None:
        """Discard all indexed lines and regions."""
        self.lines = []
        self.regions = {}
        self.longest_line = 0

    def _tab_width(self, left_pos: int) -> int:
        if self.align == Align.LEFT:
            return self.tab_size - left_pos % self.tab_size
        return self.tab_size

    def parse_ahead(self, text: str, width: int, stop: Optional[StopFunc] = None) -> None:
        """Extend the index over text until its end or until stop returns True.

        stop is called with the number and the line of each completed line.
        A width of 0 means unlimited width.
        """
        if not text:
            return
        if width == 0:
            width = sys.maxsize
        if stop is None:
            def stop(number: int, line: TextLine) -> bool:
                return False
        options = self.options

        if not self.lines:
            last = TextLine(offset=0, state=StepState(style=self.text_style))
            self.lines.append(last)
            rest = text
        else:
            last = self.lines[-1]
            last.width = 0
            last.length = 0
            rest = text[last.offset:]

        last_option = 0
        last_option_width = 0
        last_option_state: Optional[StepState] = None
        left_pos = 0
        offset = last.offset
        state = copy.copy(last.state)

        while rest:
            region = state.region
            ch, rest, state = step(rest, state, options)
            w = self._tab_width(left_pos) if ch == "\t" else state.width()
            length = state.gross_length()

            if self.wrap and last.width + w > width:
                if last_option_width == 0:
                    if stop(len(self.lines) - 1, last):
                        return
                    last = TextLine(offset=offset, state=copy.copy(state))
                    last_option = last_option_width = left_pos = 0
                else:
                    new_line = TextLine(
                        offset=last.offset + last_option,
                        width=last.width - last_option_width,
                        length=last.length - last_option,
                        state=last_option_state,
                    )
                    last.width = last_option_width
                    last.length = last_option
                    if stop(len(self.lines) - 1, last):
                        return
                    last = new_line
                    last_option = last_option_width = 0
                self.lines.append(last)

            last.width += w
            last.length += length
            offset += length
            left_pos += w
            self.longest_line = max(self.longest_line, last.width)

            can_break, optional = state.line_break()
            if can_break:
                if optional:
                    if self.wrap and self.word_wrap:
                        last_option = offset - last.offset
                        last_option_width = last.width
                        last_option_state = copy.copy(state)
                else:
                    if stop(len(self.lines) - 1, last):
                        return
                    last = TextLine(offset=offset, state=copy.copy(state))
                    self.lines.append(last)
                    last_option = last_option_width = left_pos = 0

            if self.region_tags and state.region and state.region != region:
                self.regions.setdefault(state.region, len(self.lines) - 1)