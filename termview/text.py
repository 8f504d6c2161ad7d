"""Styled text stepping: tag parsing, grapheme clusters, widths and line breaks."""

from __future__ import annotations

import copy
import re
import unicodedata
from dataclasses import dataclass, field, replace
from enum import IntEnum, IntFlag
from typing import Optional

from wcwidth import wcswidth, wcwidth

PRIMARY_TEXT_COLOR = "white"
SECONDARY_TEXT_COLOR = "yellow"
BACKGROUND_COLOR = "black"
GRAPHICS_COLOR = "white"

COLOR_NAMES = frozenset(
    {
        "black", "maroon", "green", "olive", "navy", "purple", "teal", "silver",
        "gray", "grey", "red", "lime", "yellow", "blue", "fuchsia", "aqua",
        "white", "orange", "pink", "brown", "cyan", "magenta", "darkgray",
        "lightgray", "darkblue", "darkgreen", "darkred", "lightblue",
        "lightgreen", "lightyellow", "gold", "violet", "indigo", "default",
    }
)

_ATTRIBUTE_LETTERS = frozenset("bdilrsu")
_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})")
_STYLE_TAG = re.compile(r'\[([a-zA-Z0-9_,;: \-\.#+]+)\]')
_REGION_TAG = re.compile(r'\["([a-zA-Z0-9_,;: \-\.]*)"\]')
_ESCAPED_TAG = re.compile(r'\[([a-zA-Z0-9_,;: \-\."#]+)(\[*)\[\]')
_NON_ESCAPE = re.compile(r'(\[[a-zA-Z0-9_,;: \-\."#]+\[*)\]')
_NEWLINES = frozenset({"\n", "\r", "\r\n", "\u0085", "\u2028", "\u2029", "\v", "\f"})
_JOINERS = frozenset({"\u200d", "\ufe0e", "\ufe0f"})


class Align(IntEnum):
    """Horizontal (and vertical) alignment."""

    LEFT = 0
    CENTER = 1
    RIGHT = 2
    TOP = 0
    BOTTOM = 2


@dataclass(frozen=True)
class Style:
    """Immutable text style. A colour of None means the terminal default."""

    fg: Optional[str] = None
    bg: Optional[str] = None
    attributes: frozenset = frozenset()

    def foreground(self, color: Optional[str]) -> "Style":
        return replace(self, fg=color)

    def background(self, color: Optional[str]) -> "Style":
        return replace(self, bg=color)


class StepOptions(IntFlag):
    """Which kinds of tags step() interprets."""

    NONE = 0
    STYLE = 1
    REGION = 2


@dataclass
class StepState:
    """The parser state after one call to step()."""

    style: Style = field(default_factory=Style)
    region: str = ""
    base: Optional[Style] = None
    _width: int = 0
    _gross_length: int = 0
    _break: bool = False
    _optional: bool = False
    _literal_left: int = 0
    _drop_pending: bool = False

    def __post_init__(self) -> None:
        if self.base is None:
            self.base = self.style

    def width(self) -> int:
        """Screen width of the last character."""
        return self._width

    def gross_length(self) -> int:
        """Length of the text consumed by the last step, tags included."""
        return self._gross_length

    def line_break(self) -> tuple[bool, bool]:
        """Whether a break may follow the last character, and whether it is optional."""
        return self._break, self._optional


def escape(text: str) -> str:
    """Escape style and region tags so they are printed literally."""
    return _NON_ESCAPE.sub(r"\1[]", text)


def _valid_color(value: str) -> bool:
    return value in ("", "-") or value.lower() in COLOR_NAMES or bool(_HEX_COLOR.fullmatch(value))


def _valid_attributes(value: str) -> bool:
    if value in ("", "-"):
        return True
    letters = value[1:] if value.startswith("+") else value
    return bool(letters) and set(letters) <= _ATTRIBUTE_LETTERS


def _apply_style_tag(content: str, state: StepState) -> bool:
    parts = content.split(":")
    if len(parts) > 3:
        return False
    parts += [""] * (3 - len(parts))
    fg, bg, attrs = parts
    if not (_valid_color(fg) and _valid_color(bg) and _valid_attributes(attrs)):
        return False
    base = state.base or Style()
    style = state.style

    def pick(value: str, current: Optional[str], original: Optional[str]) -> Optional[str]:
        if value == "":
            return current
        if value == "-":
            return original
        lowered = value.lower()
        return None if lowered == "default" else lowered

    style = replace(
        style,
        fg=pick(fg, style.fg, base.fg),
        bg=pick(bg, style.bg, base.bg),
    )
    if attrs == "-":
        style = replace(style, attributes=base.attributes)
    elif attrs.startswith("+"):
        style = replace(style, attributes=style.attributes | frozenset(attrs[1:]))
    elif attrs:
        style = replace(style, attributes=frozenset(attrs))
    state.style = style
    return True


def _cluster(text: str) -> str:
    if text.startswith("\r\n"):
        return "\r\n"
    end = 1
    while end < len(text):
        ch = text[end]
        if ch in _JOINERS or unicodedata.combining(ch) or unicodedata.category(ch) in ("Mn", "Me"):
            end += 1
            if ch == "\u200d" and end < len(text):
                end += 1
            continue
        break
    return text[:end]


def _cluster_width(cluster: str) -> int:
    if cluster == "\t":
        return 1
    width = wcswidth(cluster)
    if width >= 0:
        return width
    return sum(max(wcwidth(c), 0) for c in cluster)


def step(
    text: str, state: Optional[StepState] = None, options: StepOptions = StepOptions.NONE
) -> tuple[str, str, StepState]:
    """Consume the next character (and any tags before it) from text.

    Returns the character, the remaining text, and the new state.
    """
    st = copy.copy(state) if state is not None else StepState()
    st._width = 0
    st._gross_length = 0
    st._break = st._optional = False

    if st._literal_left > 0 and text:
        st._literal_left -= 1
        st._width = 1
        st._gross_length = 1
        return text[0], text[1:], st
    if st._drop_pending and text.startswith("[]"):
        st._drop_pending = False
        st._width = 1
        st._gross_length = 2
        return "]", text[2:], st

    consumed = 0
    while options and text:
        escaped = _ESCAPED_TAG.match(text)
        if escaped:
            st._literal_left = len(escaped.group(1)) + len(escaped.group(2))
            st._drop_pending = True
            st._width = 1
            st._gross_length = consumed + 1
            return "[", text[1:], st
        if options & StepOptions.REGION:
            region = _REGION_TAG.match(text)
            if region:
                st.region = region.group(1)
                consumed += region.end()
                text = text[region.end():]
                continue
        if options & StepOptions.STYLE:
            tag = _STYLE_TAG.match(text)
            if tag and _apply_style_tag(tag.group(1), st):
                consumed += tag.end()
                text = text[tag.end():]
                continue
        break

    if not text:
        st._gross_length = consumed
        return "", "", st

    cluster = _cluster(text)
    rest = text[len(cluster):]
    st._gross_length = consumed + len(cluster)
    st._width = 0 if cluster in _NEWLINES else _cluster_width(cluster)

    if cluster in _NEWLINES:
        st._break, st._optional = True, False
    elif rest:
        following = rest[0]
        if cluster.isspace() and not following.isspace():
            st._break, st._optional = True, True
        elif cluster == "-" and following.isalnum():
            st._break, st._optional = True, True
        elif st._width == 2:
            st._break, st._optional = True, True
    return cluster, rest, st