from termview.text import Align, Style, StepOptions, StepState, escape, step


def collect(text, options):
    out, state = [], None
    while text:
        ch, text, state = step(text, state, options)
        out.append(ch)
    return "".join(out)


def test_plain_step():
    ch, rest, state = step("ab", None, StepOptions.NONE)
    assert (ch, rest) == ("a", "b")
    assert state.width() == 1
    assert state.gross_length() == 1


def test_style_tag_consumed():
    ch, rest, state = step("[red]x", None, StepOptions.STYLE)
    assert ch == "x"
    assert state.style.fg == "red"
    assert state.gross_length() == len("[red]x")


def test_tag_ignored_without_option():
    assert collect("[red]x", StepOptions.NONE) == "[red]x"


def test_invalid_tag_kept():
    assert collect("[hello world]", StepOptions.STYLE) == "[hello world]"


def test_reset_to_base():
    base = Style(fg="green")
    state = StepState(style=base)
    text = "[red]a[-]b"
    ch, text, state = step(text, state, StepOptions.STYLE)
    assert state.style.fg == "red"
    ch, text, state = step(text, state, StepOptions.STYLE)
    assert ch == "b"
    assert state.style.fg == "green"


def test_region_tag():
    ch, rest, state = step('["r1"]x[""]', None, StepOptions.REGION)
    assert ch == "x"
    assert state.region == "r1"
    _, rest, state = step(rest, state, StepOptions.REGION)
    assert state.region == ""


def test_escape_round_trip():
    original = "see [red] and [\"r\"]"
    escaped = escape(original)
    assert escaped != original
    assert collect(escaped, StepOptions.STYLE | StepOptions.REGION) == original


def test_line_breaks():
    _, _, state = step("\nx", None, StepOptions.NONE)
    assert state.line_break() == (True, False)
    _, _, state = step(" x", None, StepOptions.NONE)
    assert state.line_break() == (True, True)
    _, _, state = step("ab", None, StepOptions.NONE)
    assert state.line_break() == (False, False)


def test_wide_character():
    _, _, state = step("\u4e16", None, StepOptions.NONE)
    assert state.width() == 2


def test_combining_cluster():
    ch, rest, state = step("e\u0301x", None, StepOptions.NONE)
    assert ch == "e\u0301"
    assert rest == "x"
    assert state.width() == 1


def test_style_builders():
    style = Style().foreground("red").background("blue")
    assert (style.fg, style.bg) == ("red", "blue")
    assert Align.BOTTOM == Align.RIGHT