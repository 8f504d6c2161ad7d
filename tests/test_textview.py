import threading

import pytest

from termview.screen import Key, KeyEvent, MouseAction, MouseEvent, Screen
from termview.text import Align
from termview.textview import TextView

REGION_TEXT = '["r1"]foo[""] bar ["r2"]baz[""]'


def _view(width, height, text=""):
    view = TextView()
    view.set_rect(0, 0, width, height)
    view.set_text(text)
    return view


def _rows(screen, count):
    return [screen.row_text(row).rstrip() for row in range(count)]


def test_set_text_round_trip():
    view = TextView()
    view.set_text("hello\nworld")
    assert view.get_text() == "hello\nworld"


def test_get_text_strips_style_tags_only_when_enabled():
    view = TextView()
    view.set_text("[red]hello[white] world")
    assert view.get_text(True) == "[red]hello[white] world"
    view.dynamic_colors = True
    assert view.get_text(True) == "hello world"
    assert view.get_text(False) == "[red]hello[white] world"


def test_get_text_strips_region_tags():
    view = TextView()
    view.regions = True
    view.set_text('["a"]hi[""] there')
    assert view.get_text(True) == "hi there"


@pytest.mark.parametrize(
    "text, expected",
    [("", 0), ("one line", 1), ("a\nb\nc", 3), ("a\r\nb", 2)],
)
def test_original_line_count(text, expected):
    view = TextView()
    view.set_text(text)
    assert view.original_line_count() == expected


def test_write_appends_bytes_and_str():
    view = TextView()
    assert view.write(b"abc") == 3
    view.write("def")
    assert view.get_text() == "abcdef"


def test_write_joins_split_utf8():
    view = TextView()
    view.write("é".encode()[:1])
    view.write("é".encode()[1:])
    assert view.get_text() == "é"


def test_clear_removes_text():
    view = TextView()
    view.set_text("something")
    view.clear()
    assert view.get_text() == ""


def test_batch_writer_writes_and_releases_lock():
    view = TextView()
    view.set_text("old")
    with view.batch_writer() as writer:
        writer.clear()
        writer.write("x\n")
        assert writer.has_focus() is False
    view.write("y")
    assert view.get_text() == "x\ny"


def test_changed_callback_fires_on_write():
    view = TextView()
    event = threading.Event()
    view.changed_func = event.set
    view.write("x")
    assert event.wait(2)


def test_draw_simple_text():
    view = _view(20, 5, "hello")
    screen = Screen(20, 5)
    view.draw(screen)
    assert screen.row_text(0).rstrip() == "hello"


def test_word_wrap_splits_at_space():
    view = _view(6, 3, "hello world")
    screen = Screen(6, 3)
    view.draw(screen)
    assert _rows(screen, 2) == ["hello", "world"]


def test_no_wrap_truncates():
    view = _view(5, 3, "hello world")
    view.wrap = False
    screen = Screen(5, 3)
    view.draw(screen)
    assert _rows(screen, 2) == ["hello", ""]


def test_max_lines_purges_oldest():
    view = _view(10, 10, "a\nb\nc\nd")
    view.max_lines = 2
    view.draw(Screen(10, 10))
    assert view.get_text() == "c\nd"


def test_not_scrollable_discards_scrolled_out_lines():
    view = _view(10, 2, "a\nb\nc\nd")
    view.scrollable = False
    screen = Screen(10, 2)
    view.draw(screen)
    assert _rows(screen, 2) == ["c", "d"]
    assert view.get_text() == "c\nd"


def test_scroll_to_end_shows_last_lines():
    view = _view(10, 2, "a\nb\nc\nd")
    view.scroll_to_end()
    screen = Screen(10, 2)
    view.draw(screen)
    assert _rows(screen, 2) == ["c", "d"]
    assert view.scroll_offset() == (2, 0)
    view.scroll_to_beginning()
    view.draw(screen)
    assert _rows(screen, 2) == ["a", "b"]


def test_scroll_to_ignored_when_not_scrollable():
    view = TextView()
    view.scrollable = False
    view.scroll_to(3, 4)
    assert view.scroll_offset() == (-1, 0)


def test_highlight_known_and_unknown_regions():
    view = TextView()
    view.regions = True
    view.set_text(REGION_TEXT)
    view.highlight("r1")
    assert view.highlights() == ["r1"]
    view.highlight("unknown")
    assert view.highlights() == []


def test_toggle_highlights():
    view = TextView()
    view.regions = True
    view.toggle_highlights = True
    view.set_text(REGION_TEXT)
    view.highlight("r1")
    view.highlight("r2")
    assert sorted(view.highlights()) == ["r1", "r2"]
    view.highlight("r1")
    assert view.highlights() == ["r2"]


def test_highlighted_callback_reports_changes():
    calls = []
    view = TextView()
    view.regions = True
    view.highlighted_func = lambda added, removed, remaining: calls.append((added, removed, remaining))
    view.set_text(REGION_TEXT)
    view.highlight("r1")
    view.highlight("r2")
    assert calls == [(["r1"], [], []), (["r2"], ["r1"], [])]


def test_get_region_text():
    view = TextView()
    view.set_text(REGION_TEXT)
    assert view.get_region_text("r1") == ""
    view.regions = True
    assert view.get_region_text("r1") == "foo"
    assert view.get_region_text("r2") == "baz"
    assert view.get_region_text("missing") == ""


def test_get_region_text_strips_styles():
    view = TextView()
    view.regions = True
    view.dynamic_colors = True
    view.set_text('["a"][red]x[-]y[""]')
    assert view.get_region_text("a") == "xy"


def test_highlighted_text_is_inverted():
    view = _view(20, 3, REGION_TEXT)
    view.regions = True
    view.highlight("r1")
    screen = Screen(20, 3)
    view.draw(screen)
    style = screen.get_content(0, 0)[2]
    assert (style.fg, style.bg) == ("black", "white")
    assert screen.get_content(4, 0)[2].bg != "white"


def test_mouse_click_highlights_region():
    view = _view(20, 3, REGION_TEXT)
    view.regions = True
    view.draw(Screen(20, 3))
    assert view.handle_mouse(MouseAction.LEFT_CLICK, MouseEvent(1, 0), lambda p: None) == (True, None)
    assert view.highlights() == ["r1"]
    view.handle_mouse(MouseAction.LEFT_CLICK, MouseEvent(9, 0), lambda p: None)
    assert view.highlights() == ["r2"]
    view.handle_mouse(MouseAction.LEFT_CLICK, MouseEvent(4, 0), lambda p: None)
    assert view.highlights() == []


def test_mouse_outside_not_consumed():
    view = _view(5, 2, "x")
    assert view.handle_mouse(MouseAction.LEFT_DOWN, MouseEvent(10, 10), lambda p: None) == (False, None)


def test_done_key_reported():
    keys = []
    view = TextView()
    view.done_func = keys.append
    view.handle_key(KeyEvent(Key.ENTER))
    assert keys == [Key.ENTER]


def test_key_scrolling():
    lines = [str(i) for i in range(10)]
    view = _view(5, 3, "\n".join(lines))
    screen = Screen(5, 3)
    view.draw(screen)
    assert _rows(screen, 3) == lines[:3]
    view.handle_key(KeyEvent(Key.DOWN))
    view.draw(screen)
    assert _rows(screen, 3) == lines[1:4]
    view.handle_key(KeyEvent(Key.RUNE, "G"))
    view.draw(screen)
    assert _rows(screen, 3) == lines[-3:]
    view.handle_key(KeyEvent(Key.RUNE, "g"))
    view.draw(screen)
    assert _rows(screen, 3) == lines[:3]


def test_focus_in_form_when_not_scrollable():
    finished = []
    view = TextView()
    view.scrollable = False
    view.finished_func = finished.append
    view.focus(None)
    assert finished == [None]
    assert view.has_focus() is False


def test_focus_when_scrollable():
    view = TextView()
    view.focus(None)
    assert view.has_focus() is True


def test_label_drawn_before_text():
    view = _view(20, 2, "hello")
    view.label = "Name: "
    screen = Screen(20, 2)
    view.draw(screen)
    assert screen.row_text(0).rstrip() == "Name: hello"


def test_right_alignment():
    view = _view(10, 2, "hi")
    view.text_align = Align.RIGHT
    screen = Screen(10, 2)
    view.draw(screen)
    assert screen.row_text(0) == "hi".rjust(10)


def test_center_alignment():
    view = _view(10, 2, "hi")
    view.text_align = Align.CENTER
    screen = Screen(10, 2)
    view.draw(screen)
    assert screen.row_text(0) == "hi".center(10)


def test_tab_advances_to_next_stop():
    view = _view(10, 2, "a\tb")
    screen = Screen(10, 2)
    view.draw(screen)
    assert screen.row_text(0)[4] == "b"


def test_scroll_to_highlight_brings_region_into_view():
    lines = [f"line{i}" for i in range(20)]
    lines[15] = '["x"]target[""]'
    view = _view(20, 3, "\n".join(lines))
    view.regions = True
    view.scroll_to_beginning()
    view.highlight("x")
    view.scroll_to_highlight()
    screen = Screen(20, 3)
    view.draw(screen)
    assert "target" in _rows(screen, 3)
    assert view.scroll_offset()[0] > 0