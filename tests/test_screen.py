from termview.screen import Box, Screen, print_simple, print_text, print_with_style
from termview.text import Align, Style


def test_screen_set_get():
    screen = Screen(5, 2)
    style = Style(fg="red")
    screen.set_content(1, 1, "x", None, style)
    assert screen.get_content(1, 1) == ("x", (), style)
    screen.set_content(9, 9, "y", None, style)
    assert screen.size() == (5, 2)


def test_print_left():
    screen = Screen(10, 1)
    consumed, width = print_text(screen, "hello", 0, 0, 10, Align.LEFT, "white")
    assert (consumed, width) == (5, 5)
    assert screen.row_text(0).startswith("hello")


def test_print_truncated():
    screen = Screen(10, 1)
    _, width = print_text(screen, "hello", 0, 0, 3, Align.LEFT, "white")
    assert width == 3
    assert screen.row_text(0).startswith("hel ")


def test_print_right():
    screen = Screen(10, 1)
    print_text(screen, "ab", 0, 0, 10, Align.RIGHT, "white")
    assert screen.row_text(0).endswith("ab")


def test_print_right_chops_left():
    screen = Screen(10, 1)
    _, width = print_text(screen, "abcdef", 0, 0, 3, Align.RIGHT, "white")
    assert width == 3
    assert screen.row_text(0).startswith("def")


def test_print_tags_stripped():
    screen = Screen(10, 1)
    consumed, width = print_text(screen, "[red]ab", 0, 0, 10, Align.LEFT, "white")
    assert consumed == len("[red]ab")
    assert width == 2
    assert screen.get_content(0, 0)[2].fg == "red"


def test_skip_width():
    screen = Screen(10, 1)
    start, end, width = print_with_style(screen, "abcd", 0, 0, 2, 10, Align.LEFT, Style(), False)
    assert (start, end, width) == (2, 4, 2)
    assert screen.row_text(0).startswith("cd")


def test_out_of_screen():
    screen = Screen(5, 1)
    assert print_text(screen, "abc", 0, 3, 5, Align.LEFT, "white") == (0, 0)


def test_print_simple():
    screen = Screen(6, 1)
    print_simple(screen, "hi", 1, 0)
    assert screen.row_text(0)[1:3] == "hi"


def test_box_geometry():
    box = Box()
    box.set_rect(2, 3, 10, 5)
    assert box.get_inner_rect() == (2, 3, 10, 5)
    box.border = True
    assert box.get_inner_rect() == (3, 4, 8, 3)
    assert box.in_rect(2, 3)
    assert not box.in_inner_rect(2, 3)
    assert box.in_inner_rect(3, 4)


def test_box_focus_and_draw():
    box = Box()
    box.set_rect(0, 0, 4, 3)
    box.border = True
    box.focus(None)
    assert box.has_focus()
    box.blur()
    assert not box.has_focus()
    screen = Screen(4, 3)
    box.draw(screen)
    assert screen.get_content(0, 0)[0] == "\u250c"
    assert screen.get_content(3, 2)[0] == "\u2518"