# termview

Building blocks for terminal user interfaces: a read-only, scrollable text
view with style and region tags, and a collapsible tree view. Both draw onto
an in-memory `Screen`, a grid of cells, so you can render, inspect and test
them without a real terminal.

## Installation

```
pip install termview
```

To run the test suite, install the test extra:

```
pip install "termview[test]"
pytest
```

## Screen, boxes and events

`termview.screen` holds the pieces the views are built on:

- `Screen(width, height)`: a grid of cells. `set_content` and `get_content`
  write and read a cell (character, combining marks, `Style`); `row_text(y)`
  returns one row as a string. Writes outside the grid are ignored.
- `Box`: the base primitive, a rectangle (`set_rect`, `get_rect`,
  `get_inner_rect`, `in_rect`, `in_inner_rect`) with an optional `border`, a
  `background_color` and focus state (`focus`, `blur`, `has_focus`). Its
  `draw` fills the background and draws the border.
- `Key`, `KeyEvent(key, rune)`, `MouseAction` and `MouseEvent(x, y)`: the
  input events that the views' `handle_key` and `handle_mouse` take.

`termview.text` provides `Style` (an immutable foreground, background and set
of attribute letters; colours are names such as `"red"` or hex strings such as
`"#ff8000"`, and `None` means the terminal default), `Align`, and `step`, which
reads one character, together with any style or region tags before it, and
reports its screen width and whether a line may break after it.
`escape(text)` escapes brackets so that they are not read as tags.

## Text view

`termview.textview.TextView` shows text that the user can scroll but not
edit. Text can be replaced with `set_text`, appended with `write` (strings, or
bytes decoded as UTF-8), removed with `clear`, or written in one batch through
`batch_writer()`, which takes the view's lock and returns a `TextViewWriter`
that releases it on `close()` or at the end of a `with` block.

```python
from termview.screen import Screen
from termview.textview import TextView

view = TextView()
view.set_rect(0, 0, 40, 10)
view.set_text("Hello\nworld")

screen = Screen(40, 10)
view.draw(screen)
print(screen.row_text(0))
```

Settings are attributes and properties: `wrap`, `word_wrap`,
`dynamic_colors` (style tags such as `[red]`), `regions` (region tags such as
`["id"]text[""]`), `text_style`, `text_align`, `scrollable`, `max_lines`,
`label`, `label_width`, `label_style`, `field_width`, `field_height` and
`toggle_highlights`.

- Lines wrap at word boundaries, or at any character when `word_wrap` is off.
- Tabs advance to the next tab stop when the text is left-aligned, and are
  four columns wide otherwise.
- `highlight(*ids)` highlights regions (or toggles them, with
  `toggle_highlights`); highlighted text is drawn with foreground and
  background swapped. `highlights()` lists them, `scroll_to_highlight()` brings
  them into view on the next draw, and `get_region_text(id)` returns a region's
  text.
- `max_lines` drops the oldest lines on draw; a view that is not `scrollable`
  drops lines once they scroll off the top.
- `scroll_to`, `scroll_to_beginning`, `scroll_to_end` and `scroll_offset`
  control and report scrolling.
- `handle_key`: `h`/`j`/`k`/`l` and the arrow keys scroll, `g`/Home goes to
  the top, `G`/End goes to the bottom and keeps following new text, Page
  Up/Page Down and Ctrl-B/Ctrl-F move by one page. Escape, Enter, Tab and
  Backtab call `done_func` and `finished_func`.
- `handle_mouse`: scroll wheel scrolls, a left click on a region highlights it.

Callbacks: `changed_func` (run in a separate thread whenever the text
changes), `done_func`, `finished_func` and `highlighted_func(added, removed,
remaining)`. `get_text(True)` returns the text with all tags removed, and
`original_line_count()` counts lines before any wrapping is applied.

`termview.lineindex.LineIndex` is the incremental line splitter the text view
uses; it can be used on its own to break tagged text into `TextLine`s.

## Tree view

`termview.treenode.TreeNode` holds a node's text, children, colour, indent,
`reference`, `selectable` flag and whether it is `expanded`. `walk` visits a
subtree depth-first; `add_child`, `remove_child`, `clear_children`, `expand`,
`collapse`, `expand_all` and `collapse_all` change it.
`termview.treeview.TreeView` shows a tree of such nodes, with optional line
graphics (`graphics`, `graphics_color`), per-level `prefixes`, aligned texts
(`align`) and a `top_level` below which levels are hidden.

```python
from termview.screen import Screen
from termview.treenode import TreeNode
from termview.treeview import TreeView

root = TreeNode("root")
root.add_child(TreeNode("first"))
root.add_child(TreeNode("second"))

tree = TreeView()
tree.set_rect(0, 0, 30, 10)
tree.root = root
tree.current_node = root

screen = Screen(30, 10)
tree.draw(screen)
```

The selection moves with `move(offset)` or with keys passed to `handle_key`:
`j`/`k` and the arrow keys move by one node, `g`/Home and `G`/End jump to the
top and the bottom, Page Up/Page Down move by one page, `J` moves to the last
selectable child and `K` to the parent. Enter or Space selects the current
node, calling `selected_func` and the node's own `selected_func`;
`changed_func` is called when the selection changes. `get_path(node)` returns
the nodes from the root down to a node, and `row_count()` the number of
visible nodes.

## Printing text

`termview.screen.print_text`, `print_with_style` and `print_simple` write a
single line of tagged text onto a screen, aligned left, centred or right within
a given width.

## What it does not do

termview does not talk to a terminal. There is no application loop, no
terminal output and no reading of keyboard or mouse input: you draw onto a
`Screen` and put it on a terminal yourself, and you build `KeyEvent` and
`MouseEvent` values from your own input handling. It has no editable text
widgets, forms or layout containers.