from termview.treenode import TreeNode


def build():
    root = TreeNode("root")
    a, b, c = TreeNode("a"), TreeNode("b"), TreeNode("c")
    root.add_child(a).add_child(b)
    a.add_child(c)
    return root, a, b, c


def test_walk_preorder():
    root, *_ = build()
    seen = []
    root.walk(lambda node, parent: seen.append(node.text) or True)
    assert seen == ["root", "a", "c", "b"]


def test_walk_parents():
    root, a, b, c = build()
    pairs = {}
    root.walk(lambda node, parent: pairs.setdefault(node.text, parent) is None or True)
    assert pairs["root"] is None
    assert pairs["c"] is a
    assert c.parent is a


def test_walk_prune():
    root, a, b, c = build()
    seen = []

    def visit(node, parent):
        seen.append(node.text)
        return node.text != "a"

    result = root.walk(visit)
    assert result is root
    assert seen == ["root", "a", "b"]
    assert a.parent is root
    assert b.parent is root


def test_remove_child():
    root, a, b, _ = build()
    root.remove_child(a)
    assert root.children == [b]
    root.remove_child(TreeNode("x"))
    assert root.children == [b]
    root.clear_children()
    assert root.children == []


def test_expand_collapse_all():
    root, a, b, c = build()
    root.collapse_all()
    assert not any(n.expanded for n in (root, a, b, c))
    root.expand_all()
    assert all(n.expanded for n in (root, a, b, c))
    a.collapse()
    assert not a.expanded
    a.expand()
    assert a.expanded


def test_defaults():
    node = TreeNode("n")
    assert node.selectable
    assert node.expanded
    assert node.indent == 2