"""Scrollable text views and tree views drawn onto an in-memory screen."""

__version__ = "0.1.0"
__all__ = ["lineindex", "screen", "text", "textview", "treenode", "treeview"]