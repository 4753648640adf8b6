"""Shortcut metadata integration."""

from pubsync.integrations.shortcuts.abc import ShortcutInspector
from pubsync.integrations.shortcuts.fake import FakeShortcutInspector

__all__ = ["FakeShortcutInspector", "ShortcutInspector"]
