"""Textual bridge; the demo app lives in ``app`` and needs the extra."""

from .controller import DEFAULT_KEYS, TextualEmacsAdapter, TextualUIHooks

__all__ = ["DEFAULT_KEYS", "TextualEmacsAdapter", "TextualUIHooks"]
