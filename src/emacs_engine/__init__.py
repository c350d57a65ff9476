"""UI-agnostic multi-cursor Emacs-style editing engine."""

__all__ = [
    "adapters",
    "buffer",
    "commands",
    "runtime",
]

__version__ = "0.1.0"
