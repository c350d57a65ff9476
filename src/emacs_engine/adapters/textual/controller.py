"""Minimal Textual adapter that feeds key events into the command engine."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional

from emacs_engine.buffer import Buffer, BufferMirror
from emacs_engine.commands import CommandContext, CommandEngine, CommandResult
from emacs_engine.runtime import telemetry


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


DEFAULT_KEYS: Mapping[str, str] = MappingProxyType(
    {
        "ctrl+f": "forward-char",
        "right": "forward-char",
        "ctrl+b": "backward-char",
        "left": "backward-char",
        "ctrl+n": "next-line",
        "down": "next-line",
        "ctrl+p": "previous-line",
        "up": "previous-line",
        "shift+right": "forward-char-shift",
        "shift+left": "backward-char-shift",
        "shift+down": "next-line-shift",
        "shift+up": "previous-line-shift",
        "ctrl+a": "move-beginning-of-line",
        "home": "move-beginning-of-line",
        "ctrl+e": "move-end-of-line",
        "end": "move-end-of-line",
        "alt+f": "forward-word",
        "alt+b": "backward-word",
        "alt+<": "beginning-of-buffer",
        "alt+>": "end-of-buffer",
        "alt+g": "goto-line",
        "ctrl+d": "delete-char",
        "delete": "delete-char",
        "backspace": "delete-backward-char",
        "enter": "newline",
        "ctrl+o": "open-line",
        "ctrl+t": "transpose-chars",
        "alt+u": "upcase-word",
        "alt+l": "downcase-word",
        "ctrl+x ctrl+u": "upcase-region",
        "ctrl+x ctrl+l": "downcase-region",
        "ctrl+space": "set-mark-command",
        "ctrl+@": "set-mark-command",
        "ctrl+x ctrl+x": "exchange-point-and-mark",
        "ctrl+x h": "mark-whole-buffer",
        "ctrl+g": "keyboard-quit",
        "ctrl+k": "kill-line",
        "alt+d": "kill-word",
        "alt+backspace": "backward-kill-word",
        "ctrl+w": "kill-region",
        "alt+w": "copy-region-as-kill",
        "ctrl+y": "yank",
        "alt+y": "yank-pop",
        "ctrl+/": "undo",
        "ctrl+_": "undo",
        "ctrl+x u": "undo",
        "ctrl+shift+down": "add-cursor-next-line",
        "ctrl+shift+up": "add-cursor-previous-line",
        "ctrl+>": "spawn-cursors-at-word-matches",
        "escape": "clear-multiple-cursors",
    }
)

PREFIX_KEYS = frozenset({"ctrl+x"})
UNIVERSAL_ARGUMENT = "ctrl+u"


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualEmacsAdapter:
    """Bridges key presses to ``CommandEngine.execute`` and back to the UI.

    Key resolution here is a flat lookup with a single ``ctrl+x`` prefix and
    ``ctrl+u`` for the universal argument; anything richer belongs to a real
    keymap layer in the host.
    """

    def __init__(
        self,
        engine: CommandEngine,
        buffer: Buffer,
        hooks: TextualUIHooks,
        *,
        keys: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.engine = engine
        self.buffer = buffer
        self.hooks = hooks
        self.keys: Mapping[str, str] = keys if keys is not None else DEFAULT_KEYS
        self._pending_prefix: Optional[str] = None
        self._prefix_arg: Optional[int] = None
        self._refresh_buffer()

    # ------------------------------------------------------------------
    # BufferSync
    # ------------------------------------------------------------------
    def pull_buffer(self) -> BufferMirror:
        return self.buffer.mirror(attributes={"buffer": self.buffer.name})

    def push_host_text(self, text: str) -> None:
        self.buffer.load_text(text)
        self._refresh_buffer()

    # ------------------------------------------------------------------
    # Key handling
    # ------------------------------------------------------------------
    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> Optional[CommandResult]:
        """Resolve a Textual key event and run the bound command, if any.

        Returns ``None`` while a key sequence or prefix argument is still
        being collected.
        """

        chord = _chord(key, modifiers)
        self._log_state("key ->", key=chord, text=text)

        if self._pending_prefix is None and chord == UNIVERSAL_ARGUMENT:
            self._prefix_arg = (self._prefix_arg or 1) * 4
            self.hooks.update_status(f"C-u {self._prefix_arg}")
            return None
        if self._pending_prefix is None and chord in PREFIX_KEYS:
            self._pending_prefix = chord
            self.hooks.update_status(chord)
            return None

        if self._pending_prefix is not None:
            chord = f"{self._pending_prefix} {chord}"
            self._pending_prefix = None

        command_id = self.keys.get(chord)
        insert_text: Optional[str] = None
        if command_id is None and _is_printable(chord, text):
            command_id = "self-insert-command"
            insert_text = text
        if command_id is None:
            self._prefix_arg = None
            self.hooks.update_status(f"{chord} is undefined")
            telemetry.record_event(
                "adapter.unbound_key", level="debug", data={"key": chord}
            )
            return None

        context = CommandContext(prefix_arg=self._prefix_arg, text=insert_text)
        self._prefix_arg = None
        result = self.engine.execute(self.buffer, command_id, context)
        self._after_result(result)
        self._log_state(
            "result <-",
            command=result.command_id,
            status=result.status,
            message=result.message,
        )
        return result

    def _after_result(self, result: CommandResult) -> None:
        status = result.message or result.command_id
        self.hooks.update_status(status)
        self._refresh_buffer()

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.pull_buffer())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        return {
            "cursors": self.buffer.cursors.positions,
            "primary": self.buffer.cursors.primary_index,
            "prefix_arg": self._prefix_arg,
            "buffer": self.buffer.name,
            "buffer_version": self.buffer.document.version,
        }


def _chord(key: str, modifiers: Iterable[str]) -> str:
    """Fold explicit modifiers into a Textual-style ``ctrl+x`` key name."""

    parts = [str(mod).lower() for mod in modifiers]
    lowered = key.lower() if len(key) > 1 else key
    present = set(lowered.split("+")[:-1])
    prefix = [
        mod for mod in ("ctrl", "alt", "shift") if mod in parts and mod not in present
    ]
    return "+".join([*prefix, lowered])


def _is_printable(chord: str, text: Optional[str]) -> bool:
    if not text or not text.isprintable():
        return False
    return not chord.startswith(("ctrl+", "alt+"))


__all__ = ["DEFAULT_KEYS", "TextualEmacsAdapter", "TextualUIHooks"]
