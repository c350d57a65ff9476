"""The undo command."""

from __future__ import annotations

from .models import ExecutionContext


def undo(context: ExecutionContext) -> None:
    """Revert one undo group; repeated undos keep walking back.

    Any other command ends the sequence, after which ``undo`` starts by
    reverting the undos themselves.
    """

    context.buffer.undo_step()


__all__ = ["undo"]
