"""Engine-wide tunables resolved from keyword arguments or the environment."""

from __future__ import annotations

from dataclasses import dataclass

from . import telemetry

DEFAULT_KILL_RING_CAPACITY = 60
DEFAULT_MARK_RING_CAPACITY = 16
DEFAULT_ROPE_LEAF_SIZE = 1024


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Capacities shared by buffers and the command engine."""

    kill_ring_capacity: int = DEFAULT_KILL_RING_CAPACITY
    mark_ring_capacity: int = DEFAULT_MARK_RING_CAPACITY
    rope_leaf_size: int = DEFAULT_ROPE_LEAF_SIZE

    def __post_init__(self) -> None:
        if self.kill_ring_capacity <= 0:
            raise ValueError("kill_ring_capacity must be positive")
        if self.mark_ring_capacity <= 0:
            raise ValueError("mark_ring_capacity must be positive")
        if self.rope_leaf_size < 2:
            raise ValueError("rope_leaf_size must be at least 2")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from ``EMACS_ENGINE_*`` variables over the defaults."""

        return cls(
            kill_ring_capacity=telemetry.env_int(
                "KILL_RING_CAPACITY", DEFAULT_KILL_RING_CAPACITY
            ),
            mark_ring_capacity=telemetry.env_int(
                "MARK_RING_CAPACITY", DEFAULT_MARK_RING_CAPACITY
            ),
            rope_leaf_size=telemetry.env_int("ROPE_LEAF_SIZE", DEFAULT_ROPE_LEAF_SIZE),
        )


__all__ = [
    "DEFAULT_KILL_RING_CAPACITY",
    "DEFAULT_MARK_RING_CAPACITY",
    "DEFAULT_ROPE_LEAF_SIZE",
    "EngineConfig",
]
