import pytest

from emacs_engine.buffer import Buffer
from emacs_engine.commands import CommandEngine
from emacs_engine.runtime.config import EngineConfig


def test_defaults() -> None:
    config = EngineConfig()

    assert config.kill_ring_capacity == 60
    assert config.mark_ring_capacity == 16


def test_from_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EMACS_ENGINE_KILL_RING_CAPACITY", "5")
    monkeypatch.setenv("EMACS_ENGINE_ROPE_LEAF_SIZE", "8")

    config = EngineConfig.from_env()

    assert config.kill_ring_capacity == 5
    assert config.rope_leaf_size == 8
    assert config.mark_ring_capacity == 16


def test_from_env_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EMACS_ENGINE_MARK_RING_CAPACITY", "lots")

    with pytest.raises(ValueError):
        EngineConfig.from_env()


def test_invalid_capacity() -> None:
    with pytest.raises(ValueError):
        EngineConfig(kill_ring_capacity=0)


def test_config_flows_into_rings() -> None:
    config = EngineConfig(kill_ring_capacity=2, mark_ring_capacity=3)

    engine = CommandEngine(config=config)
    buffer = Buffer.from_text("abc", config=config)

    assert engine.kill_ring.capacity == 2
    assert buffer.marks.capacity == 3
