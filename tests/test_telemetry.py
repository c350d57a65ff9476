import pytest

from emacs_engine.runtime import telemetry


def test_span_handle_payload_includes_component_and_metadata() -> None:
    handle = telemetry.SpanHandle(span_name="buffer::undo", component_name="buffer")
    handle.add_metadata("reverted", 3)

    payload = handle.payload(reason=ValueError("boom"))

    assert payload == {
        "span": "buffer::undo",
        "reverted": "3",
        "component": "buffer",
        "reason": "boom",
    }


def test_span_yields_handle_and_reraises() -> None:
    with pytest.raises(RuntimeError, match="boom"):
        with telemetry.span(
            "command::test", component="commands", metadata={"buffer": "scratch"}
        ) as handle:
            assert handle.component_name == "commands"
            assert handle.metadata == {"buffer": "scratch"}
            raise RuntimeError("boom")


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown preset"):
        telemetry.configure(preset="verbose")
