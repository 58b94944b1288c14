import pytest

from DiscordNexus.event import Event, EventBinder, EventRegistry
from DiscordNexus.event.builtin import MessageEvent, ReadyEvent, default_registry
from tests.fakes import FakeSource


def test_binds_registered_kinds_once(fake_source: FakeSource) -> None:
    binder = EventBinder(default_registry())

    async def forward(envelope: Event) -> None:
        return None

    first = binder.bind(fake_source, forward)
    second = binder.bind(fake_source, forward)

    assert "ready" in first
    assert "message" in first
    assert second == []
    assert all(len(callbacks) == 1 for callbacks in fake_source.listeners.values())


def test_unregistered_kind_is_skipped(fake_source: FakeSource) -> None:
    binder = EventBinder(default_registry())

    async def forward(envelope: Event) -> None:
        return None

    bound = binder.bind(fake_source, forward)

    assert "typing" not in bound
    assert "typing" not in fake_source.listeners


def test_broken_lazy_factory_is_skipped() -> None:
    registry = EventRegistry()
    registry.register("ready", ReadyEvent)
    registry.register("message", "nexus_missing_module:Nothing")
    source = FakeSource(kinds=["ready", "message"])
    binder = EventBinder(registry)

    async def forward(envelope: Event) -> None:
        return None

    assert binder.bind(source, forward) == ["ready"]
    assert binder.bound_kinds == ["ready"]


def test_lazy_factory_is_imported_on_resolve() -> None:
    registry = EventRegistry()
    registry.register("message", "DiscordNexus.event.builtin:MessageEvent")

    assert registry.resolve("message") is MessageEvent
    assert registry.resolve("unknown") is None


@pytest.mark.anyio
async def test_forwarder_wraps_callback_arguments(fake_source: FakeSource) -> None:
    received: list[Event] = []

    async def forward(envelope: Event) -> None:
        received.append(envelope)

    EventBinder(default_registry()).bind(fake_source, forward)
    await fake_source.emit("message", "hello")

    assert len(received) == 1
    envelope = received[0]
    assert isinstance(envelope, MessageEvent)
    assert envelope.kind == "message"
    assert envelope.args == ("hello",)
    assert envelope.arg(1, "default") == "default"


@pytest.mark.anyio
async def test_factory_error_drops_the_event() -> None:
    def explode(**kwargs) -> Event:
        raise ValueError("boom")

    registry = EventRegistry()
    registry.register("ready", explode)
    source = FakeSource(kinds=["ready"])
    received: list[Event] = []

    async def forward(envelope: Event) -> None:
        received.append(envelope)

    EventBinder(registry).bind(source, forward)
    await source.emit("ready")

    assert received == []


def test_envelopes_are_immutable() -> None:
    envelope = ReadyEvent(kind="ready")

    with pytest.raises(AttributeError):
        envelope.kind = "other"  # type: ignore[misc]
