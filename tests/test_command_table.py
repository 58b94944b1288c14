import pytest

from DiscordNexus.command.descriptor import CommandDescriptor, CommandOption, OptionType
from DiscordNexus.command.table import CommandTable


def _noop(invoker, invocation, options) -> None:
    return None


def test_register_and_resolve() -> None:
    table = CommandTable()
    descriptor = CommandDescriptor(name="ping", execute=_noop, owner="a")

    table.register(descriptor)

    assert table.resolve("ping") is descriptor
    assert table.resolve("pong") is None
    assert "ping" in table
    assert len(table) == 1


def test_last_registration_wins() -> None:
    table = CommandTable()
    first = CommandDescriptor(name="ping", execute=_noop, owner="a")
    second = CommandDescriptor(name="ping", execute=_noop, owner="b")

    assert table.register(first) is None
    assert table.register(second) is first

    assert table.resolve("ping") is second
    assert table.names() == ["ping"]


def test_unregister_respects_owner() -> None:
    table = CommandTable()
    table.register(CommandDescriptor(name="ping", execute=_noop, owner="b"))

    assert table.unregister("ping", owner="a") is False
    assert "ping" in table
    assert table.unregister("ping", owner="b") is True
    assert "ping" not in table
    assert table.unregister("ping") is False


@pytest.mark.anyio
async def test_autocomplete_missing_command_or_handler_is_empty() -> None:
    table = CommandTable()
    table.register(CommandDescriptor(name="ping", execute=_noop))

    assert await table.list_for_autocomplete("missing", None) == []
    assert await table.list_for_autocomplete("ping", None) == []


@pytest.mark.anyio
async def test_autocomplete_accepts_sync_and_async_handlers() -> None:
    table = CommandTable()

    async def colors(invocation):
        return ["red", "green"]

    table.register(
        CommandDescriptor(name="color", execute=_noop, autocomplete=colors)
    )
    table.register(
        CommandDescriptor(
            name="size", execute=_noop, autocomplete=lambda invocation: ("s", "m")
        )
    )

    assert await table.list_for_autocomplete("color", None) == ["red", "green"]
    assert await table.list_for_autocomplete("size", None) == ["s", "m"]


def test_payload_includes_options() -> None:
    table = CommandTable()
    table.register(
        CommandDescriptor(
            name="echo",
            execute=_noop,
            description="Echo text",
            options=[
                CommandOption(name="text", type=OptionType.STRING, required=True),
            ],
        )
    )
    table.register(CommandDescriptor(name="bare", execute=_noop))

    payload = {item["name"]: item for item in table.to_payload()}

    assert payload["echo"]["description"] == "Echo text"
    assert payload["echo"]["options"] == [
        {
            "name": "text",
            "description": "-",
            "type": 3,
            "required": True,
            "autocomplete": False,
        }
    ]
    assert payload["bare"]["description"] == "bare"
    assert payload["bare"]["options"] == []
