from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from DiscordNexus.event.builtin import InteractionEvent, MessageEvent
from DiscordNexus.gateway.base import EventSource
from DiscordNexus.gateway.discord_adapter import DiscordGateway


def _interaction(
    data: dict,
    kind: discord.InteractionType = discord.InteractionType.application_command,
    done: bool = False,
) -> SimpleNamespace:
    return SimpleNamespace(
        type=kind,
        data=data,
        user=SimpleNamespace(id=42, name="someone"),
        response=SimpleNamespace(
            is_done=MagicMock(return_value=done),
            send_message=AsyncMock(),
            send_autocomplete_result=AsyncMock(),
        ),
        followup=SimpleNamespace(send=AsyncMock()),
    )


@pytest.fixture
def gateway() -> DiscordGateway:
    return DiscordGateway(bot=MagicMock())


def test_gateway_is_an_event_source(gateway) -> None:
    assert isinstance(gateway, EventSource)
    assert "interaction" in gateway.event_kinds()


def test_on_subscribes_bot_listener(gateway) -> None:
    async def callback(*args) -> None:
        return None

    gateway.on("message", callback)

    gateway.bot.add_listener.assert_called_with(callback, "on_message")


def test_non_command_envelopes_are_not_invocations(gateway) -> None:
    component = _interaction({"custom_id": "x"}, kind=discord.InteractionType.component)

    assert gateway.as_invocation(MessageEvent(kind="message", args=("hi",))) is None
    assert gateway.as_invocation(InteractionEvent(kind="interaction")) is None
    assert (
        gateway.as_invocation(InteractionEvent(kind="interaction", args=(component,)))
        is None
    )


def test_options_are_flattened(gateway) -> None:
    interaction = _interaction(
        {
            "name": "config",
            "options": [
                {
                    "type": 1,
                    "name": "set",
                    "options": [
                        {"type": 3, "name": "key", "value": "lang"},
                        {"type": 3, "name": "value", "value": "spa"},
                    ],
                }
            ],
        }
    )

    invocation = gateway.as_invocation(
        InteractionEvent(kind="interaction", args=(interaction,))
    )

    assert invocation.command_name == "config"
    assert invocation.invoker_id == "42"
    assert invocation.options == {"subcommand": "set", "key": "lang", "value": "spa"}
    assert not invocation.is_autocomplete


def test_autocomplete_tracks_focused_value(gateway) -> None:
    interaction = _interaction(
        {
            "name": "color",
            "options": [{"type": 3, "name": "name", "value": "re", "focused": True}],
        },
        kind=discord.InteractionType.auto_complete,
    )

    invocation = gateway.as_invocation(
        InteractionEvent(kind="interaction", args=(interaction,))
    )

    assert invocation.is_autocomplete
    assert invocation.focused_value == "re"


@pytest.mark.anyio
async def test_reply_uses_followup_once_responded(gateway) -> None:
    fresh = _interaction({"name": "ping"})
    answered = _interaction({"name": "ping"}, done=True)

    await gateway.as_invocation(
        InteractionEvent(kind="interaction", args=(fresh,))
    ).reply("pong", ephemeral=True)
    await gateway.as_invocation(
        InteractionEvent(kind="interaction", args=(answered,))
    ).reply("again")

    fresh.response.send_message.assert_awaited_once_with("pong", ephemeral=True)
    answered.followup.send.assert_awaited_once_with("again", ephemeral=False)


@pytest.mark.anyio
async def test_autocomplete_choices_are_capped(gateway) -> None:
    interaction = _interaction(
        {"name": "color"}, kind=discord.InteractionType.auto_complete
    )
    invocation = gateway.as_invocation(
        InteractionEvent(kind="interaction", args=(interaction,))
    )

    await invocation.send_autocomplete([f"c{i}" for i in range(40)])

    choices = interaction.response.send_autocomplete_result.await_args.kwargs["choices"]
    assert len(choices) == 25
    assert all(isinstance(choice, discord.OptionChoice) for choice in choices)
