"""
Discord 网关适配器 - 通过 py-cord 对接 Discord Bot API
Discord gateway adapter - interfaces with the Discord Bot API via py-cord.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any

import discord

from DiscordNexus.event.base import Event
from DiscordNexus.gateway.base import CommandInvocation

if TYPE_CHECKING:
    from DiscordNexus.command.table import CommandTable

logger = logging.getLogger(__name__)

# py-cord 通过 on_<name> 回调分发的网关事件
DISCORD_EVENT_KINDS: tuple[str, ...] = (
    "connect",
    "disconnect",
    "ready",
    "resumed",
    "shard_ready",
    "message",
    "message_edit",
    "message_delete",
    "bulk_message_delete",
    "reaction_add",
    "reaction_remove",
    "reaction_clear",
    "interaction",
    "application_command",
    "typing",
    "member_join",
    "member_remove",
    "member_update",
    "presence_update",
    "user_update",
    "guild_join",
    "guild_remove",
    "guild_update",
    "guild_available",
    "guild_unavailable",
    "guild_role_create",
    "guild_role_delete",
    "guild_channel_create",
    "guild_channel_delete",
    "guild_channel_update",
    "thread_create",
    "thread_delete",
    "voice_state_update",
    "invite_create",
    "invite_delete",
    "webhooks_update",
)

# Discord 交互选项类型：子命令与子命令组
_SUBCOMMAND_TYPES = (1, 2)

# Discord 单次最多返回 25 个自动补全候选项
_MAX_AUTOCOMPLETE_CHOICES = 25


class DiscordGateway:
    """
    Discord 网关 - 实现 EventSource 协议
    Discord gateway - implements the EventSource protocol.
    """

    def __init__(self, bot: discord.Bot | None = None) -> None:
        self._bot = bot or discord.Bot(
            intents=discord.Intents.all(),
            auto_sync_commands=False,
        )
        self._commands: CommandTable | None = None
        self._bot.add_listener(self._publish_on_ready, "on_ready")

    @property
    def bot(self) -> discord.Bot:
        """底层 py-cord 客户端 / Underlying py-cord client."""
        return self._bot

    @property
    def user(self) -> Any:
        return self._bot.user

    def event_kinds(self) -> Iterable[str]:
        return DISCORD_EVENT_KINDS

    def on(self, kind: str, callback: Callable[..., Awaitable[None]]) -> None:
        self._bot.add_listener(callback, f"on_{kind}")

    def as_invocation(self, envelope: Event) -> CommandInvocation | None:
        """
        将交互事件转为命令调用
        Convert an interaction envelope into a command invocation.
        """
        if envelope.kind != "interaction" or not envelope.args:
            return None

        interaction = envelope.args[0]
        if interaction.type not in (
            discord.InteractionType.application_command,
            discord.InteractionType.auto_complete,
        ):
            return None

        data = interaction.data or {}
        name = data.get("name")
        if not name:
            return None

        options: dict[str, Any] = {}
        focused = _collect_options(data.get("options") or [], options)

        async def reply_fn(content: str, ephemeral: bool) -> None:
            if interaction.response.is_done():
                await interaction.followup.send(content, ephemeral=ephemeral)
            else:
                await interaction.response.send_message(content, ephemeral=ephemeral)

        async def autocomplete_fn(choices: Sequence[Any]) -> None:
            await interaction.response.send_autocomplete_result(
                choices=[_to_choice(c) for c in choices[:_MAX_AUTOCOMPLETE_CHOICES]]
            )

        user = interaction.user
        return CommandInvocation(
            command_name=name,
            invoker_id=str(user.id) if user is not None else "",
            invoker=user,
            options=options,
            is_autocomplete=interaction.type == discord.InteractionType.auto_complete,
            focused_value=focused,
            raw=interaction,
            reply_fn=reply_fn,
            autocomplete_fn=autocomplete_fn,
        )

    async def publish_commands(self, table: CommandTable) -> None:
        """
        发布命令表 - 就绪后批量覆盖全局应用命令
        Publish the command table - bulk overwrites global commands once ready.
        """
        self._commands = table
        if self._bot.is_ready():
            await self._upsert_commands()

    async def _publish_on_ready(self) -> None:
        if self._commands is not None:
            await self._upsert_commands()

    async def _upsert_commands(self) -> None:
        if self._commands is None or self._bot.application_id is None:
            return
        payload = self._commands.to_payload()
        try:
            await self._bot.http.bulk_upsert_global_commands(
                self._bot.application_id, payload
            )
        except discord.HTTPException:
            logger.exception("发布应用命令失败")
            return
        logger.info("已发布 %d 个应用命令", len(payload))

    async def connect(self, token: str) -> None:
        await self._bot.start(token)

    async def close(self) -> None:
        if not self._bot.is_closed():
            await self._bot.close()


def _collect_options(raw_options: list[dict[str, Any]], out: dict[str, Any]) -> str:
    """
    展开交互选项（包括子命令），返回正在输入的值
    Flatten interaction options (including subcommands); return the focused value.
    """
    focused = ""
    for option in raw_options:
        if option.get("type") in _SUBCOMMAND_TYPES:
            out.setdefault("subcommand", option.get("name"))
            focused = _collect_options(option.get("options") or [], out) or focused
            continue
        out[option.get("name")] = option.get("value")
        if option.get("focused"):
            focused = str(option.get("value") or "")
    return focused


def _to_choice(choice: Any) -> discord.OptionChoice:
    if isinstance(choice, discord.OptionChoice):
        return choice
    return discord.OptionChoice(name=str(choice), value=choice)
