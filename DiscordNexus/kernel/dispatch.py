"""
交互路由 - 将命令交互路由到命令处理器
Interaction router - routes command interactions to command handlers.

每个交互的状态：
RECEIVED -> AUTHORIZATION_CHECKED -> {AUTHORIZED, REJECTED}
AUTHORIZED -> {EXECUTED, AUTOCOMPLETED, EXECUTION_FAILED}

处理器抛出的异常在这里被捕获并记录，调用者收不到任何回复，
路由循环本身永远不会因为某个命令而中断。
Handler errors are caught and recorded here; the invoker gets no reply and
the routing loop is never interrupted by a broken command.
"""

from __future__ import annotations

import inspect
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from DiscordNexus.lang.keys import TranslationKeys

if TYPE_CHECKING:
    from DiscordNexus.command.table import CommandTable
    from DiscordNexus.gateway.base import CommandInvocation
    from DiscordNexus.lang.language import Language
    from DiscordNexus.store.admins import AdministratorRegistry

logger = logging.getLogger(__name__)


class InteractionState(str, Enum):
    """交互状态 / Interaction state."""

    RECEIVED = "received"
    AUTHORIZATION_CHECKED = "authorization_checked"
    AUTHORIZED = "authorized"
    REJECTED = "rejected"
    AUTOCOMPLETED = "autocompleted"
    EXECUTED = "executed"
    EXECUTION_FAILED = "execution_failed"


@dataclass
class DispatchResult:
    """
    路由结果
    Routing result of a single interaction.
    """

    command: str
    invoker_id: str
    state: InteractionState = InteractionState.RECEIVED
    error: BaseException | None = None

    @property
    def failed(self) -> bool:
        return self.state is InteractionState.EXECUTION_FAILED


class InteractionRouter:
    """
    交互路由器
    Interaction router.
    """

    def __init__(
        self,
        commands: CommandTable,
        admins: AdministratorRegistry,
        language: Language,
        max_failures: int = 100,
    ) -> None:
        self._commands = commands
        self._admins = admins
        self._language = language
        # 最近的执行失败记录
        self._failures: deque[DispatchResult] = deque(maxlen=max_failures)

    @property
    def failures(self) -> list[DispatchResult]:
        """最近的执行失败 / Recent execution failures."""
        return list(self._failures)

    async def route(self, invocation: CommandInvocation) -> DispatchResult | None:
        """
        路由一个命令交互
        Route a single command interaction.

        未知命令返回 None 且不回复调用者。
        Unknown commands return None and the invoker gets no reply.
        """
        descriptor = self._commands.resolve(invocation.command_name)
        if descriptor is None:
            logger.debug(
                "忽略未知命令 %s (来自 %s)",
                invocation.command_name,
                invocation.invoker_id,
            )
            return None

        result = DispatchResult(
            command=descriptor.name, invoker_id=invocation.invoker_id
        )

        allowed = not descriptor.administrator or self._admins.is_administrator(
            invocation.invoker_id
        )
        result.state = InteractionState.AUTHORIZATION_CHECKED
        if not allowed:
            result.state = InteractionState.REJECTED
            logger.info(
                "拒绝非管理员 %s 调用命令 %s", invocation.invoker_id, descriptor.name
            )
            try:
                if invocation.is_autocomplete:
                    # 自动补全交互不能发送消息
                    await invocation.send_autocomplete([])
                else:
                    await invocation.reply(
                        self._language.get(TranslationKeys.COMMAND_NOT_ADMINISTRATOR),
                        ephemeral=True,
                    )
            except Exception:
                logger.exception("发送拒绝消息失败")
            return result
        result.state = InteractionState.AUTHORIZED

        try:
            if invocation.is_autocomplete:
                choices = await self._commands.list_for_autocomplete(
                    descriptor.name, invocation
                )
                await invocation.send_autocomplete(choices)
                result.state = InteractionState.AUTOCOMPLETED
            else:
                outcome = descriptor.execute(
                    invocation.invoker, invocation, invocation.options
                )
                if inspect.isawaitable(outcome):
                    await outcome
                result.state = InteractionState.EXECUTED
        except Exception as exc:
            result.state = InteractionState.EXECUTION_FAILED
            result.error = exc
            self._failures.append(result)
            logger.exception(
                "命令 %s 执行出错 (调用者 %s)", descriptor.name, invocation.invoker_id
            )

        return result
