"""
nexus 命令行 - 启动运行时并管理配置、插件与管理员
nexus command line - runs the runtime and manages config, plugins and admins.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

import click
import yaml

from DiscordNexus.config.defaults import CONFIG_FILE


@click.group()
def cli() -> None:
    """DiscordNexus - 可扩展的 Discord 插件运行时"""
    pass


@cli.command()
@click.option("--config", "config_path", default=CONFIG_FILE, help="配置文件路径")
@click.option("--debug", is_flag=True, help="开启调试日志")
@click.option("--no-console", is_flag=True, help="不读取控制台命令")
def run(config_path: str, debug: bool, no_console: bool) -> None:
    """启动 DiscordNexus / Start DiscordNexus."""
    from DiscordNexus.kernel.bootstrap import Bootstrap

    bootstrap = Bootstrap(config_path=config_path, console=not no_console, debug=debug)
    logger = logging.getLogger("DiscordNexus")

    async def main() -> None:
        try:
            await bootstrap.start()
        except BaseException:
            await bootstrap.shutdown()
            raise
        await bootstrap.run_forever()

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("收到键盘中断信号")
    except Exception as exc:
        logger.exception("致命错误")
        if bootstrap.crash_reporter is not None:
            bootstrap.crash_reporter.write(exc, context="startup")
        sys.exit(1)


@cli.command()
@click.option("--config", "config_path", default=CONFIG_FILE, help="配置文件路径")
def init(config_path: str) -> None:
    """初始化配置 / Initialize configuration."""
    from DiscordNexus.config.defaults import build_default_config

    if os.path.exists(config_path):
        click.echo(f"配置文件已存在: {config_path}")
        if not click.confirm("是否覆盖?"):
            return

    os.makedirs(os.path.dirname(config_path) or ".", exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(build_default_config(), f, allow_unicode=True, sort_keys=False)

    click.echo(f"配置文件已创建: {config_path}")


@cli.command()
def version() -> None:
    """显示版本信息 / Show version info."""
    from DiscordNexus import __app_name__, __version__

    click.echo(f"{__app_name__} v{__version__}")


def _load_config(config_path: str):
    from DiscordNexus.config.defaults import build_default_config
    from DiscordNexus.config.manager import ConfigManager
    from DiscordNexus.errors import ConfigError

    config = ConfigManager(defaults=build_default_config(), config_path=config_path)
    try:
        asyncio.run(config.load())
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    return config


@cli.group()
def plugins() -> None:
    """插件管理 / Plugin management."""
    pass


@plugins.command("list")
@click.option("--config", "config_path", default=CONFIG_FILE, help="配置文件路径")
def plugins_list(config_path: str) -> None:
    """列出已安装的插件 / List installed plugins."""
    from DiscordNexus.errors import ManifestError
    from DiscordNexus.plugin.manifest import PluginManifest

    config = _load_config(config_path)
    plugins_dir = config.get("plugins.directory", "plugins")
    if not os.path.isdir(plugins_dir):
        click.echo("没有找到插件目录")
        return

    entries = sorted(
        e for e in os.listdir(plugins_dir) if os.path.isdir(os.path.join(plugins_dir, e))
    )
    if not entries:
        click.echo("没有已安装的插件")
        return

    for entry in entries:
        try:
            manifest = PluginManifest.from_directory(os.path.join(plugins_dir, entry))
        except ManifestError as exc:
            click.echo(f"  - {entry} (清单无效: {exc})")
            continue
        click.echo(f"  - {manifest.name} v{manifest.version} ({manifest.main})")


@cli.group()
def admins() -> None:
    """管理员管理 / Administrator management."""
    pass


def _registry(config_path: str):
    from DiscordNexus.store.admins import AdministratorRegistry

    config = _load_config(config_path)
    return AdministratorRegistry.from_file(
        config.get("administrators.file", "administrators.txt")
    )


@admins.command("list")
@click.option("--config", "config_path", default=CONFIG_FILE, help="配置文件路径")
def admins_list(config_path: str) -> None:
    """列出管理员 / List administrators."""
    for user_id in _registry(config_path).list():
        click.echo(f"  - {user_id}")


@admins.command("add")
@click.argument("user_id")
@click.option("--config", "config_path", default=CONFIG_FILE, help="配置文件路径")
def admins_add(user_id: str, config_path: str) -> None:
    """添加管理员 / Add an administrator."""
    _registry(config_path).add(user_id)
    click.echo(f"已添加管理员: {user_id}")


@admins.command("remove")
@click.argument("user_id")
@click.option("--config", "config_path", default=CONFIG_FILE, help="配置文件路径")
def admins_remove(user_id: str, config_path: str) -> None:
    """移除管理员 / Remove an administrator."""
    removed = _registry(config_path).remove(user_id)
    click.echo(f"已移除管理员: {user_id} ({removed} 条记录)")


@cli.group()
def conf() -> None:
    """配置管理 / Configuration management."""
    pass


@conf.command("show")
@click.argument("key", required=False)
@click.option("--config", "config_path", default=CONFIG_FILE, help="配置文件路径")
def conf_show(key: str | None, config_path: str) -> None:
    """显示配置 / Show configuration."""
    config = _load_config(config_path)
    if key:
        value = config.get(key)
        if value is None:
            click.echo(f"键 '{key}' 不存在")
            return
        if not isinstance(value, (dict, list)):
            click.echo(value)
            return
        click.echo(yaml.safe_dump(value, allow_unicode=True, sort_keys=False).rstrip())
    else:
        click.echo(
            yaml.safe_dump(config.as_dict(), allow_unicode=True, sort_keys=False).rstrip()
        )


if __name__ == "__main__":
    cli()
