#!/usr/bin/env python3
"""
DiscordNexus - 可扩展的 Discord 插件运行时
应用主入口。
"""

import sys


def check_environment() -> None:
    """校验运行环境要求。"""
    if sys.version_info < (3, 10):
        print("Error: Python 3.10 or higher is required.")
        sys.exit(1)


def display_banner() -> None:
    """显示应用启动横幅。"""
    from DiscordNexus import __version__

    banner = r"""
  ____  _                       _ _   _
 |  _ \(_)___  ___ ___  _ __ __| | \ | | _____  ___   _ ___
 | | | | / __|/ __/ _ \| '__/ _` |  \| |/ _ \ \/ / | | / __|
 | |_| | \__ \ (_| (_) | | | (_| | |\  |  __/>  <| |_| \__ \
 |____/|_|___/\___\___/|_|  \__,_|_| \_|\___/_/\_\\__,_|___/
"""
    print(banner)
    print(f"  Version {__version__} | Extensible Discord plugin runtime")
    print("  ─" * 32)


def main() -> None:
    """应用主入口：不带参数时直接启动。"""
    check_environment()

    from DiscordNexus.cli.main import cli

    args = sys.argv[1:] or ["run"]
    if args[0] == "run":
        display_banner()
    cli.main(args=args, prog_name="nexus")


if __name__ == "__main__":
    main()
