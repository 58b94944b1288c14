"""`python -m DiscordNexus.cli` 的命令行启动入口。"""

from DiscordNexus.cli.main import cli

if __name__ == "__main__":
    cli()
