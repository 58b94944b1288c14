import io

import pytest

from DiscordNexus.console import ConsoleReader
from DiscordNexus.kernel import NexusRuntime
from tests.fakes import RECORDING_PLUGIN, manifest, write_plugin

pytestmark = pytest.mark.anyio


@pytest.fixture
async def runtime(config, fake_source, admins, plugins_dir) -> NexusRuntime:
    write_plugin(plugins_dir, "rec", manifest("rec"), RECORDING_PLUGIN)
    runtime = NexusRuntime(config, fake_source, admins=admins)
    await runtime.start()
    return runtime


def _reader(runtime, lines: list[str], stops: list[bool], text: str = "") -> ConsoleReader:
    return ConsoleReader(
        runtime,
        lambda: stops.append(True),
        stream=io.StringIO(text),
        output=lines.append,
    )


async def test_admin_commands_update_registry(runtime) -> None:
    lines: list[str] = []
    reader = _reader(runtime, lines, [])

    await reader.execute("admin add u5")
    await reader.execute("admins")
    await reader.execute("admin remove u5")

    assert lines == [
        "Added administrator u5",
        "Administrators: u5",
        "Removed administrator u5",
    ]
    assert not runtime.admins.is_administrator("u5")


async def test_unknown_command_is_translated(runtime) -> None:
    lines: list[str] = []

    await _reader(runtime, lines, []).execute("frobnicate now")

    assert lines == ['Unknown command "frobnicate". Type "help" for a list of commands.']


async def test_plugins_lists_state(runtime) -> None:
    lines: list[str] = []

    await _reader(runtime, lines, []).execute("plugins")

    assert lines == ["  rec v1.0.0 [active]"]


async def test_run_reads_until_end_of_input(runtime) -> None:
    lines: list[str] = []
    stops: list[bool] = []
    reader = _reader(runtime, lines, stops, text="\nhelp\nadmin\nstop\n")

    await reader.run()

    assert lines[0].startswith("Available commands:")
    assert lines[1] == "Usage: admin <add|remove> <id>"
    assert stops == [True]
