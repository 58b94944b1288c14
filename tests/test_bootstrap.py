import asyncio

import pytest
import yaml

from DiscordNexus.config.defaults import build_default_config
from DiscordNexus.errors import ConfigError
from DiscordNexus.kernel import Bootstrap
from DiscordNexus.kernel.logging import LogManager
from DiscordNexus.plugin import PluginState
from tests.fakes import RECORDING_PLUGIN, TRACE, FakeSource, manifest, write_plugin

pytestmark = pytest.mark.anyio


class TracingSource(FakeSource):
    async def close(self) -> None:
        TRACE.append(("source", "close"))
        await super().close()


class FailingSource(FakeSource):
    async def connect(self, token: str) -> None:
        raise RuntimeError("login failed")


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    LogManager.reset()


@pytest.fixture
def no_token_env(monkeypatch):
    monkeypatch.setenv("CLIENT_TOKEN", "placeholder")
    monkeypatch.delenv("CLIENT_TOKEN")


def _write_config(tmp_path, plugins_dir, token="test-token", **plugins) -> str:
    data = build_default_config()
    data["server"]["token"] = token
    data["plugins"]["directory"] = str(plugins_dir)
    data["plugins"]["data_directory"] = str(tmp_path / "plugin_data")
    data["plugins"].update(plugins)
    data["administrators"]["file"] = str(tmp_path / "administrators.txt")
    data["crashdumps"]["directory"] = str(tmp_path / "crashdumps")
    data["logging"]["directory"] = str(tmp_path / "logs")
    path = tmp_path / "nexus.yml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return str(path)


async def test_shutdown_request_disables_plugins_then_closes_source(
    tmp_path, plugins_dir
) -> None:
    write_plugin(plugins_dir, "rec", manifest("rec"), RECORDING_PLUGIN)
    source = TracingSource()
    bootstrap = Bootstrap(
        config_path=_write_config(tmp_path, plugins_dir), source=source, console=False
    )

    await bootstrap.start()
    assert bootstrap.runtime.loader.get_plugin("rec").state is PluginState.ACTIVE
    TRACE.clear()

    asyncio.get_running_loop().call_soon(bootstrap.request_shutdown)
    await bootstrap.run_forever()

    assert TRACE == [("rec", "disable"), ("source", "close")]
    assert source.token == "test-token"
    assert bootstrap.runtime.loader.get_plugin("rec").state is PluginState.DISABLED


async def test_disable_timeout_reaches_loader_and_shutdown_runs_once(
    tmp_path, plugins_dir
) -> None:
    bootstrap = Bootstrap(
        config_path=_write_config(tmp_path, plugins_dir, disable_timeout=0),
        source=FakeSource(),
        console=False,
    )
    await bootstrap.start()
    timeouts = []

    async def record_timeout(timeout=None) -> None:
        timeouts.append(timeout)

    bootstrap.runtime.loader.disable_plugins = record_timeout

    await bootstrap.shutdown()
    await bootstrap.shutdown()

    assert timeouts == [0.0]


async def test_failed_connection_is_reraised(tmp_path, plugins_dir) -> None:
    source = FailingSource()
    bootstrap = Bootstrap(
        config_path=_write_config(tmp_path, plugins_dir), source=source, console=False
    )
    await bootstrap.start()

    with pytest.raises(RuntimeError, match="login failed"):
        await bootstrap.run_forever()

    assert source.closed


async def test_missing_token_raises(tmp_path, plugins_dir, no_token_env) -> None:
    config_path = _write_config(tmp_path, plugins_dir, token="")
    bootstrap = Bootstrap(config_path=config_path, source=FakeSource(), console=False)

    with pytest.raises(ConfigError):
        await bootstrap.start()
    await bootstrap.shutdown()

    assert bootstrap.runtime is None


async def test_token_is_read_from_env_file(tmp_path, plugins_dir, no_token_env) -> None:
    config_path = _write_config(tmp_path, plugins_dir, token="")
    (tmp_path / ".env").write_text("CLIENT_TOKEN=from-dotenv\n", encoding="utf-8")
    source = FakeSource()
    bootstrap = Bootstrap(config_path=config_path, source=source, console=False)

    await bootstrap.start()
    await asyncio.sleep(0)
    await bootstrap.shutdown()

    assert source.token == "from-dotenv"
