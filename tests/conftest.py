import pytest
import yaml

from DiscordNexus.config.defaults import build_default_config
from DiscordNexus.config.manager import ConfigManager
from DiscordNexus.store.admins import AdministratorRegistry
from tests.fakes import TRACE, FakeSource


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def plugins_dir(tmp_path):
    path = tmp_path / "plugins"
    path.mkdir()
    return path


@pytest.fixture
async def config(tmp_path, plugins_dir) -> ConfigManager:
    data = build_default_config()
    data["plugins"]["directory"] = str(plugins_dir)
    data["plugins"]["data_directory"] = str(tmp_path / "plugin_data")
    data["administrators"]["file"] = str(tmp_path / "administrators.txt")
    data["server"]["token"] = "test-token"
    path = tmp_path / "nexus.yml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")

    manager = ConfigManager(defaults=build_default_config(), config_path=str(path))
    await manager.load()
    return manager


@pytest.fixture
def admins(tmp_path) -> AdministratorRegistry:
    return AdministratorRegistry.from_file(str(tmp_path / "administrators.txt"))


@pytest.fixture(autouse=True)
def _clear_trace():
    TRACE.clear()
    yield
    TRACE.clear()
