import json

import pytest

from DiscordNexus.errors import ManifestError, PluginStateError
from DiscordNexus.plugin import PluginManifest, PluginState
from DiscordNexus.plugin.state import PluginDescriptor


def test_manifest_from_yaml(tmp_path) -> None:
    (tmp_path / "plugin.yml").write_text(
        "name: greeter\nmain: bot.entry:Greeter\nversion: 1.0\nauthor: someone\n",
        encoding="utf-8",
    )

    manifest = PluginManifest.from_directory(str(tmp_path))

    assert manifest.name == "greeter"
    assert manifest.version == "1.0"
    assert manifest.entry_module == "bot.entry"
    assert manifest.entry_class == "Greeter"
    assert manifest.directory == str(tmp_path)


def test_yaml_manifest_preferred_over_json(tmp_path) -> None:
    (tmp_path / "plugin.yml").write_text("name: from-yaml\nmain: m:C\n", encoding="utf-8")
    (tmp_path / "plugin.json").write_text(
        json.dumps({"name": "from-json", "main": "m:C"}), encoding="utf-8"
    )

    assert PluginManifest.from_directory(str(tmp_path)).name == "from-yaml"


@pytest.mark.parametrize(
    "content",
    [
        "name: x\n",
        "name: x\nmain: not-an-entry\n",
        "name: 'has space'\nmain: m:C\n",
        "- just\n- a list\n",
        "name: [unclosed\n",
    ],
)
def test_invalid_manifest_raises(tmp_path, content: str) -> None:
    (tmp_path / "plugin.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ManifestError):
        PluginManifest.from_directory(str(tmp_path))


def test_missing_manifest_raises(tmp_path) -> None:
    with pytest.raises(ManifestError):
        PluginManifest.from_directory(str(tmp_path))


def test_lifecycle_transitions() -> None:
    descriptor = PluginDescriptor(identifier="x", directory="x")

    for state in (
        PluginState.ACTIVATING,
        PluginState.ACTIVE,
        PluginState.DEACTIVATING,
        PluginState.DISABLED,
    ):
        descriptor.advance(state)

    assert descriptor.state is PluginState.DISABLED
    with pytest.raises(PluginStateError):
        descriptor.advance(PluginState.ACTIVE)


def test_illegal_transition_raises() -> None:
    descriptor = PluginDescriptor(identifier="x", directory="x")

    with pytest.raises(PluginStateError):
        descriptor.advance(PluginState.ACTIVE)
    descriptor.advance(PluginState.FAILED)
    with pytest.raises(PluginStateError):
        descriptor.advance(PluginState.ACTIVATING)
