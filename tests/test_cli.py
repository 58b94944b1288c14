import yaml
from click.testing import CliRunner

from DiscordNexus import __version__
from DiscordNexus.cli.main import cli


def test_version() -> None:
    result = CliRunner().invoke(cli, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_init_writes_defaults(tmp_path) -> None:
    path = tmp_path / "nexus.yml"

    result = CliRunner().invoke(cli, ["init", "--config", str(path)])

    assert result.exit_code == 0
    assert yaml.safe_load(path.read_text(encoding="utf-8"))["plugins"]["directory"] == "plugins"


def test_admin_commands_share_the_file(tmp_path) -> None:
    path = tmp_path / "nexus.yml"
    admins_file = tmp_path / "admins.txt"
    path.write_text(
        yaml.safe_dump({"administrators": {"file": str(admins_file)}}), encoding="utf-8"
    )
    runner = CliRunner()

    assert runner.invoke(cli, ["admins", "add", "u1", "--config", str(path)]).exit_code == 0
    assert runner.invoke(cli, ["admins", "add", "u2", "--config", str(path)]).exit_code == 0
    runner.invoke(cli, ["admins", "remove", "u1", "--config", str(path)])
    result = runner.invoke(cli, ["admins", "list", "--config", str(path)])

    assert admins_file.read_text(encoding="utf-8").splitlines() == ["u2"]
    assert "u2" in result.output
    assert "u1" not in result.output


def test_conf_show_key(tmp_path) -> None:
    path = tmp_path / "nexus.yml"
    path.write_text("server:\n  language: spa\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["conf", "show", "server.language", "--config", str(path)])

    assert result.exit_code == 0
    assert result.output.strip() == "spa"


def test_broken_config_is_reported(tmp_path) -> None:
    path = tmp_path / "nexus.yml"
    path.write_text("server: [broken\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["conf", "show", "--config", str(path)])

    assert result.exit_code == 1
