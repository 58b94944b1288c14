import os

from DiscordNexus.store import AdministratorRegistry, PersistedList


def test_persisted_list_creates_missing_file(tmp_path) -> None:
    path = tmp_path / "nested" / "items.txt"
    records = PersistedList(str(path))

    assert path.exists()
    assert records.get_all() == []
    assert len(records) == 0


def test_persisted_list_append_flushes(tmp_path) -> None:
    path = tmp_path / "items.txt"
    records = PersistedList(str(path))

    records.append("a")
    records.append("b")

    assert path.read_text(encoding="utf-8").splitlines() == ["a", "b"]
    assert "a" in records


def test_persisted_list_filter_returns_removed_count(tmp_path) -> None:
    path = tmp_path / "items.txt"
    path.write_text("a\nb\na\nc\n", encoding="utf-8")
    records = PersistedList(str(path))

    removed = records.filter(lambda item: item != "a")

    assert removed == 2
    assert path.read_text(encoding="utf-8").splitlines() == ["b", "c"]


def test_persisted_list_save_leaves_no_temp_files(tmp_path) -> None:
    records = PersistedList(str(tmp_path / "items.txt"))
    records.set_all(["x", "y"])
    records.save()

    assert sorted(os.listdir(tmp_path)) == ["items.txt"]


def test_persisted_list_reload_sees_external_edits(tmp_path) -> None:
    path = tmp_path / "items.txt"
    records = PersistedList(str(path))
    path.write_text("outside\n\n", encoding="utf-8")

    records.reload()

    assert records.get_all() == ["outside"]


def test_remove_drops_every_occurrence(tmp_path) -> None:
    path = tmp_path / "administrators.txt"
    path.write_text("u1\nu1\nu2", encoding="utf-8")
    admins = AdministratorRegistry.from_file(str(path))

    assert admins.remove("u1") == 2
    assert admins.is_administrator("u1") is False
    assert admins.is_administrator("u2") is True
    assert path.read_text(encoding="utf-8").splitlines() == ["u2"]


def test_add_persists_before_returning(tmp_path) -> None:
    path = tmp_path / "administrators.txt"
    admins = AdministratorRegistry.from_file(str(path))

    admins.add(1234)

    assert path.read_text(encoding="utf-8").splitlines() == ["1234"]
    assert admins.is_administrator("1234")
    assert admins.is_administrator(1234)


def test_registry_reads_file_changes(tmp_path) -> None:
    path = tmp_path / "administrators.txt"
    admins = AdministratorRegistry.from_file(str(path))
    assert not admins.is_administrator("u9")

    path.write_text("u9\n", encoding="utf-8")

    assert admins.is_administrator("u9")


def test_list_is_deduplicated_in_insertion_order(tmp_path) -> None:
    path = tmp_path / "administrators.txt"
    path.write_text("u2\nu1\nu2\n", encoding="utf-8")
    admins = AdministratorRegistry.from_file(str(path))

    assert admins.list() == ["u2", "u1"]


def test_remove_unknown_user_is_noop(admins) -> None:
    admins.add("u1")

    assert admins.remove("nobody") == 0
    assert admins.list() == ["u1"]
