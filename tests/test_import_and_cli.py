"""
Tests for the legacy display-name import and the ``shaker`` CLI.
"""

import pytest

from shaker import cli
from shaker.core.config import settings
from shaker.core.errors import StorageUnavailable
from shaker.services.legacy_import import import_display_names, import_display_names_file


# ===========================================================================
# Legacy import
# ===========================================================================


class TestLegacyImport:
    def test_imports_each_name(self, registry):
        summary = import_display_names(registry, ["Alice", "Bob", "Alice"])
        assert summary.imported == 3
        assert summary.failed == 0
        assert len(registry.find_by_display_name("Alice")) == 2

    def test_imported_users_have_no_external_id(self, registry):
        import_display_names(registry, ["Alice"])
        assert registry.find_by_display_name("Alice")[0].external_id is None

    def test_skips_blank_lines(self, registry):
        summary = import_display_names(registry, ["", "  Alice  ", "   ", "Bob"])
        assert summary.imported == 2
        assert registry.count() == 2
        assert registry.find_by_display_name("  Alice  ")
        assert registry.find_by_display_name("Alice") == []

    def test_failures_counted_and_import_continues(self, registry, monkeypatch):
        real_register = registry.register

        def flaky(external_id, display_name):
            if display_name == "Broken":
                raise StorageUnavailable("User storage is unavailable")
            return real_register(external_id, display_name)

        monkeypatch.setattr(registry, "register", flaky)
        summary = import_display_names(registry, ["Alice", "Broken", "Bob"])
        assert summary.imported == 2
        assert summary.failed == 1

    def test_import_from_file(self, registry, tmp_path):
        path = tmp_path / "legacy.txt"
        path.write_text("Alice\nBob\n\nCarol\n", encoding="utf-8")
        summary = import_display_names_file(registry, path)
        assert summary.imported == 3
        assert registry.count() == 3


# ===========================================================================
# CLI
# ===========================================================================


@pytest.fixture
def cli_db(monkeypatch, file_db_url, file_session_factory):
    monkeypatch.setattr(cli, "SessionLocal", file_session_factory)
    monkeypatch.setattr(settings, "DATABASE_URL", file_db_url)
    return file_session_factory


class TestCli:
    def test_register_and_lookup(self, cli_db, capsys):
        assert cli.main(["register", "Alice", "--external-id", "r1"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("#1\tr1\tAlice\t")

        assert cli.main(["lookup", "--external-id", "r1"]) == 0
        assert "Alice" in capsys.readouterr().out

        assert cli.main(["lookup", "--id", "1"]) == 0
        assert "r1" in capsys.readouterr().out

    def test_register_without_external_id(self, cli_db, capsys):
        assert cli.main(["register", "Alice"]) == 0
        assert capsys.readouterr().out.startswith("#1\t-\tAlice\t")

    def test_duplicate_exits_with_error(self, cli_db, capsys):
        cli.main(["register", "Alice", "--external-id", "r1"])
        capsys.readouterr()
        assert cli.main(["register", "Bob", "--external-id", "r1"]) == 1
        assert "already registered" in capsys.readouterr().err

    def test_empty_name_exits_with_error(self, cli_db, capsys):
        assert cli.main(["register", ""]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_lookup_missing(self, cli_db, capsys):
        assert cli.main(["lookup", "--id", "99"]) == 1
        assert "No user with id 99" in capsys.readouterr().err

    def test_count(self, cli_db, capsys):
        cli.main(["register", "Alice"])
        cli.main(["register", "Bob"])
        capsys.readouterr()
        assert cli.main(["count"]) == 0
        assert capsys.readouterr().out.strip() == "2"

    def test_import(self, cli_db, capsys, tmp_path):
        path = tmp_path / "legacy.txt"
        path.write_text("Alice\nBob\n", encoding="utf-8")
        assert cli.main(["import", str(path)]) == 0
        assert "Imported 2 users (0 failed)" in capsys.readouterr().out

    def test_import_missing_file(self, cli_db, capsys, tmp_path):
        assert cli.main(["import", str(tmp_path / "missing.txt")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_import_requires_path(self, cli_db, monkeypatch):
        monkeypatch.setattr(settings, "IMPORT_PATH", None)
        with pytest.raises(SystemExit):
            cli.main(["import"])

    def test_migrate(self, monkeypatch, tmp_path, capsys):
        url = f"sqlite:///{tmp_path / 'migrated.db'}"
        monkeypatch.setattr(settings, "DATABASE_URL", url)
        assert cli.main(["migrate"]) == 0
        assert cli.main(["migrate"]) == 0
