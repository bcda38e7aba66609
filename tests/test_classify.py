"""Tests for event classification."""

import pytest

from docksync._exclude import ExcludeFilter
from docksync._types import Action, ChangeKind, FileEvent
from docksync.classify import classify

ALL_KINDS = list(ChangeKind)


def _ev(path, *kinds, is_dir=False):
    return FileEvent(path, frozenset(kinds), is_dir)


class TestBackupFiles:
    @pytest.mark.parametrize("kind", ALL_KINDS)
    def test_tilde_always_ignored(self, kind):
        assert classify(_ev("/src/.notes.txt~", kind)) is Action.IGNORE

    @pytest.mark.parametrize("name", ["a.txt.swp", ".a.txt.swx", "b.swpx"])
    def test_swap_files_ignored(self, name):
        assert classify(_ev(f"/src/{name}", ChangeKind.WRITE)) is Action.IGNORE

    def test_tilde_with_every_kind_at_once(self):
        ev = FileEvent("/src/x~", frozenset(ALL_KINDS))
        assert classify(ev) is Action.IGNORE

    def test_tilde_in_middle_is_not_backup(self):
        assert classify(_ev("/src/a~b.txt", ChangeKind.WRITE)) is Action.UPSERT


class TestKinds:
    @pytest.mark.parametrize("kind", [ChangeKind.WRITE, ChangeKind.CREATE])
    def test_upsert(self, kind):
        assert classify(_ev("/src/a.txt", kind)) is Action.UPSERT

    @pytest.mark.parametrize("kind", [ChangeKind.REMOVE, ChangeKind.RENAME])
    def test_delete(self, kind):
        assert classify(_ev("/src/a.txt", kind)) is Action.DELETE

    def test_chmod_ignored(self):
        assert classify(_ev("/src/a.txt", ChangeKind.CHMOD)) is Action.IGNORE

    def test_write_wins_over_remove(self):
        ev = _ev("/src/a.txt", ChangeKind.REMOVE, ChangeKind.WRITE)
        assert classify(ev) is Action.UPSERT

    def test_create_and_rename(self):
        ev = _ev("/src/a.txt", ChangeKind.RENAME, ChangeKind.CREATE)
        assert classify(ev) is Action.UPSERT

    def test_rename_and_chmod(self):
        ev = _ev("/src/a.txt", ChangeKind.RENAME, ChangeKind.CHMOD)
        assert classify(ev) is Action.DELETE

    def test_directory_create(self):
        assert classify(_ev("/src/new", ChangeKind.CREATE, is_dir=True)) is Action.UPSERT


class TestExcludePatterns:
    def test_pattern_match_ignored(self):
        ef = ExcludeFilter(patterns=["*.log"])
        ev = _ev("/src/app.log", ChangeKind.WRITE)
        assert classify(ev, excludes=ef, rel_path="app.log") is Action.IGNORE

    def test_pattern_needs_rel_path(self):
        ef = ExcludeFilter(patterns=["*.log"])
        ev = _ev("/src/app.log", ChangeKind.WRITE)
        assert classify(ev, excludes=ef) is Action.UPSERT

    def test_directory_pattern(self):
        ef = ExcludeFilter(patterns=["node_modules/"])
        ev = _ev("/src/node_modules", ChangeKind.CREATE, is_dir=True)
        assert classify(ev, excludes=ef, rel_path="node_modules") is Action.IGNORE

    def test_non_matching_passes(self):
        ef = ExcludeFilter(patterns=["*.log"])
        ev = _ev("/src/app.py", ChangeKind.REMOVE)
        assert classify(ev, excludes=ef, rel_path="app.py") is Action.DELETE


class TestFileEvent:
    def test_empty_kinds_rejected(self):
        with pytest.raises(ValueError):
            FileEvent("/src/a", frozenset())

    def test_string_kinds_coerced(self):
        ev = FileEvent("/src/a", frozenset({"write"}))
        assert ev.kinds == {ChangeKind.WRITE}

    def test_relative_to(self):
        assert _ev("/src/a/b.txt", ChangeKind.WRITE).relative_to("/src") == "a/b.txt"
