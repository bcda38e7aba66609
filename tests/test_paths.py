"""Tests for host → container path mapping."""

import pytest

from docksync._types import SyncConfig
from docksync.exceptions import PathResolutionError
from docksync.paths import container_path, relative


class TestRelative:
    def test_direct_child(self):
        assert relative("/src", "/src/a.txt") == "a.txt"

    def test_nested(self):
        assert relative("/src", "/src/a/b.txt") == "a/b.txt"

    def test_trailing_separator_on_root(self):
        assert relative("/src/", "/src/a/b.txt") == "a/b.txt"

    def test_unnormalized_path(self):
        assert relative("/src", "/src/a/./x/../b.txt") == "a/b.txt"

    @pytest.mark.parametrize("path", [
        "/src/a.txt", "/src/a/b/c/d.txt", "/src/.hidden", "/src/..dots",
    ])
    def test_no_leading_separator_or_parent_segments(self, path):
        rel = relative("/src", path)
        assert not rel.startswith("/")
        assert ".." not in rel.split("/")

    def test_dotdot_prefixed_name_is_inside(self):
        assert relative("/src", "/src/..dots") == "..dots"

    @pytest.mark.parametrize("path", [
        "/other/a.txt", "/", "/srcx/a.txt", "/src/../etc/passwd",
    ])
    def test_outside_root(self, path):
        with pytest.raises(PathResolutionError):
            relative("/src", path)

    def test_root_itself(self):
        with pytest.raises(PathResolutionError):
            relative("/src", "/src")

    @pytest.mark.parametrize("root,path", [
        ("", "/src/a"),
        ("/src", ""),
        ("src", "/src/a"),
        ("/src", "a/b.txt"),
    ])
    def test_malformed(self, root, path):
        with pytest.raises(PathResolutionError):
            relative(root, path)

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            relative("/src", "/elsewhere")


class TestContainerPath:
    def test_join(self):
        assert container_path("/app", "a/b.txt") == "/app/a/b.txt"

    def test_root_container(self):
        assert container_path("/", "a.txt") == "/a.txt"

    def test_config_normalizes_trailing_slash(self):
        cfg = SyncConfig("/src", "/app/", "web")
        assert container_path(cfg.container_root, "a.txt") == "/app/a.txt"
