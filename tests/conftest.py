"""Shared fixtures for docksync tests."""

import itertools
import time

import pytest
from unittest.mock import MagicMock

from docksync._types import CommandResult, SyncConfig
from docksync.exceptions import ContainerCommandError
from docksync.loop import SyncLoop
from docksync.report import Reporter
from docksync.watch import WatchService


class RecordingRuntime:
    """Container runtime fake that records calls instead of running docker.

    Method names listed in *fail* raise :class:`ContainerCommandError`.
    """

    def __init__(self, fail=()):
        self.calls = []
        self.fail = set(fail)

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name in self.fail:
            raise ContainerCommandError(["docker", name], 1, f"{name} failed")
        return CommandResult(["docker", name], 0)

    def copy_in(self, host_path, container_name, container_path, *, is_directory=False):
        return self._record("copy_in", host_path, container_name, container_path, is_directory)

    def set_ownership(self, container_name, container_path, user, group, *, is_directory=False):
        return self._record("set_ownership", container_name, container_path, user, group, is_directory)

    def remove_path(self, container_name, container_path, *, is_directory=False):
        return self._record("remove_path", container_name, container_path, is_directory)

    @property
    def names(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def inotify():
    """Mock inotify instance; add_watch() hands out increasing descriptors."""
    ino = MagicMock()
    wds = itertools.count(1)
    ino.add_watch.side_effect = lambda path, mask: next(wds)

    def read(timeout=None):
        time.sleep(0.01)
        return []

    ino.read.side_effect = read
    return ino


@pytest.fixture
def watches(inotify):
    return WatchService(inotify=inotify)


@pytest.fixture
def runtime():
    return RecordingRuntime()


@pytest.fixture
def make_runtime():
    """Factory for runtimes that fail on selected methods."""
    return RecordingRuntime


@pytest.fixture
def config():
    return SyncConfig(host_root="/src", container_root="/app", container_name="web")


@pytest.fixture
def loop(config, runtime, watches):
    return SyncLoop(config, runtime, watches, Reporter(verbose=True))


@pytest.fixture
def host_tree(tmp_path):
    """A small host tree.

    Tree:
        readme.txt
        a/b.txt
        a/deep/c.txt
        docs/guide.md
    """
    root = tmp_path / "host"
    (root / "a" / "deep").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "readme.txt").write_text("readme")
    (root / "a" / "b.txt").write_text("b")
    (root / "a" / "deep" / "c.txt").write_text("c")
    (root / "docs" / "guide.md").write_text("guide")
    return root
