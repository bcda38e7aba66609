"""Data structures shared by the watch, classify and loop layers."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import Enum

from .exceptions import ContainerCommandError
from .paths import relative


class ChangeKind(str, Enum):
    """Kind of filesystem change carried by a :class:`FileEvent`.

    Members: ``WRITE``, ``CREATE``, ``REMOVE``, ``RENAME``, ``CHMOD``.
    """
    WRITE = "write"
    CREATE = "create"
    REMOVE = "remove"
    RENAME = "rename"
    CHMOD = "chmod"

    def __str__(self) -> str:          # noqa: D105
        return self.value


class Action(str, Enum):
    """Container-side action implied by an event: ``UPSERT``, ``DELETE`` or ``IGNORE``."""
    UPSERT = "upsert"
    DELETE = "delete"
    IGNORE = "ignore"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass(frozen=True)
class SyncConfig:
    """Where to sync from, where to sync to, and who owns the result.

    Attributes:
        host_root: Directory on the host being watched.
        container_root: Directory inside the container mirroring *host_root*.
        container_name: Name or id of the target container.
        user: Owner applied to synced paths inside the container.
        group: Group applied to synced paths inside the container.
    """
    host_root: str
    container_root: str
    container_name: str
    user: str = "www-data"
    group: str = "www-data"

    def __post_init__(self):
        for name in ("host_root", "container_root", "container_name"):
            if not getattr(self, name):
                raise ValueError(f"{name} must not be empty")
        root = posixpath.normpath(self.container_root)
        if root.startswith("//"):
            root = "/" + root.lstrip("/")
        object.__setattr__(self, "container_root", root)

    @property
    def owner(self) -> str:
        """``user:group`` as passed to ``chown``."""
        return f"{self.user}:{self.group}"


@dataclass(frozen=True)
class FileEvent:
    """A single filesystem notification.

    Attributes:
        path: Absolute host path the notification refers to.
        kinds: One or more :class:`ChangeKind` values.
        is_directory: True when the event source reported a directory.
    """
    path: str
    kinds: frozenset[ChangeKind]
    is_directory: bool = False

    def __post_init__(self):
        kinds = frozenset(ChangeKind(k) for k in self.kinds)
        if not kinds:
            raise ValueError("FileEvent needs at least one change kind")
        object.__setattr__(self, "kinds", kinds)

    def has(self, *kinds: ChangeKind) -> bool:
        """True if the event carries any of *kinds*."""
        return any(k in self.kinds for k in kinds)

    def relative_to(self, root: str) -> str:
        """Path relative to *root*; raises :class:`PathResolutionError`."""
        return relative(root, self.path)


@dataclass
class WatchError:
    """An error surfaced by the watch layer rather than by a sync action.

    Attributes:
        path: Path being watched or translated when the error happened.
        error: Human-readable error message.
    """
    path: str
    error: str


@dataclass
class CommandResult:
    """Outcome of one container runtime invocation."""
    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def check(self) -> CommandResult:
        """Return self, or raise :class:`ContainerCommandError` on failure."""
        if not self.ok:
            raise ContainerCommandError(
                self.args, self.returncode, self.stderr or self.stdout,
            )
        return self
