"""docksync: one-way sync of a host directory into a running container."""

from ._types import Action, ChangeKind, CommandResult, FileEvent, SyncConfig, WatchError
from ._exclude import ExcludeFilter
from .classify import classify
from .exceptions import (
    ContainerCommandError,
    DocksyncError,
    PathResolutionError,
    RuntimeUnavailableError,
)
from .loop import SyncLoop
from .paths import container_path, relative
from .report import Reporter
from .runtime import ContainerRuntime, DockerRuntime, check_runtime
from .watch import WatchService, register_tree

__all__ = [
    "Action", "ChangeKind", "CommandResult", "FileEvent", "SyncConfig", "WatchError",
    "ExcludeFilter", "classify",
    "DocksyncError", "PathResolutionError", "ContainerCommandError", "RuntimeUnavailableError",
    "SyncLoop", "relative", "container_path", "Reporter",
    "ContainerRuntime", "DockerRuntime", "check_runtime",
    "WatchService", "register_tree",
]
