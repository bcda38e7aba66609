"""Container-side actions, run as ``docker`` subprocesses.

Every call is synchronous: a slow or hung runtime stalls the event loop
until it returns.  There is no timeout and no retry.
"""

from __future__ import annotations

import subprocess
from typing import Protocol

from ._types import CommandResult
from .exceptions import ContainerCommandError, RuntimeUnavailableError


class ContainerRuntime(Protocol):
    """What the event loop needs from a container runtime."""

    def copy_in(self, host_path: str, container_name: str, container_path: str,
                *, is_directory: bool = False) -> CommandResult: ...

    def set_ownership(self, container_name: str, container_path: str,
                      user: str, group: str, *,
                      is_directory: bool = False) -> CommandResult: ...

    def remove_path(self, container_name: str, container_path: str, *,
                    is_directory: bool = False) -> CommandResult: ...


class DockerRuntime:
    """Run container actions through the ``docker`` CLI.

    *binary* may be any docker-compatible CLI (e.g. ``podman``).
    """

    def __init__(self, binary: str = "docker") -> None:
        self.binary = binary

    def _run(self, *args: str) -> CommandResult:
        cmd = [self.binary, *args]
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as exc:
            raise ContainerCommandError(cmd, None, str(exc)) from exc
        return CommandResult(cmd, proc.returncode, proc.stdout, proc.stderr)

    def version(self) -> str:
        """Return the runtime's version string (``docker -v``)."""
        try:
            return self._run("-v").check().stdout.strip()
        except ContainerCommandError as exc:
            raise RuntimeUnavailableError(exc.cmd, exc.returncode, exc.output) from exc

    def copy_in(self, host_path, container_name, container_path, *,
                is_directory=False):
        """Copy *host_path* to *container_path* inside the container.

        Overwrites an existing file.  For a directory the contents are
        copied (``src/.``), so the destination ends up at *container_path*
        whether or not it already existed.
        """
        src = host_path.rstrip("/") + "/." if is_directory else host_path
        return self._run("cp", src, f"{container_name}:{container_path}").check()

    def set_ownership(self, container_name, container_path, user, group, *,
                      is_directory=False):
        """``chown user:group`` the path inside the container."""
        args = ["exec", container_name, "chown"]
        if is_directory:
            args.append("-R")
        args += [f"{user}:{group}", container_path]
        return self._run(*args).check()

    def remove_path(self, container_name, container_path, *, is_directory=False):
        """``rm`` the path inside the container (``rm -r`` for directories)."""
        args = ["exec", container_name, "rm"]
        if is_directory:
            args.append("-r")
        args.append(container_path)
        return self._run(*args).check()


def check_runtime(runtime: DockerRuntime) -> str:
    """Fail fast if the runtime can't be invoked.

    Returns the version string; raises :class:`RuntimeUnavailableError`.
    """
    return runtime.version()
