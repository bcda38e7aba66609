"""Host path → container path mapping."""

from __future__ import annotations

import os
import posixpath

from .exceptions import PathResolutionError


def relative(host_root: str, path: str) -> str:
    """Return *path* relative to *host_root*, with ``/`` separators.

    Purely lexical: nothing is resolved against the filesystem.  Raises
    :class:`PathResolutionError` if either input is empty or relative, if
    *path* is the root itself, or if it lies outside the root.
    """
    if not host_root or not path:
        raise PathResolutionError(f"Cannot relativize {path!r} to {host_root!r}")
    if not os.path.isabs(host_root) or not os.path.isabs(path):
        raise PathResolutionError(
            f"Cannot relativize {path!r} to {host_root!r}: both must be absolute"
        )
    try:
        rel = os.path.relpath(os.path.normpath(path), os.path.normpath(host_root))
    except ValueError as exc:
        # Windows: paths on different drives
        raise PathResolutionError(str(exc)) from exc
    rel = rel.replace(os.sep, "/")
    if rel == "." or rel == ".." or rel.startswith("../"):
        raise PathResolutionError(f"{path} is not under {host_root}")
    return rel


def container_path(container_root: str, rel: str) -> str:
    """Join a container root and a relative path (POSIX semantics)."""
    return posixpath.join(container_root, rel)
