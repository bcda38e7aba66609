"""Per-directory watch registration on a single inotify instance.

Every directory gets its own *non-recursive* inotify watch, so the watch set
is exactly the set of directories seen so far.  All watches share one kernel
instance: ``fs.inotify.max_user_instances`` (128 by default) is spent once,
and only ``max_user_watches`` bounds the tree size.  Directories created
after startup are only observed once :func:`register_tree` is called on
them (the event loop does this on their create event).

A reader thread translates raw inotify events into :class:`FileEvent`
objects and pushes them onto one FIFO queue, which a single consumer
drains.  Errors travel the same queue as :class:`WatchError`.
"""

from __future__ import annotations

import os
import queue
import threading
from typing import Union

from inotify_simple import INotify, flags

from ._exclude import ExcludeFilter
from ._types import ChangeKind, FileEvent, WatchError
from .exceptions import PathResolutionError
from .paths import relative

QueueItem = Union[FileEvent, WatchError]

#: Events requested for every watched directory.
WATCH_MASK = (
    flags.CREATE | flags.MODIFY | flags.ATTRIB | flags.DELETE
    | flags.MOVED_FROM | flags.MOVED_TO | flags.ONLYDIR | flags.DONT_FOLLOW
)

# Poll interval (ms) of the reader thread, bounds how long stop() waits.
_READ_TIMEOUT = 500


# ---------------------------------------------------------------------------
# Event translation
# ---------------------------------------------------------------------------

def translate(event, parent: str) -> FileEvent | None:
    """Turn one inotify event from the watch on *parent* into a :class:`FileEvent`.

    A move shows up as two events: ``MOVED_FROM`` (rename of the old path)
    and ``MOVED_TO`` (create of the new one).  Returns ``None`` for events
    about the watched directory itself and for modifications of
    subdirectories, which only mean "a child changed".
    """
    if not event.name:
        return None
    mask = event.mask
    is_dir = bool(mask & flags.ISDIR)
    kinds = set()
    if mask & flags.MODIFY and not is_dir:
        kinds.add(ChangeKind.WRITE)
    if mask & (flags.CREATE | flags.MOVED_TO):
        kinds.add(ChangeKind.CREATE)
    if mask & flags.DELETE:
        kinds.add(ChangeKind.REMOVE)
    if mask & flags.MOVED_FROM:
        kinds.add(ChangeKind.RENAME)
    if mask & flags.ATTRIB:
        kinds.add(ChangeKind.CHMOD)
    if not kinds:
        return None
    return FileEvent(os.path.join(parent, event.name), frozenset(kinds), is_dir)


# ---------------------------------------------------------------------------
# WatchService
# ---------------------------------------------------------------------------

class WatchService:
    """Owns the inotify instance, the watch set, and the delivery queue.

    Usage::

        watches = WatchService()
        watches.start()
        register_tree(watches, "/src")
        item = watches.get()   # blocks

    *inotify* is injectable so tests can pass a mock.
    """

    def __init__(self, inotify=None) -> None:
        self._inotify = inotify if inotify is not None else INotify()
        self._queue: queue.Queue[QueueItem] = queue.Queue()
        self._lock = threading.Lock()
        self._wd_for_path: dict[str, int] = {}
        self._path_for_wd: dict[int, str] = {}
        self._stopped = threading.Event()
        self._reader: threading.Thread | None = None

    @property
    def watched(self) -> list[str]:
        """Sorted list of registered directories."""
        with self._lock:
            return sorted(self._wd_for_path)

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return os.path.normpath(path) in self._wd_for_path

    def register(self, path: str) -> bool:
        """Watch the files directly inside *path*.

        Returns False if *path* was already registered.
        """
        path = os.path.normpath(path)
        with self._lock:
            if path in self._wd_for_path:
                return False
            wd = self._inotify.add_watch(path, WATCH_MASK)
            # inotify hands back the existing wd when the inode is already
            # watched under another name (a directory moved inside the tree)
            stale = self._path_for_wd.get(wd)
            if stale is not None:
                self._wd_for_path.pop(stale, None)
            self._wd_for_path[path] = wd
            self._path_for_wd[wd] = path
        return True

    def unregister_tree(self, path: str) -> list[str]:
        """Drop the watch on *path* and on every registered directory below it.

        Returns the directories that were unregistered.
        """
        path = os.path.normpath(path)
        prefix = path.rstrip(os.sep) + os.sep
        with self._lock:
            gone = [p for p in self._wd_for_path if p == path or p.startswith(prefix)]
            for p in gone:
                wd = self._wd_for_path.pop(p)
                self._path_for_wd.pop(wd, None)
                try:
                    self._inotify.rm_watch(wd)
                except OSError:
                    # the kernel already dropped it along with the directory
                    pass
        return sorted(gone)

    def put(self, item: QueueItem) -> None:
        self._queue.put(item)

    def get(self, timeout: float | None = None) -> QueueItem:
        """Block until the next event or error is available."""
        return self._queue.get(timeout=timeout)

    # ------------------------------------------------------------------
    def deliver(self, event) -> None:
        """Translate one raw inotify event and queue the result."""
        if event.mask & flags.Q_OVERFLOW:
            self.put(WatchError("", "inotify queue overflowed, changes were lost"))
            return
        with self._lock:
            parent = self._path_for_wd.get(event.wd)
            if parent is not None and event.mask & flags.IGNORED:
                # watched directory is gone; the kernel removed the watch
                del self._path_for_wd[event.wd]
                if self._wd_for_path.get(parent) == event.wd:
                    del self._wd_for_path[parent]
                return
        if parent is None:
            return
        try:
            item = translate(event, parent)
        except Exception as exc:
            self.put(WatchError(os.path.join(parent, event.name), str(exc)))
            return
        if item is not None:
            self.put(item)

    def _read_loop(self) -> None:
        while not self._stopped.is_set():
            try:
                events = self._inotify.read(timeout=_READ_TIMEOUT)
            except OSError as exc:
                if not self._stopped.is_set():
                    self.put(WatchError("", f"inotify read failed: {exc}"))
                return
            for event in events:
                self.deliver(event)

    def start(self) -> None:
        self._reader = threading.Thread(
            target=self._read_loop, name="docksync-watch", daemon=True,
        )
        self._reader.start()

    def stop(self) -> None:
        self._stopped.set()
        if self._reader is not None:
            self._reader.join(timeout=5)
        self._inotify.close()


# ---------------------------------------------------------------------------
# Registrar
# ---------------------------------------------------------------------------

def _skip_missing(exc: OSError) -> None:
    if not isinstance(exc, FileNotFoundError):
        raise exc


def register_tree(watches: WatchService, root: str, *,
                  excludes: ExcludeFilter | None = None,
                  host_root: str | None = None) -> int:
    """Register *root* and every directory below it.

    Entries that vanish mid-walk are skipped.  With *excludes*, directories
    matching the patterns (relative to *host_root*, default *root*) are
    neither registered nor descended into.  Returns the number of newly
    registered directories.
    """
    host_root = host_root or root
    count = 0
    for dirpath, dirnames, _filenames in os.walk(root, onerror=_skip_missing):
        if excludes is not None:
            kept = []
            for name in dirnames:
                try:
                    rel = relative(host_root, os.path.join(dirpath, name))
                except PathResolutionError:
                    continue
                if not excludes.is_excluded(rel, is_dir=True):
                    kept.append(name)
            dirnames[:] = kept
        try:
            if watches.register(dirpath):
                count += 1
        except (FileNotFoundError, NotADirectoryError):
            dirnames[:] = []
    return count
