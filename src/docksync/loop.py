"""The event loop: one consumer turning file events into container actions."""

from __future__ import annotations

import os

from ._exclude import ExcludeFilter
from ._types import Action, ChangeKind, FileEvent, SyncConfig, WatchError
from .classify import classify
from .exceptions import DocksyncError, PathResolutionError
from .paths import container_path
from .report import Reporter
from .runtime import ContainerRuntime
from .watch import QueueItem, WatchService, register_tree


def _dirs(n: int) -> str:
    return f"{n} directory" if n == 1 else f"{n} directories"


class SyncLoop:
    """Dispatch events from a :class:`WatchService` to a container runtime.

    Events are handled one at a time, in delivery order.  Every failure is
    reported and the event dropped; nothing raised while handling one event
    stops the loop.
    """

    def __init__(
        self,
        config: SyncConfig,
        runtime: ContainerRuntime,
        watches: WatchService,
        reporter: Reporter | None = None,
        excludes: ExcludeFilter | None = None,
    ) -> None:
        self.config = config
        self.runtime = runtime
        self.watches = watches
        self.reporter = reporter or Reporter()
        self.excludes = excludes or ExcludeFilter()

    # ------------------------------------------------------------------
    def run(self) -> None:
        """Drain the watch queue forever.

        An unexpected exception while handling one item is reported and the
        item dropped, so a single bad event never stops syncing.
        """
        while True:
            item = self.watches.get()
            try:
                self.process(item)
            except Exception as exc:
                self.reporter.error(f"{getattr(item, 'path', item)}: {exc}")

    def process(self, item: QueueItem) -> Action | None:
        """Handle one item from the watch queue."""
        if isinstance(item, WatchError):
            self.handle_error(item)
            return None
        return self.dispatch(item)

    def handle_error(self, err: WatchError) -> None:
        self.reporter.error(f"watch: {err.path}: {err.error}")

    # ------------------------------------------------------------------
    def dispatch(self, event: FileEvent) -> Action:
        """Classify *event*, perform its action, and return the action."""
        try:
            rel = event.relative_to(self.config.host_root)
        except PathResolutionError as exc:
            self.reporter.status(f"Dropped: {exc}")
            return Action.IGNORE

        action = classify(event, excludes=self.excludes, rel_path=rel)
        if action is Action.UPSERT:
            self._upsert(event, rel)
        elif action is Action.DELETE:
            self._delete(event, rel)
        elif self.excludes.is_excluded(rel, is_dir=event.is_directory):
            self.reporter.info(f"Skipping: {event.path}")
        else:
            kinds = ",".join(sorted(str(k) for k in event.kinds))
            self.reporter.status(f"Ignored {kinds}: {rel}")
        return action

    def _upsert(self, event: FileEvent, rel: str) -> None:
        cfg = self.config
        target = container_path(cfg.container_root, rel)
        is_dir = event.is_directory or os.path.isdir(event.path)

        if is_dir and event.has(ChangeKind.CREATE):
            try:
                added = register_tree(self.watches, event.path,
                                      excludes=self.excludes,
                                      host_root=cfg.host_root)
            except OSError as exc:
                self.reporter.error(f"{rel}: can't watch new directory: {exc}")
            else:
                self.reporter.status(f"Watching {_dirs(added)} under {rel}")

        try:
            self.runtime.copy_in(event.path, cfg.container_name, target,
                                 is_directory=is_dir)
        except DocksyncError as exc:
            self.reporter.error(f"{rel}: can't copy to container: {exc}")
            return
        self.reporter.success(f"Copied: {rel} to {cfg.container_name}:{target}")

        try:
            self.runtime.set_ownership(cfg.container_name, target,
                                       cfg.user, cfg.group, is_directory=is_dir)
        except DocksyncError as exc:
            self.reporter.error(f"{rel}: can't change owner to {cfg.owner}: {exc}")

    def _delete(self, event: FileEvent, rel: str) -> None:
        cfg = self.config
        target = container_path(cfg.container_root, rel)
        dropped = self.watches.unregister_tree(event.path)
        is_dir = event.is_directory or bool(dropped)
        if dropped:
            self.reporter.status(f"Stopped watching {_dirs(len(dropped))} under {rel}")

        try:
            self.runtime.remove_path(cfg.container_name, target,
                                     is_directory=is_dir)
        except DocksyncError as exc:
            self.reporter.error(f"{rel}: can't remove from container: {exc}")
            return
        self.reporter.removed(f"Removed: {target}")
