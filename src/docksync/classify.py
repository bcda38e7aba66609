"""Decide which container action a filesystem event implies."""

from __future__ import annotations

from ._exclude import ExcludeFilter
from ._types import Action, ChangeKind, FileEvent

_DEFAULT_FILTER = ExcludeFilter()


def classify(event: FileEvent, *, excludes: ExcludeFilter | None = None,
             rel_path: str | None = None) -> Action:
    """Map *event* to :class:`Action`.

    Rules, first match wins:

    1. backup/swap file, or *rel_path* matched by *excludes* → ``IGNORE``
    2. write or create → ``UPSERT`` (the path now has content to push)
    3. remove or rename → ``DELETE`` (the old path is gone; the new name of
       a rename arrives as its own create event)
    4. anything else → ``IGNORE``
    """
    excludes = excludes or _DEFAULT_FILTER
    if excludes.is_backup(event.path):
        return Action.IGNORE
    if rel_path is not None and excludes.is_excluded(
        rel_path, is_dir=event.is_directory,
    ):
        return Action.IGNORE
    if event.has(ChangeKind.WRITE, ChangeKind.CREATE):
        return Action.UPSERT
    if event.has(ChangeKind.REMOVE, ChangeKind.RENAME):
        return Action.DELETE
    return Action.IGNORE
