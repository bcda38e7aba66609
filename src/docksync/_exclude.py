"""Noise filter for watched paths.

Editor backup and swap files are always skipped.  On top of that, the
``--exclude`` patterns and ``--exclude-from`` file are combined into one
gitignore-style predicate (implemented by ``dulwich.ignore.IgnoreFilter``)
that both the registrar and the classifier consult.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

from dulwich.ignore import IgnoreFilter

#: Suffixes of files that editors write next to the real file.
BACKUP_SUFFIXES = ("~", ".swp", ".swx", ".swpx")


class ExcludeFilter:
    """Combines backup-suffix skipping with --exclude / --exclude-from patterns."""

    def __init__(
        self,
        *,
        patterns: Sequence[str] | None = None,
        exclude_from: str | None = None,
        suffixes: Sequence[str] = BACKUP_SUFFIXES,
    ) -> None:
        lines: list[bytes] = []
        for p in patterns or ():
            lines.append(p.encode("utf-8"))
        if exclude_from is not None:
            for raw in Path(exclude_from).read_bytes().splitlines():
                line = raw.strip()
                if line and not line.startswith(b"#"):
                    lines.append(line)
        self._patterns: IgnoreFilter | None = IgnoreFilter(lines) if lines else None
        self._suffixes = tuple(suffixes)

    def is_backup(self, path: str) -> bool:
        """True if *path* looks like an editor backup or swap file."""
        name = os.path.basename(path.rstrip("/" + os.sep))
        return name.endswith(self._suffixes)

    def is_excluded(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check *rel_path* (``/``-separated, relative to the host root).

        Backup files are excluded whatever the patterns say.
        """
        if self.is_backup(rel_path):
            return True
        if self._patterns is None:
            return False
        check = rel_path + "/" if is_dir else rel_path
        return self._patterns.is_ignored(check) is True
