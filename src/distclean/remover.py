"""
distclean/remover.py

Executes a RemovalPlan.

For every planned path (in lexicographic order) the remover deletes the path,
then walks upward removing each parent directory that the deletion left empty,
stopping at the entry's root boundary. The root itself is checked once after
every processed path and removed when it is empty.

Dry runs never touch the filesystem. Instead every removal (real or simulated)
is recorded in a ``VirtualRemovedSet`` and all existence and emptiness checks
consult it, so a dry run reports exactly the paths a real run deletes.
"""

from __future__ import annotations

import enum
import logging
import os
import shutil
import sys
from pathlib import Path
from typing import TextIO

from distclean.exceptions import RemovalError
from distclean.plan import RemovalEntry, RemovalPlan

logger = logging.getLogger(__name__)

DRY_RUN_PREFIX = "[DRY RUN]"


class VirtualRemovedSet:
    """Paths removed, or marked removed, during a single execution."""

    def __init__(self) -> None:
        self._paths: set[Path] = set()

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def add(self, path: Path) -> None:
        self._paths.add(path)

    def covers(self, path: Path) -> bool:
        """True if ``path`` or any of its ancestors has been removed."""
        if path in self._paths:
            return True
        return any(parent in self._paths for parent in path.parents)


class CascadeState(enum.Enum):
    CASCADING = "cascading"
    STOPPED_BY_NON_EMPTY = "stopped_by_non_empty"
    STOPPED_AT_ROOT = "stopped_at_root"
    STOPPED_MISSING_PARENT = "stopped_missing_parent"


class UpwardCascade:
    """Walks from a removed path toward its root, removing directories it emptied.

    Each ``step`` examines one directory. The root itself is never removed by
    the cascade; reaching it ends the walk with ``STOPPED_AT_ROOT``.
    """

    def __init__(self, remover: CascadingRemover, start: Path, root: Path) -> None:
        self.remover = remover
        self.root = root
        self.current = start.parent
        self.state = CascadeState.CASCADING
        self.removed: list[Path] = []

    def step(self) -> CascadeState:
        if self.state is not CascadeState.CASCADING:
            return self.state
        if self.current == self.root:
            self.state = CascadeState.STOPPED_AT_ROOT
        elif not self.remover.exists(self.current):
            self.state = CascadeState.STOPPED_MISSING_PARENT
        elif self.remover.remove_dir_if_empty(self.current):
            self.removed.append(self.current)
            self.current = self.current.parent
        else:
            self.state = CascadeState.STOPPED_BY_NON_EMPTY
        return self.state

    def run(self) -> CascadeState:
        while self.step() is CascadeState.CASCADING:
            pass
        return self.state


class CascadingRemover:
    """Removes (or simulates removing) the paths of one RemovalPlan.

    A remover is single-use: its ``removed`` set belongs to one execution.
    """

    def __init__(
        self,
        plan: RemovalPlan,
        *,
        dry_run: bool = False,
        stdout: TextIO | None = None,
    ) -> None:
        self.plan = plan
        self.dry_run = dry_run
        self.stdout = stdout if stdout is not None else sys.stdout
        self.removed = VirtualRemovedSet()
        self.reported: list[Path] = []

    def execute(self) -> list[Path]:
        """Process every plan entry and return the removed paths in report order.

        Raises:
            PlannerConsistencyError: an entry does not lie under its root.
            RemovalError: a real deletion (or the listing before it) failed.
        """
        for entry in self.plan.sorted_entries():
            self._process(entry)
        return list(self.reported)

    def exists(self, path: Path) -> bool:
        """Existence as seen by this execution (removed paths are gone in both modes)."""
        if self.removed.covers(path):
            return False
        return os.path.lexists(path)

    def remove_dir_if_empty(self, directory: Path) -> bool:
        """Remove ``directory`` when it has no remaining entries; return True if removed."""
        if not self.exists(directory):
            return False
        try:
            names = os.listdir(directory)
        except OSError as exc:
            raise RemovalError(f"failed to read directory: {directory}", path=directory) from exc

        if self.dry_run:
            names = [name for name in names if directory / name not in self.removed]
        if names:
            return False

        if not self.dry_run:
            try:
                os.rmdir(directory)
            except OSError as exc:
                raise RemovalError(f"failed to remove directory {directory}", path=directory) from exc
        self.removed.add(directory)
        self._report(directory)
        return True

    def _process(self, entry: RemovalEntry) -> None:
        entry.check_boundary()

        if self.exists(entry.path):
            if not self.dry_run:
                self._remove_leaf(entry)
            self.removed.add(entry.path)
            self._report(entry.path)
        else:
            self.removed.add(entry.path)

        cascade = UpwardCascade(self, entry.path, entry.root)
        state = cascade.run()
        logger.debug("Cascade from %s ended: %s", entry.path, state.value)

        self.remove_dir_if_empty(entry.root)

    def _remove_leaf(self, entry: RemovalEntry) -> None:
        path = entry.path
        if path.is_dir() and not path.is_symlink():
            try:
                if entry.is_dir:
                    shutil.rmtree(path)
                else:
                    os.rmdir(path)
            except OSError as exc:
                raise RemovalError(f"failed to remove directory {path}", path=path) from exc
            return
        try:
            os.remove(path)
        except OSError as exc:
            raise RemovalError(f"failed to remove file {path}", path=path) from exc

    def _report(self, path: Path) -> None:
        self.reported.append(path)
        if self.dry_run:
            self.stdout.write(f"{DRY_RUN_PREFIX}     {path}\n")
        else:
            logger.debug("Removed %s", path)


def execute_plan(
    plan: RemovalPlan,
    *,
    dry_run: bool = False,
    stdout: TextIO | None = None,
) -> list[Path]:
    """Run ``plan`` with a fresh VirtualRemovedSet and return the removed paths."""
    return CascadingRemover(plan, dry_run=dry_run, stdout=stdout).execute()
