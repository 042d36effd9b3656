"""
distclean/plan.py

The removal plan: every path to delete, tagged with the root boundary the
upward cascade must stop at and whether the path is a directory.

Binaries are always files rooted at their build output directory; dist
artifacts keep their own directory flag and are rooted at the dist output
directory.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from distclean.exceptions import PlannerConsistencyError


def normalize(path: Path | str) -> Path:
    """Absolute, normalized path without resolving symlinks."""
    return Path(os.path.abspath(path))


def is_strictly_under(path: Path, root: Path) -> bool:
    return path != root and root in path.parents


@dataclass(frozen=True)
class RemovalEntry:
    path: Path
    root: Path
    is_dir: bool = False

    def check_boundary(self) -> None:
        if not is_strictly_under(self.path, self.root):
            raise PlannerConsistencyError(
                f"root dir path {self.root} does not contain {self.path}",
                context={"path": str(self.path), "root": str(self.root)},
            )


@dataclass(frozen=True)
class RemovalPlan:
    """Immutable mapping of path -> RemovalEntry."""

    _entries: Mapping[Path, RemovalEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_entries", MappingProxyType(dict(self._entries)))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[RemovalEntry]:
        return iter(self.sorted_entries())

    def get(self, path: Path) -> RemovalEntry | None:
        return self._entries.get(path)

    @property
    def paths(self) -> list[Path]:
        return [entry.path for entry in self.sorted_entries()]

    def sorted_entries(self) -> list[RemovalEntry]:
        """Entries in lexicographic order of their path string."""
        return sorted(self._entries.values(), key=lambda entry: str(entry.path))


class RemovalPlanBuilder:
    """Accumulates entries for a RemovalPlan, rejecting conflicting duplicates."""

    def __init__(self) -> None:
        self._entries: dict[Path, RemovalEntry] = {}

    def add(self, path: Path | str, *, root: Path | str, is_dir: bool) -> RemovalEntry:
        entry = RemovalEntry(path=normalize(path), root=normalize(root), is_dir=is_dir)
        existing = self._entries.get(entry.path)
        if existing is not None and existing != entry:
            raise PlannerConsistencyError(
                f"conflicting removal entries for {entry.path}",
                context={
                    "path": str(entry.path),
                    "existing": {"root": str(existing.root), "is_dir": existing.is_dir},
                    "new": {"root": str(entry.root), "is_dir": entry.is_dir},
                },
            )
        self._entries[entry.path] = entry
        return entry

    def add_binaries(self, output_root: Path | str, binaries: Iterable[Path]) -> None:
        for binary in binaries:
            self.add(binary, root=output_root, is_dir=False)

    def add_dist_artifacts(self, dist_dir: Path | str, artifacts: Mapping[Path, bool]) -> None:
        for path, is_dir in artifacts.items():
            self.add(path, root=dist_dir, is_dir=is_dir)

    def build(self) -> RemovalPlan:
        return RemovalPlan(self._entries)


def build_removal_plan(
    bin_outputs: Mapping[Path, Iterable[Path]],
    dist_outputs: Mapping[Path, Mapping[Path, bool]],
) -> RemovalPlan:
    """Merge classifier and matcher results keyed by their root directories."""
    builder = RemovalPlanBuilder()
    for output_root, binaries in bin_outputs.items():
        builder.add_binaries(output_root, binaries)
    for dist_dir, artifacts in dist_outputs.items():
        builder.add_dist_artifacts(dist_dir, artifacts)
    return builder.build()
