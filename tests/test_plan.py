"""Tests for building removal plans."""

from __future__ import annotations

from pathlib import Path

import pytest

from distclean.exceptions import PlannerConsistencyError
from distclean.plan import (
    RemovalEntry,
    RemovalPlan,
    RemovalPlanBuilder,
    build_removal_plan,
    is_strictly_under,
)


class TestRemovalEntry:
    def test_boundary_accepts_descendant(self, tmp_path: Path) -> None:
        RemovalEntry(tmp_path / "out/a/b", root=tmp_path / "out").check_boundary()

    @pytest.mark.parametrize("rel", ["out", "other/file", "outside"])
    def test_boundary_rejects_root_and_outsiders(self, tmp_path: Path, rel: str) -> None:
        entry = RemovalEntry(tmp_path / rel, root=tmp_path / "out")
        with pytest.raises(PlannerConsistencyError) as excinfo:
            entry.check_boundary()
        assert excinfo.value.code == "planner_consistency_error"
        assert excinfo.value.context["root"] == str(tmp_path / "out")

    def test_sibling_with_shared_prefix_is_not_under(self) -> None:
        assert not is_strictly_under(Path("/out-old/app"), Path("/out"))


class TestRemovalPlanBuilder:
    def test_merges_binaries_and_dist_artifacts(self, tmp_path: Path) -> None:
        build_root = tmp_path / "build"
        dist_root = tmp_path / "dist"

        plan = build_removal_plan(
            {build_root: {build_root / "1.0/linux-amd64/app"}},
            {dist_root: {dist_root / "app-1.0.tgz": False, dist_root / "app-1.0": True}},
        )

        assert len(plan) == 3
        assert plan.get(build_root / "1.0/linux-amd64/app") == RemovalEntry(
            build_root / "1.0/linux-amd64/app", root=build_root, is_dir=False
        )
        assert plan.get(dist_root / "app-1.0") == RemovalEntry(
            dist_root / "app-1.0", root=dist_root, is_dir=True
        )

    def test_duplicate_identical_entries_are_deduplicated(self, tmp_path: Path) -> None:
        builder = RemovalPlanBuilder()
        builder.add(tmp_path / "out/x", root=tmp_path / "out", is_dir=False)
        builder.add(tmp_path / "out/x", root=tmp_path / "out", is_dir=False)
        assert len(builder.build()) == 1

    def test_conflicting_flags_raise(self, tmp_path: Path) -> None:
        builder = RemovalPlanBuilder()
        builder.add(tmp_path / "out/x", root=tmp_path / "out", is_dir=False)
        with pytest.raises(PlannerConsistencyError, match="conflicting"):
            builder.add(tmp_path / "out/x", root=tmp_path / "out", is_dir=True)

    def test_paths_are_normalized(self, tmp_path: Path) -> None:
        builder = RemovalPlanBuilder()
        entry = builder.add(f"{tmp_path}/out/./a/../b", root=f"{tmp_path}/out/", is_dir=False)
        assert entry.path == tmp_path / "out" / "b"
        assert entry.root == tmp_path / "out"


class TestRemovalPlan:
    def test_entries_sorted_lexicographically(self) -> None:
        plan = build_removal_plan(
            {Path("/out"): {Path("/out/b/x"), Path("/out/a/y"), Path("/out/a-b/z")}},
            {},
        )
        assert [str(p) for p in plan.paths] == ["/out/a-b/z", "/out/a/y", "/out/b/x"]

    def test_plan_is_read_only(self) -> None:
        plan = RemovalPlan({Path("/out/a"): RemovalEntry(Path("/out/a"), Path("/out"))})
        with pytest.raises(TypeError):
            plan._entries[Path("/out/b")] = RemovalEntry(Path("/out/b"), Path("/out"))
        assert Path("/out/a") in plan
