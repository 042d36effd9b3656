"""Tests for locating product binaries in build output roots."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from distclean.bin_output import classify_bin_outputs, index_products_by_osarch
from distclean.exceptions import ScanError
from distclean.osarch import OSArch

LINUX = OSArch("linux", "amd64")
DARWIN = OSArch("darwin", "arm64")


class TestIndexProductsByOsarch:
    def test_inverts_product_map(self) -> None:
        index = index_products_by_osarch({"app": [LINUX, DARWIN], "tool": ["linux-amd64"]})
        assert index == {"linux-amd64": {"app", "tool"}, "darwin-arm64": {"app"}}


class TestClassifyBinOutputs:
    def test_selects_requested_products_and_archs(self, tmp_path: Path, make_tree) -> None:
        root = make_tree(
            tmp_path / "build",
            [
                "1.0.0/linux-amd64/app",
                "1.0.0/linux-amd64/tool",
                "1.0.0/darwin-arm64/app",
                "1.0.0/windows-amd64/app",
                "snapshot/linux-amd64/app",
            ],
        )

        result = classify_bin_outputs(root, {"app": [LINUX, DARWIN]})

        assert result == {
            root / "1.0.0/linux-amd64/app",
            root / "1.0.0/darwin-arm64/app",
            root / "snapshot/linux-amd64/app",
        }

    def test_missing_root_is_empty(self, tmp_path: Path) -> None:
        assert classify_bin_outputs(tmp_path / "missing", {"app": [LINUX]}) == set()

    def test_ignores_files_at_root_and_tag_level(self, tmp_path: Path, make_tree) -> None:
        root = make_tree(
            tmp_path / "build",
            ["linux-amd64", "1.0.0/app", "1.0.0/linux-amd64/app"],
        )
        assert classify_bin_outputs(root, {"app": [LINUX]}) == {root / "1.0.0/linux-amd64/app"}

    def test_requires_exact_names(self, tmp_path: Path, make_tree) -> None:
        root = make_tree(
            tmp_path / "build",
            ["1.0.0/linux-amd64/app.exe", "1.0.0/linux-amd64/app-helper", "1.0.0/linux-amd64x/app"],
        )
        assert classify_bin_outputs(root, {"app": [LINUX]}) == set()

    def test_directory_named_after_product_is_selected(self, tmp_path: Path, make_tree) -> None:
        root = make_tree(tmp_path / "build", ["1.0.0/linux-amd64/app/"])
        assert classify_bin_outputs(root, {"app": [LINUX]}) == {root / "1.0.0/linux-amd64/app"}

    def test_empty_targets_reads_nothing(self, tmp_path: Path, make_tree) -> None:
        root = make_tree(tmp_path / "build", ["1.0.0/linux-amd64/app"])
        assert classify_bin_outputs(root, {}) == set()

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions")
    def test_unreadable_tag_dir_raises(self, tmp_path: Path, make_tree) -> None:
        root = make_tree(tmp_path / "build", ["1.0.0/linux-amd64/app"])
        tag_dir = root / "1.0.0"
        tag_dir.chmod(0)
        try:
            with pytest.raises(ScanError) as excinfo:
                classify_bin_outputs(root, {"app": [LINUX]})
        finally:
            tag_dir.chmod(0o755)
        assert excinfo.value.path == tag_dir
