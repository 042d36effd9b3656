"""
Shared pytest fixtures for distclean tests.

Provides helpers for:
- Building output trees on disk from a list of relative paths
- Snapshotting a tree to compare before/after a run
- Writing project config files
- Running the CLI in a subprocess
"""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if SRC_ROOT.is_dir():
    sys.path.insert(0, str(SRC_ROOT))

REPO_ROOT = Path(__file__).resolve().parents[1]


# =============================================================================
# File system helpers
# =============================================================================


def _make_tree(root: Path, paths: Iterable[str]) -> Path:
    """Create files (and directories for entries ending in '/') under ``root``."""
    root.mkdir(parents=True, exist_ok=True)
    for rel in paths:
        target = root / rel
        if rel.endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"content of {rel}\n", encoding="utf-8")
    return root


def _snapshot(root: Path) -> set[str]:
    """Relative POSIX paths of everything below ``root`` (directories end in '/')."""
    if not root.exists():
        return set()
    entries: set[str] = set()
    for path in root.rglob("*"):
        rel = path.relative_to(root).as_posix()
        entries.add(rel + "/" if path.is_dir() else rel)
    return entries


PROJECT_YAML = """\
version: 1.2.0
products:
  app:
    build:
      output-dir: out/build
      os-archs: [linux-amd64, darwin-arm64]
    dist:
      - output-dir: out/dist
        type: manual
        config:
          extension: tgz
  tool:
    build:
      output-dir: out/build
      os-archs:
        - os: linux
          arch: amd64
"""


def write_project(project_dir: Path, content: str = PROJECT_YAML) -> Path:
    project_dir.mkdir(parents=True, exist_ok=True)
    config_path = project_dir / "distclean.yml"
    config_path.write_text(content, encoding="utf-8")
    return config_path


@pytest.fixture
def make_tree() -> Callable[[Path, Iterable[str]], Path]:
    return _make_tree


@pytest.fixture
def snapshot() -> Callable[[Path], set[str]]:
    return _snapshot


@pytest.fixture
def write_config() -> Callable[..., Path]:
    return write_project


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project with a config and a populated output tree."""
    root = tmp_path / "project"
    write_project(root)
    _make_tree(
        root,
        [
            "out/build/1.2.0/linux-amd64/app",
            "out/build/1.2.0/linux-amd64/tool",
            "out/build/1.2.0/darwin-arm64/app",
            "out/dist/app-1.2.0.tgz",
            "out/dist/app-1.1.0.tgz",
            "out/dist/other-1.2.0.tgz",
        ],
    )
    return root


# =============================================================================
# CLI helpers
# =============================================================================


def _build_env(repo_root: Path) -> dict[str, str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = f"{repo_root / 'src'}{os.pathsep}{env.get('PYTHONPATH', '')}".strip(
        os.pathsep
    )
    return env


@pytest.fixture
def run_distclean() -> Callable[..., subprocess.CompletedProcess[str]]:
    def _run(args: list[str], *, cwd: Path) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            [sys.executable, "-m", "distclean.cli", *args],
            cwd=cwd,
            env=_build_env(REPO_ROOT),
            text=True,
            capture_output=True,
            check=False,
        )

    return _run
