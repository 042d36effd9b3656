"""
distclean/bin_output.py

Locates the binaries a set of products produced under a build output root.

Layout: ``<output_root>/<tag-dir>/<os-arch>/<binary>``. The tag directory name
(usually a version) is not inspected; the os-arch directory must equal a
canonical ``os-arch`` string and the binary must be named exactly after the
product.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from distclean.exceptions import ScanError
from distclean.osarch import OSArch

logger = logging.getLogger(__name__)


def index_products_by_osarch(
    product_targets: Mapping[str, Iterable[OSArch | str]],
) -> dict[str, set[str]]:
    """Invert ``product -> os-archs`` into ``os-arch string -> product names``."""
    index: dict[str, set[str]] = {}
    for product, osarchs in product_targets.items():
        for osarch in osarchs:
            index.setdefault(str(osarch), set()).add(product)
    return index


def _subdirectories(path: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        raise ScanError(f"failed to read directory {path}", path=path) from exc
    return [entry for entry in entries if entry.is_dir(follow_symlinks=False)]


def classify_bin_outputs(
    output_root: Path,
    product_targets: Mapping[str, Iterable[OSArch | str]],
) -> set[Path]:
    """Return the binary paths under ``output_root`` that belong to ``product_targets``.

    A missing or unreadable output root means nothing was built yet and yields
    an empty set. Unreadable tag or os-arch directories raise ``ScanError``.
    """
    output_root = Path(output_root)
    index = index_products_by_osarch(product_targets)
    if not index:
        return set()

    try:
        with os.scandir(output_root) as it:
            top_entries = sorted(it, key=lambda entry: entry.name)
    except OSError:
        logger.debug("Output root %s not readable; nothing to classify", output_root)
        return set()

    binaries: set[Path] = set()
    for tag_entry in top_entries:
        if not tag_entry.is_dir(follow_symlinks=False):
            continue
        tag_dir = output_root / tag_entry.name
        for osarch_entry in _subdirectories(tag_dir):
            expected = index.get(osarch_entry.name)
            if not expected:
                continue
            osarch_dir = tag_dir / osarch_entry.name
            try:
                names = sorted(os.listdir(osarch_dir))
            except OSError as exc:
                raise ScanError(f"failed to read directory {osarch_dir}", path=osarch_dir) from exc
            for name in names:
                if name in expected:
                    binaries.add(osarch_dir / name)
    return binaries
