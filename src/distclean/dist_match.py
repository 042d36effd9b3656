"""
distclean/dist_match.py

Matches entries of a distribution output directory against the artifact names
a product's distribution is expected to produce.

Matchers are tried in order and the first one that accepts a name wins:

1. ``PrefixPattern("<product>-")``: any versioned artifact named after the
   product, regardless of version.
2. One pattern per rendered artifact name. Names that still contain the
   ``{{Version}}`` placeholder become ``VersionedNamePattern`` (any non-empty
   version in that position); all others become ``ExactPattern``.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from distclean.templates import VERSION_PLACEHOLDER

logger = logging.getLogger(__name__)


class NamePattern(Protocol):
    def matches(self, name: str) -> bool: ...


@dataclass(frozen=True)
class PrefixPattern:
    """Matches ``prefix`` followed by at least one more character."""

    prefix: str

    def matches(self, name: str) -> bool:
        return len(name) > len(self.prefix) and name.startswith(self.prefix)


@dataclass(frozen=True)
class ExactPattern:
    name: str

    def matches(self, name: str) -> bool:
        return name == self.name


@dataclass(frozen=True)
class VersionedNamePattern:
    """Matches a rendered name whose version placeholder may be any non-empty text."""

    template: str
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        literal_parts = self.template.split(VERSION_PLACEHOLDER)
        regex = re.compile(".+".join(re.escape(part) for part in literal_parts))
        object.__setattr__(self, "_regex", regex)

    def matches(self, name: str) -> bool:
        return self._regex.fullmatch(name) is not None


def artifact_pattern(artifact_name: str) -> NamePattern:
    """Build the pattern for one rendered artifact basename."""
    name = os.path.basename(artifact_name)
    if VERSION_PLACEHOLDER in name:
        return VersionedNamePattern(name)
    return ExactPattern(name)


def build_matchers(
    product: str,
    artifact_names: Iterable[str],
    *,
    match_product_prefix: bool = True,
) -> list[NamePattern]:
    matchers: list[NamePattern] = []
    if match_product_prefix:
        matchers.append(PrefixPattern(f"{product}-"))
    matchers.extend(artifact_pattern(name) for name in artifact_names)
    return matchers


def first_match(name: str, matchers: Sequence[NamePattern]) -> NamePattern | None:
    for matcher in matchers:
        if matcher.matches(name):
            return matcher
    return None


def match_dist_artifacts(
    dist_dir: Path,
    product: str,
    artifact_names: Iterable[str],
    *,
    match_product_prefix: bool = True,
) -> dict[Path, bool]:
    """Return ``{path: is_dir}`` for every entry of ``dist_dir`` that is an artifact of ``product``.

    A missing or unreadable ``dist_dir`` means no distribution was produced yet
    and yields an empty mapping.
    """
    dist_dir = Path(dist_dir)
    matchers = build_matchers(product, artifact_names, match_product_prefix=match_product_prefix)
    if not matchers:
        return {}

    try:
        with os.scandir(dist_dir) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError:
        logger.debug("Dist directory %s not readable; skipping", dist_dir)
        return {}

    matched: dict[Path, bool] = {}
    for entry in entries:
        if first_match(entry.name, matchers) is None:
            continue
        matched[dist_dir / entry.name] = entry.is_dir(follow_symlinks=False)
    return matched
