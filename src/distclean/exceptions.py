"""
distclean/exceptions.py

Exception hierarchy for the cleanup engine.

Every error carries a stable machine-readable ``code`` and a ``context`` dict
with the offending path/product so the CLI (or any other caller) can surface it
verbatim. Absence of output is never an error and is not represented here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class DistCleanError(Exception):
    """Base class for all distclean errors."""

    code = "distclean_error"

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})


class ConfigValidationError(DistCleanError):
    """Raised when the project configuration is structurally invalid."""

    code = "config_validation_error"


class YamlParseError(DistCleanError):
    """Raised when a YAML document cannot be parsed."""

    code = "yaml_parse_error"


class PlannerConsistencyError(DistCleanError):
    """A removal entry does not lie under its declared root, or conflicts with another entry.

    Always fatal: it indicates a defect in whoever built the plan.
    """

    code = "planner_consistency_error"


class ScanError(DistCleanError):
    """Raised when an output directory exists but cannot be read."""

    code = "directory_scan_error"

    def __init__(self, message: str, *, path: Path | str) -> None:
        super().__init__(message, context={"path": str(path)})
        self.path = Path(path)


class RemovalError(DistCleanError):
    """Raised when deleting (or listing, prior to deleting) a path fails."""

    code = "removal_error"

    def __init__(self, message: str, *, path: Path | str) -> None:
        super().__init__(message, context={"path": str(path)})
        self.path = Path(path)


class DistArtifactError(DistCleanError):
    """Raised when a distribution's declared artifact is missing or malformed."""

    code = "dist_artifact_error"


class ProductCleanError(DistCleanError):
    """Wraps any failure that happened while cleaning a single product."""

    code = "product_clean_failed"

    def __init__(self, product: str) -> None:
        super().__init__(f"failed to clean {product}", context={"product": product})
        self.product = product


def describe_error(exc: BaseException) -> str:
    """Join an exception and its explicit causes into a single line.

    ``ProductCleanError("failed to clean app")`` chained to
    ``RemovalError("failed to remove file /out/app")`` renders as
    ``failed to clean app: failed to remove file /out/app``.
    """
    parts: list[str] = []
    current: BaseException | None = exc
    while current is not None:
        text = str(current)
        if text and text not in parts:
            parts.append(text)
        current = current.__cause__
    return ": ".join(parts)
