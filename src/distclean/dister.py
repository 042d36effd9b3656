"""
distclean/dister.py

Distribution types ("disters").

Only the ``manual`` type is provided: its output is produced by an external
dist script, so the dister itself performs no action and only knows which
artifact name the script is expected to create. Cleanup asks a dister for its
artifact names; ``verify-dist`` asks it to check the script's output.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import yaml

from distclean.exceptions import ConfigValidationError, DistArtifactError, YamlParseError

logger = logging.getLogger(__name__)

MANUAL_DIST_TYPE_NAME = "manual"


class Dister(Protocol):
    type_name: str

    def artifacts(self, rendered_name: str) -> list[str]: ...

    def run_dist(self, output_dir: Path, rendered_name: str) -> bytes | None: ...

    def verify_artifacts(self, output_dir: Path, rendered_name: str) -> None: ...


@dataclass(frozen=True)
class ManualDistConfig:
    """Config for the ``manual`` dist type.

    ``extension`` is the extension of the file the dist script writes, e.g.
    ``tgz``. The script output is expected at ``{{Product}}-{{Version}}.<extension>``
    (or without a suffix when the extension is empty).
    """

    extension: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ManualDistConfig:
        data = dict(data or {})
        unknown = sorted(set(data) - {"extension"})
        if unknown:
            raise ConfigValidationError(
                f"Unknown keys in manual dist config: {', '.join(unknown)}",
                context={"dist_type": MANUAL_DIST_TYPE_NAME, "keys": unknown},
            )
        extension = data.get("extension") or ""
        if not isinstance(extension, str):
            raise ConfigValidationError(
                "manual dist config 'extension' must be a string",
                context={"dist_type": MANUAL_DIST_TYPE_NAME, "extension": repr(extension)},
            )
        return cls(extension=extension.lstrip("."))


class ManualDister:
    type_name = MANUAL_DIST_TYPE_NAME

    def __init__(self, config: ManualDistConfig | None = None) -> None:
        self.config = config or ManualDistConfig()

    @classmethod
    def from_config(cls, data: Mapping[str, Any] | None) -> ManualDister:
        return cls(ManualDistConfig.from_mapping(data))

    @classmethod
    def from_yaml(cls, text: str) -> ManualDister:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise YamlParseError(
                f"failed to unmarshal YAML: {exc}",
                context={"dist_type": MANUAL_DIST_TYPE_NAME, "error": str(exc)},
            ) from exc
        if data is not None and not isinstance(data, Mapping):
            raise ConfigValidationError(
                "manual dist config must be a mapping",
                context={"dist_type": MANUAL_DIST_TYPE_NAME},
            )
        return cls.from_config(data)

    def artifacts(self, rendered_name: str) -> list[str]:
        name = rendered_name
        if self.config.extension:
            name += "." + self.config.extension
        return [name]

    def run_dist(self, output_dir: Path, rendered_name: str) -> bytes | None:
        # The dist script produces the output.
        return None

    def verify_artifacts(self, output_dir: Path, rendered_name: str) -> None:
        """Check that the script produced exactly one regular artifact."""
        names = self.artifacts(rendered_name)
        if len(names) != 1:
            raise DistArtifactError("manual distribution must produce a single artifact")
        artifact = Path(output_dir) / names[0]
        if not artifact.exists():
            raise DistArtifactError(
                f"expected output does not exist at {artifact}",
                context={"path": str(artifact)},
            )
        if artifact.is_dir():
            raise DistArtifactError(
                f"output at {artifact} is a directory",
                context={"path": str(artifact)},
            )
        logger.debug("Verified manual dist artifact %s", artifact)


DISTER_FACTORIES: dict[str, Callable[[Mapping[str, Any] | None], Dister]] = {
    MANUAL_DIST_TYPE_NAME: ManualDister.from_config,
}


def new_dister(type_name: str, config: Mapping[str, Any] | None = None) -> Dister:
    factory = DISTER_FACTORIES.get(type_name)
    if factory is None:
        raise ConfigValidationError(
            f"Unknown dist type: {type_name}",
            context={"dist_type": type_name, "known": sorted(DISTER_FACTORIES)},
        )
    return factory(config)
