"""
distclean/project_config.py

Loads the project configuration (``distclean.yml``) into typed specs.

The YAML file is the source of truth for which products exist, where their
binaries are written and which distributions they declare. Relative output
directories resolve against the project directory.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from distclean.config_validator import read_yaml
from distclean.dister import MANUAL_DIST_TYPE_NAME, Dister, new_dister
from distclean.exceptions import ConfigValidationError
from distclean.osarch import OSArch
from distclean.templates import DEFAULT_NAME_TEMPLATE, KNOWN_FIELDS, template_fields

DEFAULT_CONFIG_NAME = "distclean.yml"
DEFAULT_BUILD_OUTPUT_DIR = "build"
DEFAULT_DIST_OUTPUT_DIR = "dist"
PROJECT_SCHEMA = "project"


@dataclass(frozen=True)
class BuildSpec:
    output_dir: Path
    os_archs: tuple[OSArch, ...]


@dataclass(frozen=True)
class DistSpec:
    output_dir: Path
    dister: Dister
    name_template: str = DEFAULT_NAME_TEMPLATE
    match_product_prefix: bool = True

    @property
    def type_name(self) -> str:
        return self.dister.type_name


@dataclass(frozen=True)
class ProductSpec:
    name: str
    build: BuildSpec
    dists: tuple[DistSpec, ...] = ()

    @property
    def product_targets(self) -> dict[str, tuple[OSArch, ...]]:
        return {self.name: self.build.os_archs}


@dataclass(frozen=True)
class ProjectConfig:
    project_dir: Path
    products: Mapping[str, ProductSpec] = field(default_factory=dict)
    version: str | None = None

    def product(self, name: str) -> ProductSpec:
        try:
            return self.products[name]
        except KeyError:
            raise ConfigValidationError(
                f"Unknown product: {name}",
                context={"product": name, "known": sorted(self.products)},
            ) from None

    @property
    def product_names(self) -> list[str]:
        return sorted(self.products)


def _resolve_dir(project_dir: Path, raw: str) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = project_dir / path
    return path


def _parse_osarch(raw: Any) -> OSArch:
    if isinstance(raw, Mapping):
        return OSArch(os=str(raw["os"]), arch=str(raw["arch"]))
    return OSArch.parse(str(raw))


def _parse_build(project_dir: Path, raw: Mapping[str, Any] | None) -> BuildSpec:
    raw = raw or {}
    os_archs_raw = raw.get("os-archs")
    if os_archs_raw:
        os_archs = tuple(dict.fromkeys(_parse_osarch(item) for item in os_archs_raw))
    else:
        os_archs = (OSArch.current(),)
    return BuildSpec(
        output_dir=_resolve_dir(project_dir, raw.get("output-dir") or DEFAULT_BUILD_OUTPUT_DIR),
        os_archs=os_archs,
    )


def _parse_dist(product: str, project_dir: Path, raw: Mapping[str, Any]) -> DistSpec:
    name_template = raw.get("name-template") or DEFAULT_NAME_TEMPLATE
    unknown_fields = sorted(set(template_fields(name_template)) - KNOWN_FIELDS)
    if unknown_fields:
        raise ConfigValidationError(
            f"Unknown name-template fields for {product}: {', '.join(unknown_fields)}",
            context={"product": product, "name_template": name_template},
        )
    dist_type = raw.get("type") or MANUAL_DIST_TYPE_NAME
    return DistSpec(
        output_dir=_resolve_dir(project_dir, raw.get("output-dir") or DEFAULT_DIST_OUTPUT_DIR),
        dister=new_dister(dist_type, raw.get("config")),
        name_template=name_template,
        match_product_prefix=raw.get("match-product-prefix", True),
    )


def _yaml_to_product_spec(name: str, project_dir: Path, raw: Mapping[str, Any] | None) -> ProductSpec:
    raw = raw or {}
    dist_raw = raw.get("dist") or []
    if isinstance(dist_raw, Mapping):
        dist_raw = [dist_raw]
    return ProductSpec(
        name=name,
        build=_parse_build(project_dir, raw.get("build")),
        dists=tuple(_parse_dist(name, project_dir, item) for item in dist_raw),
    )


def project_config_from_mapping(data: Mapping[str, Any], project_dir: Path) -> ProjectConfig:
    """Build a ProjectConfig from already-validated YAML data."""
    project_dir = Path(project_dir).expanduser().resolve()
    products = {
        name: _yaml_to_product_spec(name, project_dir, raw)
        for name, raw in (data.get("products") or {}).items()
    }
    version = data.get("version")
    return ProjectConfig(
        project_dir=project_dir,
        products=products,
        version=str(version) if version is not None else None,
    )


def load_project_config(config_path: Path, project_dir: Path | None = None) -> ProjectConfig:
    """Read and validate ``config_path``.

    ``project_dir`` defaults to the directory containing the config file.
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigValidationError(
            f"Config file not found: {config_path}",
            context={"path": str(config_path)},
        )
    data = read_yaml(config_path, schema_name=PROJECT_SCHEMA)
    return project_config_from_mapping(data, project_dir or config_path.parent)
