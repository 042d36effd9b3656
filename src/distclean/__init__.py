"""Cleanup engine for multi-product build and distribution outputs."""

from distclean.bin_output import classify_bin_outputs
from distclean.clean import CleanReport, clean_product, clean_products, plan_product
from distclean.dist_match import match_dist_artifacts
from distclean.exceptions import (
    ConfigValidationError,
    DistArtifactError,
    DistCleanError,
    PlannerConsistencyError,
    ProductCleanError,
    RemovalError,
    ScanError,
    YamlParseError,
)
from distclean.osarch import OSArch
from distclean.plan import RemovalEntry, RemovalPlan, RemovalPlanBuilder, build_removal_plan
from distclean.project_config import ProjectConfig, load_project_config
from distclean.remover import CascadingRemover, execute_plan

__version__ = "0.1.0"

__all__ = [
    "OSArch",
    "classify_bin_outputs",
    "match_dist_artifacts",
    "RemovalEntry",
    "RemovalPlan",
    "RemovalPlanBuilder",
    "build_removal_plan",
    "CascadingRemover",
    "execute_plan",
    "ProjectConfig",
    "load_project_config",
    "CleanReport",
    "clean_product",
    "clean_products",
    "plan_product",
    "DistCleanError",
    "ConfigValidationError",
    "YamlParseError",
    "ScanError",
    "RemovalError",
    "PlannerConsistencyError",
    "DistArtifactError",
    "ProductCleanError",
]
