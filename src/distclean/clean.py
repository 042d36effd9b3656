"""
distclean/clean.py

Cleans the build and dist outputs of configured products.

Each product is planned and executed on its own: a fresh RemovalPlan and
VirtualRemovedSet per product, products processed in order, the first failure
aborting the rest.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from distclean.bin_output import classify_bin_outputs
from distclean.dist_match import match_dist_artifacts
from distclean.exceptions import DistCleanError, ProductCleanError
from distclean.logging_config import LogContext
from distclean.plan import RemovalPlan, RemovalPlanBuilder
from distclean.project_config import ProductSpec, ProjectConfig
from distclean.remover import DRY_RUN_PREFIX, CascadingRemover
from distclean.templates import render_name_template

logger = logging.getLogger(__name__)


@dataclass
class CleanReport:
    product: str
    dry_run: bool
    removed: list[Path] = field(default_factory=list)


def verify_product_dists(product: ProductSpec, version: str) -> list[Path]:
    """Check each dist's script output for ``version``; return the verified output dirs."""
    verified: list[Path] = []
    with LogContext(product=product.name, version=version):
        for dist in product.dists:
            rendered = render_name_template(dist.name_template, product.name, version)
            dist.dister.verify_artifacts(dist.output_dir, rendered)
            verified.append(dist.output_dir)
    return verified


def plan_product(product: ProductSpec) -> RemovalPlan:
    """Build the removal plan for one product's binaries and dist artifacts."""
    builder = RemovalPlanBuilder()

    output_root = product.build.output_dir
    builder.add_binaries(output_root, classify_bin_outputs(output_root, product.product_targets))

    for dist in product.dists:
        rendered = render_name_template(dist.name_template, product.name)
        artifacts = match_dist_artifacts(
            dist.output_dir,
            product.name,
            dist.dister.artifacts(rendered),
            match_product_prefix=dist.match_product_prefix,
        )
        builder.add_dist_artifacts(dist.output_dir, artifacts)

    return builder.build()


def clean_product(
    product: ProductSpec,
    *,
    dry_run: bool = False,
    stdout: TextIO | None = None,
) -> CleanReport:
    stdout = stdout if stdout is not None else sys.stdout
    with LogContext(product=product.name, dry_run=dry_run):
        try:
            plan = plan_product(product)
            if dry_run:
                stdout.write(f"{DRY_RUN_PREFIX} Clean {product.name} will remove paths:\n")
            removed = CascadingRemover(plan, dry_run=dry_run, stdout=stdout).execute()
        except DistCleanError as exc:
            raise ProductCleanError(product.name) from exc
        except OSError as exc:
            raise ProductCleanError(product.name) from exc

        if dry_run:
            logger.debug("Dry run for %s would remove %d paths", product.name, len(removed))
        else:
            logger.info("Cleaned %s: removed %d paths", product.name, len(removed))
    return CleanReport(product=product.name, dry_run=dry_run, removed=removed)


def clean_products(
    project: ProjectConfig,
    products: Sequence[str] | None = None,
    *,
    dry_run: bool = False,
    stdout: TextIO | None = None,
) -> list[CleanReport]:
    """Clean ``products`` (all configured products when empty) in order."""
    names = list(dict.fromkeys(products)) if products else project.product_names
    # Resolve every name up front so a typo removes nothing.
    specs = [project.product(name) for name in names]
    return [clean_product(spec, dry_run=dry_run, stdout=stdout) for spec in specs]
