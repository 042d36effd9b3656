#!/usr/bin/env python3
"""Command line entry point for cleaning product build and dist outputs."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from distclean.clean import clean_products, verify_product_dists
from distclean.exceptions import ConfigValidationError, DistCleanError, describe_error
from distclean.logging_config import add_logging_args, configure_logging
from distclean.project_config import DEFAULT_CONFIG_NAME, ProjectConfig, load_project_config

COMMAND_CLEAN = "clean"
COMMAND_VERIFY_DIST = "verify-dist"
COMMAND_LIST_PRODUCTS = "list-products"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="distclean",
        description="Remove the build and distribution outputs of configured products.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Project config file (default: <project-dir>/{DEFAULT_CONFIG_NAME}).",
    )
    parser.add_argument(
        "--project-dir",
        default=".",
        help="Project directory that relative output dirs resolve against (default: .).",
    )
    add_logging_args(parser)

    sub = parser.add_subparsers(dest="command")
    clean = sub.add_parser(COMMAND_CLEAN, help="Remove outputs for products.")
    clean.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the paths that would be removed without removing them.",
    )
    clean.add_argument("products", nargs="*", help="Products to clean (default: all).")

    verify = sub.add_parser(COMMAND_VERIFY_DIST, help="Verify dist script outputs for a product.")
    verify.add_argument("product", help="Product whose dist outputs to verify.")
    verify.add_argument(
        "--version",
        default=None,
        help="Version the outputs were rendered with (default: config 'version').",
    )

    sub.add_parser(COMMAND_LIST_PRODUCTS, help="List configured products.")
    return parser


def _load_project(args: argparse.Namespace) -> ProjectConfig:
    project_dir = Path(args.project_dir).expanduser().resolve()
    config_path = Path(args.config).expanduser() if args.config else project_dir / DEFAULT_CONFIG_NAME
    return load_project_config(config_path, project_dir=project_dir)


def _run_verify(project: ProjectConfig, product: str, version: str | None) -> int:
    version = version or project.version
    if not version:
        raise ConfigValidationError(
            "No version given: pass --version or set 'version' in the config",
            context={"product": product},
        )
    spec = project.product(product)
    for output_dir in verify_product_dists(spec, version):
        print(f"Verified {spec.name} dist output in {output_dir}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level, fmt=args.log_format)

    if not args.command:
        print("No command specified. Use 'clean', 'verify-dist' or 'list-products'.")
        return 1

    try:
        project = _load_project(args)
        if args.command == COMMAND_LIST_PRODUCTS:
            for name in project.product_names:
                print(name)
            return 0
        if args.command == COMMAND_VERIFY_DIST:
            return _run_verify(project, args.product, args.version)
        if args.command == COMMAND_CLEAN:
            clean_products(project, args.products, dry_run=args.dry_run, stdout=sys.stdout)
            return 0
    except DistCleanError as exc:
        print(f"Error: {describe_error(exc)}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
