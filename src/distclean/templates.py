"""
distclean/templates.py

Rendering of distribution name templates such as ``{{Product}}-{{Version}}``.

When no version is supplied the ``{{Version}}`` placeholder is left in the
rendered name so the matcher can treat it as a wildcard; cleanup must not
depend on which version happened to be built.
"""

from __future__ import annotations

import re

DEFAULT_NAME_TEMPLATE = "{{Product}}-{{Version}}"
VERSION_PLACEHOLDER = "{{Version}}"

TEMPLATE_FIELD_PATTERN = re.compile(r"\{\{\s*\.?(?P<field>[A-Za-z]+)\s*\}\}")
KNOWN_FIELDS = frozenset({"Product", "Version"})


def template_fields(template: str) -> list[str]:
    return [match.group("field") for match in TEMPLATE_FIELD_PATTERN.finditer(template)]


def render_name_template(template: str, product: str, version: str | None = None) -> str:
    """Render ``template`` for ``product``.

    Raises:
        ValueError: if the template references a field other than Product or Version.
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group("field")
        if name == "Product":
            return product
        if name == "Version":
            return VERSION_PLACEHOLDER if version is None else version
        raise ValueError(f"Unknown name template field: {match.group(0)}")

    return TEMPLATE_FIELD_PATTERN.sub(replace, template)
