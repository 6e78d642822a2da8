"""Tests for architecture import boundaries.

These tests ensure that the layering of the package is maintained:
- domain imports nothing from application, infrastructure or cli
- application imports nothing from infrastructure or cli
- nothing outside cli imports cli
"""

from __future__ import annotations

import ast
import re
from pathlib import Path

import pytest

# Root of the ig_summary package
PACKAGE_ROOT = Path(__file__).parent.parent.parent.parent / "ig_summary"


def get_python_files(directory: Path) -> list[Path]:
    return list(directory.rglob("*.py"))


def extract_imports_from_file(file_path: Path) -> list[str]:
    """Extract all imported module names from a Python file.

    Relative imports are returned without their leading dots, so
    ``from ..cli import app`` yields ``cli``.
    """
    imports = []
    tree = ast.parse(file_path.read_text(encoding="utf-8"))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            imports.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            imports.append(node.module)
    return imports


def has_forbidden_import(imports: list[str], forbidden_pattern: str) -> list[str]:
    pattern = re.compile(forbidden_pattern)
    return [imp for imp in imports if pattern.search(imp)]


def layer_violations(layer: str, forbidden_pattern: str) -> list[str]:
    layer_dir = PACKAGE_ROOT / layer
    if not layer_dir.exists():
        pytest.skip(f"{layer} directory not found")

    violations = []
    for py_file in get_python_files(layer_dir):
        forbidden = has_forbidden_import(
            extract_imports_from_file(py_file), forbidden_pattern
        )
        if forbidden:
            rel_path = py_file.relative_to(PACKAGE_ROOT.parent)
            violations.append(f"{rel_path}: {forbidden}")
    return violations


class TestLayerBoundaries:
    """The CLI is the outermost layer and the domain the innermost."""

    @pytest.mark.parametrize("layer", ["domain", "application", "infrastructure"])
    def test_layer_does_not_import_cli(self, layer):
        violations = layer_violations(layer, r"(^|\.)cli(\.|$)")

        assert not violations, f"{layer} imports CLI modules:\n" + "\n".join(violations)

    def test_domain_does_not_import_outer_layers(self):
        violations = layer_violations(
            "domain", r"(^|\.)(application|infrastructure)(\.|$)"
        )

        assert not violations, "Domain imports outer layers:\n" + "\n".join(violations)

    def test_application_does_not_import_infrastructure(self):
        violations = layer_violations("application", r"(^|\.)infrastructure(\.|$)")

        assert not violations, (
            "Application imports infrastructure:\n" + "\n".join(violations)
        )

    def test_domain_has_no_third_party_io(self):
        """Spreadsheet and YAML handling stays in infrastructure."""
        violations = layer_violations("domain", r"^(pandas|openpyxl|yaml|rich|click)(\.|$)")

        assert not violations, "Domain imports I/O libraries:\n" + "\n".join(violations)


class TestPackageLayout:
    def test_every_layer_is_a_package(self):
        for layer in ("domain", "application", "infrastructure", "cli"):
            assert (PACKAGE_ROOT / layer / "__init__.py").exists(), layer

    def test_helper_extracts_relative_imports(self, tmp_path):
        module = tmp_path / "module.py"
        module.write_text(
            "import json\nfrom ..cli.commands import create\nfrom . import x\n",
            encoding="utf-8",
        )

        assert extract_imports_from_file(module) == ["json", "cli.commands"]
