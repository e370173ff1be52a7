"""Tests to verify hexagonal architecture structure."""

from pathlib import Path

import pytest

# Compute project root relative to this test file
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def package_path() -> Path:
    """Return the branchflow package directory."""
    return PROJECT_ROOT / "branchflow"


def _import_lines(py_file: Path, prefix: str) -> list[str]:
    return [
        line.strip()
        for line in py_file.read_text().split("\n")
        if line.strip().startswith((f"from {prefix}", f"import {prefix}"))
    ]


def test_main_layers_exist(package_path: Path) -> None:
    """Verify all main layer directories exist."""
    layers = ["domain", "application", "infrastructure", "api", "config", "bootstrap"]
    for layer in layers:
        assert (package_path / layer).is_dir(), f"Missing layer: {layer}"
        assert (package_path / layer / "__init__.py").is_file(), (
            f"Missing {layer}/__init__.py"
        )


def test_domain_subdirectories_exist(package_path: Path) -> None:
    domain = package_path / "domain"
    for subdir in ["models", "errors", "services"]:
        assert (domain / subdir / "__init__.py").is_file(), f"Missing domain/{subdir}"


def test_domain_has_no_external_layer_imports(package_path: Path) -> None:
    """Domain is the innermost layer and imports nothing from the others."""
    for py_file in (package_path / "domain").rglob("*.py"):
        for layer in ("application", "infrastructure", "api", "bootstrap", "config"):
            offending = _import_lines(py_file, f"branchflow.{layer}")
            assert not offending, f"{py_file} contains forbidden import: {offending}"


def test_domain_has_no_framework_imports(package_path: Path) -> None:
    """Domain code stays free of web and database frameworks."""
    for py_file in (package_path / "domain").rglob("*.py"):
        for framework in ("fastapi", "sqlalchemy", "pydantic", "structlog"):
            offending = _import_lines(py_file, framework)
            assert not offending, f"{py_file} imports {framework}: {offending}"


def test_application_has_no_forbidden_imports(package_path: Path) -> None:
    """Application imports only domain and config.

    Adapters reach services through the ports, never the other way round.
    """
    for py_file in (package_path / "application").rglob("*.py"):
        for layer in ("infrastructure", "api", "bootstrap"):
            offending = _import_lines(py_file, f"branchflow.{layer}")
            assert not offending, f"{py_file} contains forbidden import: {offending}"


def test_infrastructure_does_not_import_api(package_path: Path) -> None:
    for py_file in (package_path / "infrastructure").rglob("*.py"):
        for layer in ("api", "bootstrap"):
            offending = _import_lines(py_file, f"branchflow.{layer}")
            assert not offending, f"{py_file} contains forbidden import: {offending}"


def test_config_is_a_leaf(package_path: Path) -> None:
    """Config depends on nothing else in the package."""
    for py_file in (package_path / "config").rglob("*.py"):
        offending = [
            line
            for line in _import_lines(py_file, "branchflow.")
            if not line.startswith(("from branchflow.config", "import branchflow.config"))
        ]
        assert not offending, f"{py_file} contains forbidden import: {offending}"


def test_ports_are_protocols_or_abcs(package_path: Path) -> None:
    """Every port module declares a Protocol or ABC."""
    ports = package_path / "application" / "ports"
    for py_file in ports.glob("*.py"):
        if py_file.name == "__init__.py":
            continue
        content = py_file.read_text()
        assert "(Protocol)" in content or "(ABC)" in content, (
            f"{py_file} does not declare a Protocol or ABC"
        )
