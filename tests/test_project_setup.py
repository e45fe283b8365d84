"""Test project setup and structure"""

import importlib
from pathlib import Path


def test_package_imports():
    """Verify all core dependencies are importable"""
    importlib.import_module("typer")
    importlib.import_module("rich")
    importlib.import_module("pydantic")
    importlib.import_module("yaml")


def test_directory_structure():
    """Verify project directory structure"""
    base_dir = Path(__file__).parent.parent

    assert (base_dir / "certgen").is_dir()
    assert (base_dir / "certgen" / "__init__.py").is_file()
    assert (base_dir / "certgen" / "option").is_dir()
    assert (base_dir / "certgen" / "cli.py").is_file()
    assert (base_dir / "tests").is_dir()
    assert (base_dir / "tests" / "unit").is_dir()
    assert (base_dir / "tests" / "integration").is_dir()
