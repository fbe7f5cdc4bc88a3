"""
Structure lint tests.
Verify the component skeleton exists and follows conventions.
"""

from pathlib import Path

import yaml

PROJECT_ROOT = Path(__file__).parent.parent

COMPONENTS = [
    "admin",
    "bootstrap",
    "contact",
    "live_sync",
    "portfolio_view",
    "repository",
    "uploads",
]


class TestProjectStructure:
    def test_core_directories_exist(self) -> None:
        assert (PROJECT_ROOT / "src" / "core" / "ports").is_dir()
        assert (PROJECT_ROOT / "src" / "domain").is_dir()
        assert (PROJECT_ROOT / "src" / "adapters").is_dir()
        assert (PROJECT_ROOT / "src" / "api" / "routes").is_dir()

    def test_components_have_public_surface(self) -> None:
        """Each component exposes __init__ and a component module."""
        for name in COMPONENTS:
            base = PROJECT_ROOT / "src" / "components" / name
            assert (base / "__init__.py").is_file(), f"Missing __init__.py in {name}"
            assert (base / "component.py").is_file(), f"Missing component.py in {name}"

    def test_migrations_ship_with_package(self) -> None:
        migrations = PROJECT_ROOT / "src" / "adapters" / "sqlite" / "migrations"
        assert sorted(p.name for p in migrations.glob("*.sql"))[0].startswith("0001_")

    def test_tests_structure_exists(self) -> None:
        assert (PROJECT_ROOT / "tests" / "unit").is_dir()
        assert (PROJECT_ROOT / "tests" / "integration").is_dir()


class TestRulesFile:
    def test_rules_file_is_valid_yaml(self) -> None:
        with open(PROJECT_ROOT / "rules.yaml") as f:
            data = yaml.safe_load(f)

        assert isinstance(data, dict)
        assert "owner" in data
        assert "live_sync" in data
