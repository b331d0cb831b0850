"""
Structure lint tests.

Verify that every component follows the package conventions.
"""

from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
PACKAGE = PROJECT_ROOT / "travel_cms"

COMPONENTS = ["content", "editor", "publishing", "render", "scheduler"]


class TestProjectStructure:
    def test_layers_exist(self) -> None:
        for layer in ("domain", "ports", "adapters", "rules", "components", "app_shell", "api"):
            assert (PACKAGE / layer).is_dir(), layer

    def test_tests_structure_exists(self) -> None:
        assert (PROJECT_ROOT / "tests" / "unit").is_dir()
        assert (PROJECT_ROOT / "tests" / "integration").is_dir()
        assert (PROJECT_ROOT / "tests" / "regression").is_dir()

    def test_components_follow_layout(self) -> None:
        for name in COMPONENTS:
            component = PACKAGE / "components" / name
            for filename in ("__init__.py", "_impl.py", "models.py"):
                assert (component / filename).is_file(), f"{name}/{filename}"

    def test_init_files_present(self) -> None:
        for path in PACKAGE.rglob("*.py"):
            if path.name == "__init__.py":
                continue
            assert (path.parent / "__init__.py").is_file(), f"Missing __init__.py in {path.parent}"

    def test_rules_and_migrations_present(self) -> None:
        assert (PROJECT_ROOT / "rules.yaml").is_file()
        migrations = PACKAGE / "adapters" / "sqlite" / "migrations"
        assert sorted(p.name for p in migrations.glob("*.sql")) == ["0001_content.sql"]
