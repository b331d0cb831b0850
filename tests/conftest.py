from datetime import UTC, datetime
from pathlib import Path

import pytest

from travel_cms.adapters.clock import FrozenClock
from travel_cms.app_shell.context import ServiceContext
from travel_cms.rules.loader import load_rules
from travel_cms.rules.models import Rules

ROOT = Path(__file__).resolve().parent.parent

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def rules() -> Rules:
    """REAL rules from the project root."""
    rules_path = ROOT / "rules.yaml"
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def ctx(rules: Rules, clock: FrozenClock) -> ServiceContext:
    """In-memory ServiceContext driven by a frozen clock."""
    return ServiceContext.in_memory(rules, clock)


@pytest.fixture
def sqlite_ctx(tmp_path: Path, rules: Rules, clock: FrozenClock) -> ServiceContext:
    """ServiceContext backed by a migrated temporary SQLite DB."""
    return ServiceContext.create(str(tmp_path / "travel_cms.db"), rules, clock)
