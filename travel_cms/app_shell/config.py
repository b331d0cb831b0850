import logging
import os
from dataclasses import dataclass
from pathlib import Path

from travel_cms.rules.loader import check_required_env
from travel_cms.rules.models import Rules

logger = logging.getLogger(__name__)

RULES_ENV = "TRAVEL_CMS_RULES"


@dataclass(frozen=True)
class Settings:
    base_dir: Path
    rules_path: Path
    data_dir_env: str = "TRAVEL_CMS_DATA_DIR"

    @classmethod
    def from_env(cls) -> "Settings":
        base_dir = Path(os.getcwd())
        rules_path = Path(os.environ.get(RULES_ENV, base_dir / "rules.yaml"))
        return cls(base_dir=base_dir, rules_path=rules_path)

    def data_dir(self, rules: Rules) -> Path:
        return Path(os.environ.get(rules.ops.data_dir_env, self.base_dir / "data"))

    def db_path(self, rules: Rules) -> str:
        return str(self.data_dir(rules) / rules.ops.db_filename)


def configure_logging(rules: Rules) -> None:
    logging.basicConfig(
        level=getattr(logging, rules.logging.level.upper(), logging.INFO),
        format=rules.logging.format,
    )


def validate_ops_rules(rules: Rules, settings: Settings) -> None:
    """
    Validate operational requirements before startup.

    Raises RuntimeError for missing environment variables. Creates the data
    directory when it does not exist yet.
    """
    check_required_env(rules)
    data_dir = settings.data_dir(rules)
    data_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Configuration validated (data dir: %s)", data_dir)
