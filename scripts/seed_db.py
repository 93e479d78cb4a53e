from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.college_records.college_records.database.bootstrap import apply_seed_sql, ensure_demo_users
from src.college_records.college_records.database.connection import DBConfig

logger = logging.getLogger("college_records.seed_db")


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format="%(levelname)s %(message)s")
    db_config = DBConfig.from_mapping(settings.DB_CONFIG)

    # seed.sql assigns courses to the demo teacher, so users go in first
    ensure_demo_users(db_config)
    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    logger.info("demo data seeded into %s@%s:%s/%s", db_config.user, db_config.host, db_config.port, db_config.database)


if __name__ == "__main__":
    main()
