from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.college_records.college_records.database.bootstrap import apply_schema, list_tables
from src.college_records.college_records.database.connection import DBConfig

logger = logging.getLogger("college_records.init_db")


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format="%(levelname)s %(message)s")
    db_config = DBConfig.from_mapping(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    logger.info(
        "schema applied to %s@%s:%s/%s (tables=%d)",
        db_config.user,
        db_config.host,
        db_config.port,
        db_config.database,
        len(list_tables(db_config)),
    )


if __name__ == "__main__":
    main()
