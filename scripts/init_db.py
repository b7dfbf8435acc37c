from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from dotenv import load_dotenv

from config import get_settings_module
from config.log_config import configure_logging

from kindergarten_attendance.database.bootstrap import apply_schema, apply_seed_sql, list_tables

logger = logging.getLogger("kindergarten_attendance.scripts.init_db")


def main() -> None:
    load_dotenv(override=False)
    configure_logging(level="INFO")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    applied = apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    if "--seed" in sys.argv[1:]:
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

    tables = list_tables(db_config)
    logger.info(
        "%s schema -> %s@%s:%s/%s (tables=%d)",
        "Applied" if applied else "Up-to-date",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )


if __name__ == "__main__":
    main()
