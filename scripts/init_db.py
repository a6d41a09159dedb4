from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module

from attendance_payroll.database.bootstrap import apply_schema, list_tables

logger = logging.getLogger("init_db")


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    settings_module = get_settings_module()
    db_config = dict(importlib.import_module(settings_module).DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    executed = apply_schema(db_config)
    tables = list_tables(db_config)
    logger.info("%s: %d statements applied to %s", settings_module, executed, target)
    logger.info("tables: %s", ", ".join(sorted(tables)) or "(none)")


if __name__ == "__main__":
    main()
