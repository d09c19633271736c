from __future__ import annotations

import logging

from bizledger.application.container import AppContainer, build_container
from bizledger.config import get_app_paths, load_settings
from bizledger.logging_config import setup_logging


def bootstrap(app_name: str = "BizLedger") -> AppContainer:
    """Resolve the data directory, start logging and load the ledger."""
    paths = get_app_paths(app_name)
    setup_logging(paths.logs_dir, level=logging.INFO)

    container = build_container(paths.db_path, settings=load_settings(), backup_dir=paths.backups_dir)
    logging.getLogger(__name__).info("ledger_ready db=%s", paths.db_path)
    return container
