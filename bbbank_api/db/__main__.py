from __future__ import annotations

import argparse
import logging

from bbbank_api.config import get_settings
from bbbank_api.db.models import Base
from bbbank_api.db.seed import seed_demo_data
from bbbank_api.db.session import get_engine, get_sessionmaker, init_db
from bbbank_api.observability.logging import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="BBBank database setup")
    parser.add_argument("--seed", action="store_true", help="Insert demo users, accounts and transactions")
    parser.add_argument("--reset", action="store_true", help="Drop all tables before creating them")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level_value, access_level=settings.access_log_level_value)
    logger = logging.getLogger("bbbank_api.db")

    if args.reset:
        Base.metadata.drop_all(bind=get_engine())
        logger.info("db.dropped")

    init_db()
    logger.info("db.initialized", extra={"database_url": get_settings().database_url})

    if args.seed:
        with get_sessionmaker()() as db:
            seed_demo_data(db)


if __name__ == "__main__":
    main()
