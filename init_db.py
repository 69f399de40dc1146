#!/usr/bin/env python3
"""
Create all tables for local development.
Production databases are migrated with Alembic (alembic/versions).
"""

import logging

from app.core.logging_config import configure_logging
from app.db.database import init_db


if __name__ == "__main__":
    configure_logging()
    init_db()
    logging.getLogger("init_db").info("Database tables created")
