#!/usr/bin/env python3
"""
Script to make a user an admin.
Usage: python make_admin.py user@example.com
"""

import argparse
import logging
import sys

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.logging_config import configure_logging
from app.db.database import SessionLocal


logger = logging.getLogger("make_admin")


def make_user_admin(email: str) -> bool:
    """Make a user an admin by email."""
    db = SessionLocal()
    try:
        result = db.execute(
            text("UPDATE users SET role = 'admin' WHERE lower(email) = lower(:email)"),
            {"email": email}
        )
        if result.rowcount == 0:
            logger.error("User with email '%s' not found", email)
            db.rollback()
            return False

        db.commit()
        user_result = db.execute(
            text("SELECT email, role FROM users WHERE lower(email) = lower(:email)"),
            {"email": email}
        ).fetchone()
        logger.info("User: %s, Role: %s", user_result[0], user_result[1])
        return True

    except SQLAlchemyError as e:
        logger.error("Error promoting %s: %s", email, e)
        db.rollback()
        return False
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Grant the admin role to a user")
    parser.add_argument("email")
    args = parser.parse_args()

    configure_logging()
    sys.exit(0 if make_user_admin(args.email) else 1)
