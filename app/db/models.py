"""Declarative base shared by the ORM models"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# ORM model classes live in app/infrastructure/orm/ and are imported there
# to keep this module free of circular imports.
