from sqlalchemy.orm import declarative_base

# Base for ORM models (REQUIRED for Alembic)
Base = declarative_base()
