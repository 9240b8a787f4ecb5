from sqlalchemy.orm import declarative_base

# Declarative base shared by sluggable models and the slug history table,
# so Alembic sees a single metadata collection.
Base = declarative_base()
