from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base
from sqlalchemy import event
from core.id_generator import ENTITY_TABLES, generate_id

# Shared Base for every model
Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@event.listens_for(Base, "before_insert", propagate=True)
def assign_id(mapper, connection, target):
    # relation tables are keyed by their foreign keys and have no id column
    if target.__tablename__ in ENTITY_TABLES and getattr(target, "id", None) is None:
        target.id = generate_id(target.__tablename__)
