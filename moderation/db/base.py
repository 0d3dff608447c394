import uuid

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_uuid() -> str:
    """Primary key default; ids are stored as 36-character strings."""
    return str(uuid.uuid4())
