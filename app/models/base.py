import uuid

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_uuid() -> str:
    """Primary keys are UUID4 strings."""
    return str(uuid.uuid4())
