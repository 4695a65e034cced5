import uuid
from datetime import datetime


def new_id():
    return str(uuid.uuid4())


def utcnow():
    return datetime.utcnow()


def money(value):
    """Numeric column value as a JSON-friendly float."""
    return float(value) if value is not None else None
