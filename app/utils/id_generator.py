import uuid


def generate_uuid() -> str:
    """Item ids double as the partition key, so they must be unique and well spread."""
    return str(uuid.uuid4())
