import uuid


def new_time_uuid() -> str:
    """UUID ordenado por tiempo (versión 1)."""
    return str(uuid.uuid1())
