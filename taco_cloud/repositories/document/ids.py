import uuid


def new_document_id() -> str:
    """Genera un ID de documento (24 caracteres hex, como un ObjectId)."""
    return uuid.uuid4().hex[:24]
