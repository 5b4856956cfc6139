from app.db.models.user import User
from app.db.models.document import Document

__all__ = [
    "User",
    "Document"
]
