from app.domains.documents.entities import Document, ContentType, Visibility, OwnerSummary

__all__ = [
    "Document", "ContentType", "Visibility", "OwnerSummary"
]
