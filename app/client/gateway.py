import logging
import uuid
from typing import Any, Dict, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)


class DocumentGateway(Protocol):
    """Удаленное хранилище документов с точки зрения редактора"""

    async def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def update(self, document_id: uuid.UUID, patch: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def delete(self, document_id: uuid.UUID) -> None:
        ...


class HttpDocumentGateway:
    """Клиент HTTP API документов"""

    def __init__(
        self,
        base_url: str,
        token: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._owns_client = client is None
        self._headers = {"Authorization": f"Bearer {token}"}

    async def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._client.post("/documents", json=payload, headers=self._headers)
        response.raise_for_status()
        return response.json()

    async def update(self, document_id: uuid.UUID, patch: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._client.put(f"/documents/{document_id}", json=patch, headers=self._headers)
        response.raise_for_status()
        return response.json()

    async def delete(self, document_id: uuid.UUID) -> None:
        response = await self._client.delete(f"/documents/{document_id}", headers=self._headers)
        response.raise_for_status()
        logger.info(f"Document {document_id} deleted remotely")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
