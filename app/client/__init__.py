from app.client.autosave import (
    AutosaveReconciler, DocumentPatch, EditorAttributes, Present, ABSENT,
    ResetPolicy, SaveState
)
from app.client.delta import Delta
from app.client.gateway import DocumentGateway, HttpDocumentGateway
from app.client.scheduler import AsyncioScheduler, ManualScheduler, Scheduler

__all__ = [
    "AutosaveReconciler", "DocumentPatch", "EditorAttributes", "Present", "ABSENT",
    "ResetPolicy", "SaveState",
    "Delta",
    "DocumentGateway", "HttpDocumentGateway",
    "AsyncioScheduler", "ManualScheduler", "Scheduler"
]
