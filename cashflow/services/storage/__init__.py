"""
Storage Services Package

Abstract interfaces plus Google Sheets and in-memory implementations of the
remote tables, and the local JSON state file.
"""

from cashflow.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    NotFoundError,
    ProfileStorageInterface,
    RecordStorageInterface,
    RemoteSnapshot,
    StorageError,
)
from cashflow.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsProfileStorage,
    GoogleSheetsRecordStorage,
)
from cashflow.services.storage.local_file import LocalStateFile
from cashflow.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryProfileStorage,
    InMemoryRecordStorage,
)

__all__ = [
    "AuditStorageInterface",
    "ConnectionError",
    "DuplicateError",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsProfileStorage",
    "GoogleSheetsRecordStorage",
    "InMemoryAuditStorage",
    "InMemoryProfileStorage",
    "InMemoryRecordStorage",
    "LocalStateFile",
    "NotFoundError",
    "ProfileStorageInterface",
    "RecordStorageInterface",
    "RemoteSnapshot",
    "StorageError",
]
