"""Services package: remote storage, price feeds, authentication and export."""

from cashflow.services.auth import AuthService, LoginResult, PinVerifier, PlainTextPinVerifier
from cashflow.services.export import ExportData, ExportError, export_excel, export_pdf
from cashflow.services.prices import PriceFeedError, PriceFeedService
from cashflow.services.storage import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsProfileStorage,
    GoogleSheetsRecordStorage,
    InMemoryAuditStorage,
    InMemoryProfileStorage,
    InMemoryRecordStorage,
    LocalStateFile,
    NotFoundError,
    ProfileStorageInterface,
    RecordStorageInterface,
    RemoteSnapshot,
    StorageError,
)

__all__ = [
    # Auth
    "AuthService",
    "LoginResult",
    "PinVerifier",
    "PlainTextPinVerifier",
    # Export
    "ExportData",
    "ExportError",
    "export_excel",
    "export_pdf",
    # Prices
    "PriceFeedError",
    "PriceFeedService",
    # Storage
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
