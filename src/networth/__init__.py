"""networth — persistence for a personal net-worth tracker.

One JSON document of transactions, stored locally or in Google Drive.
"""

__version__ = "0.1.0"

from networth.config import OAuthCredentials, StorageConfig
from networth.constants import Backend, ServiceState, StorageMode
from networth.errors import (
    AuthExchangeFailed,
    AuthRefreshFailed,
    CorruptLocalData,
    LocalWriteFailed,
    NotConfigured,
    PersistenceError,
    RemoteApiError,
    RemoteUnavailable,
    RemoteWriteFailed,
)
from networth.local_store import LocalStore
from networth.models import Currency, StoredDocument, Transaction, TransactionType
from networth.service import PersistenceService
from networth.stores import FileLocalStore, MemoryLocalStore

__all__ = [
    "OAuthCredentials",
    "StorageConfig",
    "Backend",
    "ServiceState",
    "StorageMode",
    "AuthExchangeFailed",
    "AuthRefreshFailed",
    "CorruptLocalData",
    "LocalWriteFailed",
    "NotConfigured",
    "PersistenceError",
    "RemoteApiError",
    "RemoteUnavailable",
    "RemoteWriteFailed",
    "LocalStore",
    "Currency",
    "StoredDocument",
    "Transaction",
    "TransactionType",
    "PersistenceService",
    "FileLocalStore",
    "MemoryLocalStore",
]
