"""Constants for the networth persistence layer."""

from enum import Enum


GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
DRIVE_API_URL = "https://www.googleapis.com/drive/v3"
DRIVE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3"

# Access limited to files this app created.
DRIVE_SCOPES = ("https://www.googleapis.com/auth/drive.file",)

DRIVE_FILE_NAME = "networth_data.json"
DOCUMENT_MIME_TYPE = "application/json"

# Local store keys
TOKENS_KEY = "google_drive_tokens"
DOCUMENT_KEY = "financial_data"

HTTP_TIMEOUT_SECS = 30.0

DEFAULT_REDIRECT_URI = "http://localhost:5173/auth/callback"


class StorageMode(str, Enum):
    """Storage mode requested by the host application."""

    LOCAL = "local"
    REMOTE = "remote"


class Backend(str, Enum):
    """Backend resolved for a single save/load call."""

    LOCAL = "local"
    REMOTE = "remote"


class ServiceState(str, Enum):
    """Lifecycle of the persistence service."""

    UNCONFIGURED = "unconfigured"
    LOCAL_ONLY = "local_only"
    REMOTE_PENDING_AUTH = "remote_pending_auth"
    REMOTE_AUTHORIZED = "remote_authorized"
