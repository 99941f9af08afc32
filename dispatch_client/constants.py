"""Client-level constants shared across modules."""
from __future__ import annotations

SERVICE_NAME = "dispatch-client"

SUCCESS_STATUS_CODES = range(200, 300)

DEFAULT_CONNECT_TIMEOUT_SECONDS = 5.0
DEFAULT_READ_TIMEOUT_SECONDS = 15.0
DEFAULT_CALLBACK_WORKERS = 4


class SECRET_KIND:
    NONE = "none"
    HEADER = "header"
    QUERY = "query"
