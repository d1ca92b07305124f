"""Error kinds and status-code groupings.

Error Kind Taxonomy
===================

Every caught value is assigned exactly one kind. When several signals could
apply, the classifier's precedence order decides (see ``classifier.py``).

    | Kind       | Trigger                                  | Retryable |
    |------------|------------------------------------------|-----------|
    | network    | failed fetch / connection, or status 0   | Yes       |
    |            | inside a response envelope               |           |
    | timeout    | aborted or timed-out request             | Yes       |
    | auth       | 401, 403                                 | No        |
    | notFound   | 404                                      | No        |
    | validation | 400, 422                                 | No        |
    | rateLimit  | 429                                      | No        |
    | server     | >= 500                                   | Yes       |
    | unknown    | anything else                            | No        |

Rate limiting is deliberately not retryable: callers back off explicitly
rather than retrying blindly.
"""

from __future__ import annotations

from enum import Enum

AUTH_STATUSES = frozenset({401, 403})
NOT_FOUND_STATUS = 404
VALIDATION_STATUSES = frozenset({400, 422})
RATE_LIMIT_STATUS = 429
SERVER_STATUS_MIN = 500


class ErrorKind(str, Enum):
    """Closed classification of a caught error value."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    AUTH = "auth"
    NOT_FOUND = "notFound"
    VALIDATION = "validation"
    RATE_LIMIT = "rateLimit"
    SERVER = "server"
    UNKNOWN = "unknown"

    @property
    def is_retryable(self) -> bool:
        """Whether the default policy permits retrying this kind."""
        return self in RETRYABLE_KINDS

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


RETRYABLE_KINDS: frozenset[ErrorKind] = frozenset({
    ErrorKind.NETWORK,
    ErrorKind.TIMEOUT,
    ErrorKind.SERVER,
})

_DESCRIPTIONS: dict[ErrorKind, str] = {
    ErrorKind.NETWORK: "No network connection or the request never completed",
    ErrorKind.TIMEOUT: "Request was aborted or timed out",
    ErrorKind.AUTH: "Not authenticated or not permitted (401/403)",
    ErrorKind.NOT_FOUND: "Resource does not exist (404)",
    ErrorKind.VALIDATION: "Request was rejected as invalid (400/422)",
    ErrorKind.RATE_LIMIT: "Too many requests (429)",
    ErrorKind.SERVER: "Server-side failure (5xx)",
    ErrorKind.UNKNOWN: "Unclassified error",
}
