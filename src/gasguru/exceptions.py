"""Custom exception hierarchy for gasguru."""

from __future__ import annotations


class GuruError(Exception):
    """Base exception for all gasguru errors."""


class GuruConfigError(GuruError):
    """Invalid or missing configuration."""


class GuruTransportError(GuruError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        collection: str = "",
    ) -> None:
        self.status_code = status_code
        self.collection = collection
        super().__init__(message)


class GuruApiError(GuruError):
    """The document store returned a structured error body."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        collection: str = "",
    ) -> None:
        self.code = code
        self.collection = collection
        super().__init__(message)


class GuruNotFoundError(GuruApiError):
    """Target document does not exist (``NOT_FOUND``)."""


class GuruPermissionError(GuruApiError):
    """Request rejected by the store's security rules or credentials.

    Covers HTTP 401/403 and the ``PERMISSION_DENIED`` / ``UNAUTHENTICATED``
    statuses.
    """


class GuruValidationError(GuruError):
    """A form value failed local validation.

    Raised before any remote call; ``field`` names the offending input.
    """

    def __init__(self, message: str, *, field: str = "", title: str = "Erreur") -> None:
        self.field = field
        self.title = title
        super().__init__(message)


class GuruIntegrityError(GuruError):
    """Delete refused because other records still reference the target."""

    def __init__(
        self,
        message: str,
        *,
        collection: str = "",
        record_id: str = "",
        dependents: int = 0,
    ) -> None:
        self.collection = collection
        self.record_id = record_id
        self.dependents = dependents
        super().__init__(message)


class GuruPlacesError(GuruError):
    """The places lookup service failed or returned an error status."""
