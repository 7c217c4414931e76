"""Library access permission state."""

from __future__ import annotations

from loguru import logger

from core.models import AuthorizationStatus
from core.services.interfaces import MediaLibrary


class LibraryPermission:
    """Holds the current library authorization status.

    The status starts as `NOT_DETERMINED`. A denial is kept until the next
    explicit `request_access` call; nothing retries on its own.
    """

    def __init__(self, status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED) -> None:
        self._status = status

    @property
    def status(self) -> AuthorizationStatus:
        return self._status

    @property
    def is_authorized(self) -> bool:
        return self._status is AuthorizationStatus.AUTHORIZED

    def update(self, status: AuthorizationStatus) -> None:
        """Record a status reported by the library."""
        if status is not self._status:
            logger.info("Library authorization: {} -> {}", self._status.value, status.value)
        self._status = status

    @staticmethod
    def ask(library: MediaLibrary) -> AuthorizationStatus:
        """Ask `library` for access without recording anything.

        Safe to call off the UI thread. An OS error while checking counts as
        a denial.
        """
        try:
            return library.request_access()
        except OSError as ex:
            logger.error("Library access request failed: {}", ex)
            return AuthorizationStatus.DENIED

    def request_access(self, library: MediaLibrary) -> AuthorizationStatus:
        """Ask `library` for access and record the result."""
        status = self.ask(library)
        self.update(status)
        return status
