from __future__ import annotations

from typing import Optional


class ReporterError(Exception):
    """Base class for failures that end a reporter run."""


class MissingCredentialsError(ReporterError, ValueError):
    pass


class UsageCollectionError(ReporterError):
    pass


class GeolocationError(ReporterError):
    pass


class DeliveryError(ReporterError):
    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status
