"""Exception hierarchy for ContextAds."""

from __future__ import annotations


class ContextAdsError(Exception):
    """Base exception for all ContextAds errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.message} (status {self.status_code})"
        return self.message


class AdSourceError(ContextAdsError):
    """The external ad network could not be reached or returned garbage."""
