"""Click analytics module for ContextAds."""

from .store import ClickAnalytics, ClickEvent, ClickStore

__all__ = ["ClickAnalytics", "ClickEvent", "ClickStore"]
