"""Repository layer for Redis persistence"""

from .settings_repository import SettingsRepository

__all__ = ["SettingsRepository"]
