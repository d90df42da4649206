"""
Configuration Management Module
"""
from .settings import (
    Settings,
    SiteSettings,
    ScraperSettings,
    ScheduleSettings,
    StorageSettings,
    ScheduleWindow,
    get_settings,
)

__all__ = [
    "Settings",
    "SiteSettings",
    "ScraperSettings",
    "ScheduleSettings",
    "StorageSettings",
    "ScheduleWindow",
    "get_settings",
]
