"""Configuration management"""

from .settings import (
    Settings,
    DevelopmentSettings,
    ProductionSettings,
    TestSettings,
    get_settings,
)

__all__ = [
    "Settings",
    "DevelopmentSettings",
    "ProductionSettings",
    "TestSettings",
    "get_settings",
]
