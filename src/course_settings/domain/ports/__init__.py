"""Domain port definitions for adapters."""

from __future__ import annotations

from .actor import ActorContextProvider
from .settings import (
    FORBIDDEN_STATUS,
    EnablementSaver,
    LoadedSettings,
    SettingsBodyGateway,
    SettingsBodySaver,
    SettingsFetcher,
    SettingsGateway,
    SettingsRequestError,
)

__all__ = [
    "FORBIDDEN_STATUS",
    "ActorContextProvider",
    "EnablementSaver",
    "LoadedSettings",
    "SettingsBodyGateway",
    "SettingsBodySaver",
    "SettingsFetcher",
    "SettingsGateway",
    "SettingsRequestError",
]
