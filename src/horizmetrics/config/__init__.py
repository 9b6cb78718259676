"""
Configuration module for horizmetrics settings
"""

from .settings import Settings, GatherSettings, EvaluateSettings, KubernetesSettings, LoggingSettings

__all__ = [
    "Settings",
    "GatherSettings",
    "EvaluateSettings",
    "KubernetesSettings",
    "LoggingSettings"
]
