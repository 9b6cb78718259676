"""
Client interfaces and the Kubernetes pod lister
"""

from .base import MetricsClient, PodLister

__all__ = [
    "MetricsClient",
    "PodLister",
]
