"""
Core readiness and logging helpers
"""

from .logging_config import setup_logging, get_logger
from .podutil import PodReadiness, PodReadyCounter, classify_pods, calculate_pod_requests, is_pod_ready

__all__ = [
    "setup_logging",
    "get_logger",
    "PodReadiness",
    "PodReadyCounter",
    "classify_pods",
    "calculate_pod_requests",
    "is_pod_ready",
]
