"""
horizmetrics: gather and evaluate Kubernetes horizontal autoscaling metrics
"""

from .errors import (
    HorizMetricsError,
    MetricsClientError,
    DataInsufficiencyError,
    NoReadyInstancesError,
    ConfigurationError,
    UnsupportedMetricSourceError,
    InvalidTargetError,
    MissingRequestError,
    EvaluationError,
)
from .gather import Gatherer
from .evaluate import Evaluator

__version__ = "0.1.0"

__all__ = [
    "Gatherer",
    "Evaluator",
    "HorizMetricsError",
    "MetricsClientError",
    "DataInsufficiencyError",
    "NoReadyInstancesError",
    "ConfigurationError",
    "UnsupportedMetricSourceError",
    "InvalidTargetError",
    "MissingRequestError",
    "EvaluationError",
]
