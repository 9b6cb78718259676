#!/usr/bin/env python3
"""
Error types raised while gathering and evaluating metrics
"""

from typing import Optional


class HorizMetricsError(Exception):
    """Base class for all gather and evaluate failures"""


class MetricsClientError(HorizMetricsError):
    """A metrics or pod client call failed; the original error is the __cause__"""

    def __init__(self, message: str, metric_name: Optional[str] = None, object_ref: Optional[str] = None):
        super().__init__(message)
        self.metric_name = metric_name
        self.object_ref = object_ref


class DataInsufficiencyError(HorizMetricsError):
    """Not enough data to produce a meaningful decision"""


class NoReadyInstancesError(DataInsufficiencyError):
    """No ready instances with usable metrics"""


class ConfigurationError(HorizMetricsError):
    """The metric spec or its target can't be evaluated as given"""


class UnsupportedMetricSourceError(ConfigurationError):
    """Unrecognised metric source type"""

    def __init__(self, source_type):
        super().__init__(f"unsupported metric source type '{source_type}'")
        self.source_type = source_type


class InvalidTargetError(ConfigurationError):
    """Target type not valid for the metric source"""


class MissingRequestError(ConfigurationError):
    """A counted pod has no usable resource request"""


class EvaluationError(HorizMetricsError):
    """Every metric in a combined evaluation failed"""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])
