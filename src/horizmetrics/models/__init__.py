"""
Models package for metric specs and gathered snapshots
"""

from .spec import (
    MetricSourceType,
    MetricTargetType,
    MetricTarget,
    MetricIdentifier,
    CrossVersionObjectReference,
    ResourceMetricSource,
    PodsMetricSource,
    ObjectMetricSource,
    ExternalMetricSource,
    MetricSpec,
)
from .metrics import (
    InstanceRef,
    PodMetric,
    MetricValue,
    ResourceMetric,
    PodsMetric,
    ObjectMetric,
    ExternalMetric,
    Metric,
    ScaleDecision,
)

__all__ = [
    "MetricSourceType",
    "MetricTargetType",
    "MetricTarget",
    "MetricIdentifier",
    "CrossVersionObjectReference",
    "ResourceMetricSource",
    "PodsMetricSource",
    "ObjectMetricSource",
    "ExternalMetricSource",
    "MetricSpec",
    "InstanceRef",
    "PodMetric",
    "MetricValue",
    "ResourceMetric",
    "PodsMetric",
    "ObjectMetric",
    "ExternalMetric",
    "Metric",
    "ScaleDecision",
]
