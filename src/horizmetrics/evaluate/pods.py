#!/usr/bin/env python3
"""
Evaluation of Pods metrics
"""

from fractions import Fraction

from ..errors import InvalidTargetError, NoReadyInstancesError
from ..models.metrics import PodsMetric, ScaleDecision
from ..models.spec import MetricTarget, MetricTargetType
from .calculate import ceil_replicas, require_positive, require_ready


class PodsEvaluate:
    """Turns a per-pod custom metric into a desired replica count"""

    def evaluate(self, metric: PodsMetric, target: MetricTarget) -> ScaleDecision:
        if target.type == MetricTargetType.AVERAGE_VALUE:
            threshold = require_positive(target.average_value, "target average value")
        elif target.type == MetricTargetType.VALUE:
            threshold = require_positive(target.value, "target value")
        else:
            raise InvalidTargetError(f"pods metrics don't support {target.type.value} targets")

        ready_pod_count = require_ready(metric.ready_pod_count)
        if not metric.pod_metrics:
            raise NoReadyInstancesError("no ready instances with usable metrics")

        # Missing pods take the average of the reported ones, leaving it unchanged
        average = Fraction(sum(reading.value for reading in metric.pod_metrics.values()), len(metric.pod_metrics))
        usage_ratio = average / threshold
        replicas = ceil_replicas(ready_pod_count * usage_ratio)

        return ScaleDecision(
            replicas=replicas, usage_ratio=float(usage_ratio), ready_pod_count=ready_pod_count, metric=metric
        )
