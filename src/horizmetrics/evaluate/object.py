#!/usr/bin/env python3
"""
Evaluation of Object metrics
"""

from ..errors import DataInsufficiencyError, InvalidTargetError
from ..models.metrics import ObjectMetric, ScaleDecision
from ..models.spec import MetricTarget, MetricTargetType
from .calculate import ceil_replicas, require_positive, require_ready, to_fraction


class ObjectEvaluate:
    """Turns an object metric into a desired replica count"""

    def evaluate(self, metric: ObjectMetric, target: MetricTarget) -> ScaleDecision:
        """
        Value targets scale the ready pod count by value / target; AverageValue
        targets spread the value over the ready pods first.
        """
        if target.type == MetricTargetType.VALUE:
            threshold = require_positive(target.value, "target value")
            current = metric.current.value
            if current is None:
                raise DataInsufficiencyError("object metric has no current value")
            ready_pod_count = require_ready(metric.ready_pod_count)
            usage_ratio = to_fraction(current) / threshold
        elif target.type == MetricTargetType.AVERAGE_VALUE:
            threshold = require_positive(target.average_value, "target average value")
            current = metric.current.average_value
            if current is None:
                raise DataInsufficiencyError("object metric has no current average value")
            ready_pod_count = require_ready(metric.ready_pod_count)
            usage_ratio = (to_fraction(current) / ready_pod_count) / threshold
        else:
            raise InvalidTargetError(f"object metrics don't support {target.type.value} targets")

        replicas = ceil_replicas(ready_pod_count * usage_ratio)
        return ScaleDecision(
            replicas=replicas, usage_ratio=float(usage_ratio), ready_pod_count=ready_pod_count, metric=metric
        )
