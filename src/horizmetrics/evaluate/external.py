#!/usr/bin/env python3
"""
Evaluation of External metrics
"""

from ..errors import DataInsufficiencyError, InvalidTargetError
from ..models.metrics import ExternalMetric, ScaleDecision
from ..models.spec import MetricTarget, MetricTargetType
from .calculate import ceil_replicas, require_positive, require_ready, to_fraction


class ExternalEvaluate:
    """Turns an external metric into a desired replica count"""

    def evaluate(self, metric: ExternalMetric, target: MetricTarget) -> ScaleDecision:
        """
        Value targets give sum / target regardless of pod count; AverageValue
        targets scale the ready pod count by sum / target.
        """
        if target.type == MetricTargetType.VALUE:
            threshold = require_positive(target.value, "target value")
            current = metric.current.value
            if current is None:
                raise DataInsufficiencyError("external metric has no current value")
            usage_ratio = to_fraction(current) / threshold
            ready_pod_count = None
            replicas = ceil_replicas(usage_ratio)
        elif target.type == MetricTargetType.AVERAGE_VALUE:
            threshold = require_positive(target.average_value, "target average value")
            current = metric.current.average_value
            if current is None:
                raise DataInsufficiencyError("external metric has no current average value")
            ready_pod_count = require_ready(metric.ready_pod_count)
            usage_ratio = to_fraction(current) / threshold
            replicas = ceil_replicas(ready_pod_count * usage_ratio)
        else:
            raise InvalidTargetError(f"external metrics don't support {target.type.value} targets")

        return ScaleDecision(
            replicas=replicas, usage_ratio=float(usage_ratio), ready_pod_count=ready_pod_count, metric=metric
        )
