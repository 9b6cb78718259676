#!/usr/bin/env python3
"""
Evaluation of Resource metrics
"""

from fractions import Fraction

from ..core.logging_config import get_logger
from ..errors import InvalidTargetError, MissingRequestError, NoReadyInstancesError
from ..models.metrics import ResourceMetric, ScaleDecision
from ..models.spec import MetricTarget, MetricTargetType
from .calculate import ceil_replicas, require_positive, require_ready

logger = get_logger(__name__)


class ResourceEvaluate:
    """Turns a resource metric into a desired replica count"""

    def evaluate(self, metric: ResourceMetric, target: MetricTarget) -> ScaleDecision:
        """
        Calculate the desired replica count for a resource metric

        Utilization targets compare usage against pod requests; AverageValue
        targets compare the raw per-pod average. Pods that are counted as
        ready but have no usable reading are assumed to behave like the average
        of the pods that do.

        Raises:
            NoReadyInstancesError: If there are no ready pods with readings
            MissingRequestError: If a counted pod has no (or a zero) request
            InvalidTargetError: If the target type is Value
        """
        if target.type == MetricTargetType.UTILIZATION:
            return self._evaluate_utilization(metric, target)
        if target.type == MetricTargetType.AVERAGE_VALUE:
            return self._evaluate_average_value(metric, target)
        raise InvalidTargetError(f"resource metrics don't support {target.type.value} targets")

    def _evaluate_utilization(self, metric: ResourceMetric, target: MetricTarget) -> ScaleDecision:
        target_fraction = require_positive(target.average_utilization, "target average utilization") / 100
        ready_pod_count = require_ready(metric.ready_pod_count)
        if not metric.pod_metrics:
            raise NoReadyInstancesError("no ready instances with usable metrics")

        present_usage = sum(reading.value for reading in metric.pod_metrics.values())
        present_requests = sum(self._request(metric, ref) for ref in metric.pod_metrics)
        missing_requests = sum(self._request(metric, ref) for ref in metric.missing_pods)

        # Missing pods are assumed to run at the ratio of the pods that reported
        present_ratio = Fraction(present_usage, present_requests)
        total_usage = present_usage + present_ratio * missing_requests
        ratio = total_usage / (present_requests + missing_requests)

        usage_ratio = ratio / target_fraction
        replicas = ceil_replicas(ready_pod_count * usage_ratio)

        logger.debug(
            f"Utilization {float(ratio) * 100:.1f}% of requests against target "
            f"{target.average_utilization}% over {ready_pod_count} pods: {replicas} replicas"
        )

        return ScaleDecision(
            replicas=replicas, usage_ratio=float(usage_ratio), ready_pod_count=ready_pod_count, metric=metric
        )

    def _evaluate_average_value(self, metric: ResourceMetric, target: MetricTarget) -> ScaleDecision:
        target_value = require_positive(target.average_value, "target average value")
        ready_pod_count = require_ready(metric.ready_pod_count)
        if not metric.pod_metrics:
            raise NoReadyInstancesError("no ready instances with usable metrics")

        average = Fraction(sum(reading.value for reading in metric.pod_metrics.values()), len(metric.pod_metrics))
        usage_ratio = average / target_value
        replicas = ceil_replicas(ready_pod_count * usage_ratio)

        return ScaleDecision(
            replicas=replicas, usage_ratio=float(usage_ratio), ready_pod_count=ready_pod_count, metric=metric
        )

    @staticmethod
    def _request(metric: ResourceMetric, ref) -> int:
        request = metric.requests.get(ref)
        if not request or request <= 0:
            raise MissingRequestError(f"missing request for pod {ref}, unable to compute utilization")
        return request
