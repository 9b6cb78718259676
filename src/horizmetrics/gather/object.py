#!/usr/bin/env python3
"""
Gathering for Object metric specs
"""

from typing import Optional

from ..clients.base import MetricsClient
from ..core.podutil import PodReadyCounter
from ..errors import MetricsClientError
from ..models.metrics import MetricValue, ObjectMetric
from ..models.spec import CrossVersionObjectReference


class ObjectGather:
    """Retrieves a single metric value describing an object"""

    def __init__(self, metrics_client: MetricsClient, pod_ready_counter: PodReadyCounter):
        self.metrics_client = metrics_client
        self.pod_ready_counter = pod_ready_counter

    def _get_value(self, metric_name, namespace, object_ref, metric_selector, timeout):
        try:
            return self.metrics_client.get_object_metric(
                metric_name, namespace, object_ref, metric_selector, timeout=timeout
            )
        except Exception as e:
            raise MetricsClientError(
                f"unable to get metric {metric_name}: {object_ref} in {namespace}: {e}",
                metric_name=metric_name,
                object_ref=str(object_ref),
            ) from e

    def gather(
        self,
        metric_name: str,
        namespace: str,
        object_ref: CrossVersionObjectReference,
        pod_selector: Optional[str],
        metric_selector: Optional[str],
        timeout: Optional[float] = None,
    ) -> ObjectMetric:
        """Gather an object metric compared against a Value target"""
        value, timestamp = self._get_value(metric_name, namespace, object_ref, metric_selector, timeout)
        ready_pod_count = self.pod_ready_counter.get_ready_pods_count(namespace, pod_selector, timeout=timeout)

        return ObjectMetric(
            current=MetricValue(value=value),
            ready_pod_count=ready_pod_count,
            timestamp=timestamp,
        )

    def gather_per_pod(
        self,
        metric_name: str,
        namespace: str,
        object_ref: CrossVersionObjectReference,
        pod_selector: Optional[str],
        metric_selector: Optional[str],
        timeout: Optional[float] = None,
    ) -> ObjectMetric:
        """Gather an object metric compared against an AverageValue target"""
        value, timestamp = self._get_value(metric_name, namespace, object_ref, metric_selector, timeout)
        ready_pod_count = self.pod_ready_counter.get_ready_pods_count(namespace, pod_selector, timeout=timeout)

        return ObjectMetric(
            current=MetricValue(average_value=value),
            ready_pod_count=ready_pod_count,
            timestamp=timestamp,
        )
