#!/usr/bin/env python3
"""
Gathering for External metric specs
"""

from typing import Optional

from ..clients.base import MetricsClient
from ..core.podutil import PodReadyCounter
from ..errors import MetricsClientError
from ..models.metrics import ExternalMetric, MetricValue


class ExternalGather:
    """Retrieves external metric values; these have no per-pod breakdown"""

    def __init__(self, metrics_client: MetricsClient, pod_ready_counter: PodReadyCounter):
        self.metrics_client = metrics_client
        self.pod_ready_counter = pod_ready_counter

    def _get_values(self, metric_name, namespace, metric_selector, timeout):
        try:
            return self.metrics_client.get_external_metric(metric_name, namespace, metric_selector, timeout=timeout)
        except Exception as e:
            raise MetricsClientError(
                f"unable to get external metric {namespace}/{metric_name}/{metric_selector or ''}: {e}",
                metric_name=metric_name,
            ) from e

    def gather(
        self, metric_name: str, namespace: str, metric_selector: Optional[str], timeout: Optional[float] = None
    ) -> ExternalMetric:
        """Gather an external metric compared against a Value target"""
        values, timestamp = self._get_values(metric_name, namespace, metric_selector, timeout)

        return ExternalMetric(
            current=MetricValue(value=sum(values)),
            values=list(values),
            timestamp=timestamp,
        )

    def gather_per_pod(
        self,
        metric_name: str,
        namespace: str,
        metric_selector: Optional[str],
        pod_selector: Optional[str],
        timeout: Optional[float] = None,
    ) -> ExternalMetric:
        """Gather an external metric compared against an AverageValue target"""
        values, timestamp = self._get_values(metric_name, namespace, metric_selector, timeout)
        ready_pod_count = self.pod_ready_counter.get_ready_pods_count(namespace, pod_selector, timeout=timeout)

        return ExternalMetric(
            current=MetricValue(average_value=sum(values)),
            values=list(values),
            ready_pod_count=ready_pod_count,
            timestamp=timestamp,
        )
