#!/usr/bin/env python3
"""
Gathering for Pods metric specs (custom per-pod metrics)
"""

from datetime import datetime, timedelta
from typing import Optional

from ..clients.base import MetricsClient, PodLister
from ..core.logging_config import get_logger
from ..core.podutil import classify_pods
from ..errors import MetricsClientError
from ..models.metrics import PodsMetric
from .podmetrics import group_pod_metrics, list_pods

logger = get_logger(__name__)


class PodsGather:
    """Retrieves custom per-pod metrics"""

    def __init__(
        self,
        metrics_client: MetricsClient,
        pod_lister: PodLister,
        cpu_initialization_period: timedelta,
        initial_readiness_delay: timedelta,
    ):
        self.metrics_client = metrics_client
        self.pod_lister = pod_lister
        self.cpu_initialization_period = cpu_initialization_period
        self.initial_readiness_delay = initial_readiness_delay

    def gather(
        self,
        metric_name: str,
        namespace: str,
        selector: Optional[str],
        metric_selector: Optional[str],
        now: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> PodsMetric:
        """Gather a custom metric for every pod matching the selector"""
        try:
            readings, timestamp = self.metrics_client.get_raw_metric(
                metric_name, namespace, selector, metric_selector, timeout=timeout
            )
        except Exception as e:
            raise MetricsClientError(f"unable to get metric {metric_name}: {e}", metric_name=metric_name) from e

        pods = list_pods(self.pod_lister, namespace, selector, timeout=timeout)
        readiness = classify_pods(pods, self.cpu_initialization_period, self.initial_readiness_delay, now)
        grouped = group_pod_metrics(readings, readiness, namespace)

        logger.debug(
            f"Pods metric {metric_name}: {len(grouped.pod_metrics)} readings, "
            f"{len(grouped.missing_pods)} missing, {len(grouped.ignored_pods)} ignored"
        )

        return PodsMetric(
            pod_metrics=grouped.pod_metrics,
            ready_pod_count=grouped.ready_pod_count,
            total_pods=len(pods),
            ignored_pods=grouped.ignored_pods,
            missing_pods=grouped.missing_pods,
            timestamp=timestamp,
        )
