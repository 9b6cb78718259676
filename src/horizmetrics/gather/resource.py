#!/usr/bin/env python3
"""
Gathering for Resource metric specs (cpu, memory)
"""

from datetime import datetime, timedelta
from typing import Optional

from ..clients.base import MetricsClient, PodLister
from ..core.logging_config import get_logger
from ..core.podutil import calculate_pod_requests, classify_pods, ready_since
from ..errors import MetricsClientError, MissingRequestError
from ..models.metrics import PodMetric, ResourceMetric
from .podmetrics import group_pod_metrics, list_pods

logger = get_logger(__name__)

RESOURCE_CPU = "cpu"


def _reading_predates_readiness(pod, reading: PodMetric) -> bool:
    """True when the reading's collection window started before the pod became ready"""
    transition = ready_since(pod)
    if transition is None or reading.timestamp is None:
        return True
    return reading.timestamp < transition + reading.window


class ResourceGather:
    """Retrieves resource metrics and sorts pods by how their readings may be used"""

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
        resource: str,
        namespace: str,
        selector: Optional[str],
        now: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> ResourceMetric:
        """
        Gather a resource metric for the pods matching the selector

        Args:
            resource: Resource name, e.g. 'cpu'
            namespace: Namespace of the pods
            selector: Label selector of the pods
            now: Reference time for the startup windows
            timeout: Per-call timeout in seconds for the metrics and pod requests

        Returns:
            ResourceMetric snapshot

        Raises:
            MetricsClientError: If metrics or pods can't be retrieved
            NoReadyInstancesError: If no pods match the selector
        """
        try:
            readings, requests, timestamp = self.metrics_client.get_resource_metric(
                resource, namespace, selector, timeout=timeout
            )
        except Exception as e:
            raise MetricsClientError(
                f"unable to get metrics for resource {resource}: {e}", metric_name=resource
            ) from e

        pods = list_pods(self.pod_lister, namespace, selector, timeout=timeout)
        readiness = classify_pods(pods, self.cpu_initialization_period, self.initial_readiness_delay, now)

        # Early cpu samples from starting pods under-report steady state usage
        discard = _reading_predates_readiness if resource == RESOURCE_CPU else None
        grouped = group_pod_metrics(readings, readiness, namespace, discard)

        pod_requests = {}
        for ref, pod in grouped.pods.items():
            request = requests.get(pod.metadata.name)
            if request is None:
                try:
                    request = calculate_pod_requests(pod, resource)
                except MissingRequestError as e:
                    logger.debug(f"No {resource} request for {ref}: {e}")
                    continue
            pod_requests[ref] = request

        logger.debug(
            f"Resource {resource}: {len(grouped.pod_metrics)} readings, "
            f"{len(grouped.missing_pods)} missing, {len(grouped.ignored_pods)} ignored of {len(pods)} pods"
        )

        return ResourceMetric(
            pod_metrics=grouped.pod_metrics,
            requests=pod_requests,
            ready_pod_count=grouped.ready_pod_count,
            total_pods=len(pods),
            ignored_pods=grouped.ignored_pods,
            missing_pods=grouped.missing_pods,
            timestamp=timestamp,
        )
