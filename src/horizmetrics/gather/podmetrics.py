#!/usr/bin/env python3
"""
Shared helpers for the per-pod gatherers
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

from ..clients.base import PodLister
from ..core.logging_config import get_logger
from ..core.podutil import PodReadiness
from ..errors import MetricsClientError, NoReadyInstancesError
from ..models.metrics import InstanceRef, PodMetric

logger = get_logger(__name__)


@dataclass
class GroupedPodMetrics:
    """Readings split by what the evaluators may do with them"""
    pod_metrics: Dict[InstanceRef, PodMetric] = field(default_factory=dict)
    ignored_pods: Set[InstanceRef] = field(default_factory=set)
    missing_pods: Set[InstanceRef] = field(default_factory=set)
    pods: Dict[InstanceRef, object] = field(default_factory=dict)

    @property
    def ready_pod_count(self) -> int:
        return len(self.pod_metrics) + len(self.missing_pods)


def instance_ref(pod, namespace: str) -> InstanceRef:
    return InstanceRef(pod.metadata.namespace or namespace, pod.metadata.name)


def list_pods(
    pod_lister: PodLister, namespace: str, selector: Optional[str], timeout: Optional[float] = None
) -> List:
    """
    List the pods backing the workload

    Raises:
        MetricsClientError: If listing fails
        NoReadyInstancesError: If the selector matches no pods
    """
    try:
        pods = pod_lister.list_pods(namespace, selector, timeout=timeout)
    except Exception as e:
        raise MetricsClientError(f"unable to get pods while calculating replica count: {e}") from e

    if not pods:
        raise NoReadyInstancesError("no pods returned by selector while calculating replica count")

    return pods


def group_pod_metrics(
    readings: Dict[str, PodMetric],
    readiness: PodReadiness,
    namespace: str,
    discard: Optional[Callable[[object, PodMetric], bool]] = None,
) -> GroupedPodMetrics:
    """
    Match readings to classified pods

    Unready pods are ignored, counted pods without a reading are missing.
    ``discard`` is consulted for starting-up pods; a discarded reading makes the
    pod missing. Readings for pods that were not listed are dropped.
    """
    grouped = GroupedPodMetrics()

    for pod in readiness.unready:
        grouped.ignored_pods.add(instance_ref(pod, namespace))

    starting_up = {id(pod) for pod in readiness.starting_up}
    for pod in readiness.counted:
        ref = instance_ref(pod, namespace)
        grouped.pods[ref] = pod
        reading = readings.get(pod.metadata.name)
        if reading is None:
            grouped.missing_pods.add(ref)
            continue
        if discard is not None and id(pod) in starting_up and discard(pod, reading):
            logger.debug(f"Discarding early reading for starting up pod {ref}")
            grouped.missing_pods.add(ref)
            continue
        grouped.pod_metrics[ref] = reading

    return grouped
