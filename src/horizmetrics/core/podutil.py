#!/usr/bin/env python3
"""
Pod readiness classification and request helpers.

Pods are classified into three groups:

- ready: running, Ready condition true, past both startup grace windows
- starting up: running and Ready, but inside the cpu initialization period or
  the initial readiness delay; cpu readings from these pods may be too early
  to trust
- unready: everything else (pending, failed, being deleted, not Ready, or no
  start time)
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional
from kubernetes.utils import parse_quantity

from ..clients.base import PodLister
from ..errors import MetricsClientError, MissingRequestError
from .logging_config import get_logger

logger = get_logger(__name__)

POD_RUNNING = "Running"
POD_FAILED = "Failed"
POD_READY = "Ready"


@dataclass
class PodReadiness:
    """Pod names grouped by readiness"""
    ready: List = field(default_factory=list)
    starting_up: List = field(default_factory=list)
    unready: List = field(default_factory=list)

    @property
    def counted(self) -> List:
        """Pods that count towards the ready pod total"""
        return self.ready + self.starting_up


def get_pod_condition(pod, condition_type: str):
    """Return the pod's condition of the given type, or None"""
    status = pod.status
    if status is None or not status.conditions:
        return None
    for condition in status.conditions:
        if condition.type == condition_type:
            return condition
    return None


def is_pod_ready(pod) -> bool:
    """Running with a Ready condition that is currently true"""
    if pod.status is None or pod.status.phase != POD_RUNNING:
        return False
    if pod.metadata is not None and pod.metadata.deletion_timestamp is not None:
        return False
    condition = get_pod_condition(pod, POD_READY)
    return condition is not None and condition.status == "True"


def ready_since(pod) -> Optional[datetime]:
    """When the pod's Ready condition last transitioned, if known"""
    condition = get_pod_condition(pod, POD_READY)
    if condition is None:
        return None
    return condition.last_transition_time


def classify_pod(
    pod,
    cpu_initialization_period: timedelta,
    initial_readiness_delay: timedelta,
    now: datetime,
) -> str:
    """Classify a single pod as 'ready', 'starting_up' or 'unready'"""
    if not is_pod_ready(pod):
        return "unready"

    start_time = pod.status.start_time
    if start_time is None:
        return "unready"

    if now < start_time + cpu_initialization_period:
        return "starting_up"

    transition = ready_since(pod)
    if transition is not None and now < transition + initial_readiness_delay:
        return "starting_up"

    return "ready"


def classify_pods(
    pods: Iterable,
    cpu_initialization_period: timedelta,
    initial_readiness_delay: timedelta,
    now: Optional[datetime] = None,
) -> PodReadiness:
    """
    Partition pods into ready, starting up and unready

    Args:
        pods: Pod objects (kubernetes V1Pod or anything shaped like one)
        cpu_initialization_period: How long after start cpu usage is unrepresentative
        initial_readiness_delay: How long after becoming ready a pod is still settling
        now: Reference time, defaults to the current UTC time

    Returns:
        PodReadiness holding the pods in each group
    """
    if now is None:
        now = datetime.now(timezone.utc)

    readiness = PodReadiness()
    for pod in pods:
        group = classify_pod(pod, cpu_initialization_period, initial_readiness_delay, now)
        getattr(readiness, group).append(pod)
        logger.debug(f"Pod {pod.metadata.name} classified as {group}")

    return readiness


def to_milli(quantity) -> int:
    """Convert a Kubernetes quantity (e.g. '500m', '1', '128Mi') to milli-units, rounding up"""
    return int(math.ceil(parse_quantity(quantity) * 1000))


def calculate_pod_requests(pod, resource: str) -> int:
    """
    Sum a resource request over all containers in a pod, in milli-units

    Raises:
        MissingRequestError: If any container has no request for the resource
    """
    total = 0
    for container in pod.spec.containers:
        requests = (container.resources.requests if container.resources else None) or {}
        if resource not in requests:
            raise MissingRequestError(
                f"missing request for {resource} in container {container.name} of Pod {pod.metadata.name}"
            )
        total += to_milli(requests[resource])
    return total


class PodReadyCounter:
    """Counts ready pods matching a selector using a pod lister"""

    def __init__(self, pod_lister: PodLister):
        self.pod_lister = pod_lister

    def get_ready_pods_count(self, namespace: str, selector: Optional[str], timeout: Optional[float] = None) -> int:
        """
        Count running pods whose Ready condition is true

        Args:
            timeout: Passed through to the pod lister

        Raises:
            MetricsClientError: If the pods could not be listed
        """
        try:
            pods = self.pod_lister.list_pods(namespace, selector, timeout=timeout)
        except Exception as e:
            raise MetricsClientError(f"unable to get pods while calculating replica count: {e}") from e

        if not pods:
            return 0

        return sum(1 for pod in pods if is_pod_ready(pod))
