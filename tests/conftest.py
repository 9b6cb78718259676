"""
Shared fixtures and in-memory doubles for the test suite
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from kubernetes.client import (
    V1Container,
    V1ObjectMeta,
    V1Pod,
    V1PodCondition,
    V1PodSpec,
    V1PodStatus,
    V1ResourceRequirements,
)

from horizmetrics.clients.base import MetricsClient, PodLister
from horizmetrics.models.metrics import PodMetric

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
CPU_INITIALIZATION_PERIOD = timedelta(seconds=300)
INITIAL_READINESS_DELAY = timedelta(seconds=30)


def make_pod(
    name: str,
    namespace: str = "default",
    phase: str = "Running",
    ready: Optional[bool] = True,
    started: Optional[timedelta] = timedelta(hours=1),
    ready_for: Optional[timedelta] = timedelta(minutes=59),
    deleting: bool = False,
    requests: Optional[Dict[str, str]] = None,
) -> V1Pod:
    """Build a pod; ``started`` and ``ready_for`` are durations before NOW"""
    conditions = None
    if ready is not None:
        conditions = [
            V1PodCondition(
                type="Ready",
                status="True" if ready else "False",
                last_transition_time=NOW - ready_for if ready_for is not None else None,
            )
        ]

    if requests is None:
        requests = {"cpu": "100m", "memory": "128Mi"}

    return V1Pod(
        metadata=V1ObjectMeta(
            name=name,
            namespace=namespace,
            deletion_timestamp=NOW if deleting else None,
        ),
        spec=V1PodSpec(
            containers=[V1Container(name="app", resources=V1ResourceRequirements(requests=requests))]
        ),
        status=V1PodStatus(
            phase=phase,
            conditions=conditions,
            start_time=NOW - started if started is not None else None,
        ),
    )


def reading(value: int, age: timedelta = timedelta(seconds=10), window: timedelta = timedelta(seconds=30)) -> PodMetric:
    return PodMetric(value=value, timestamp=NOW - age, window=window)


class FakeMetricsClient(MetricsClient):
    """Metrics client returning canned results"""

    def __init__(self):
        self.resource_metric = ({}, {}, NOW)
        self.raw_metric = ({}, NOW)
        self.object_metric = (0, NOW)
        self.external_metric = ([], NOW)
        self.error: Optional[Exception] = None
        self.calls: List[tuple] = []
        self.timeouts: List[Optional[float]] = []

    def _respond(self, result, timeout, *call):
        self.calls.append(call)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return result

    def get_resource_metric(self, resource, namespace, selector, timeout=None):
        return self._respond(self.resource_metric, timeout, "resource", resource, namespace, selector)

    def get_raw_metric(self, metric_name, namespace, selector, metric_selector, timeout=None):
        return self._respond(self.raw_metric, timeout, "raw", metric_name, namespace, selector, metric_selector)

    def get_object_metric(self, metric_name, namespace, object_ref, metric_selector, timeout=None):
        return self._respond(self.object_metric, timeout, "object", metric_name, namespace, object_ref, metric_selector)

    def get_external_metric(self, metric_name, namespace, selector, timeout=None):
        return self._respond(self.external_metric, timeout, "external", metric_name, namespace, selector)


class FakePodLister(PodLister):
    """Pod lister returning a fixed pod list"""

    def __init__(self, pods: Optional[List[V1Pod]] = None):
        self.pods = pods or []
        self.error: Optional[Exception] = None
        self.calls: List[tuple] = []
        self.timeouts: List[Optional[float]] = []

    def list_pods(self, namespace, selector, timeout=None):
        self.calls.append((namespace, selector))
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return list(self.pods)


@pytest.fixture
def metrics_client():
    return FakeMetricsClient()


@pytest.fixture
def pod_lister():
    return FakePodLister()


def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
