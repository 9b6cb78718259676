"""
Tests for the per-source gather strategies
"""

from datetime import timedelta

import pytest

from conftest import (
    CPU_INITIALIZATION_PERIOD,
    INITIAL_READINESS_DELAY,
    NOW,
    FakeMetricsClient,
    FakePodLister,
    make_pod,
    reading,
)
from horizmetrics.core.podutil import PodReadyCounter
from horizmetrics.errors import MetricsClientError, NoReadyInstancesError
from horizmetrics.gather.external import ExternalGather
from horizmetrics.gather.object import ObjectGather
from horizmetrics.gather.pods import PodsGather
from horizmetrics.gather.resource import ResourceGather
from horizmetrics.models.metrics import InstanceRef
from horizmetrics.models.spec import CrossVersionObjectReference


def ref(name):
    return InstanceRef("default", name)


class TestResourceGather:
    """Test resource metric gathering"""

    @pytest.fixture
    def gather(self, metrics_client, pod_lister):
        return ResourceGather(metrics_client, pod_lister, CPU_INITIALIZATION_PERIOD, INITIAL_READINESS_DELAY)

    def test_all_pods_ready(self, gather, metrics_client, pod_lister):
        """Every ready pod with a reading lands in pod_metrics"""
        pod_lister.pods = [make_pod("a"), make_pod("b"), make_pod("c")]
        metrics_client.resource_metric = (
            {"a": reading(50), "b": reading(60), "c": reading(70)},
            {"a": 100, "b": 100, "c": 100},
            NOW,
        )

        metric = gather.gather("cpu", "default", "app=web", now=NOW)

        assert {r: m.value for r, m in metric.pod_metrics.items()} == {ref("a"): 50, ref("b"): 60, ref("c"): 70}
        assert metric.requests == {ref("a"): 100, ref("b"): 100, ref("c"): 100}
        assert metric.ready_pod_count == 3
        assert metric.total_pods == 3
        assert metric.ignored_pods == set()
        assert metric.missing_pods == set()
        assert metric.timestamp == NOW
        assert metrics_client.calls == [("resource", "cpu", "default", "app=web")]

    def test_unready_pod_is_ignored(self, gather, metrics_client, pod_lister):
        """Unready pods never contribute readings, even when the backend has one"""
        pod_lister.pods = [make_pod("a"), make_pod("b", ready=False)]
        metrics_client.resource_metric = ({"a": reading(50), "b": reading(500)}, {"a": 100, "b": 100}, NOW)

        metric = gather.gather("cpu", "default", None, now=NOW)

        assert set(metric.pod_metrics) == {ref("a")}
        assert metric.ignored_pods == {ref("b")}
        assert metric.ready_pod_count == 1
        assert metric.total_pods == 2
        assert ref("b") not in metric.requests

    def test_pod_without_reading_is_missing(self, gather, metrics_client, pod_lister):
        pod_lister.pods = [make_pod("a"), make_pod("b")]
        metrics_client.resource_metric = ({"a": reading(50)}, {"a": 100, "b": 100}, NOW)

        metric = gather.gather("cpu", "default", None, now=NOW)

        assert set(metric.pod_metrics) == {ref("a")}
        assert metric.missing_pods == {ref("b")}
        assert metric.ready_pod_count == 2
        assert metric.requests[ref("b")] == 100

    def test_starting_up_cpu_reading_before_window_is_discarded(self, gather, metrics_client, pod_lister):
        """An early cpu sample from a starting pod is treated as missing"""
        pod_lister.pods = [
            make_pod("a"),
            make_pod("b", started=timedelta(seconds=60), ready_for=timedelta(seconds=20)),
        ]
        # b became ready 20s ago; its sample covers the 30s window ending 10s ago
        metrics_client.resource_metric = ({"a": reading(50), "b": reading(5)}, {"a": 100, "b": 100}, NOW)

        metric = gather.gather("cpu", "default", None, now=NOW)

        assert set(metric.pod_metrics) == {ref("a")}
        assert metric.missing_pods == {ref("b")}
        assert metric.ready_pod_count == 2

    def test_starting_up_cpu_reading_after_window_is_kept(self, gather, metrics_client, pod_lister):
        pod_lister.pods = [make_pod("a", started=timedelta(seconds=200), ready_for=timedelta(seconds=120))]
        metrics_client.resource_metric = ({"a": reading(40)}, {"a": 100}, NOW)

        metric = gather.gather("cpu", "default", None, now=NOW)

        assert set(metric.pod_metrics) == {ref("a")}
        assert metric.missing_pods == set()

    def test_starting_up_pod_without_reading_is_missing(self, gather, metrics_client, pod_lister):
        pod_lister.pods = [make_pod("a", started=timedelta(seconds=60), ready_for=timedelta(seconds=20))]
        metrics_client.resource_metric = ({}, {"a": 100}, NOW)

        metric = gather.gather("cpu", "default", None, now=NOW)

        assert metric.missing_pods == {ref("a")}

    def test_starting_up_memory_reading_is_kept(self, gather, metrics_client, pod_lister):
        """Only cpu readings are subject to the startup discard"""
        pod_lister.pods = [make_pod("a", started=timedelta(seconds=60), ready_for=timedelta(seconds=20))]
        metrics_client.resource_metric = ({"a": reading(64)}, {"a": 128}, NOW)

        metric = gather.gather("memory", "default", None, now=NOW)

        assert set(metric.pod_metrics) == {ref("a")}
        assert metric.missing_pods == set()

    def test_requests_fall_back_to_pod_spec(self, gather, metrics_client, pod_lister):
        pod_lister.pods = [make_pod("a", requests={"cpu": "250m"})]
        metrics_client.resource_metric = ({"a": reading(100)}, {}, NOW)

        metric = gather.gather("cpu", "default", None, now=NOW)

        assert metric.requests == {ref("a"): 250}

    def test_pod_without_any_request_has_none(self, gather, metrics_client, pod_lister):
        pod_lister.pods = [make_pod("a", requests={"memory": "1Gi"})]
        metrics_client.resource_metric = ({"a": reading(100)}, {}, NOW)

        metric = gather.gather("cpu", "default", None, now=NOW)

        assert metric.requests == {}
        assert set(metric.pod_metrics) == {ref("a")}

    def test_readings_for_unlisted_pods_are_dropped(self, gather, metrics_client, pod_lister):
        pod_lister.pods = [make_pod("a")]
        metrics_client.resource_metric = ({"a": reading(50), "gone": reading(90)}, {"a": 100}, NOW)

        metric = gather.gather("cpu", "default", None, now=NOW)

        assert set(metric.pod_metrics) == {ref("a")}

    def test_metrics_client_error_is_wrapped(self, gather, metrics_client, pod_lister):
        pod_lister.pods = [make_pod("a")]
        metrics_client.error = RuntimeError("metrics API unavailable")

        with pytest.raises(MetricsClientError, match="resource cpu") as excinfo:
            gather.gather("cpu", "default", None, now=NOW)

        assert excinfo.value.metric_name == "cpu"
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_pod_lister_error_is_wrapped(self, gather, metrics_client, pod_lister):
        pod_lister.error = RuntimeError("forbidden")

        with pytest.raises(MetricsClientError, match="unable to get pods"):
            gather.gather("cpu", "default", None, now=NOW)

    def test_no_pods(self, gather, metrics_client, pod_lister):
        with pytest.raises(NoReadyInstancesError):
            gather.gather("cpu", "default", None, now=NOW)


class TestPodsGather:
    """Test per-pod custom metric gathering"""

    @pytest.fixture
    def gather(self, metrics_client, pod_lister):
        return PodsGather(metrics_client, pod_lister, CPU_INITIALIZATION_PERIOD, INITIAL_READINESS_DELAY)

    def test_gather(self, gather, metrics_client, pod_lister):
        pod_lister.pods = [make_pod("a"), make_pod("b"), make_pod("c", phase="Pending", ready=False)]
        metrics_client.raw_metric = ({"a": reading(10), "c": reading(99)}, NOW)

        metric = gather.gather("requests_per_second", "default", "app=web", "verb=GET", now=NOW)

        assert set(metric.pod_metrics) == {ref("a")}
        assert metric.missing_pods == {ref("b")}
        assert metric.ignored_pods == {ref("c")}
        assert metric.ready_pod_count == 2
        assert metric.total_pods == 3
        assert metrics_client.calls == [("raw", "requests_per_second", "default", "app=web", "verb=GET")]

    def test_starting_up_reading_is_kept(self, gather, metrics_client, pod_lister):
        """No cpu initialization special case for custom metrics"""
        pod_lister.pods = [make_pod("a", started=timedelta(seconds=30), ready_for=timedelta(seconds=5))]
        metrics_client.raw_metric = ({"a": reading(10, age=timedelta(seconds=20))}, NOW)

        metric = gather.gather("queue_depth", "default", None, None, now=NOW)

        assert set(metric.pod_metrics) == {ref("a")}

    def test_client_error_is_wrapped(self, gather, metrics_client, pod_lister):
        pod_lister.pods = [make_pod("a")]
        metrics_client.error = RuntimeError("boom")

        with pytest.raises(MetricsClientError, match="queue_depth"):
            gather.gather("queue_depth", "default", None, None, now=NOW)


class TestObjectGather:
    """Test object metric gathering"""

    @pytest.fixture
    def object_ref(self):
        return CrossVersionObjectReference(kind="Ingress", name="main-route", api_version="networking.k8s.io/v1")

    @pytest.fixture
    def gather(self, metrics_client, pod_lister):
        pod_lister.pods = [make_pod("a"), make_pod("b"), make_pod("c", ready=False)]
        return ObjectGather(metrics_client, PodReadyCounter(pod_lister))

    def test_gather_value(self, gather, metrics_client, object_ref):
        metrics_client.object_metric = (2000, NOW)

        metric = gather.gather("requests", "default", object_ref, "app=web", None)

        assert metric.current.value == 2000
        assert metric.current.average_value is None
        assert metric.ready_pod_count == 2
        assert metric.timestamp == NOW

    def test_gather_per_pod(self, gather, metrics_client, object_ref):
        metrics_client.object_metric = (2000, NOW)

        metric = gather.gather_per_pod("requests", "default", object_ref, "app=web", None)

        assert metric.current.average_value == 2000
        assert metric.current.value is None
        assert metric.ready_pod_count == 2

    def test_client_error_names_object(self, gather, metrics_client, object_ref):
        metrics_client.error = RuntimeError("not found")

        with pytest.raises(MetricsClientError, match="Ingress main-route") as excinfo:
            gather.gather("requests", "default", object_ref, None, None)

        assert excinfo.value.object_ref == "Ingress main-route"


class TestExternalGather:
    """Test external metric gathering"""

    @pytest.fixture
    def gather(self, metrics_client, pod_lister):
        pod_lister.pods = [make_pod("a"), make_pod("b")]
        return ExternalGather(metrics_client, PodReadyCounter(pod_lister))

    def test_gather_value(self, gather, metrics_client, pod_lister):
        metrics_client.external_metric = ([100, 150], NOW)

        metric = gather.gather("queue_messages", "default", "queue=jobs")

        assert metric.current.value == 250
        assert metric.values == [100, 150]
        assert metric.ready_pod_count is None
        assert pod_lister.calls == []

    def test_gather_per_pod(self, gather, metrics_client):
        metrics_client.external_metric = ([40], NOW)

        metric = gather.gather_per_pod("queue_messages", "default", "queue=jobs", "app=worker")

        assert metric.current.average_value == 40
        assert metric.ready_pod_count == 2

    def test_client_error_is_wrapped(self, gather, metrics_client):
        metrics_client.error = RuntimeError("timeout")

        with pytest.raises(MetricsClientError, match="queue_messages"):
            gather.gather("queue_messages", "default", None)
