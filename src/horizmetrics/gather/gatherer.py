#!/usr/bin/env python3
"""
Gatherer routes metric specs to the gather strategy for their source type
"""

import concurrent.futures
from datetime import timedelta
from typing import List, Optional, Sequence

from ..clients.base import MetricsClient, PodLister
from ..config.settings import Settings
from ..core.logging_config import get_logger
from ..core.podutil import PodReadyCounter
from ..errors import InvalidTargetError, UnsupportedMetricSourceError
from ..models.metrics import Metric
from ..models.spec import MetricSourceType, MetricSpec, MetricTargetType
from .external import ExternalGather
from .object import ObjectGather
from .pods import PodsGather
from .resource import ResourceGather

logger = get_logger(__name__)


class Gatherer:
    """Gathers metrics for metric specs"""

    def __init__(
        self,
        metrics_client: MetricsClient,
        pod_lister: PodLister,
        cpu_initialization_period: timedelta,
        initial_readiness_delay: timedelta,
        max_workers: int = 4,
    ):
        """
        Initialize gatherer

        Args:
            metrics_client: Source of raw metric values
            pod_lister: Source of the pods backing the workload
            cpu_initialization_period: Window after pod start in which cpu readings may be discarded
            initial_readiness_delay: Window after a pod becomes ready in which it is still starting up
            max_workers: Upper bound on specs gathered in parallel
        """
        pod_ready_counter = PodReadyCounter(pod_lister)

        self.max_workers = max(1, max_workers)
        self.resource = ResourceGather(metrics_client, pod_lister, cpu_initialization_period, initial_readiness_delay)
        self.pods = PodsGather(metrics_client, pod_lister, cpu_initialization_period, initial_readiness_delay)
        self.object = ObjectGather(metrics_client, pod_ready_counter)
        self.external = ExternalGather(metrics_client, pod_ready_counter)

        self._strategies = {
            MetricSourceType.RESOURCE: self._gather_resource,
            MetricSourceType.PODS: self._gather_pods,
            MetricSourceType.OBJECT: self._gather_object,
            MetricSourceType.EXTERNAL: self._gather_external,
        }

    @classmethod
    def from_settings(
        cls, metrics_client: MetricsClient, pod_lister: PodLister, config: Optional[Settings] = None
    ) -> "Gatherer":
        config = config or Settings()
        return cls(
            metrics_client,
            pod_lister,
            cpu_initialization_period=config.gather.cpu_initialization_timedelta,
            initial_readiness_delay=config.gather.initial_readiness_timedelta,
            max_workers=config.gather.max_workers,
        )

    def gather_single_metric(
        self, spec: MetricSpec, namespace: str, selector: Optional[str], timeout: Optional[float] = None
    ) -> Metric:
        """
        Gather the metric for a single spec

        Args:
            spec: Metric spec to gather
            namespace: Namespace of the workload
            selector: Label selector of the workload's pods
            timeout: Per-call timeout in seconds handed to every client call

        Raises:
            UnsupportedMetricSourceError: If the spec's source type is not recognised
            InvalidTargetError: If the target type is not valid for the source
            MetricsClientError: If the metrics or pods could not be retrieved
        """
        strategy = self._strategies.get(spec.type) if isinstance(spec.type, MetricSourceType) else None
        if strategy is None:
            raise UnsupportedMetricSourceError(spec.type)
        return strategy(spec, namespace, selector, timeout)

    def gather_multiple_metrics(
        self,
        specs: Sequence[MetricSpec],
        namespace: str,
        selector: Optional[str],
        timeout: Optional[float] = None,
    ) -> List[Metric]:
        """
        Gather metrics for several specs in parallel

        Results keep the order of ``specs``. The first failure is raised
        without waiting for gathers still in flight; queued gathers are
        cancelled and partial results are never returned.
        """
        if not specs:
            return []

        if len(specs) == 1:
            return [self.gather_single_metric(specs[0], namespace, selector, timeout)]

        executor = concurrent.futures.ThreadPoolExecutor(max_workers=min(self.max_workers, len(specs)))
        try:
            futures = [
                executor.submit(self.gather_single_metric, spec, namespace, selector, timeout)
                for spec in specs
            ]
            for future in concurrent.futures.as_completed(futures):
                future.result()
        except Exception:
            # In-flight client calls finish in the background, bounded by their timeout
            executor.shutdown(wait=False, cancel_futures=True)
            raise
        executor.shutdown(wait=True)

        return [future.result() for future in futures]

    def _gather_resource(self, spec, namespace, selector, timeout) -> Metric:
        source = spec.resource
        if source.target.type not in (MetricTargetType.UTILIZATION, MetricTargetType.AVERAGE_VALUE):
            raise InvalidTargetError(
                f"invalid resource metric source {source.name}: target type must be Utilization or AverageValue"
            )
        return Metric(spec=spec, resource=self.resource.gather(source.name, namespace, selector, timeout=timeout))

    def _gather_pods(self, spec, namespace, selector, timeout) -> Metric:
        source = spec.pods
        if source.target.type == MetricTargetType.UTILIZATION:
            raise InvalidTargetError(
                f"invalid pods metric source {source.metric.name}: target type must be AverageValue or Value"
            )
        return Metric(
            spec=spec,
            pods=self.pods.gather(source.metric.name, namespace, selector, source.metric.selector, timeout=timeout),
        )

    def _gather_object(self, spec, namespace, selector, timeout) -> Metric:
        source = spec.object
        args = (source.metric.name, namespace, source.described_object, selector, source.metric.selector)
        if source.target.type == MetricTargetType.VALUE:
            return Metric(spec=spec, object=self.object.gather(*args, timeout=timeout))
        if source.target.type == MetricTargetType.AVERAGE_VALUE:
            return Metric(spec=spec, object=self.object.gather_per_pod(*args, timeout=timeout))
        raise InvalidTargetError(
            f"invalid object metric source {source.metric.name}: target type must be Value or AverageValue"
        )

    def _gather_external(self, spec, namespace, selector, timeout) -> Metric:
        source = spec.external
        if source.target.type == MetricTargetType.VALUE:
            return Metric(
                spec=spec,
                external=self.external.gather(source.metric.name, namespace, source.metric.selector, timeout=timeout),
            )
        if source.target.type == MetricTargetType.AVERAGE_VALUE:
            return Metric(
                spec=spec,
                external=self.external.gather_per_pod(
                    source.metric.name, namespace, source.metric.selector, selector, timeout=timeout
                ),
            )
        raise InvalidTargetError(
            f"invalid external metric source {source.metric.name}: target type must be Value or AverageValue"
        )
