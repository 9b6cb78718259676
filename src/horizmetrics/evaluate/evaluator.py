#!/usr/bin/env python3
"""
Evaluator combines per-metric evaluations into a single replica count
"""

from typing import List, Optional, Sequence

from ..config.settings import Settings
from ..core.logging_config import get_logger
from ..errors import DataInsufficiencyError, EvaluationError, HorizMetricsError, UnsupportedMetricSourceError
from ..models.metrics import Metric, ScaleDecision
from ..models.spec import MetricSourceType
from .calculate import to_fraction
from .external import ExternalEvaluate
from .object import ObjectEvaluate
from .pods import PodsEvaluate
from .resource import ResourceEvaluate

logger = get_logger(__name__)


class Evaluator:
    """
    Evaluates gathered metrics and picks the largest desired replica count.

    If any single metric says the workload is under capacity, that wins.
    """

    def __init__(self, tolerance: float = 0.0, fail_fast: bool = True):
        """
        Initialize evaluator

        Args:
            tolerance: Metrics whose usage ratio is within this fraction of 1.0 ask
                for the current replica count; 0 disables the check
            fail_fast: Raise on the first failing metric. When False, failing metrics
                are skipped and only an all-failed evaluation raises
        """
        if tolerance < 0:
            raise ValueError(f"tolerance must not be negative, got {tolerance}")

        self.tolerance = tolerance
        self.fail_fast = fail_fast

        self.resource = ResourceEvaluate()
        self.pods = PodsEvaluate()
        self.object = ObjectEvaluate()
        self.external = ExternalEvaluate()

        self._strategies = {
            MetricSourceType.RESOURCE: ("resource", self.resource),
            MetricSourceType.PODS: ("pods", self.pods),
            MetricSourceType.OBJECT: ("object", self.object),
            MetricSourceType.EXTERNAL: ("external", self.external),
        }

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "Evaluator":
        config = config or Settings()
        return cls(tolerance=config.evaluate.tolerance, fail_fast=config.evaluate.fail_fast)

    def evaluate_metric(self, metric: Metric) -> ScaleDecision:
        """Evaluate a single gathered metric with the strategy for its source type"""
        spec = metric.spec
        strategy = self._strategies.get(spec.type) if isinstance(spec.type, MetricSourceType) else None
        if strategy is None:
            raise UnsupportedMetricSourceError(spec.type)

        field_name, evaluate = strategy
        snapshot = getattr(metric, field_name)
        if snapshot is None:
            raise DataInsufficiencyError(f"metric {spec.metric_name} has no {field_name} data to evaluate")

        return evaluate.evaluate(snapshot, spec.target)

    def evaluate_all(self, metrics: Sequence[Metric]) -> List[ScaleDecision]:
        """
        Evaluate every metric, applying the failure policy

        Raises:
            EvaluationError: If no metrics were given, or every metric failed
        """
        if not metrics:
            raise EvaluationError("no metrics to evaluate")

        decisions = []
        errors = []
        for metric in metrics:
            try:
                decision = self.evaluate_metric(metric)
            except HorizMetricsError as e:
                if self.fail_fast:
                    raise
                logger.debug(f"Skipping metric {metric.spec.metric_name}: {e}")
                errors.append(e)
                continue
            logger.debug(f"Metric {metric.spec.metric_name} wants {decision.replicas} replicas")
            decisions.append(decision)

        if not decisions:
            raise EvaluationError(
                f"all {len(errors)} metrics failed to evaluate: {'; '.join(str(e) for e in errors)}",
                errors=errors,
            )

        return decisions

    def evaluate(self, metrics: Sequence[Metric], current_replicas: Optional[int] = None) -> int:
        """
        Calculate the desired replica count across all metrics

        A metric whose usage ratio is within tolerance of 1.0 asks for
        current_replicas instead of its computed count.

        Args:
            metrics: Gathered metrics, each carrying its spec
            current_replicas: Current replica count, required for the tolerance check

        Returns:
            The largest desired replica count across metrics
        """
        decisions = self.evaluate_all(metrics)

        desired = None
        for decision in decisions:
            replicas = decision.replicas
            if self._within_tolerance(decision, current_replicas):
                logger.debug(
                    f"Usage ratio {decision.usage_ratio} within tolerance {self.tolerance}, "
                    f"keeping {current_replicas} replicas instead of {replicas}"
                )
                replicas = current_replicas
            desired = replicas if desired is None else max(desired, replicas)

        return desired

    def _within_tolerance(self, decision: ScaleDecision, current_replicas: Optional[int]) -> bool:
        if not self.tolerance or not current_replicas or current_replicas <= 0 or decision.usage_ratio is None:
            return False

        ratio = to_fraction(decision.usage_ratio)
        if decision.ready_pod_count is None:
            # Count independent of pods: compare it against the current count
            ratio = ratio / current_replicas

        return abs(ratio - 1) <= to_fraction(self.tolerance)
