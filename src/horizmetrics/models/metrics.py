#!/usr/bin/env python3
"""
Metric snapshots produced by the gatherers and consumed by the evaluators
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Set
from pydantic import BaseModel, Field

from .spec import MetricSpec


@dataclass(frozen=True, order=True)
class InstanceRef:
    """Identifies one pod backing the workload"""
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class PodMetric:
    """A single raw reading for a pod, in milli-units"""
    value: int
    timestamp: Optional[datetime] = None
    window: timedelta = timedelta(0)


@dataclass(frozen=True)
class MetricValue:
    """Current value of an aggregate metric; one of the two is set"""
    value: Optional[int] = None
    average_value: Optional[int] = None


def _instances_dict(values: Dict[InstanceRef, Any]) -> Dict[str, Any]:
    return {str(ref): value for ref, value in sorted(values.items())}


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class ResourceMetric:
    """Resource (cpu, memory) readings for every pod in the scale target"""
    pod_metrics: Dict[InstanceRef, PodMetric] = field(default_factory=dict)
    requests: Dict[InstanceRef, int] = field(default_factory=dict)
    ready_pod_count: int = 0
    total_pods: int = 0
    ignored_pods: Set[InstanceRef] = field(default_factory=set)
    missing_pods: Set[InstanceRef] = field(default_factory=set)
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pod_metrics": _instances_dict({ref: m.value for ref, m in self.pod_metrics.items()}),
            "requests": _instances_dict(self.requests),
            "ready_pod_count": self.ready_pod_count,
            "total_pods": self.total_pods,
            "ignored_pods": sorted(str(ref) for ref in self.ignored_pods),
            "missing_pods": sorted(str(ref) for ref in self.missing_pods),
            "timestamp": _timestamp(self.timestamp),
        }


@dataclass
class PodsMetric:
    """Custom per-pod metric readings"""
    pod_metrics: Dict[InstanceRef, PodMetric] = field(default_factory=dict)
    ready_pod_count: int = 0
    total_pods: int = 0
    ignored_pods: Set[InstanceRef] = field(default_factory=set)
    missing_pods: Set[InstanceRef] = field(default_factory=set)
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pod_metrics": _instances_dict({ref: m.value for ref, m in self.pod_metrics.items()}),
            "ready_pod_count": self.ready_pod_count,
            "total_pods": self.total_pods,
            "ignored_pods": sorted(str(ref) for ref in self.ignored_pods),
            "missing_pods": sorted(str(ref) for ref in self.missing_pods),
            "timestamp": _timestamp(self.timestamp),
        }


@dataclass
class ObjectMetric:
    """Aggregate metric describing a single object"""
    current: MetricValue
    ready_pod_count: int = 0
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": {"value": self.current.value, "average_value": self.current.average_value},
            "ready_pod_count": self.ready_pod_count,
            "timestamp": _timestamp(self.timestamp),
        }


@dataclass
class ExternalMetric:
    """External metric values; current holds their sum"""
    current: MetricValue
    values: List[int] = field(default_factory=list)
    ready_pod_count: Optional[int] = None
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": {"value": self.current.value, "average_value": self.current.average_value},
            "values": list(self.values),
            "ready_pod_count": self.ready_pod_count,
            "timestamp": _timestamp(self.timestamp),
        }


@dataclass
class Metric:
    """Result of gathering one metric spec; exactly one snapshot is set"""
    spec: MetricSpec
    resource: Optional[ResourceMetric] = None
    pods: Optional[PodsMetric] = None
    object: Optional[ObjectMetric] = None
    external: Optional[ExternalMetric] = None

    @property
    def snapshot(self):
        for snapshot in (self.resource, self.pods, self.object, self.external):
            if snapshot is not None:
                return snapshot
        return None

    def to_dict(self) -> Dict[str, Any]:
        snapshot = self.snapshot
        return {
            "spec": self.spec.model_dump(mode="json", exclude_none=True),
            "snapshot": snapshot.to_dict() if snapshot is not None else None,
        }


class ScaleDecision(BaseModel):
    """Desired replica count computed from one metric"""
    replicas: int = Field(..., ge=0, description="Desired replica count")
    usage_ratio: Optional[float] = Field(None, description="Current usage relative to target")
    ready_pod_count: Optional[int] = Field(
        None, description="Pod count usage_ratio is measured over; None when the count does not depend on pods"
    )
    metric: Optional[Any] = Field(None, description="Metric the decision was derived from")
