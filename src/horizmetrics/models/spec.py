#!/usr/bin/env python3
"""
Pydantic models describing the metric specs a workload is scaled on.

The shapes follow the autoscaling/v2 MetricSpec: a ``type`` tag naming the
source, and exactly one populated source field matching that tag.
"""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator


class MetricSourceType(str, Enum):
    """Metric source tags"""
    RESOURCE = "Resource"
    PODS = "Pods"
    OBJECT = "Object"
    EXTERNAL = "External"


class MetricTargetType(str, Enum):
    """How a target threshold is expressed"""
    VALUE = "Value"
    AVERAGE_VALUE = "AverageValue"
    UTILIZATION = "Utilization"


class MetricTarget(BaseModel):
    """Target threshold for a metric"""
    model_config = ConfigDict(frozen=True)

    type: MetricTargetType = Field(..., description="Target type")
    value: Optional[float] = Field(None, description="Target for the raw value (Value)")
    average_value: Optional[float] = Field(None, description="Target per pod (AverageValue)")
    average_utilization: Optional[int] = Field(
        None, description="Target percentage of the requested resource (Utilization)"
    )


class MetricIdentifier(BaseModel):
    """Name and optional label selector of a custom or external metric"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Metric name")
    selector: Optional[str] = Field(None, description="Label selector narrowing the metric series")


class CrossVersionObjectReference(BaseModel):
    """Reference to the object an Object metric describes"""
    model_config = ConfigDict(frozen=True)

    kind: str
    name: str
    api_version: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.kind} {self.name}"


class ResourceMetricSource(BaseModel):
    """Resource known to the scheduler (cpu, memory) as specified in pod requests"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Resource name, e.g. 'cpu'")
    target: MetricTarget


class PodsMetricSource(BaseModel):
    """Custom metric reported per pod"""
    model_config = ConfigDict(frozen=True)

    metric: MetricIdentifier
    target: MetricTarget


class ObjectMetricSource(BaseModel):
    """Custom metric describing a single object in the namespace"""
    model_config = ConfigDict(frozen=True)

    described_object: CrossVersionObjectReference
    metric: MetricIdentifier
    target: MetricTarget


class ExternalMetricSource(BaseModel):
    """Metric not associated with any object in the cluster"""
    model_config = ConfigDict(frozen=True)

    metric: MetricIdentifier
    target: MetricTarget


_SOURCE_FIELDS = {
    MetricSourceType.RESOURCE: "resource",
    MetricSourceType.PODS: "pods",
    MetricSourceType.OBJECT: "object",
    MetricSourceType.EXTERNAL: "external",
}


class MetricSpec(BaseModel):
    """
    A single metric to scale on.

    ``type`` is kept open to plain strings so unrecognised source tags reach the
    gatherer and fail there with an unsupported-source error.
    """
    model_config = ConfigDict(frozen=True)

    type: Union[MetricSourceType, str] = Field(..., union_mode="left_to_right", description="Metric source tag")
    resource: Optional[ResourceMetricSource] = None
    pods: Optional[PodsMetricSource] = None
    object: Optional[ObjectMetricSource] = None
    external: Optional[ExternalMetricSource] = None

    @model_validator(mode="after")
    def check_source_matches_type(self) -> "MetricSpec":
        field_name = _SOURCE_FIELDS.get(self.type) if isinstance(self.type, MetricSourceType) else None
        if field_name is not None and getattr(self, field_name) is None:
            raise ValueError(f"metric spec of type '{self.type.value}' requires '{field_name}' to be set")
        return self

    @property
    def source(self):
        """The populated source for this spec's type, if the type is recognised"""
        field_name = _SOURCE_FIELDS.get(self.type) if isinstance(self.type, MetricSourceType) else None
        return getattr(self, field_name) if field_name else None

    @property
    def target(self) -> Optional[MetricTarget]:
        source = self.source
        return source.target if source is not None else None

    @property
    def metric_name(self) -> str:
        """Human readable metric name used in error context"""
        source = self.source
        if source is None:
            return str(self.type)
        if isinstance(source, ResourceMetricSource):
            return source.name
        return source.metric.name
