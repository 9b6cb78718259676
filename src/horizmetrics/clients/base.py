#!/usr/bin/env python3
"""
Capability interfaces the gatherers depend on.

Implementations talk to a metrics backend and to the cluster; the gatherers
only ever see these interfaces, so tests can swap in in-memory doubles.

Every call takes an optional ``timeout`` in seconds. The gatherers pass the
caller's value through unchanged and never enforce one themselves; None
means the implementation's own default applies.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..models.metrics import PodMetric
from ..models.spec import CrossVersionObjectReference


class MetricsClient(ABC):
    """Retrieves raw metric values; pod-keyed results use pod names within the namespace"""

    @abstractmethod
    def get_resource_metric(
        self, resource: str, namespace: str, selector: Optional[str], timeout: Optional[float] = None
    ) -> Tuple[Dict[str, PodMetric], Dict[str, int], datetime]:
        """
        Per-pod usage of a resource plus per-pod requests, both in milli-units.

        Pods missing from the requests mapping have their requests derived from
        their container specs by the resource gatherer.
        """

    @abstractmethod
    def get_raw_metric(
        self,
        metric_name: str,
        namespace: str,
        selector: Optional[str],
        metric_selector: Optional[str],
        timeout: Optional[float] = None,
    ) -> Tuple[Dict[str, PodMetric], datetime]:
        """Per-pod values of a custom metric"""

    @abstractmethod
    def get_object_metric(
        self,
        metric_name: str,
        namespace: str,
        object_ref: CrossVersionObjectReference,
        metric_selector: Optional[str],
        timeout: Optional[float] = None,
    ) -> Tuple[int, datetime]:
        """Single value of a custom metric describing an object"""

    @abstractmethod
    def get_external_metric(
        self, metric_name: str, namespace: str, selector: Optional[str], timeout: Optional[float] = None
    ) -> Tuple[List[int], datetime]:
        """All values of an external metric matching the selector"""


class PodLister(ABC):
    """Lists pods with their status"""

    @abstractmethod
    def list_pods(self, namespace: str, selector: Optional[str], timeout: Optional[float] = None) -> List:
        """Pods (kubernetes V1Pod objects) in the namespace matching the label selector"""
