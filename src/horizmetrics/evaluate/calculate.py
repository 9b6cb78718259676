#!/usr/bin/env python3
"""
Exact arithmetic helpers shared by the evaluators.

Replica counts are ceilings of ratios, so values are kept as Fractions to stop
float rounding from turning an exact match (ratio 1.0) into an extra replica.
"""

import math
from decimal import Decimal
from fractions import Fraction
from typing import Optional, Union

from ..errors import ConfigurationError, DataInsufficiencyError, NoReadyInstancesError

Number = Union[int, float, Decimal, Fraction]


def to_fraction(value: Number) -> Fraction:
    if isinstance(value, float):
        # via str so 0.1 means one tenth, not its binary approximation
        return Fraction(str(value))
    return Fraction(value)


def require_positive(value: Optional[Number], description: str) -> Fraction:
    """Convert a target threshold, rejecting missing, zero or negative values"""
    if value is None:
        raise ConfigurationError(f"{description} is not set")
    result = to_fraction(value)
    if result <= 0:
        raise ConfigurationError(f"{description} must be greater than zero, got {value}")
    return result


def require_ready(ready_pod_count: Optional[int]) -> int:
    if not ready_pod_count or ready_pod_count <= 0:
        raise NoReadyInstancesError("no ready instances with usable metrics")
    return ready_pod_count


def ceil_replicas(value: Fraction) -> int:
    replicas = math.ceil(value)
    if replicas < 0:
        raise DataInsufficiencyError(f"computed a negative replica count ({replicas}) from negative metric values")
    return replicas
