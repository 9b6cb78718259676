"""
Gather strategies, one per metric source type, and the routing gatherer
"""

from .resource import ResourceGather
from .pods import PodsGather
from .object import ObjectGather
from .external import ExternalGather
from .gatherer import Gatherer

__all__ = [
    "ResourceGather",
    "PodsGather",
    "ObjectGather",
    "ExternalGather",
    "Gatherer",
]
