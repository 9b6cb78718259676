"""
Evaluate strategies, one per metric source type, and the combining evaluator
"""

from .resource import ResourceEvaluate
from .pods import PodsEvaluate
from .object import ObjectEvaluate
from .external import ExternalEvaluate
from .evaluator import Evaluator

__all__ = [
    "ResourceEvaluate",
    "PodsEvaluate",
    "ObjectEvaluate",
    "ExternalEvaluate",
    "Evaluator",
]
