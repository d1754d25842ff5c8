"""
評分副本 (Scoring Replicas)

演化優化器與外部模型之間的介面。
"""

from .base import ScoringReplica
from .dense import DenseNetwork

__all__ = [
    "ScoringReplica",
    "DenseNetwork",
]
