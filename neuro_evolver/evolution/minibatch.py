"""
小批次分派器 (Mini-Batch Handler)

循環地從訓練資料依序讀取小批次，並追蹤已完成的 epoch 數。
"""

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .exceptions import ExhaustionError

logger = logging.getLogger(__name__)


def _frozen(array: np.ndarray) -> np.ndarray:
    """回傳唯讀副本"""
    frozen = np.array(array, copy=True)
    frozen.setflags(write=False)
    return frozen


@dataclass(frozen=True, eq=False)
class TrainingSet:
    """訓練資料集

    有序且固定長度的 (label, features) 配對集合。

    Attributes:
        labels: 標籤陣列，第一維為樣本
        features: 特徵陣列，第一維為樣本
    """
    labels: np.ndarray
    features: np.ndarray

    def __post_init__(self):
        labels = _frozen(np.asarray(self.labels, dtype=np.float64))
        features = _frozen(np.asarray(self.features, dtype=np.float64))

        if labels.shape[:1] != features.shape[:1]:
            raise ValueError(
                f"Labels and features must have the same number of samples, "
                f"got {labels.shape[:1]} and {features.shape[:1]}"
            )

        object.__setattr__(self, "labels", labels)
        object.__setattr__(self, "features", features)

    @classmethod
    def from_pairs(
        cls,
        labels: Sequence[Sequence[float]],
        features: Sequence[Sequence[float]],
    ) -> "TrainingSet":
        """從標籤與特徵序列建立資料集"""
        if len(labels) == 0 and len(features) == 0:
            return cls(labels=np.empty((0, 0)), features=np.empty((0, 0)))
        return cls(labels=np.asarray(labels), features=np.asarray(features))

    def __len__(self) -> int:
        return int(self.labels.shape[0])


@dataclass(frozen=True, eq=False)
class MiniBatch:
    """小批次

    一輪評估使用的不可變資料快照，所有評估任務共用同一份。

    Attributes:
        labels: 唯讀標籤陣列
        data: 唯讀特徵陣列
    """
    labels: np.ndarray
    data: np.ndarray

    def __len__(self) -> int:
        return int(self.labels.shape[0])


class MiniBatchHandler:
    """小批次分派器

    狀態只有游標與 epoch，且僅由 next_batch 修改。
    游標耗盡時回到 0 並使 epoch 加一，同一次呼叫繼續填滿，
    因此一個批次可以跨越 epoch 邊界。

    Attributes:
        training_set: 訓練資料集
    """

    def __init__(self, training_set: TrainingSet):
        """初始化分派器

        Args:
            training_set: 訓練資料集
        """
        self.training_set = training_set
        self._cursor = 0
        self._epoch = 0

    @property
    def cursor(self) -> int:
        """下一個要讀取的樣本索引"""
        return self._cursor

    @property
    def epoch(self) -> int:
        """已完成的 epoch 數"""
        return self._epoch

    def get_epoch(self) -> int:
        return self._epoch

    def next_batch(self, size: int) -> MiniBatch:
        """取得下一個小批次

        Args:
            size: 批次大小

        Returns:
            不可變的小批次快照

        Raises:
            ExhaustionError: 若訓練資料為空
        """
        total = len(self.training_set)
        if total == 0:
            raise ExhaustionError(size)

        indices = np.empty(size, dtype=np.intp)
        for i in range(size):
            if self._cursor >= total:
                # 進入新的 epoch
                self._epoch += 1
                self._cursor = 0
                logger.debug(f"Training data exhausted, starting epoch {self._epoch}")

            indices[i] = self._cursor
            self._cursor += 1

        return MiniBatch(
            labels=_frozen(self.training_set.labels[indices]),
            data=_frozen(self.training_set.features[indices]),
        )
