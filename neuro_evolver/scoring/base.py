"""Scoring Replica Abstract Interface - 評分副本抽象介面

定義演化優化器對外部模型的唯一需求：
把基因組載入副本，並針對一個批次回傳純量損失。
"""

from abc import ABC, abstractmethod

import numpy as np


class ScoringReplica(ABC):
    """評分副本抽象介面

    任何滿足此介面的模型都可以被演化優化器訓練。
    多個副本以索引區分，每個副本在一次評估中只會被一個任務使用。
    """

    @abstractmethod
    def parameter_count(self) -> int:
        """攤平後可變參數的總數

        Returns:
            參數數量，即基因組長度
        """
        pass

    @abstractmethod
    def load_parameters(self, genome: np.ndarray) -> None:
        """以基因組覆寫模型參數

        攤平順序必須固定且確定，並在所有副本與所有呼叫間一致。

        Args:
            genome: 長度為 parameter_count() 的一維陣列
        """
        pass

    @abstractmethod
    def score(self, labels: np.ndarray, data: np.ndarray) -> float:
        """以目前參數計算批次損失

        除了內部評估快取之外，不得修改任何外部狀態。

        Args:
            labels: 批次標籤
            data: 批次特徵

        Returns:
            純量損失
        """
        pass

    def get_parameters(self) -> np.ndarray:
        """讀出目前參數（攤平後）

        Raises:
            NotImplementedError: 若副本不支援讀出參數
        """
        raise NotImplementedError(
            f"{type(self).__name__} does not expose its parameters"
        )
