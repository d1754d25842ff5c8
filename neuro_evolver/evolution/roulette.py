"""
輪盤選擇 (Roulette Selection)

適應度比例選擇：從固定的候選集合中，依轉換後的適應度權重抽樣親代索引。
由於適應度為最小化分數，權重以範圍反射方式導出，使最小適應度得到最大權重。
"""

from typing import List, Sequence

import numpy as np

from .models import Individual
from .random_source import RandomSource


class Roulette:
    """輪盤

    每一世代由精英切片建立一次。

    權重計算：lo = min(fitness)、hi = max(fitness)，
    weight(i) = (lo + hi) - fitness(i)。
    權重以總和正規化，因此當所有適應度皆為負數（總和為負）時仍為合法分布；
    與總和符號相反的權重視為零。總和為零、非有限值或所有權重相等時，
    退化為均勻索引選擇。

    適應度正負混合且總和為負時，被截為零的是權重為正的候選者，
    也就是適應度最低者；此時選擇偏向適應度最高的候選者，
    與全負適應度時的排序方向一致。例如適應度 [-10, 0, 5] 的機率為
    [0, 1/3, 2/3]。

    Attributes:
        size: 候選者數量
        uniform: 是否退化為均勻選擇
    """

    def __init__(
        self,
        individuals: Sequence[Individual],
        rng: RandomSource,
    ):
        """建立輪盤

        Args:
            individuals: 候選個體（通常為排序後的精英切片）
            rng: 隨機數來源

        Raises:
            ValueError: 若候選集合為空
        """
        if not individuals:
            raise ValueError("Roulette requires at least one candidate")

        self.size = len(individuals)
        self._rng = rng

        fitnesses = np.array([ind.fitness for ind in individuals], dtype=np.float64)
        self.weights = self._adjusted_weights(fitnesses)
        self.total = float(self.weights.sum())

        self.uniform = (
            not np.isfinite(self.total)
            or self.total == 0.0
            or bool(np.all(self.weights == self.weights[0]))
        )

        if self.uniform:
            self._cumulative = np.arange(1, self.size + 1, dtype=np.float64)
        else:
            normalized = np.clip(self.weights / self.total, 0.0, None)
            self._cumulative = np.cumsum(normalized)

    @staticmethod
    def _adjusted_weights(fitnesses: np.ndarray) -> np.ndarray:
        """以範圍反射轉換適應度，使最小適應度得到最大權重"""
        adjustment = fitnesses.min() + fitnesses.max()
        return adjustment - fitnesses

    @property
    def probabilities(self) -> List[float]:
        """每個索引被選中的機率"""
        if self.uniform:
            return [1.0 / self.size] * self.size
        steps = np.diff(self._cumulative, prepend=0.0)
        return (steps / self._cumulative[-1]).tolist()

    def spin(self) -> int:
        """轉動輪盤

        抽取 [0, 總權重) 的 r，回傳累積權重首次超過 r 的索引；
        若因捨入誤差未命中任何索引，回傳最後一個索引。

        Returns:
            選中的候選者索引
        """
        if self.uniform:
            return self._rng.uniform_int(self.size)

        r = self._rng.uniform(0.0, float(self._cumulative[-1]))
        index = int(np.searchsorted(self._cumulative, r, side="right"))

        # 捨入誤差保護
        if index >= self.size:
            return self.size - 1
        return index
