"""
個體資料模型 (Individual Data Model)

定義演化優化器的核心資料結構：個體由固定長度的實數基因組與適應度組成，
並提供無性繁殖（突變）與有性繁殖（均勻交叉）兩種基因算子。

適應度慣例：數值越低越好（為損失值經衰減後的累積）。
"""

from dataclasses import dataclass, field
import math

import numpy as np

from .random_source import RandomSource


# 未評估個體的適應度：最差值，確保未評估者永遠不會排在已評估者之前
UNEVALUATED_FITNESS = math.inf

# 均勻交叉時每個基因取自第二親代的機率
CROSSOVER_GENE_PROBABILITY = 0.5


@dataclass(eq=False)
class Individual:
    """演化個體

    代表種群中的一個個體，包含基因組與適應度資訊。
    基因組由個體獨佔，複製時一律深拷貝，親代與子代不共用儲存空間。

    Attributes:
        genome: 個體的基因組（float64 一維陣列）
        fitness: 適應度分數（越低越好，預設為未評估）
    """
    genome: np.ndarray
    fitness: float = field(default=UNEVALUATED_FITNESS)

    def __post_init__(self):
        self.genome = np.array(self.genome, dtype=np.float64).reshape(-1)

    def __len__(self) -> int:
        return int(self.genome.shape[0])

    def __lt__(self, other: "Individual") -> bool:
        """比較適應度（用於排序）"""
        return self.fitness < other.fitness

    @property
    def is_evaluated(self) -> bool:
        """是否已被評估過"""
        return not math.isinf(self.fitness)

    @classmethod
    def create(
        cls,
        length: int,
        rng: RandomSource,
        initial_weights_delta: float = 1.0,
    ) -> "Individual":
        """建立隨機個體

        基因值從 [-initial_weights_delta, +initial_weights_delta) 均勻抽樣。

        Args:
            length: 基因組長度
            rng: 隨機數來源
            initial_weights_delta: 初始權重範圍

        Returns:
            尚未評估的隨機個體
        """
        genome = rng.uniform_array(length, -initial_weights_delta, initial_weights_delta)
        return cls(genome=genome, fitness=UNEVALUATED_FITNESS)

    def clone(self) -> "Individual":
        """建立個體的深拷貝"""
        return Individual(genome=self.genome.copy(), fitness=self.fitness)

    def mutate(
        self,
        power: float,
        rate: float,
        rng: RandomSource,
    ) -> "Individual":
        """無性繁殖（突變）

        複製親代後，每個基因以 rate 的機率獨立加上
        [-power, power) 範圍內的均勻擾動。
        子代適應度沿用親代的值，作為下一次評估前的暫存值。

        Args:
            power: 突變幅度
            rate: 每個基因的突變機率
            rng: 隨機數來源

        Returns:
            新的子代個體（親代不變）
        """
        child = self.clone()
        genome = child.genome

        for i in range(genome.shape[0]):
            if rng.uniform01() < rate:
                genome[i] += rng.uniform(-power, power)

        return child

    def crossover(
        self,
        other: "Individual",
        rng: RandomSource,
    ) -> "Individual":
        """有性繁殖（均勻交叉）

        複製本個體後，每個基因以 0.5 的機率改用另一親代在相同位置的值。
        子代基因完全來自親代，不會產生內插值。
        子代適應度為兩親代適應度的平均（暫存值）。

        Args:
            other: 第二個親代
            rng: 隨機數來源

        Returns:
            新的子代個體（親代不變）
        """
        assert len(self) == len(other), (
            f"Genome length mismatch: {len(self)} != {len(other)}"
        )

        child = self.clone()
        genome = child.genome
        donor = other.genome

        for i in range(genome.shape[0]):
            if rng.uniform01() < CROSSOVER_GENE_PROBABILITY:
                genome[i] = donor[i]

        child.fitness = (self.fitness + other.fitness) / 2.0
        return child


def genome_equals(g1: np.ndarray, g2: np.ndarray, tolerance: float = 1e-9) -> bool:
    """比較兩個基因組是否相等（考慮浮點數誤差）

    Args:
        g1: 第一個基因組
        g2: 第二個基因組
        tolerance: 浮點數比較容差

    Returns:
        兩個基因組是否相等
    """
    if g1.shape != g2.shape:
        return False
    return bool(np.allclose(g1, g2, rtol=0.0, atol=tolerance))
