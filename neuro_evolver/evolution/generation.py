"""
世代統計 (Generation Statistics)

記錄每一世代的適應度、損失與突變排程，供外部報告使用。
"""

from dataclasses import asdict, dataclass, field
from typing import List

import numpy as np
import pandas as pd

from .population import Population


@dataclass
class GenerationStats:
    """世代統計

    記錄單一世代在繁衍之前的統計資訊。

    Attributes:
        generation: 世代編號
        best_fitness: 最佳（最低）適應度
        average_fitness: 平均適應度
        lowest_loss: 上一輪評估的最低損失
        average_loss: 上一輪評估的平均損失
        mutation_power: 本世代使用的突變幅度
        mutation_rate: 本世代使用的突變機率
        epoch: 小批次分派器目前的 epoch
    """
    generation: int
    best_fitness: float
    average_fitness: float
    lowest_loss: float
    average_loss: float
    mutation_power: float
    mutation_rate: float
    epoch: int

    @classmethod
    def from_population(
        cls,
        generation: int,
        population: Population,
        losses: np.ndarray,
        mutation_power: float,
        mutation_rate: float,
        epoch: int,
    ) -> "GenerationStats":
        """從已排序的種群與損失向量計算統計"""
        return cls(
            generation=generation,
            best_fitness=population.best.fitness,
            average_fitness=population.average_fitness(),
            lowest_loss=float(np.min(losses)),
            average_loss=float(np.mean(losses)),
            mutation_power=mutation_power,
            mutation_rate=mutation_rate,
            epoch=epoch,
        )

    def summary(self) -> str:
        """單行文字摘要"""
        return (
            f"Generation {self.generation}: best fitness {self.best_fitness:.6f}, "
            f"average fitness {self.average_fitness:.6f}, "
            f"lowest loss {self.lowest_loss:.6f}, "
            f"average loss {self.average_loss:.6f}, epoch {self.epoch}"
        )


@dataclass
class EvolutionHistory:
    """演化歷史

    Attributes:
        generations: 各世代統計列表
    """
    generations: List[GenerationStats] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.generations)

    def append(self, stats: GenerationStats) -> None:
        self.generations.append(stats)

    def best_fitness_sequence(self) -> List[float]:
        """各世代最佳適應度序列"""
        return [stats.best_fitness for stats in self.generations]

    def to_dataframe(self) -> pd.DataFrame:
        """轉換為 DataFrame，以世代編號為索引"""
        columns = [
            "generation", "best_fitness", "average_fitness", "lowest_loss",
            "average_loss", "mutation_power", "mutation_rate", "epoch",
        ]
        frame = pd.DataFrame(
            [asdict(stats) for stats in self.generations],
            columns=columns,
        )
        return frame.set_index("generation")
