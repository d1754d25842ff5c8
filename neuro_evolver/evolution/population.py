"""
種群 (Population)

固定大小、有序的個體集合。每一世代整體替換，個體不會跨世代存活，
只有基因內容經由複製、突變與交叉傳遞下去。
"""

from typing import Iterator, List, Sequence

from .models import Individual
from .random_source import RandomSource


class Population:
    """種群

    選擇之前必須先以 sort() 依適應度遞增排序（越低越好）。

    Attributes:
        individuals: 個體列表
    """

    def __init__(self, individuals: Sequence[Individual]):
        """初始化種群

        Args:
            individuals: 個體列表

        Raises:
            ValueError: 若個體列表為空或基因組長度不一致
        """
        if not individuals:
            raise ValueError("Population cannot be empty")

        length = len(individuals[0])
        for index, individual in enumerate(individuals):
            if len(individual) != length:
                raise ValueError(
                    f"Individual {index} has genome length {len(individual)}, "
                    f"expected {length}"
                )

        self.individuals: List[Individual] = list(individuals)

    @classmethod
    def random(
        cls,
        size: int,
        genome_length: int,
        rng: RandomSource,
        initial_weights_delta: float = 1.0,
    ) -> "Population":
        """生成隨機種群

        每個位置建立一個隨機個體。

        Args:
            size: 種群大小
            genome_length: 基因組長度
            rng: 隨機數來源
            initial_weights_delta: 初始權重範圍

        Returns:
            未評估的隨機種群
        """
        return cls([
            Individual.create(genome_length, rng, initial_weights_delta)
            for _ in range(size)
        ])

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self) -> Iterator[Individual]:
        return iter(self.individuals)

    def __getitem__(self, index: int) -> Individual:
        return self.individuals[index]

    @property
    def genome_length(self) -> int:
        return len(self.individuals[0])

    def sort(self) -> None:
        """依適應度遞增排序（穩定排序）"""
        self.individuals.sort(key=lambda ind: ind.fitness)

    def elite(self, count: int) -> List[Individual]:
        """取得排序後的前 count 個個體（不複製）"""
        return self.individuals[:count]

    @property
    def best(self) -> Individual:
        """適應度最低（最佳）的個體"""
        return min(self.individuals, key=lambda ind: ind.fitness)

    def average_fitness(self) -> float:
        """種群平均適應度"""
        return sum(ind.fitness for ind in self.individuals) / len(self.individuals)

    def snapshot(self) -> List[Individual]:
        """回傳所有個體的深拷貝"""
        return [ind.clone() for ind in self.individuals]
