"""
評估排程器 (Evaluation Scheduler)

將種群切分給 K 個評分副本並行評估。每次評估都建立新的執行緒池，
並在所有任務完成後才返回（硬性屏障）。副本是互斥的單位：
同一個副本在一次評估中只會被一個任務使用。
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence, Tuple

import numpy as np

from .exceptions import ConfigurationError, EvaluationError
from .minibatch import MiniBatch
from .models import Individual
from .population import Population

logger = logging.getLogger(__name__)


def partition(population_size: int, replica_count: int) -> List[Tuple[int, int]]:
    """切分種群索引範圍

    將 [0, population_size) 切成大小為 ceil(population_size / replica_count)
    的連續區段，最後一段截斷。區段數量不會超過 replica_count。

    Args:
        population_size: 種群大小
        replica_count: 副本數量

    Returns:
        (start, end) 區段列表，第 i 段由第 i 個副本評估
    """
    if population_size < 1 or replica_count < 1:
        return []

    chunk = math.ceil(population_size / replica_count)
    return [
        (start, min(start + chunk, population_size))
        for start in range(0, population_size, chunk)
    ]


class EvaluationScheduler:
    """評估排程器

    適應度更新公式：
        new = previous * (1 - fitness_decay_rate) + max(batch_size - loss, min_fitness)
    未評估個體的 previous 視為 0。

    Attributes:
        replicas: 評分副本列表（以索引區分）
        fitness_decay_rate: 舊適應度衰減率
        min_fitness: 單次評估貢獻的下限
    """

    def __init__(
        self,
        replicas: Sequence,
        fitness_decay_rate: float = 0.2,
        min_fitness: float = 0.00001,
    ):
        """初始化評估排程器

        Args:
            replicas: 評分副本列表
            fitness_decay_rate: 舊適應度衰減率，預設為 0.2
            min_fitness: 單次評估貢獻的下限，預設為 0.00001

        Raises:
            ConfigurationError: 若副本列表為空
        """
        if not replicas:
            raise ConfigurationError(
                "replicas", 0, "at least one scoring replica is required"
            )

        self.replicas = list(replicas)
        self.fitness_decay_rate = fitness_decay_rate
        self.min_fitness = min_fitness

    @property
    def replica_count(self) -> int:
        return len(self.replicas)

    def updated_fitness(self, individual: Individual, loss: float, batch_size: int) -> float:
        """計算評估後的新適應度"""
        previous = individual.fitness if individual.is_evaluated else 0.0
        contribution = max(batch_size - loss, self.min_fitness)
        return previous * (1.0 - self.fitness_decay_rate) + contribution

    def evaluate(
        self,
        population: Population,
        batch: MiniBatch,
        generation: int = 0,
    ) -> np.ndarray:
        """評估整個種群

        批次在派工前擷取一次，所有任務共用同一份不可變快照。

        Args:
            population: 要評估的種群
            batch: 本輪小批次
            generation: 世代編號（用於日誌）

        Returns:
            各種群位置的損失值

        Raises:
            EvaluationError: 任一副本評估失敗（所有任務結束後才拋出）
        """
        losses = np.zeros(len(population), dtype=np.float64)
        ranges = partition(len(population), self.replica_count)

        with ThreadPoolExecutor(max_workers=len(ranges)) as executor:
            futures = [
                executor.submit(self._evaluate_range, population, start, end, replica_index, batch, losses)
                for replica_index, (start, end) in enumerate(ranges)
            ]

        # 屏障：離開 with 區塊時所有任務皆已完成
        for future in futures:
            error = future.exception()
            if error is not None:
                logger.error(f"Evaluation of generation {generation} aborted: {error}")
                raise error

        return losses

    def _evaluate_range(
        self,
        population: Population,
        start: int,
        end: int,
        replica_index: int,
        batch: MiniBatch,
        losses: np.ndarray,
    ) -> None:
        """以單一副本評估 [start, end) 範圍內的個體"""
        replica = self.replicas[replica_index]
        batch_size = len(batch)

        for i in range(start, end):
            individual = population[i]
            try:
                replica.load_parameters(individual.genome)
                loss = float(replica.score(batch.labels, batch.data))
            except Exception as exc:
                raise EvaluationError(replica_index, i, exc) from exc

            losses[i] = loss
            individual.fitness = self.updated_fitness(individual, loss, batch_size)
