"""
演化優化器 (Evolver)

以族群搜尋取代反向傳播，訓練外部評分模型的固定長度參數向量。
每一世代依序執行：排序 → 報告 → 選擇與繁衍 → 以新的小批次評估 →
衰減突變幅度與突變機率。
"""

import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence

import numpy as np

from .exceptions import (
    ConfigurationError,
    EvaluationError,
    EvolverStateError,
    GenerationLimitError,
    validate_genome_length,
)
from .generation import EvolutionHistory, GenerationStats
from .minibatch import MiniBatchHandler, TrainingSet
from .models import Individual
from .params import EvolverParams
from .population import Population
from .random_source import RandomSource
from .roulette import Roulette
from .scheduler import EvaluationScheduler

logger = logging.getLogger(__name__)


class EvolverState(Enum):
    """演化狀態

    Attributes:
        INITIALIZED: 已建立初始種群，尚未評估
        EVALUATED: 種群已評估，可進行選擇
        SELECTED: 已產生新種群，尚未評估
        DONE: 已完成 max_generations 個世代
        FAILED: 評估失敗，種群含有過期的適應度，執行無法繼續
    """
    INITIALIZED = "initialized"
    EVALUATED = "evaluated"
    SELECTED = "selected"
    DONE = "done"
    FAILED = "failed"


class Evolver:
    """演化優化器

    建構時建立隨機初始種群並以第一個小批次評估。
    所有隨機決策都來自建構時取得的 RandomSource，固定種子可完整重現執行結果。

    Attributes:
        params: 演化參數
        generation: 已完成的世代數
        state: 目前狀態
        mutation_power: 目前的突變幅度
        mutation_rate: 目前的突變機率
        history: 各世代統計
    """

    def __init__(
        self,
        replicas: Sequence,
        training_set: TrainingSet,
        params: Optional[EvolverParams] = None,
        seed: int = 0,
        random_source: Optional[RandomSource] = None,
        genome_length: Optional[int] = None,
        progress_callback: Optional[Callable[[int, GenerationStats], None]] = None,
    ):
        """初始化演化優化器

        Args:
            replicas: 評分副本列表，必須為同一模型拓撲的多個實例
            training_set: 訓練資料集
            params: 演化參數，預設使用 EvolverParams()
            seed: 隨機種子（未提供 random_source 時使用）
            random_source: 隨機數來源，可選
            genome_length: 預期的基因組長度，可選；提供時必須與副本一致
            progress_callback: 進度回調函數，接收 (generation, stats) 參數

        Raises:
            ConfigurationError: 若參數不合法或副本參數數量不一致
            ExhaustionError: 若訓練資料為空
            EvaluationError: 若初始種群評估失敗
        """
        self.params = params or EvolverParams()
        self.params.validate()

        if not replicas:
            raise ConfigurationError(
                "replicas", 0, "at least one scoring replica is required"
            )

        self._replicas = list(replicas)
        self._genome_length = self._check_replicas(self._replicas, genome_length)

        self._rng = random_source if random_source is not None else RandomSource(seed)
        self._handler = MiniBatchHandler(training_set)
        self._scheduler = EvaluationScheduler(
            self._replicas,
            fitness_decay_rate=self.params.fitness_decay_rate,
            min_fitness=self.params.min_fitness,
        )
        self.progress_callback = progress_callback

        self.generation = 0
        self.mutation_power = self.params.mutation_power
        self.mutation_rate = self.params.mutation_rate
        self._power_decay = self.params.power_decay_factor
        self._rate_decay = self.params.rate_decay_factor
        self.history = EvolutionHistory()

        logger.info(
            f"Initializing population of {self.params.population_size} individuals "
            f"with genome length {self._genome_length} "
            f"across {len(self._replicas)} scoring replicas"
        )

        self._population = Population.random(
            self.params.population_size,
            self._genome_length,
            self._rng,
            self.params.initial_weights_delta,
        )
        self._losses = np.zeros(self.params.population_size, dtype=np.float64)
        self.state = EvolverState.INITIALIZED

        self._evaluate_population()

    @staticmethod
    def _check_replicas(replicas: List, genome_length: Optional[int]) -> int:
        """驗證所有副本的參數數量一致，回傳基因組長度"""
        expected = genome_length
        if expected is None:
            expected = int(replicas[0].parameter_count())

        if isinstance(expected, bool) or not isinstance(expected, int) or expected < 1:
            raise ConfigurationError(
                "genome_length", expected, "must be a positive integer"
            )

        for index, replica in enumerate(replicas):
            validate_genome_length(index, expected, int(replica.parameter_count()))

        return expected

    # ------------------------------------------------------------------
    # 屬性
    # ------------------------------------------------------------------

    @property
    def genome_length(self) -> int:
        return self._genome_length

    @property
    def current_epoch(self) -> int:
        """小批次分派器目前的 epoch"""
        return self._handler.get_epoch()

    @property
    def generation_losses(self) -> np.ndarray:
        """上一輪評估中各種群位置的損失"""
        return self._losses.copy()

    @property
    def random_source(self) -> RandomSource:
        return self._rng

    # ------------------------------------------------------------------
    # 世代流程
    # ------------------------------------------------------------------

    def run_generations(self, n: Optional[int] = None) -> EvolutionHistory:
        """執行多個世代

        Args:
            n: 要執行的世代數；None 表示執行到 max_generations 為止。
               超過剩餘世代數時於完成後停止。

        Returns:
            演化歷史

        Raises:
            EvaluationError: 任一副本評估失敗
        """
        remaining = self.params.max_generations - self.generation
        steps = remaining if n is None else min(n, remaining)

        for _ in range(steps):
            self.step_generation()

        return self.history

    def step_generation(self) -> GenerationStats:
        """執行單一世代

        Returns:
            繁衍前的世代統計

        Raises:
            GenerationLimitError: 若已完成所有世代
            EvolverStateError: 若種群尚未評估或先前的評估已失敗
            EvaluationError: 任一副本評估失敗
        """
        self._require_evaluated("step a generation")

        # 1. 排序
        self._population.sort()

        # 2. 報告
        stats = self._report()

        # 3. 選擇與繁衍
        self.reproduce_population()

        # 4. 以新的小批次評估
        self._evaluate_population()

        # 5. 衰減突變排程
        self.generation += 1
        self.mutation_power *= self._power_decay
        self.mutation_rate *= self._rate_decay

        if self.generation >= self.params.max_generations:
            self.state = EvolverState.DONE
            logger.info(
                f"Evolution finished after {self.generation} generations, "
                f"best fitness {self._population.best.fitness:.6f}"
            )

        return stats

    def reproduce_population(self) -> None:
        """選擇與繁衍

        從排序後的精英切片建立輪盤，為每個位置抽取親代：
        以 sex_proportion 的機率再獨立抽取第二親代進行交叉（可與第一親代相同），
        否則以目前的突變幅度與機率進行突變。新種群整體取代舊種群。
        僅能在 EVALUATED 狀態下呼叫。

        Raises:
            GenerationLimitError: 若已完成所有世代
            EvolverStateError: 若種群尚未評估或先前的評估已失敗
        """
        self._require_evaluated("reproduce the population")

        self._population.sort()
        elite = self._population.elite(self.params.elite_count)
        wheel = Roulette(elite, self._rng)

        offspring: List[Individual] = []
        for _ in range(self.params.population_size):
            parent = elite[wheel.spin()]

            if self._rng.uniform01() < self.params.sex_proportion:
                child = parent.crossover(elite[wheel.spin()], self._rng)
            else:
                child = parent.mutate(self.mutation_power, self.mutation_rate, self._rng)

            offspring.append(child)

        self._population = Population(offspring)
        self.state = EvolverState.SELECTED

    def _require_evaluated(self, operation: str) -> None:
        """只有已評估的種群可以排序與選擇"""
        if self.state == EvolverState.DONE:
            raise GenerationLimitError(self.params.max_generations)
        if self.state != EvolverState.EVALUATED:
            raise EvolverStateError(operation, self.state.value)

    def _evaluate_population(self) -> None:
        """以新的小批次評估整個種群"""
        batch = self._handler.next_batch(self.params.sample_count)
        try:
            self._losses = self._scheduler.evaluate(self._population, batch, self.generation)
        except EvaluationError:
            self.state = EvolverState.FAILED
            raise
        self.state = EvolverState.EVALUATED

    def _report(self) -> GenerationStats:
        """計算、記錄並回報世代統計"""
        stats = GenerationStats.from_population(
            generation=self.generation,
            population=self._population,
            losses=self._losses,
            mutation_power=self.mutation_power,
            mutation_rate=self.mutation_rate,
            epoch=self.current_epoch,
        )
        self.history.append(stats)

        is_last = self.generation == self.params.max_generations - 1
        if self.generation % self.params.tracking_stride == 0 or is_last:
            logger.info(stats.summary())

        if self.progress_callback is not None:
            self.progress_callback(self.generation, stats)

        return stats

    # ------------------------------------------------------------------
    # 查詢
    # ------------------------------------------------------------------

    def best_individual(self) -> Individual:
        """目前適應度最低（最佳）個體的複本"""
        return self._population.best.clone()

    def population_snapshot(self) -> List[Individual]:
        """種群的深拷貝（供檢視與測試）"""
        return self._population.snapshot()

    def average_fitness(self) -> float:
        return self._population.average_fitness()

    def current_weights(self, replica_index: int = 0) -> np.ndarray:
        """讀出副本目前載入的參數

        Raises:
            NotImplementedError: 若副本不支援讀出參數
        """
        return np.asarray(self._replicas[replica_index].get_parameters(), dtype=np.float64)

    def score_best(self, labels: np.ndarray, data: np.ndarray) -> float:
        """以最佳個體對外部資料（例如保留集）評分

        僅供報告使用，不影響適應度。不可與評估同時呼叫。

        Args:
            labels: 標籤
            data: 特徵

        Returns:
            最佳個體的損失
        """
        replica = self._replicas[0]
        replica.load_parameters(self._population.best.genome)
        return float(replica.score(labels, data))
