"""
演化參數 (Evolver Parameters)

控制演化優化器的所有可配置參數，支援驗證與 JSON 讀寫。
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict
import json

from .exceptions import (
    ConfigurationError,
    validate_elite_count,
    validate_non_negative,
    validate_population_size,
    validate_positive_int,
    validate_selection_proportion,
    validate_unit_interval,
)


@dataclass
class EvolverParams:
    """演化參數

    Attributes:
        population_size: 種群大小
        max_generations: 最大世代數
        sample_count: 每世代評估使用的小批次大小
        mutation_power: 突變幅度上限
        mutation_power_decay: 突變幅度在整個執行期間的總衰減比例
            (0 表示不衰減，1 表示最後一代幅度為 0)
        mutation_rate: 每個基因的突變機率
        mutation_rate_decay: 突變機率在整個執行期間的總衰減比例
        sex_proportion: 以有性繁殖產生的子代比例
        selection_proportion: 可作為親代的排序後精英比例
        initial_weights_delta: 初始權重範圍 [-delta, delta]
        fitness_decay_rate: 每次評估時舊適應度的衰減率
        tracking_stride: 每 N 個世代輸出一次統計
        min_fitness: 單次評估適應度貢獻的下限
    """
    population_size: int = 1000
    max_generations: int = 20
    sample_count: int = 2
    mutation_power: float = 0.03
    mutation_power_decay: float = 0.99
    mutation_rate: float = 0.04
    mutation_rate_decay: float = 0.0
    sex_proportion: float = 0.5
    selection_proportion: float = 0.4
    initial_weights_delta: float = 1.0
    fitness_decay_rate: float = 0.2
    tracking_stride: int = 1000
    min_fitness: float = 0.00001

    def validate(self) -> None:
        """驗證參數

        Raises:
            ConfigurationError: 第一個不合法的參數（訊息中包含參數名稱）
        """
        validate_population_size(self.population_size)
        validate_positive_int("max_generations", self.max_generations)
        validate_positive_int("sample_count", self.sample_count)
        validate_selection_proportion(self.selection_proportion)
        validate_elite_count(self.population_size, self.selection_proportion)
        validate_non_negative("mutation_power", self.mutation_power)
        validate_unit_interval("mutation_power_decay", self.mutation_power_decay)
        validate_unit_interval("mutation_rate", self.mutation_rate)
        validate_unit_interval("mutation_rate_decay", self.mutation_rate_decay)
        validate_unit_interval("sex_proportion", self.sex_proportion)
        validate_non_negative("initial_weights_delta", self.initial_weights_delta)
        validate_unit_interval("fitness_decay_rate", self.fitness_decay_rate)
        validate_positive_int("tracking_stride", self.tracking_stride)
        validate_non_negative("min_fitness", self.min_fitness)

    @property
    def elite_count(self) -> int:
        """精英切片大小（截斷而非四捨五入）"""
        return int(self.population_size * self.selection_proportion)

    @property
    def power_decay_factor(self) -> float:
        """每世代突變幅度的乘數"""
        return (1.0 - self.mutation_power_decay) ** (1.0 / self.max_generations)

    @property
    def rate_decay_factor(self) -> float:
        """每世代突變機率的乘數"""
        return (1.0 - self.mutation_rate_decay) ** (1.0 / self.max_generations)

    def to_dict(self) -> Dict[str, Any]:
        """轉換為字典格式"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EvolverParams":
        """從字典建立參數

        未列出的參數使用預設值。

        Raises:
            ConfigurationError: 若包含未知的參數名稱
        """
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                raise ConfigurationError(key, data[key], "unknown parameter")
        return cls(**data)

    def to_json(self) -> str:
        """序列化為 JSON 字串"""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "EvolverParams":
        """從 JSON 字串反序列化"""
        return cls.from_dict(json.loads(json_str))
