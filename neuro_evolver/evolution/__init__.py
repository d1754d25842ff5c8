"""
輕量演化優化器 (Lightweight Evolutionary Optimizer)

以族群搜尋（選擇、突變、交叉）取代反向傳播，訓練外部模型的參數向量。
"""

from .random_source import (
    RandomSource,
)

from .models import (
    Individual,
    UNEVALUATED_FITNESS,
    CROSSOVER_GENE_PROBABILITY,
    genome_equals,
)

from .roulette import (
    Roulette,
)

from .minibatch import (
    TrainingSet,
    MiniBatch,
    MiniBatchHandler,
)

from .population import (
    Population,
)

from .params import (
    EvolverParams,
)

from .scheduler import (
    EvaluationScheduler,
    partition,
)

from .generation import (
    GenerationStats,
    EvolutionHistory,
)

from .evolver import (
    EvolverState,
    Evolver,
)

from .exceptions import (
    EvolutionError,
    ConfigurationError,
    InvalidPopulationSizeError,
    InvalidSelectionProportionError,
    EmptyEliteError,
    GenomeLengthMismatchError,
    EvaluationError,
    ExhaustionError,
    GenerationLimitError,
    EvolverStateError,
    validate_population_size,
    validate_selection_proportion,
    validate_elite_count,
    validate_positive_int,
    validate_unit_interval,
    validate_non_negative,
    validate_genome_length,
)

__all__ = [
    # Random
    "RandomSource",
    # Models
    "Individual",
    "UNEVALUATED_FITNESS",
    "CROSSOVER_GENE_PROBABILITY",
    "genome_equals",
    # Selection
    "Roulette",
    # Data
    "TrainingSet",
    "MiniBatch",
    "MiniBatchHandler",
    # Population
    "Population",
    # Params
    "EvolverParams",
    # Evaluation
    "EvaluationScheduler",
    "partition",
    # Generation
    "GenerationStats",
    "EvolutionHistory",
    # Evolver
    "EvolverState",
    "Evolver",
    # Exceptions
    "EvolutionError",
    "ConfigurationError",
    "InvalidPopulationSizeError",
    "InvalidSelectionProportionError",
    "EmptyEliteError",
    "GenomeLengthMismatchError",
    "EvaluationError",
    "ExhaustionError",
    "GenerationLimitError",
    "EvolverStateError",
    "validate_population_size",
    "validate_selection_proportion",
    "validate_elite_count",
    "validate_positive_int",
    "validate_unit_interval",
    "validate_non_negative",
    "validate_genome_length",
]
