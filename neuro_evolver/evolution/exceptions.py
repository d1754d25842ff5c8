"""
Evolver Exception Classes

This module defines custom exceptions for the evolutionary optimizer.
Every exception carries a message naming the failing parameter, replica or
index, and an optional suggestion describing how to recover.
"""

import numbers
from typing import Any, Optional


class EvolutionError(Exception):
    """Base exception class for all evolution-related errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.suggestion:
            return f"{self.message}. Suggestion: {self.suggestion}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(EvolutionError):
    """
    Raised when a construction parameter is invalid.

    Configuration errors are fatal: they are raised before any generation
    runs and always name the offending parameter.
    """

    def __init__(
        self,
        parameter: str,
        value: Any,
        requirement: str,
        suggestion: Optional[str] = None,
    ):
        self.parameter = parameter
        self.value = value
        self.requirement = requirement
        message = f"Invalid {parameter}: {value!r} ({requirement})"
        super().__init__(message, suggestion)


class InvalidPopulationSizeError(ConfigurationError):
    """Raised when population_size is not a positive integer."""

    def __init__(self, population_size: Any):
        self.population_size = population_size
        super().__init__(
            "population_size",
            population_size,
            "must be a positive integer",
            "Use at least one individual per population",
        )


class InvalidSelectionProportionError(ConfigurationError):
    """Raised when selection_proportion is outside (0, 1]."""

    def __init__(self, selection_proportion: Any):
        self.selection_proportion = selection_proportion
        super().__init__(
            "selection_proportion",
            selection_proportion,
            "must be within (0, 1]",
            "Select a fraction such as 0.4 of the sorted population as parents",
        )


class EmptyEliteError(ConfigurationError):
    """
    Raised when the elite slice would contain no individuals.

    The elite slice is floor(population_size * selection_proportion)
    individuals, truncated rather than rounded.
    """

    def __init__(self, population_size: int, selection_proportion: float):
        self.population_size = population_size
        self.selection_proportion = selection_proportion
        super().__init__(
            "selection_proportion",
            selection_proportion,
            f"selects no parents from a population of {population_size}",
            "Increase population_size or selection_proportion",
        )


class GenomeLengthMismatchError(ConfigurationError):
    """Raised when a scoring replica's parameter count differs from the genome length."""

    def __init__(self, replica_index: int, expected_length: int, actual_length: int):
        self.replica_index = replica_index
        self.expected_length = expected_length
        self.actual_length = actual_length
        super().__init__(
            f"replica {replica_index} parameter_count",
            actual_length,
            f"expected genome length {expected_length}",
            "All scoring replicas must be instances of the same model topology",
        )


# =============================================================================
# Runtime Errors
# =============================================================================

class EvaluationError(EvolutionError):
    """
    Raised when a scoring replica fails while evaluating an individual.

    The whole generation is aborted: individuals that were skipped would keep
    stale fitness and corrupt the next sort and selection.
    """

    def __init__(
        self,
        replica_index: int,
        individual_index: int,
        cause: Optional[BaseException] = None,
    ):
        self.replica_index = replica_index
        self.individual_index = individual_index
        self.cause = cause
        message = (
            f"Scoring replica {replica_index} failed while evaluating "
            f"individual {individual_index}"
        )
        if cause is not None:
            message = f"{message}: {type(cause).__name__}: {cause}"
        suggestion = "Check the replica's load_parameters and score implementations"
        super().__init__(message, suggestion)


class ExhaustionError(EvolutionError):
    """Raised when a minibatch is requested from an empty training set."""

    def __init__(self, requested: int):
        self.requested = requested
        message = (
            f"Cannot draw a minibatch of {requested} samples: "
            f"the training set is empty"
        )
        suggestion = "Provide at least one (label, features) training pair"
        super().__init__(message, suggestion)


class GenerationLimitError(EvolutionError):
    """Raised when a generation step is requested after the run completed."""

    def __init__(self, max_generations: int):
        self.max_generations = max_generations
        message = f"Evolution already completed all {max_generations} generations"
        suggestion = "Construct a new Evolver to continue optimizing"
        super().__init__(message, suggestion)


class EvolverStateError(EvolutionError):
    """
    Raised when an operation is not allowed in the evolver's current state.

    A run whose evaluation failed is terminal: its population holds stale
    placeholder fitness and must not be sorted or selected again.
    """

    def __init__(self, operation: str, state: Any):
        self.operation = operation
        self.state = state
        message = f"Cannot {operation} while the evolver is {state}"
        suggestion = "Construct a new Evolver to restart the run"
        super().__init__(message, suggestion)


# =============================================================================
# Utility Functions
# =============================================================================

def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def validate_population_size(size: Any) -> None:
    """Validate population size is a positive integer."""
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        raise InvalidPopulationSizeError(size)


def validate_selection_proportion(proportion: float) -> None:
    """Validate selection proportion is within (0, 1]."""
    if not _is_real(proportion) or not 0.0 < proportion <= 1.0:
        raise InvalidSelectionProportionError(proportion)


def validate_elite_count(population_size: int, selection_proportion: float) -> None:
    """Validate the elite slice holds at least one individual."""
    if int(population_size * selection_proportion) < 1:
        raise EmptyEliteError(population_size, selection_proportion)


def validate_positive_int(parameter: str, value: Any) -> None:
    """Validate an integer parameter is at least one."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(parameter, value, "must be a positive integer")


def validate_unit_interval(parameter: str, value: float) -> None:
    """Validate a proportion parameter is within [0, 1]."""
    if not _is_real(value) or not 0.0 <= value <= 1.0:
        raise ConfigurationError(parameter, value, "must be within [0, 1]")


def validate_non_negative(parameter: str, value: float) -> None:
    """Validate a magnitude parameter is finite and not negative."""
    if not _is_real(value) or not 0.0 <= value < float("inf"):
        raise ConfigurationError(parameter, value, "must be a finite value >= 0")


def validate_genome_length(
    replica_index: int,
    expected_length: int,
    actual_length: int,
) -> None:
    """Validate a replica's parameter count matches the genome length."""
    if expected_length != actual_length:
        raise GenomeLengthMismatchError(replica_index, expected_length, actual_length)
