"""
Tests for the parallel evaluation scheduler.

Properties tested:
- The population is split into contiguous per-replica chunks
- Fitness follows the decayed accumulation update
- Replicas are never shared between concurrent tasks
- Replica failures abort the whole evaluation with the failing index
"""

import pytest
import numpy as np

from neuro_evolver.evolution.exceptions import ConfigurationError, EvaluationError
from neuro_evolver.evolution.minibatch import MiniBatchHandler
from neuro_evolver.evolution.models import Individual
from neuro_evolver.evolution.population import Population
from neuro_evolver.evolution.random_source import RandomSource
from neuro_evolver.evolution.scheduler import EvaluationScheduler, partition

from fakes import ConstantLossReplica, ExclusiveUseReplica, FailingReplica


def make_population(size, length=4, seed=42):
    return Population.random(size, length, RandomSource(seed))


class TestPartition:

    def test_even_split(self):
        assert partition(12, 3) == [(0, 4), (4, 8), (8, 12)]

    def test_last_chunk_truncated(self):
        assert partition(10, 3) == [(0, 4), (4, 8), (8, 10)]

    def test_fewer_individuals_than_replicas(self):
        assert partition(2, 4) == [(0, 1), (1, 2)]

    def test_single_replica(self):
        assert partition(7, 1) == [(0, 7)]

    def test_chunks_cover_population_once(self):
        for size in range(1, 40):
            for replicas in range(1, 9):
                chunks = partition(size, replicas)
                covered = [i for start, end in chunks for i in range(start, end)]
                assert covered == list(range(size))
                assert len(chunks) <= replicas


class TestFitnessUpdate:

    def test_first_evaluation_ignores_sentinel(self, training_set):
        scheduler = EvaluationScheduler([ConstantLossReplica(4, loss=0.5)])
        population = make_population(5)
        batch = MiniBatchHandler(training_set).next_batch(2)
        scheduler.evaluate(population, batch)
        assert all(ind.fitness == pytest.approx(1.5) for ind in population)

    def test_decayed_accumulation(self, training_set):
        scheduler = EvaluationScheduler(
            [ConstantLossReplica(4, loss=1.0)], fitness_decay_rate=0.25
        )
        ind = Individual(genome=np.zeros(4), fitness=8.0)
        batch = MiniBatchHandler(training_set).next_batch(3)
        scheduler.evaluate(Population([ind]), batch)
        assert ind.fitness == pytest.approx(8.0 * 0.75 + 2.0)

    def test_contribution_clamped_to_min_fitness(self, training_set):
        scheduler = EvaluationScheduler(
            [ConstantLossReplica(4, loss=100.0)], min_fitness=0.01
        )
        population = make_population(3)
        batch = MiniBatchHandler(training_set).next_batch(2)
        scheduler.evaluate(population, batch)
        assert all(ind.fitness == pytest.approx(0.01) for ind in population)

    def test_converges_to_contribution_over_decay(self, training_set):
        decay = 0.2
        scheduler = EvaluationScheduler(
            [ConstantLossReplica(4, loss=0.5)], fitness_decay_rate=decay
        )
        handler = MiniBatchHandler(training_set)
        population = make_population(4)
        for _ in range(200):
            scheduler.evaluate(population, handler.next_batch(2))
        contribution = 2 - 0.5
        for ind in population:
            assert ind.fitness == pytest.approx(contribution / decay, rel=1e-6)

    def test_returns_loss_per_slot(self, training_set):
        scheduler = EvaluationScheduler([ConstantLossReplica(4, loss=0.75)])
        losses = scheduler.evaluate(make_population(6), MiniBatchHandler(training_set).next_batch(2))
        assert losses.tolist() == [0.75] * 6


class TestConcurrency:

    def test_each_replica_used_by_one_task(self, training_set):
        replicas = [ExclusiveUseReplica(4) for _ in range(4)]
        scheduler = EvaluationScheduler(replicas)
        population = make_population(40)
        scheduler.evaluate(population, MiniBatchHandler(training_set).next_batch(2))

        for replica in replicas:
            assert not replica.overlapped
            assert len(replica.threads) == 1
            assert len(replica.batches) == 10

    def test_all_replicas_score_identical_batch(self, training_set):
        replicas = [ConstantLossReplica(4) for _ in range(3)]
        scheduler = EvaluationScheduler(replicas)
        batch = MiniBatchHandler(training_set).next_batch(3)
        scheduler.evaluate(make_population(9), batch)

        for replica in replicas:
            for labels, data in replica.batches:
                assert labels is batch.labels
                assert data is batch.data

    def test_idle_replicas_when_population_is_small(self, training_set):
        replicas = [ConstantLossReplica(4) for _ in range(5)]
        scheduler = EvaluationScheduler(replicas)
        scheduler.evaluate(make_population(2), MiniBatchHandler(training_set).next_batch(1))
        assert [len(r.batches) for r in replicas] == [1, 1, 0, 0, 0]

    def test_requires_a_replica(self):
        with pytest.raises(ConfigurationError, match="at least one scoring replica"):
            EvaluationScheduler([])


class TestFailures:

    def test_failure_names_replica_and_index(self, training_set):
        replicas = [ConstantLossReplica(4), FailingReplica(4, fail_on_call=2)]
        scheduler = EvaluationScheduler(replicas)
        population = make_population(6)

        with pytest.raises(EvaluationError) as excinfo:
            scheduler.evaluate(population, MiniBatchHandler(training_set).next_batch(2))

        error = excinfo.value
        assert error.replica_index == 1
        assert error.individual_index == 4
        assert isinstance(error.__cause__, RuntimeError)
        assert "replica 1" in str(error)
        assert "individual 4" in str(error)

    def test_other_tasks_finish_before_error_is_raised(self, training_set):
        healthy = ConstantLossReplica(4)
        scheduler = EvaluationScheduler([FailingReplica(4), healthy])
        population = make_population(8)

        with pytest.raises(EvaluationError):
            scheduler.evaluate(population, MiniBatchHandler(training_set).next_batch(2))

        assert len(healthy.batches) == 4
