"""Shared fixtures for the evolver tests."""

import numpy as np
import pytest

from neuro_evolver.evolution.minibatch import TrainingSet

from fakes import QuadraticReplica


@pytest.fixture
def training_set():
    """Ten samples with two features and a one-dimensional label."""
    features = np.arange(20, dtype=np.float64).reshape(10, 2)
    labels = np.arange(10, dtype=np.float64).reshape(10, 1)
    return TrainingSet(labels=labels, features=features)


@pytest.fixture
def make_quadratic_replicas():
    def _make(count: int, length: int = 6):
        return [QuadraticReplica(length) for _ in range(count)]
    return _make
