"""Fake scoring replicas shared by the evolver tests."""

import threading

import numpy as np

from neuro_evolver.scoring.base import ScoringReplica


class ConstantLossReplica(ScoringReplica):
    """Replica whose loss never depends on the loaded genome."""

    def __init__(self, length: int, loss: float = 0.5):
        self.length = length
        self.loss = loss
        self.loaded = np.zeros(length)
        self.batches = []

    def parameter_count(self) -> int:
        return self.length

    def load_parameters(self, genome: np.ndarray) -> None:
        self.loaded = np.array(genome, copy=True)

    def score(self, labels: np.ndarray, data: np.ndarray) -> float:
        self.batches.append((labels, data))
        return self.loss


class QuadraticReplica(ScoringReplica):
    """Replica scoring the squared distance of the genome from a target."""

    def __init__(self, length: int, target: float = 0.25):
        self.length = length
        self.target = target
        self.loaded = np.zeros(length)

    def parameter_count(self) -> int:
        return self.length

    def load_parameters(self, genome: np.ndarray) -> None:
        self.loaded = np.array(genome, copy=True)

    def score(self, labels: np.ndarray, data: np.ndarray) -> float:
        offset = float(np.sum(data)) * 1e-3
        return float(np.sum((self.loaded - self.target) ** 2)) + offset

    def get_parameters(self) -> np.ndarray:
        return self.loaded.copy()


class FailingReplica(ConstantLossReplica):
    """Replica that raises on its N-th score call (1-based)."""

    def __init__(self, length: int, fail_on_call: int = 1):
        super().__init__(length)
        self.fail_on_call = fail_on_call
        self.calls = 0

    def score(self, labels: np.ndarray, data: np.ndarray) -> float:
        self.calls += 1
        if self.calls >= self.fail_on_call:
            raise RuntimeError("replica exploded")
        return self.loss


class ExclusiveUseReplica(ConstantLossReplica):
    """Replica that records whether two tasks ever used it at the same time."""

    def __init__(self, length: int, loss: float = 0.5):
        super().__init__(length, loss)
        self._lock = threading.Lock()
        self._active = 0
        self.overlapped = False
        self.threads = set()

    def score(self, labels: np.ndarray, data: np.ndarray) -> float:
        with self._lock:
            self._active += 1
            if self._active > 1:
                self.overlapped = True
        self.threads.add(threading.get_ident())
        try:
            return super().score(labels, data)
        finally:
            with self._lock:
                self._active -= 1
