"""
全連接網路評分副本 (Dense Network Replica)

以 NumPy 實作的小型全連接網路，作為 ScoringReplica 介面的參考實作。
隱藏層使用 sigmoid 激活，輸出層為線性，損失為各樣本均方誤差的總和。
"""

from typing import List, Sequence, Tuple

import numpy as np

from .base import ScoringReplica


def _sigmoid(x: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-x))


class DenseNetwork(ScoringReplica):
    """全連接網路

    參數攤平順序：逐層先權重（列優先，形狀為 輸入 x 輸出）再偏差。

    Attributes:
        layer_sizes: 各層神經元數量，第一個為輸入維度
    """

    def __init__(self, layer_sizes: Sequence[int]):
        """初始化網路

        Args:
            layer_sizes: 各層大小，例如 [784, 80, 10]

        Raises:
            ValueError: 若層數少於兩層或任一層大小非正
        """
        if len(layer_sizes) < 2:
            raise ValueError(
                f"A dense network needs at least an input and an output layer, "
                f"got {list(layer_sizes)}"
            )
        if any(size < 1 for size in layer_sizes):
            raise ValueError(f"Layer sizes must be positive, got {list(layer_sizes)}")

        self.layer_sizes = list(layer_sizes)
        self._layers: List[Tuple[np.ndarray, np.ndarray]] = [
            (np.zeros((n_in, n_out)), np.zeros(n_out))
            for n_in, n_out in zip(self.layer_sizes[:-1], self.layer_sizes[1:])
        ]

    def parameter_count(self) -> int:
        return sum(w.size + b.size for w, b in self._layers)

    def load_parameters(self, genome: np.ndarray) -> None:
        genome = np.asarray(genome, dtype=np.float64)
        if genome.shape != (self.parameter_count(),):
            raise ValueError(
                f"Expected {self.parameter_count()} parameters, got {genome.shape}"
            )

        offset = 0
        layers = []
        for weights, bias in self._layers:
            w = genome[offset:offset + weights.size].reshape(weights.shape)
            offset += weights.size
            b = genome[offset:offset + bias.size].copy()
            offset += bias.size
            layers.append((w.copy(), b))
        self._layers = layers

    def get_parameters(self) -> np.ndarray:
        return np.concatenate([
            np.concatenate([w.ravel(), b]) for w, b in self._layers
        ])

    def forward(self, data: np.ndarray) -> np.ndarray:
        """前向傳播"""
        activations = np.asarray(data, dtype=np.float64)
        last = len(self._layers) - 1
        for i, (weights, bias) in enumerate(self._layers):
            activations = activations @ weights + bias
            if i < last:
                activations = _sigmoid(activations)
        return activations

    def score(self, labels: np.ndarray, data: np.ndarray) -> float:
        outputs = self.forward(data)
        targets = np.asarray(labels, dtype=np.float64).reshape(outputs.shape)
        errors = (outputs - targets) ** 2
        return float(errors.mean(axis=-1).sum())
