"""
Neuro Evolver

以輕量演化演算法 (LEEA) 訓練神經網路參數的無梯度優化器。
"""

__version__ = "0.1.0"
