"""
隨機數來源 (Random Source)

決定性的偽隨機數產生器，驅動演化過程中所有的隨機決策。

採用 55 格減法延遲費波那契產生器 (subtractive lagged-Fibonacci generator)。
相同的種子保證產生相同的序列，因此整個演化過程可重現。
此物件不具執行緒安全性，必須由單一執行緒擁有或由外部同步。
"""

from typing import Optional

import numpy as np


_RAND_MBIG = 1_000_000_000
_RAND_MSEED = 161_803_398
_TABLE_SIZE = 55
_LAG = 31


class RandomSource:
    """隨機數來源

    每次抽樣都會推進內部狀態，不會有兩次邏輯抽樣觀察到相同的狀態。

    Attributes:
        seed_value: 目前使用的種子
    """

    def __init__(self, seed: int = 0):
        """初始化隨機數來源

        Args:
            seed: 隨機種子，預設為 0
        """
        self.seed_value = 0
        self._table = [0] * (_TABLE_SIZE + 1)
        self._inext = 0
        self._inextp = 0
        self.seed(seed)

    def seed(self, seed: int) -> None:
        """重設種子

        以決定性方式重建內部狀態：相同種子之後的序列完全相同。

        Args:
            seed: 隨機種子
        """
        self.seed_value = int(seed)
        table = [0] * (_TABLE_SIZE + 1)

        mj = (_RAND_MSEED - abs(self.seed_value)) % _RAND_MBIG
        table[_TABLE_SIZE] = mj
        mk = 1

        # 以 21 為步長打散初始值
        for i in range(1, _TABLE_SIZE):
            ii = (21 * i) % _TABLE_SIZE
            table[ii] = mk
            mk = mj - mk
            if mk < 0:
                mk += _RAND_MBIG
            mj = table[ii]

        # 預熱四輪
        for _ in range(4):
            for j in range(1, _TABLE_SIZE + 1):
                table[j] -= table[1 + (j + 30) % _TABLE_SIZE]
                if table[j] < 0:
                    table[j] += _RAND_MBIG

        self._table = table
        self._inext = 0
        self._inextp = _LAG

    def get_seed(self) -> int:
        """取得目前種子"""
        return self.seed_value

    def _next(self) -> int:
        """產生 [0, _RAND_MBIG) 之間的整數並推進狀態"""
        self._inext += 1
        if self._inext > _TABLE_SIZE:
            self._inext = 1
        self._inextp += 1
        if self._inextp > _TABLE_SIZE:
            self._inextp = 1

        mj = self._table[self._inext] - self._table[self._inextp]
        if mj < 0:
            mj += _RAND_MBIG
        self._table[self._inext] = mj
        return mj

    def uniform01(self) -> float:
        """產生 [0, 1) 之間的浮點數"""
        return self._next() / _RAND_MBIG

    def uniform(self, min_value: float, max_value: float) -> float:
        """產生 [min_value, max_value) 之間的浮點數

        Args:
            min_value: 下界（包含）
            max_value: 上界（不包含）

        Returns:
            均勻分布的隨機數
        """
        return self.uniform01() * (max_value - min_value) + min_value

    def uniform_int(self, max_value: int, upper: Optional[int] = None) -> int:
        """產生隨機整數

        單一參數時回傳 [0, max_value)；兩個參數時回傳 [max_value, upper)。

        Args:
            max_value: 上界（單一參數時）或下界（兩個參數時）
            upper: 上界（不包含），可選

        Returns:
            均勻分布的隨機整數
        """
        if upper is not None:
            return self.uniform_int(upper - max_value) + max_value
        return int(self.uniform01() * max_value)

    def uniform_array(
        self,
        size: int,
        min_value: float = 0.0,
        max_value: float = 1.0,
    ) -> np.ndarray:
        """產生獨立抽樣的浮點數陣列

        依序從同一串流抽樣，等同呼叫 size 次 uniform()。

        Args:
            size: 陣列長度
            min_value: 下界（包含）
            max_value: 上界（不包含）

        Returns:
            float64 一維陣列
        """
        return np.fromiter(
            (self.uniform(min_value, max_value) for _ in range(size)),
            dtype=np.float64,
            count=size,
        )

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed_value})"
