"""
가중치 기반 경품 추첨

실효 가중치 = weight * remaining_quantity
남은 수량이 줄어들수록 해당 경품의 당첨 확률도 함께 줄어듭니다.
"""

import random
from typing import List, Optional, Protocol, Sequence, TypeVar


class PoolEntry(Protocol):
    weight: int
    remaining_quantity: int


E = TypeVar("E", bound=PoolEntry)


class PrizeSelector:
    """룰렛 휠 방식의 경품 선택기

    운영 환경에서는 SystemRandom, 테스트에서는 시드 고정 Random을 주입합니다.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.SystemRandom()

    @staticmethod
    def effective_weight(entry: PoolEntry) -> int:
        return max(entry.weight, 0) * max(entry.remaining_quantity, 0)

    def probabilities(self, entries: Sequence[PoolEntry]) -> List[float]:
        """각 항목의 현재 당첨 확률 (합계 1, 모두 소진이면 전부 0)"""
        weights = [self.effective_weight(entry) for entry in entries]
        total = sum(weights)
        if total <= 0:
            return [0.0 for _ in entries]
        return [w / total for w in weights]

    def choose(self, entries: Sequence[E]) -> Optional[E]:
        """실효 가중치 비율로 한 항목 선택. 선택 가능한 항목이 없으면 None"""
        weights = [self.effective_weight(entry) for entry in entries]
        total = sum(weights)
        if total <= 0:
            return None

        pick = self._rng.randrange(total)
        cumulative = 0
        for entry, weight in zip(entries, weights):
            cumulative += weight
            if pick < cumulative:
                return entry

        # randrange(total) < total 이므로 도달하지 않음
        return None
